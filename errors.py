"""
Exception types and FastAPI exception handlers.

Every error that reaches the framework is rendered with the same envelope:
    {"error": {"code": <status>, "message": <text>, "path": <request path>}}

The catch-all Exception handler is installed by Starlette on its
ServerErrorMiddleware, which wraps every user middleware. Unhandled 500s are
therefore answered outside the admission filter and carry no CORS headers;
browsers report them as CORS failures. HTTPException and validation errors are
handled inside the pipeline and do get CORS headers.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


# -------- Exceptions --------

class ConfigurationError(Exception):
    """Fatal: required configuration is missing or malformed."""

    def __init__(self, key: str, message: Optional[str] = None) -> None:
        self.key = key
        super().__init__(message or f"{key} not defined")


class DatabaseConnectError(Exception):
    """Fatal: the database could not be reached (including timeouts)."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class OriginNotAllowed(Exception):
    """Request-scoped: the declared Origin is not in the allow-list."""

    def __init__(self, origin: str) -> None:
        self.origin = origin
        super().__init__(f"CORS not allowed for this origin: {origin}")


# -------- Envelope --------

def error_response(status_code: int, message: Any, path: str,
                   details: Optional[Any] = None,
                   headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    body: Dict[str, Any] = {"code": status_code, "message": message, "path": path}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content={"error": body}, headers=headers)


# -------- Handlers --------

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.warning(
        "HTTP %s on %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail
    )
    return error_response(exc.status_code, exc.detail, request.url.path,
                          headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
    return error_response(
        422,
        "Validation error",
        request.url.path,
        details=jsonable_errors(exc),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the full exception and hide it from the client."""
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", request.url.path
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx may hold exception instances that JSONResponse cannot serialize
    cleaned = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        cleaned.append(err)
    return jsonable_encoder(cleaned)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
