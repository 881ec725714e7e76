"""
Admission filter (CORS policy).

- Requests without an Origin header (mobile apps, Postman, server-to-server) are
  always admitted.
- Requests whose Origin exactly matches the allow-list are admitted and may carry
  credentials.
- Anything else is rejected with 403 and logged; the process keeps serving.

Every OPTIONS request is answered here, so preflights never depend on routing.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

from config import Settings
from errors import OriginNotAllowed, error_response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OriginPolicy:
    allowed_origins: Tuple[str, ...]

    def admits(self, origin: Optional[str]) -> bool:
        if not origin:
            return True
        return origin in self.allowed_origins

    def check(self, origin: Optional[str]) -> None:
        """Raise OriginNotAllowed unless the origin is absent or allow-listed."""
        if not self.admits(origin):
            raise OriginNotAllowed(origin)


class AdmissionMiddleware(CORSMiddleware):
    """
    Starlette's CORSMiddleware with exact-match origins and an explicit rejection
    for unknown origins (the stock middleware silently omits headers instead).
    """

    def __init__(self, app: ASGIApp, settings: Settings) -> None:
        headers = settings.allowed_headers
        super().__init__(
            app,
            allow_origins=list(settings.allowed_origins),
            allow_methods=list(settings.allowed_methods),
            allow_headers=["*"] if headers is None else list(headers),
            allow_credentials=settings.allow_credentials,
            max_age=settings.cors_max_age,
        )
        self.policy = OriginPolicy(tuple(settings.allowed_origins))

    def is_allowed_origin(self, origin: str) -> bool:
        return self.policy.admits(origin)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        origin = headers.get("origin")

        try:
            self.policy.check(origin)
        except OriginNotAllowed as exc:
            logger.warning("CORS blocked for origin: %s", exc.origin)
            response = error_response(403, str(exc), scope["path"])
            await response(scope, receive, send)
            return

        if scope["method"] == "OPTIONS":
            if origin and "access-control-request-method" in headers:
                response = self.preflight_response(request_headers=headers)
            else:
                response = self.bare_options_response(origin)
            await response(scope, receive, send)
            return

        if not origin:
            await self.app(scope, receive, send)
            return

        await self.simple_response(scope, receive, send, request_headers=headers)

    def bare_options_response(self, origin: Optional[str]) -> Response:
        """Answer an OPTIONS that is not a browser preflight."""
        headers = dict(self.preflight_headers)
        if origin:
            headers["Access-Control-Allow-Origin"] = origin
        return Response(status_code=204, headers=headers)
