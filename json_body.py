"""
JSON body parser.

Runs after the admission filter and before routing: JSON request bodies are read
once, size-checked and validated, then replayed unchanged to the app. Handlers can
assume any JSON body they receive is well formed.
"""
from __future__ import annotations
import json
import logging

from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from errors import error_response

logger = logging.getLogger(__name__)


def is_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


class BodyTooLarge(Exception):
    pass


class JSONBodyMiddleware:
    def __init__(self, app: ASGIApp, limit: int = 100 * 1024) -> None:
        self.app = app
        self.limit = limit

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        if not is_json_content_type(headers.get("content-type", "")):
            await self.app(scope, receive, send)
            return

        declared = headers.get("content-length")
        if declared and declared.isdigit() and int(declared) > self.limit:
            await self._reject(scope, receive, send, 413, "request entity too large")
            return

        try:
            body = await self._read_body(receive)
        except BodyTooLarge:
            await self._reject(scope, receive, send, 413, "request entity too large")
            return

        if body:
            try:
                parsed = json.loads(body.decode("utf-8"))
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.debug("Rejected JSON body on %s: %s", scope["path"], e)
                await self._reject(scope, receive, send, 400, "invalid JSON body")
                return
            # only objects and arrays are accepted as top-level values
            if not isinstance(parsed, (dict, list)):
                logger.debug("Rejected non-container JSON body on %s", scope["path"])
                await self._reject(scope, receive, send, 400, "invalid JSON body")
                return

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)

    async def _read_body(self, receive: Receive) -> bytes:
        chunks = []
        size = 0
        while True:
            message = await receive()
            if message["type"] != "http.request":
                break
            chunk = message.get("body", b"")
            size += len(chunk)
            if size > self.limit:
                raise BodyTooLarge()
            chunks.append(chunk)
            if not message.get("more_body", False):
                break
        return b"".join(chunks)

    @staticmethod
    async def _reject(scope: Scope, receive: Receive, send: Send, status_code: int, message: str) -> None:
        response = error_response(status_code, message, scope["path"])
        await response(scope, receive, send)
