"""ASGI middleware stages for the request pipeline."""

import json
import time
from typing import Final

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from hello_service.logs import logs_request

from .errors import JsonBodyError, api_request_url

JSON_BODY_LIMIT_BYTES: Final[int] = 100 * 1024

SECURITY_HEADERS: Final[dict[str, str]] = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;form-action 'self';"
        "frame-ancestors 'none';img-src 'self' data:;object-src 'none';script-src 'self';"
        "script-src-attr 'none';style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "DENY",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


class SecurityHeadersMiddleware:
    """Add the baseline security header set to every HTTP response."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for header_name, header_value in SECURITY_HEADERS.items():
                    headers[header_name] = header_value
            await send(message)

        await self.app(scope, receive, send_with_headers)


class RequestLoggingMiddleware:
    """Emit one summary line when a response finishes.

    The line is written when the final body message passes through, so the
    elapsed time covers the full request lifetime. Messages are forwarded
    unchanged.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started_at = time.perf_counter()
        status_code = 0

        async def send_observing_completion(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            elif message["type"] == "http.response.body" and not message.get("more_body", False):
                elapsed_ms = int(round((time.perf_counter() - started_at) * 1000))
                logs_request(scope["method"], api_request_url(scope), status_code, elapsed_ms)
            await send(message)

        await self.app(scope, receive, send_observing_completion)


def _is_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


class JsonBodyMiddleware:
    """Parse JSON request bodies into `request.state.json_body`.

    Requests without a JSON content type pass through untouched. The body is
    replayed to downstream stages after parsing.
    """

    def __init__(self, app: ASGIApp, limit_bytes: int = JSON_BODY_LIMIT_BYTES) -> None:
        self.app = app
        self.limit_bytes = limit_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not _is_json_content_type(Headers(scope=scope).get("content-type", "")):
            await self.app(scope, receive, send)
            return

        buffered_messages: list[Message] = []
        body = b""
        while True:
            message = await receive()
            buffered_messages.append(message)
            if message["type"] != "http.request":
                break
            body += message.get("body", b"")
            if len(body) > self.limit_bytes:
                raise JsonBodyError("Request body exceeds JSON size limit")
            if not message.get("more_body", False):
                break

        payload = None
        if body.strip():
            try:
                payload = json.loads(body)
            except ValueError as error:
                raise JsonBodyError("Malformed JSON request body") from error
        scope.setdefault("state", {})["json_body"] = payload

        async def replay_receive() -> Message:
            if buffered_messages:
                return buffered_messages.pop(0)
            return await receive()

        await self.app(scope, replay_receive, send)
