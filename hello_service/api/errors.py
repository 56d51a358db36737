"""Route error types and the error-to-response decision table.

Classification precedence is fixed: 404 signals first, then 405 signals, and
everything else becomes a 500 whose detail is logged but never sent to the
client. A 404 or 405 is recognized by status code, by message text or by
exception class name.
"""

from typing import Any, Final

from fastapi import Request
from fastapi.responses import PlainTextResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from hello_service.logs import logs_request_error

DEFAULT_ALLOWED_METHODS: Final[str] = "GET"
NOT_FOUND_TEXT: Final[str] = "Not Found"
METHOD_NOT_ALLOWED_TEXT: Final[str] = "Method Not Allowed"
INTERNAL_SERVER_ERROR_TEXT: Final[str] = "Internal Server Error"


class RouteError(Exception):
    """Base exception for errors surfaced as plain-text HTTP responses.

    Attributes:
        status_code: HTTP status code associated with the error.
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(RouteError):
    """Raised when no route matches the request path."""

    status_code = 404

    def __init__(self, message: str = NOT_FOUND_TEXT):
        super().__init__(message)


class MethodNotAllowedError(RouteError):
    """Raised when a route exists but does not accept the request method.

    Attributes:
        allowed_methods: Value for the `Allow` response header.
    """

    status_code = 405

    def __init__(self, allowed_methods: str = DEFAULT_ALLOWED_METHODS, message: str = METHOD_NOT_ALLOWED_TEXT):
        super().__init__(message)
        self.allowed_methods = allowed_methods


class JsonBodyError(RouteError):
    """Raised when a JSON request body is malformed or exceeds the size limit."""

    status_code = 400


def api_classify_error(error: BaseException) -> int:
    """Map an error to the response status the service writes.

    Args:
        error: Exception raised while handling a request.

    Returns:
        int: 404, 405 or 500.
    """

    status_code = getattr(error, "status_code", None) or getattr(error, "status", None) or 500
    message = getattr(error, "detail", None) or str(error)
    error_name = type(error).__name__

    if status_code == 404 or message == NOT_FOUND_TEXT or error_name == "NotFoundError":
        return 404
    if status_code == 405 or message == METHOD_NOT_ALLOWED_TEXT or error_name == "MethodNotAllowedError":
        return 405
    return 500


def _api_resolve_allowed_methods(error: BaseException) -> str:
    allowed_methods = getattr(error, "allowed_methods", None)
    if allowed_methods:
        return str(allowed_methods)
    error_headers: Any = getattr(error, "headers", None) or {}
    for header_name, header_value in dict(error_headers).items():
        if header_name.lower() == "allow" and header_value:
            return str(header_value)
    return DEFAULT_ALLOWED_METHODS


def api_build_error_response(error: BaseException, method: str | None = None, url: str | None = None) -> Response:
    """Build the plain-text response for a request error.

    Args:
        error: Exception raised while handling a request.
        method: Request method used for server-side error context.
        url: Request URL used for server-side error context.

    Returns:
        Response: 404, 405 or 500 plain-text response.
    """

    status_code = api_classify_error(error)
    if status_code == 404:
        return PlainTextResponse(NOT_FOUND_TEXT, status_code=404)
    if status_code == 405:
        return PlainTextResponse(
            METHOD_NOT_ALLOWED_TEXT,
            status_code=405,
            headers={"Allow": _api_resolve_allowed_methods(error)},
        )

    logs_request_error(error, method, url)
    return PlainTextResponse(INTERNAL_SERVER_ERROR_TEXT, status_code=500)


def api_request_url(scope: Scope) -> str:
    """Return the request path with its query string, as logged by the service."""

    path = scope.get("path", "")
    query_string = scope.get("query_string", b"")
    if query_string:
        return f"{path}?{query_string.decode('latin-1')}"
    return path


async def api_handle_http_exception(request: Request, error: Exception) -> Response:
    """Exception handler routing framework HTTP exceptions through the decision table."""

    return api_build_error_response(error, request.method, api_request_url(request.scope))


async def api_route_not_found(_scope: Scope, _receive: Receive, _send: Send) -> None:
    """Catch-all route raising `NotFoundError` for unmatched paths."""

    raise NotFoundError()


class ErrorHandlerMiddleware:
    """ASGI middleware converting downstream exceptions to error responses.

    When the response has already started, the exception is re-raised for the
    outer server error handling instead of writing a second response.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_tracking_start(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracking_start)
        except Exception as error:
            if response_started:
                raise
            response = api_build_error_response(error, scope.get("method"), api_request_url(scope))
            await response(scope, receive, send)
