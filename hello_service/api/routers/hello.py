"""Hello endpoint router."""

import logging

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)


def api_create_hello_router() -> APIRouter:
    """Create the router exposing `GET /hello`.

    Other methods on `/hello` are rejected by routing with 405 and `Allow: GET`.

    Returns:
        APIRouter: Router exposing `/hello` endpoint.
    """

    router = APIRouter(tags=["hello"])

    @router.get("/hello", response_class=PlainTextResponse)
    def api_hello() -> PlainTextResponse:
        """Return the plain-text greeting."""

        logger.info("Request received at /hello endpoint")
        return PlainTextResponse("Hello world", status_code=200)

    return router
