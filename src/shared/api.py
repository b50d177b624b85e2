"""HTTP helpers shared by the storefront routers.

Identity arrives from the upstream auth collaborator as request headers; the
core only compares roles. Errors from the checkout taxonomy are rendered with
their declared status code and retry hint.
"""

import structlog
from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers

from shared.errors import CheckoutError
from shared.identity import Actor, Role

logger = structlog.get_logger(__name__)


async def current_actor(
    x_user_id: str = Header(),
    x_user_role: str = Header(default=Role.USER.value),
    x_user_name: str = Header(default=""),
) -> Actor:
    """FastAPI dependency resolving the caller from identity headers."""
    return Actor(user_id=x_user_id, role=x_user_role, name=x_user_name)


def _messages(exc) -> dict:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return messages
    return {"_entity": [str(messages or exc)]}


async def _checkout_error_handler(request: Request, exc: CheckoutError) -> JSONResponse:
    logger.info(
        "request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        status_code=exc.status_code,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": type(exc).__name__,
            "messages": _messages(exc),
            "retryable": exc.retryable,
        },
    )


async def _not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    logger.info("object_not_found", path=request.url.path)
    return JSONResponse(
        status_code=404,
        content={"error": "NotFound", "messages": _messages(exc), "retryable": False},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's default handlers, then the checkout-specific ones."""
    register_exception_handlers(app)
    app.add_exception_handler(CheckoutError, _checkout_error_handler)
    app.add_exception_handler(ObjectNotFoundError, _not_found_handler)
