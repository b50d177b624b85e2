"""Storefront FastAPI application.

Serves orders, payments and product reviews from one process. Each request
runs inside the Protean domain that owns its URL prefix; payments act on
orders, so they share the ordering domain.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload

Environment:
    PROTEAN_ENV           config overlay and default log level
    CORS_ALLOW_ORIGINS    comma-separated origins, ``*`` by default
    PAYMENT_GATEWAY       ``fake`` (default) or ``stripe``
"""

import os

from catalogue.domain import catalogue
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ordering.catalogue import get_catalogue, set_catalogue
from ordering.catalogue.domain_adapter import CatalogueDomainLookup
from ordering.domain import ordering
from payments.gateway import get_gateway
from shared.api import register_error_handlers
from shared.logging import add_context, clear_context, configure_logging

configure_logging()

ordering.init()
catalogue.init()

# Orders are placed against the live catalogue
set_catalogue(CatalogueDomainLookup(catalogue))

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/orders": ordering,
    "/payments": ordering,
    "/products": catalogue,
}


def _resolve_domain(path: str):
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


def _allowed_origins() -> list[str]:
    raw = os.environ.get("CORS_ALLOW_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Checkout and order lifecycle — Ordering, Payments & Catalogue",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Bind request details to the log context and enter the owning domain."""
    clear_context()
    add_context(path=request.url.path, method=request.method)

    domain = _resolve_domain(request.url.path)
    if domain is None:
        return await call_next(request)

    with domain.domain_context():
        return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from catalogue.api import product_router  # noqa: E402
from ordering.api.routes import order_router  # noqa: E402
from payments.api.routes import payment_router  # noqa: E402

app.include_router(order_router)
app.include_router(payment_router)
app.include_router(product_router)


@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": [ordering.name, catalogue.name],
            "adapters": {
                "payment_gateway": type(get_gateway()).__name__,
                "catalogue": type(get_catalogue()).__name__,
            },
        }
    )
