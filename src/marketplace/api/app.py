"""FastAPI application factory.

The domain must already be initialized (``domain.init()``) before the app
serves requests; ``src/app.py`` does that for uvicorn and ``DomainFixture``
does it for tests. Every request runs inside the domain context so handlers
and queries can reach ``current_domain``.
"""

import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from marketplace.accounts.api import address_router, admin_user_router, auth_router, user_router
from marketplace.api.errors import register_error_handlers
from marketplace.catalogue.api import (
    admin_product_router,
    category_router,
    product_router,
    vendor_product_router,
)
from marketplace.domain import marketplace
from marketplace.ordering.api import admin_order_router, cart_router, order_router, vendor_order_router
from marketplace.utils.logging import bind_request_context, clear_request_context, current_env

SESSION_COOKIE = "marketplace_session"

_ROUTERS = [
    auth_router,
    user_router,
    address_router,
    admin_user_router,
    category_router,
    product_router,
    vendor_product_router,
    admin_product_router,
    cart_router,
    order_router,
    vendor_order_router,
    admin_order_router,
]


def create_app(domain=marketplace) -> FastAPI:
    app = FastAPI(
        title="Marketplace API",
        description="Multi-vendor marketplace: catalogue, carts, checkout and accounts",
    )

    # Middleware added last runs first: sessions must be decoded before the
    # domain context middleware hands the request to a route.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=os.environ.get("CORS_ORIGINS", "*").split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the domain context and bind request details to the log context."""
        bind_request_context(method=request.method, path=request.url.path)
        try:
            with domain.domain_context():
                return await call_next(request)
        finally:
            clear_request_context()

    app.add_middleware(
        SessionMiddleware,
        secret_key=os.environ.get("SESSION_SECRET", "marketplace-development-secret"),
        session_cookie=SESSION_COOKIE,
        max_age=int(os.environ.get("SESSION_MAX_AGE", str(14 * 24 * 60 * 60))),
        same_site="lax",
        https_only=current_env() == "production",
    )

    for router in _ROUTERS:
        app.include_router(router)

    register_error_handlers(app)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": {"name": domain.name}})

    return app
