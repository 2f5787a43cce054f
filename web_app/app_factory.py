"""FastAPI application factory."""

from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .api.errors import validation_error_handler
from .api.routes import AdminKeyRequired, admin_key_error_handler
from .web import web_router
from .middleware.headers import ForwardedHeadersMiddleware
from .middleware.logging import LoggingMiddleware
from .middleware.redirect import ShortLinkRedirectMiddleware


def create_app(
    config,
    store=None,
    cache=None,
    resolver=None,
    admin=None,
    domain_checker=None,
    lifespan=None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        config: Configuration instance
        store: Link store instance (may be set later by the lifespan)
        cache: Optional lookup cache instance
        resolver: Resolver instance
        admin: LinkAdminService instance
        domain_checker: Optional DomainChecker
        lifespan: Optional lifespan context manager that wires the instances

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Short Links",
        description="Short link redirects and link administration",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )

    # Instances live on app state; handlers read them from request.app.state
    app.state.config = config
    app.state.store = store
    app.state.cache = cache
    app.state.resolver = resolver
    app.state.admin = admin
    app.state.domain_checker = domain_checker

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(AdminKeyRequired, admin_key_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Last added runs first: logging wraps everything, redirects run before routing
    app.add_middleware(ShortLinkRedirectMiddleware)
    app.add_middleware(ForwardedHeadersMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app
