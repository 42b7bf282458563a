"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orgtree.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from orgtree.api.routes import join_parent_requests, memberships, metrics, organizations
from orgtree.core.config import Settings, get_settings
from orgtree.core.database import build_engine, build_session_factory
from orgtree.core.structured_logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Own the database engine for the lifetime of the process."""
    engine = build_engine(app.state.settings)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    try:
        yield
    finally:
        await engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use instead of the environment-derived ones

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    docs_enabled = settings.api_docs_enabled
    if docs_enabled is None:
        docs_enabled = settings.environment != "production"

    app = FastAPI(
        title="OrgTree API",
        description="Organization hierarchy, memberships and join-parent requests",
        version="1.0.0",
        docs_url="/api/docs" if docs_enabled else None,
        redoc_url="/api/redoc" if docs_enabled else None,
        openapi_url="/api/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware configuration (order matters - applied in reverse order)
    # 1. Request logging (outermost - logs all requests)
    app.add_middleware(RequestLoggingMiddleware)

    # 2. Security headers
    app.add_middleware(SecurityHeadersMiddleware, environment=settings.environment)

    # 3. CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    app.include_router(organizations.router, prefix="/api/organizations", tags=["organizations"])
    app.include_router(memberships.router, prefix="/api", tags=["memberships"])
    app.include_router(join_parent_requests.router, prefix="/api", tags=["join-parent-requests"])
    app.include_router(metrics.router, prefix="/api", tags=["metrics"])

    return app


app = create_app()
