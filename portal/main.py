"""HR Portal — FastAPI Application Factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from portal.common.exceptions import register_exception_handlers
from portal.common.rate_limit import limiter
from portal.config import settings
from portal.dashboard.router import router as dashboard_router
from portal.employees.router import router as employees_router
from portal.engagement.router import router as engagement_router
from portal.grievances.router import router as grievances_router
from portal.leave.router import router as leave_router
from portal.offers.router import router as offers_router
from portal.upstream import create_http_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    # Startup
    app.state.http = create_http_client()
    logger.info("HRMS API at %s", settings.API_BASE_URL)
    yield
    # Shutdown
    await app.state.http.aclose()


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging()

    app = FastAPI(
        title="HR Portal",
        description="Role-aware HRMS pages: dashboard, employees, engagement, grievances, leaves, offers",
        version="1.0.0",
        docs_url="/api/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/api/redoc" if settings.ENVIRONMENT != "production" else None,
        lifespan=lifespan,
    )

    # Exception handlers (RFC 7807)
    register_exception_handlers(app)

    # Rate limiting (slowapi)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check (no auth)
    @app.get("/api/v1/health", tags=["system"])
    async def health_check():
        return {
            "status": "healthy",
            "version": "1.0.0",
            "environment": settings.ENVIRONMENT,
        }

    # Register routers
    app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["dashboard"])
    app.include_router(employees_router, prefix="/api/v1/employees", tags=["employees"])
    app.include_router(engagement_router, prefix="/api/v1/engagement", tags=["engagement"])
    app.include_router(grievances_router, prefix="/api/v1/grievances", tags=["grievances"])
    app.include_router(leave_router, prefix="/api/v1/leaves", tags=["leaves"])
    app.include_router(offers_router, prefix="/api/v1/offers", tags=["offers"])

    return app


app = create_app()
