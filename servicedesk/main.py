"""
FastAPI Application
===================

Main FastAPI app setup with all routes and middleware.
"""
import logging
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.middleware import SlowAPIMiddleware

from servicedesk.api.error_handlers import register_error_handlers
from servicedesk.api.middleware import CORRELATION_HEADER, CorrelationIdMiddleware, CSRFMiddleware
from servicedesk.api.rate_limit import limiter
from servicedesk.api.v1 import (
    auth_router,
    category_router,
    change_router,
    incident_router,
    knowledge_router,
    leave_request_router,
    notification_router,
    organization_router,
    problem_router,
    project_router,
    release_router,
    report_router,
    service_catalog_router,
    service_request_router,
    sla_router,
    sprint_router,
    task_router,
    team_router,
)
from servicedesk.api.v1.dependencies import get_container
from servicedesk.core.config import Settings, get_settings
from servicedesk.core.logging_config import configure_logging
from servicedesk.di.container import DIContainer
from servicedesk.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

ALLOWED_HEADERS = [
    "Content-Type",
    "Authorization",
    "X-Organization-ID",
    "X-CSRF-Token",
    CORRELATION_HEADER,
]


def create_application(
    settings: Optional[Settings] = None,
    container: Optional[DIContainer] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    This function sets up the FastAPI application with:
    - Logging with request correlation ids
    - CORS, CSRF, correlation id and rate limiting middleware
    - The JSON error envelope handlers
    - API route registration
    - Liveness and database health endpoints

    Args:
        settings: Settings to use (defaults to the environment)
        container: Prebuilt DI container (tests pass one over an in-memory database)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        description="ITSM and project-management API: incidents, problems, changes, SLAs, sprints and boards",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    application.state.container = container or DIContainer()
    application.state.limiter = limiter

    register_error_handlers(application)

    # Last added runs first: CORS wraps correlation ids, which wrap CSRF and rate limiting
    application.add_middleware(SlowAPIMiddleware)
    if settings.csrf_enabled:
        application.add_middleware(CSRFMiddleware)
    application.add_middleware(CorrelationIdMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=ALLOWED_HEADERS,
        expose_headers=[CORRELATION_HEADER],
    )

    # Register API routers
    application.include_router(auth_router, prefix=f"{API_PREFIX}/auth")
    application.include_router(organization_router, prefix=f"{API_PREFIX}/organizations")
    application.include_router(team_router, prefix=f"{API_PREFIX}/teams")
    application.include_router(project_router, prefix=f"{API_PREFIX}/pm")
    application.include_router(sprint_router, prefix=f"{API_PREFIX}/pm")
    application.include_router(task_router, prefix=f"{API_PREFIX}/pm")
    application.include_router(incident_router, prefix=f"{API_PREFIX}/incidents")
    application.include_router(problem_router, prefix=f"{API_PREFIX}/problems")
    application.include_router(change_router, prefix=f"{API_PREFIX}/changes")
    application.include_router(release_router, prefix=f"{API_PREFIX}/releases")
    application.include_router(sla_router, prefix=f"{API_PREFIX}/sla")
    application.include_router(service_catalog_router, prefix=f"{API_PREFIX}/service-catalog")
    application.include_router(service_request_router, prefix=f"{API_PREFIX}/service-requests")
    application.include_router(category_router, prefix=f"{API_PREFIX}/categories")
    application.include_router(knowledge_router, prefix=f"{API_PREFIX}/knowledge")
    application.include_router(leave_request_router, prefix=f"{API_PREFIX}/leave-requests")
    application.include_router(notification_router, prefix=f"{API_PREFIX}/notifications")
    application.include_router(report_router, prefix=f"{API_PREFIX}/reports")

    @application.get("/")
    def root():
        """Root endpoint - service banner."""
        return {
            "status": "running",
            "service": settings.app_name,
            "version": "1.0.0",
            "docs": "/docs",
        }

    @application.get("/health")
    def health():
        """Liveness check."""
        return {"status": "healthy", "timestamp": utc_now().isoformat()}

    @application.get("/health/db")
    def health_db(container: DIContainer = Depends(get_container)):
        """MongoDB reachability; 503 when the ping fails."""
        if container.get("mongo_client").ping():
            return {"status": "healthy", "database": "connected"}
        return JSONResponse(status_code=503, content={"status": "unhealthy", "database": "disconnected"})

    @application.on_event("shutdown")
    def shutdown_event():
        """Close the MongoDB connection when FastAPI shuts down."""
        application.state.container.get("mongo_client").close()
        logger.info("MongoDB connection closed")

    logger.info("%s configured (environment=%s)", settings.app_name, settings.environment)
    return application


# Create application instance
app = create_application()
