"""
API v1 Package
===============

Version 1 API controllers.
"""
from .auth_controller import router as auth_router
from .organization_controller import router as organization_router
from .team_controller import router as team_router
from .project_controller import router as project_router
from .sprint_controller import router as sprint_router
from .task_controller import router as task_router
from .incident_controller import router as incident_router
from .problem_controller import router as problem_router
from .change_controller import router as change_router
from .release_controller import router as release_router
from .sla_controller import router as sla_router
from .service_catalog_controller import router as service_catalog_router
from .service_request_controller import router as service_request_router
from .category_controller import router as category_router
from .knowledge_controller import router as knowledge_router
from .leave_request_controller import router as leave_request_router
from .notification_controller import router as notification_router
from .report_controller import router as report_router

__all__ = [
    "auth_router",
    "organization_router",
    "team_router",
    "project_router",
    "sprint_router",
    "task_router",
    "incident_router",
    "problem_router",
    "change_router",
    "release_router",
    "sla_router",
    "service_catalog_router",
    "service_request_router",
    "category_router",
    "knowledge_router",
    "leave_request_router",
    "notification_router",
    "report_router",
]
