"""
Report Controller
=================
"""
from fastapi import APIRouter, Depends, Query

from servicedesk.api.responses import success
from servicedesk.api.v1.dependencies import get_current_user, get_organization_id, get_report_service
from servicedesk.application.services.report_service import DEFAULT_VELOCITY_SPRINTS, ReportService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["reports"])


@router.get("/dashboard", summary="Organization dashboard")
def dashboard(
    organization_id: str = Depends(get_organization_id),
    service: ReportService = Depends(get_report_service),
):
    return success(service.dashboard(organization_id))


@router.get("/projects/{project_id}/velocity", summary="Velocity of a project's last completed sprints")
def project_velocity(
    project_id: str,
    sprints: int = Query(DEFAULT_VELOCITY_SPRINTS, ge=1, le=20),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    return success(service.project_velocity(organization_id, user, project_id, sprints=sprints))
