"""
Release Controller
==================
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from servicedesk.api.responses import paginated, success
from servicedesk.api.v1.dependencies import get_current_user, get_organization_id, get_release_service
from servicedesk.application.dto.release_dto import (
    LinkChangeRequest,
    ReleaseCreateRequest,
    ReleaseStatusRequest,
    ReleaseUpdateRequest,
    TestResultsRequest,
)
from servicedesk.application.services.release_service import ReleaseService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["releases"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Plan a release")
def create_release(
    body: ReleaseCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ReleaseService = Depends(get_release_service),
):
    release = service.create_release(organization_id, user, **body.model_dump())
    return success(release, "Release created")


@router.get("", summary="List releases")
def list_releases(
    status_filter: Optional[str] = Query(None, alias="status"),
    type: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    organization_id: str = Depends(get_organization_id),
    service: ReleaseService = Depends(get_release_service),
):
    releases, total = service.list_releases(
        organization_id, status=status_filter, type=type, search=search, page=page, limit=limit
    )
    return paginated(releases, page, limit, total)


@router.get("/stats", summary="Release counts by status")
def release_stats(
    organization_id: str = Depends(get_organization_id),
    service: ReleaseService = Depends(get_release_service),
):
    return success(service.stats(organization_id))


@router.get("/{release_id}", summary="Get a release")
def get_release(
    release_id: str,
    organization_id: str = Depends(get_organization_id),
    service: ReleaseService = Depends(get_release_service),
):
    return success(service.get_release(organization_id, release_id))


@router.patch("/{release_id}", summary="Update a release")
def update_release(
    release_id: str,
    body: ReleaseUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ReleaseService = Depends(get_release_service),
):
    release = service.update_release(organization_id, user, release_id, body.model_dump(exclude_unset=True))
    return success(release, "Release updated")


@router.delete("/{release_id}", summary="Delete a planning or closed release")
def delete_release(
    release_id: str,
    organization_id: str = Depends(get_organization_id),
    service: ReleaseService = Depends(get_release_service),
):
    service.delete_release(organization_id, release_id)
    return success(message="Release deleted")


@router.patch("/{release_id}/status", summary="Move a release along its lifecycle")
def change_status(
    release_id: str,
    body: ReleaseStatusRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ReleaseService = Depends(get_release_service),
):
    release = service.change_status(organization_id, user, release_id, body.status)
    return success(release, f"Release status changed to {release.status}")


@router.post("/{release_id}/link-change", summary="Bundle a change into the release")
def link_change(
    release_id: str,
    body: LinkChangeRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ReleaseService = Depends(get_release_service),
):
    return success(service.link_change(organization_id, user, release_id, body.change_id), "Change linked")


@router.post("/{release_id}/test-results", summary="Record test results")
def record_test_results(
    release_id: str,
    body: TestResultsRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: ReleaseService = Depends(get_release_service),
):
    release = service.record_test_results(organization_id, user, release_id, body.passed, body.test_results)
    return success(release, "Test results recorded")
