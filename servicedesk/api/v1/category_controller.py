"""
Category Controller
===================

Everyone in the organization reads categories; managers maintain them.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from servicedesk.api.responses import paginated, success
from servicedesk.api.v1.dependencies import get_category_service, get_organization_id, require_manager
from servicedesk.application.dto.knowledge_dto import CategoryCreateRequest, CategoryUpdateRequest
from servicedesk.application.services.category_service import CategoryService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["categories"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a category")
def create_category(
    body: CategoryCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(require_manager),
    service: CategoryService = Depends(get_category_service),
):
    return success(service.create(organization_id, user, body.model_dump()), "Category created")


@router.get("", summary="List categories")
def list_categories(
    category_type: Optional[str] = Query(None, alias="type"),
    parent_id: Optional[str] = None,
    include_inactive: bool = False,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    organization_id: str = Depends(get_organization_id),
    service: CategoryService = Depends(get_category_service),
):
    categories, total = service.list_categories(
        organization_id,
        type=category_type,
        parent_id=parent_id,
        include_inactive=include_inactive,
        search=search,
        page=page,
        limit=limit,
    )
    return paginated(categories, page, limit, total)


@router.get("/{category_id}", summary="Get a category")
def get_category(
    category_id: str,
    organization_id: str = Depends(get_organization_id),
    service: CategoryService = Depends(get_category_service),
):
    return success(service.get(organization_id, category_id))


@router.put("/{category_id}", summary="Update a category")
def update_category(
    category_id: str,
    body: CategoryUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(require_manager),
    service: CategoryService = Depends(get_category_service),
):
    category = service.update(organization_id, category_id, body.model_dump(exclude_unset=True))
    return success(category, "Category updated")


@router.delete("/{category_id}", summary="Deactivate a category")
def deactivate_category(
    category_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(require_manager),
    service: CategoryService = Depends(get_category_service),
):
    return success(service.deactivate(organization_id, category_id), "Category deactivated")


@router.delete("/{category_id}/permanent", summary="Delete a category for good")
def delete_category(
    category_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(require_manager),
    service: CategoryService = Depends(get_category_service),
):
    service.delete(organization_id, category_id)
    return success(message="Category deleted")
