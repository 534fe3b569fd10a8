"""
Service Catalog Controller
==========================

Catalog items are addressed by id or by service id (SVC-xxxxxxxx).
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from servicedesk.api.responses import paginated, success
from servicedesk.api.v1.dependencies import get_organization_id, get_service_catalog_service, require_manager
from servicedesk.application.dto.service_catalog_dto import CatalogItemCreateRequest, CatalogItemUpdateRequest
from servicedesk.application.services.service_catalog_service import ServiceCatalogService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["service-catalog"])


@router.post("", status_code=status.HTTP_201_CREATED, summary="Publish a catalog item")
def create_item(
    body: CatalogItemCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(require_manager),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    return success(service.create_item(organization_id, body.model_dump()), "Catalog item created")


@router.get("", summary="Browse the catalog")
def list_items(
    category: Optional[str] = None,
    active_only: bool = False,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    organization_id: str = Depends(get_organization_id),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    items, total = service.list_items(
        organization_id, category=category, active_only=active_only, search=search, page=page, limit=limit
    )
    return paginated(items, page, limit, total)


@router.get("/{item_id}", summary="Get a catalog item")
def get_item(
    item_id: str,
    organization_id: str = Depends(get_organization_id),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    return success(service.get_item(organization_id, item_id))


@router.patch("/{item_id}", summary="Update a catalog item")
def update_item(
    item_id: str,
    body: CatalogItemUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(require_manager),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    item = service.update_item(organization_id, item_id, body.model_dump(exclude_unset=True))
    return success(item, "Catalog item updated")


@router.delete("/{item_id}", summary="Remove a catalog item")
def delete_item(
    item_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(require_manager),
    service: ServiceCatalogService = Depends(get_service_catalog_service),
):
    service.delete_item(organization_id, item_id)
    return success(message="Catalog item deleted")
