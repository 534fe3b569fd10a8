"""
Service Catalog DTO
===================

Requests for catalog items and the service requests raised against them.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from servicedesk.application.dto.common_dto import one_of
from servicedesk.domain.constants.itsm_constants import Priority, ServiceCategory
from servicedesk.domain.models.service_catalog import ApprovalStep

_FULFILLMENT_TYPES = "^(manual|automated|hybrid)$"


class CatalogItemCreateRequest(BaseModel):
    """DTO for publishing a catalog item."""
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: str = Field(ServiceCategory.GENERAL_REQUEST, pattern=one_of(ServiceCategory.ALL))
    icon: Optional[str] = None
    form_fields: List[Dict[str, Any]] = Field(default_factory=list)
    requires_approval: bool = False
    approval_chain: List[ApprovalStep] = Field(default_factory=list)
    sla_id: Optional[str] = None
    fulfillment_type: str = Field("manual", pattern=_FULFILLMENT_TYPES)
    estimated_hours: float = Field(24, gt=0)
    is_active: bool = True
    tags: List[str] = Field(default_factory=list)
    order: int = 0


class CatalogItemUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(None, pattern=one_of(ServiceCategory.ALL))
    icon: Optional[str] = None
    form_fields: Optional[List[Dict[str, Any]]] = None
    requires_approval: Optional[bool] = None
    approval_chain: Optional[List[ApprovalStep]] = None
    sla_id: Optional[str] = None
    fulfillment_type: Optional[str] = Field(None, pattern=_FULFILLMENT_TYPES)
    estimated_hours: Optional[float] = Field(None, gt=0)
    is_active: Optional[bool] = None
    tags: Optional[List[str]] = None
    order: Optional[int] = None


class ServiceRequestCreateRequest(BaseModel):
    """`service_id` accepts the catalog item id or its SVC-style id."""
    service_id: str
    form_data: Dict[str, Any] = Field(default_factory=dict)
    priority: str = Field(Priority.MEDIUM, pattern=one_of(Priority.ALL))
    site_id: Optional[str] = None


class ApprovalDecisionRequest(BaseModel):
    approved: bool
    comments: Optional[str] = Field(None, max_length=2000)


class FulfillRequest(BaseModel):
    notes: Optional[str] = None
