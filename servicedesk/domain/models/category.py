"""
Category Model
==============

Tenant-defined classification for tickets and knowledge articles.
Categories nest one level through `parent_id`.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.core.errors import ValidationError
from servicedesk.domain.constants.itsm_constants import CategoryType
from servicedesk.utils.datetime_utils import now


class Category(BaseModel):
    """Category domain model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    organization_id: str
    name: str
    description: Optional[str] = None
    type: str = CategoryType.GENERAL
    parent_id: Optional[str] = None
    color: Optional[str] = None
    is_active: bool = True
    order: int = 0
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    def set_parent(self, parent: Optional["Category"]) -> None:
        if parent is None:
            self.parent_id = None
            return
        if parent.id == self.id:
            raise ValidationError("A category cannot be its own parent")
        if parent.parent_id is not None:
            raise ValidationError("Subcategories cannot have children")
        if not parent.is_active:
            raise ValidationError("Parent category is inactive")
        self.parent_id = parent.id

    def deactivate(self) -> None:
        self.is_active = False
        self.updated_at = now()
