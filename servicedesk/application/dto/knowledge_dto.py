"""
Knowledge DTO
=============

Requests for categories and knowledge base articles.
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from servicedesk.application.dto.common_dto import one_of
from servicedesk.domain.constants.itsm_constants import ArticleVisibility, CategoryType

_COLOR = r"^#[0-9A-Fa-f]{6}$"


class CategoryCreateRequest(BaseModel):
    """DTO for creating a category; `parent_id` makes it a subcategory."""
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    type: str = Field(CategoryType.GENERAL, pattern=one_of(CategoryType.ALL))
    parent_id: Optional[str] = None
    color: Optional[str] = Field(None, pattern=_COLOR)
    order: int = 0


class CategoryUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    parent_id: Optional[str] = None
    color: Optional[str] = Field(None, pattern=_COLOR)
    is_active: Optional[bool] = None
    order: Optional[int] = None


class ArticleCreateRequest(BaseModel):
    """DTO for drafting a knowledge article."""
    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    summary: Optional[str] = Field(None, max_length=1000)
    category_id: str
    tags: List[str] = Field(default_factory=list)
    visibility: str = Field(ArticleVisibility.INTERNAL, pattern=one_of(ArticleVisibility.ALL))
    is_featured: bool = False


class ArticleUpdateRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    content: Optional[str] = Field(None, min_length=1)
    summary: Optional[str] = Field(None, max_length=1000)
    category_id: Optional[str] = None
    tags: Optional[List[str]] = None
    visibility: Optional[str] = Field(None, pattern=one_of(ArticleVisibility.ALL))
    is_featured: Optional[bool] = None


class ArticleFeedbackRequest(BaseModel):
    helpful: Optional[bool] = None
    rating: Optional[int] = Field(None, ge=1, le=5)


class LinkIncidentRequest(BaseModel):
    incident_id: str


class LinkKnownErrorRequest(BaseModel):
    ke_id: str = Field(..., min_length=1)
