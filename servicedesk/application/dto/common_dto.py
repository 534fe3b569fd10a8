"""
Common DTO
==========

Pieces shared by the request/response models of every module.
"""
import math
from typing import Optional
from pydantic import BaseModel, Field


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit) if limit else 0)


class CommentRequest(BaseModel):
    """DTO for adding a comment."""
    content: str = Field(..., min_length=1, max_length=5000)


class CancelRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


def one_of(values) -> str:
    """Regex pattern accepting exactly one of the given values."""
    return "^(" + "|".join(values) + ")$"
