"""
Knowledge Article Model
=======================

Domain model for knowledge base articles. Articles start as drafts,
are published for readers and archived when obsolete. Editing the
content of an article bumps its version.
"""
import re
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from servicedesk.core.errors import ValidationError
from servicedesk.domain.constants.itsm_constants import ArticleStatus, ArticleVisibility
from servicedesk.domain.models.itsm_common import PersonRef
from servicedesk.utils.datetime_utils import now


def article_slug(title: str) -> str:
    slug = re.sub(r"[^a-z0-9\s-]", "", title.lower())
    return re.sub(r"\s+", "-", slug.strip())[:100]


class ArticleMetrics(BaseModel):
    views: int = 0
    helpful_count: int = 0
    not_helpful_count: int = 0
    avg_rating: float = 0
    rating_count: int = 0


class KnowledgeArticle(BaseModel):
    """Knowledge article domain model."""
    model_config = ConfigDict(extra="ignore")

    id: str
    article_id: str
    organization_id: str
    title: str
    slug: str
    content: str
    summary: Optional[str] = None
    category_id: str
    tags: List[str] = Field(default_factory=list)
    status: str = ArticleStatus.DRAFT
    visibility: str = ArticleVisibility.INTERNAL
    author: PersonRef
    linked_incidents: List[str] = Field(default_factory=list)
    linked_problems: List[str] = Field(default_factory=list)
    known_errors: List[str] = Field(default_factory=list)
    metrics: ArticleMetrics = Field(default_factory=ArticleMetrics)
    version: int = 1
    is_featured: bool = False
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
    published_at: Optional[datetime] = None

    def is_published(self) -> bool:
        return self.status == ArticleStatus.PUBLISHED

    def revise(self, content: str) -> None:
        """Replace the body; a different body is a new version."""
        if content != self.content:
            self.content = content
            self.version += 1
        self.updated_at = now()

    def publish(self) -> None:
        if self.status == ArticleStatus.PUBLISHED:
            raise ValidationError("Article is already published")
        self.status = ArticleStatus.PUBLISHED
        if self.published_at is None:
            self.published_at = now()
        self.updated_at = now()

    def archive(self) -> None:
        if self.status == ArticleStatus.ARCHIVED:
            raise ValidationError("Article is already archived")
        self.status = ArticleStatus.ARCHIVED
        self.updated_at = now()

    def record_feedback(self, helpful: Optional[bool] = None, rating: Optional[int] = None) -> ArticleMetrics:
        """
        Count a helpful/not-helpful vote and fold a 1-5 rating into the
        running average.

        Raises:
            ValidationError: If the article is not published, or the
                feedback carries neither a vote nor a rating
        """
        if not self.is_published():
            raise ValidationError("Feedback is only accepted on published articles")
        if helpful is None and rating is None:
            raise ValidationError("Feedback needs a helpful vote or a rating")
        if helpful is True:
            self.metrics.helpful_count += 1
        elif helpful is False:
            self.metrics.not_helpful_count += 1
        if rating is not None:
            if not 1 <= rating <= 5:
                raise ValidationError("Rating must be between 1 and 5")
            total = self.metrics.avg_rating * self.metrics.rating_count + rating
            self.metrics.rating_count += 1
            self.metrics.avg_rating = round(total / self.metrics.rating_count, 2)
        return self.metrics

    def link_incident(self, incident_id: str) -> bool:
        """Returns False when the incident was already linked."""
        if incident_id in self.linked_incidents:
            return False
        self.linked_incidents.append(incident_id)
        self.updated_at = now()
        return True

    def link_known_error(self, ke_id: str, problem_id: str) -> bool:
        """Link a known error and the problem that documents it."""
        if ke_id in self.known_errors:
            return False
        self.known_errors.append(ke_id)
        if problem_id not in self.linked_problems:
            self.linked_problems.append(problem_id)
        self.updated_at = now()
        return True
