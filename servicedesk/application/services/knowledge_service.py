"""
Knowledge Service
=================

Knowledge base articles: drafting, publishing, reading, feedback and
links to incidents and known errors.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from servicedesk.core.errors import AuthorizationError, NotFoundError, ValidationError
from servicedesk.domain.constants.itsm_constants import ArticleStatus, ArticleVisibility
from servicedesk.domain.constants.people_constants import UserRole
from servicedesk.domain.models.knowledge_article import ArticleMetrics, KnowledgeArticle
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.knowledge_article_repository import KnowledgeArticleRepository
from servicedesk.domain.repositories.problem_repository import ProblemRepository
from servicedesk.application.services.category_service import CategoryService
from servicedesk.application.use_cases.common.generate_ticket_id import GenerateTicketIdUseCase
from servicedesk.application.use_cases.knowledge.create_article import CreateArticleUseCase

logger = logging.getLogger(__name__)

_EDITABLE = ("title", "summary", "tags", "visibility", "is_featured")


class KnowledgeService:
    """
    Application service for the knowledge base.

    Regular users read only published public articles; agents, managers
    and admins see every article of the organization. Agents and above
    write articles, and only the author or a manager edits, publishes,
    archives or deletes one.
    """

    def __init__(
        self,
        article_repository: KnowledgeArticleRepository,
        category_service: CategoryService,
        incident_repository: IncidentRepository,
        problem_repository: ProblemRepository,
        counter_repository: CounterRepository,
    ):
        self._articles = article_repository
        self._categories = category_service
        self._incidents = incident_repository
        self._problems = problem_repository
        self._create_use_case = CreateArticleUseCase(article_repository, GenerateTicketIdUseCase(counter_repository))

    def create(self, organization_id: str, author: User, fields: Dict[str, Any]) -> KnowledgeArticle:
        """
        Raises:
            AuthorizationError: If the author is a regular user
            NotFoundError: If the category does not exist
            ValidationError: If the category is inactive
        """
        self._require_staff(author)
        self._categories.require_active(organization_id, fields["category_id"])
        return self._create_use_case.execute(
            organization_id,
            author,
            title=fields["title"],
            content=fields["content"],
            category_id=fields["category_id"],
            summary=fields.get("summary"),
            tags=fields.get("tags"),
            visibility=fields.get("visibility") or ArticleVisibility.INTERNAL,
            is_featured=fields.get("is_featured", False),
        )

    def list_articles(
        self,
        organization_id: str,
        viewer: User,
        status: Optional[str] = None,
        category_id: Optional[str] = None,
        visibility: Optional[str] = None,
        tag: Optional[str] = None,
        is_featured: Optional[bool] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[KnowledgeArticle], int]:
        filters = {
            "status": status,
            "category_id": category_id,
            "visibility": visibility,
            "tags": tag,
            "is_featured": is_featured,
            **self._reader_filters(viewer),
        }
        return self._articles.find_page(organization_id, filters, page, limit, search)

    def search(
        self,
        organization_id: str,
        viewer: User,
        query: str,
        category_id: Optional[str] = None,
        limit: int = 10,
    ) -> List[KnowledgeArticle]:
        """Published articles matching the query text."""
        if not query or not query.strip():
            raise ValidationError("Search query is required")
        filters = {"category_id": category_id, **self._reader_filters(viewer), "status": ArticleStatus.PUBLISHED}
        articles, _ = self._articles.find_page(organization_id, filters, 1, limit, query)
        return articles

    def featured(self, organization_id: str, viewer: User, limit: int = 5) -> List[KnowledgeArticle]:
        filters = {**self._reader_filters(viewer), "status": ArticleStatus.PUBLISHED, "is_featured": True}
        return self._articles.find_top(organization_id, filters, "published_at", limit)

    def popular(self, organization_id: str, viewer: User, limit: int = 10) -> List[KnowledgeArticle]:
        filters = {**self._reader_filters(viewer), "status": ArticleStatus.PUBLISHED}
        return self._articles.find_top(organization_id, filters, "metrics.views", limit)

    def get(self, organization_id: str, viewer: User, article_ref: str, count_view: bool = False) -> KnowledgeArticle:
        """
        Find an article by id, KB id or slug.

        Raises:
            NotFoundError: If no such article exists or the viewer cannot read it
        """
        article = self._find(organization_id, article_ref)
        if not self._can_read(viewer, article):
            raise NotFoundError.for_resource("Article", article_ref)
        if count_view:
            self._articles.increment_views(article.id)
            article.metrics.views += 1
        return article

    def update(self, organization_id: str, actor: User, article_ref: str, changes: Dict[str, Any]) -> KnowledgeArticle:
        article = self._find(organization_id, article_ref)
        self._require_editor(actor, article)
        if article.status == ArticleStatus.ARCHIVED:
            raise ValidationError("Archived articles cannot be edited")
        if changes.get("category_id"):
            self._categories.require_active(organization_id, changes["category_id"])
            article.category_id = changes["category_id"]
        for field in _EDITABLE:
            if changes.get(field) is not None:
                setattr(article, field, changes[field])
        if changes.get("content") is not None:
            article.revise(changes["content"])
        return self._articles.update(article)

    def publish(self, organization_id: str, actor: User, article_ref: str) -> KnowledgeArticle:
        article = self._find(organization_id, article_ref)
        self._require_editor(actor, article)
        article.publish()
        updated = self._articles.update(article)
        logger.info("Knowledge article published: %s", updated.article_id)
        return updated

    def archive(self, organization_id: str, actor: User, article_ref: str) -> KnowledgeArticle:
        article = self._find(organization_id, article_ref)
        self._require_editor(actor, article)
        article.archive()
        return self._articles.update(article)

    def delete(self, organization_id: str, actor: User, article_ref: str) -> None:
        article = self._find(organization_id, article_ref)
        self._require_editor(actor, article)
        self._articles.delete(article.id)
        logger.info("Knowledge article deleted: %s", article.article_id)

    def submit_feedback(
        self,
        organization_id: str,
        viewer: User,
        article_ref: str,
        helpful: Optional[bool] = None,
        rating: Optional[int] = None,
    ) -> ArticleMetrics:
        article = self.get(organization_id, viewer, article_ref)
        metrics = article.record_feedback(helpful, rating)
        self._articles.update(article)
        return metrics

    def link_incident(self, organization_id: str, actor: User, article_ref: str, incident_ref: str) -> KnowledgeArticle:
        """
        Raises:
            NotFoundError: If the article or incident does not exist
            ValidationError: If the incident is already linked
        """
        self._require_staff(actor)
        article = self._find(organization_id, article_ref)
        incident = self._incidents.find_in_organization(organization_id, incident_ref)
        if incident is None:
            incident = self._incidents.find_by_ticket_id(organization_id, incident_ref)
        if incident is None:
            raise NotFoundError.for_resource("Incident", incident_ref)
        if not article.link_incident(incident.incident_id):
            raise ValidationError(f"Incident {incident.incident_id} is already linked")
        return self._articles.update(article)

    def link_known_error(self, organization_id: str, actor: User, article_ref: str, ke_id: str) -> KnowledgeArticle:
        """
        Link the article to a known error documented on a problem.

        Raises:
            NotFoundError: If the article or the known error does not exist
            ValidationError: If the known error is already linked
        """
        self._require_staff(actor)
        article = self._find(organization_id, article_ref)
        problem = self._problems.find_by_known_error(organization_id, ke_id)
        if problem is None:
            raise NotFoundError.for_resource("Known error", ke_id)
        if not article.link_known_error(ke_id, problem.problem_id):
            raise ValidationError(f"Known error {ke_id} is already linked")
        updated = self._articles.update(article)
        logger.info("Article %s linked to known error %s", updated.article_id, ke_id)
        return updated

    def stats(self, organization_id: str) -> Dict[str, Any]:
        by_status = self._articles.count_by(organization_id, "status")
        return {
            "total_articles": sum(by_status.values()),
            "published_articles": by_status.get(ArticleStatus.PUBLISHED, 0),
            "draft_articles": by_status.get(ArticleStatus.DRAFT, 0),
            "by_status": by_status,
            **self._articles.metrics_summary(organization_id),
        }

    def _find(self, organization_id: str, article_ref: str) -> KnowledgeArticle:
        article = (
            self._articles.find_in_organization(organization_id, article_ref)
            or self._articles.find_by_article_id(organization_id, article_ref)
            or self._articles.find_by_slug(organization_id, article_ref)
        )
        if article is None:
            raise NotFoundError.for_resource("Article", article_ref)
        return article

    @staticmethod
    def _reader_filters(viewer: User) -> Dict[str, Any]:
        if viewer.role == UserRole.USER:
            return {"status": ArticleStatus.PUBLISHED, "visibility": ArticleVisibility.PUBLIC}
        return {}

    @staticmethod
    def _can_read(viewer: User, article: KnowledgeArticle) -> bool:
        if viewer.role != UserRole.USER:
            return True
        return article.is_published() and article.visibility == ArticleVisibility.PUBLIC

    @staticmethod
    def _require_staff(actor: User) -> None:
        if actor.role == UserRole.USER:
            raise AuthorizationError("Only agents and managers can manage knowledge articles")

    def _require_editor(self, actor: User, article: KnowledgeArticle) -> None:
        self._require_staff(actor)
        if article.author.id != actor.id and not actor.is_manager():
            raise AuthorizationError("Only the author or a manager can change this article")
