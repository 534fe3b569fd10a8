"""
Create Knowledge Article Use Case
=================================
"""
import logging
from typing import List, Optional

from servicedesk.domain.constants.itsm_constants import ArticleVisibility, TicketPrefix
from servicedesk.domain.models.itsm_common import PersonRef
from servicedesk.domain.models.knowledge_article import KnowledgeArticle, article_slug
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.knowledge_article_repository import KnowledgeArticleRepository
from servicedesk.application.use_cases.common.generate_ticket_id import GenerateTicketIdUseCase
from servicedesk.utils.id_utils import new_id, short_token

logger = logging.getLogger(__name__)


class CreateArticleUseCase:
    """
    Use case for drafting a knowledge article.

    Articles get a KB-YYYY-NNNNN id and a slug derived from the title,
    made unique within the organization.
    """

    def __init__(self, article_repository: KnowledgeArticleRepository, generate_ticket_id: GenerateTicketIdUseCase):
        self._articles = article_repository
        self._ticket_ids = generate_ticket_id

    def execute(
        self,
        organization_id: str,
        author: User,
        title: str,
        content: str,
        category_id: str,
        summary: Optional[str] = None,
        tags: Optional[List[str]] = None,
        visibility: str = ArticleVisibility.INTERNAL,
        is_featured: bool = False,
    ) -> KnowledgeArticle:
        article = KnowledgeArticle(
            id=new_id(),
            article_id=self._ticket_ids.execute(TicketPrefix.KNOWLEDGE_ARTICLE),
            organization_id=organization_id,
            title=title.strip(),
            slug=self._unique_slug(organization_id, title),
            content=content,
            summary=summary.strip() if summary else None,
            category_id=category_id,
            tags=tags or [],
            visibility=visibility,
            author=PersonRef.of(author),
            is_featured=is_featured,
        )
        created = self._articles.create(article)
        logger.info("Knowledge article drafted: %s by %s", created.article_id, author.id)
        return created

    def _unique_slug(self, organization_id: str, title: str) -> str:
        slug = article_slug(title) or "article"
        if self._articles.find_by_slug(organization_id, slug) is None:
            return slug
        return short_token(slug, 6)
