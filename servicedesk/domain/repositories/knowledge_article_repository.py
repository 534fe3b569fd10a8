"""
Knowledge Article Repository Interface
======================================
"""
from abc import abstractmethod
from typing import Dict, List, Optional

from servicedesk.domain.models.knowledge_article import KnowledgeArticle
from servicedesk.domain.repositories.base_repository import Filters, TenantRepository


class KnowledgeArticleRepository(TenantRepository[KnowledgeArticle]):

    @abstractmethod
    def find_by_article_id(self, organization_id: str, article_id: str) -> Optional[KnowledgeArticle]:
        """Find an article by its KB-YYYY-NNNNN id."""
        pass

    @abstractmethod
    def find_by_slug(self, organization_id: str, slug: str) -> Optional[KnowledgeArticle]:
        pass

    @abstractmethod
    def find_top(
        self,
        organization_id: str,
        filters: Optional[Filters] = None,
        sort_field: str = "published_at",
        limit: int = 10,
    ) -> List[KnowledgeArticle]:
        """Articles matching the filters, highest `sort_field` first."""
        pass

    @abstractmethod
    def increment_views(self, article_id: str) -> None:
        """Bump the view counter of an article."""
        pass

    @abstractmethod
    def metrics_summary(self, organization_id: str) -> Dict[str, float]:
        """Total views and the mean rating of rated articles."""
        pass
