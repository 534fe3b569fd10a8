from typing import TYPE_CHECKING

from servicedesk.domain.repositories.category_repository import CategoryRepository
from servicedesk.domain.repositories.counter_repository import CounterRepository
from servicedesk.domain.repositories.incident_repository import IncidentRepository
from servicedesk.domain.repositories.knowledge_article_repository import KnowledgeArticleRepository
from servicedesk.domain.repositories.problem_repository import ProblemRepository
from servicedesk.application.services.category_service import CategoryService
from servicedesk.application.services.knowledge_service import KnowledgeService

if TYPE_CHECKING:
    from servicedesk.di.base_container import BaseContainer


class KnowledgeProvider:
    """Knowledge provider - registers category and knowledge base services"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        articles = container.get(KnowledgeArticleRepository)
        categories = CategoryService(
            category_repository=container.get(CategoryRepository),
            article_repository=articles,
        )
        container.register_singleton(CategoryService, categories)
        container.register_singleton(
            KnowledgeService,
            KnowledgeService(
                article_repository=articles,
                category_service=categories,
                incident_repository=container.get(IncidentRepository),
                problem_repository=container.get(ProblemRepository),
                counter_repository=container.get(CounterRepository),
            )
        )
