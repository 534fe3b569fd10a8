"""
Category Service
================
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from servicedesk.core.errors import ConflictError, NotFoundError, ValidationError
from servicedesk.domain.models.category import Category
from servicedesk.domain.models.user import User
from servicedesk.domain.repositories.category_repository import CategoryRepository
from servicedesk.domain.repositories.knowledge_article_repository import KnowledgeArticleRepository
from servicedesk.utils.id_utils import new_id

logger = logging.getLogger(__name__)

_FIELDS = ("description", "color", "is_active", "order")


class CategoryService:
    """
    Application service for ticket and article categories.

    Names are unique per organization and category type. Deleting a
    category normally just deactivates it; a permanent delete is refused
    while subcategories or articles still use it.
    """

    def __init__(self, category_repository: CategoryRepository, article_repository: KnowledgeArticleRepository):
        self._categories = category_repository
        self._articles = article_repository

    def create(self, organization_id: str, actor: User, fields: Dict[str, Any]) -> Category:
        """
        Raises:
            ConflictError: If a category of that type already has the name
            NotFoundError: If the parent category does not exist
            ValidationError: If the parent cannot take subcategories
        """
        name = fields["name"].strip()
        category = Category(
            id=new_id(),
            organization_id=organization_id,
            name=name,
            type=fields["type"],
            created_by=actor.id,
            **{k: fields[k] for k in _FIELDS if fields.get(k) is not None},
        )
        self._ensure_unique(category)
        if fields.get("parent_id"):
            category.set_parent(self.get(organization_id, fields["parent_id"]))
        created = self._categories.create(category)
        logger.info("Category created: %s (%s)", created.name, created.type)
        return created

    def list_categories(
        self,
        organization_id: str,
        type: Optional[str] = None,
        parent_id: Optional[str] = None,
        include_inactive: bool = False,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[Category], int]:
        filters = {"type": type, "parent_id": parent_id, "is_active": None if include_inactive else True}
        return self._categories.find_page(organization_id, filters, page, limit, search)

    def get(self, organization_id: str, category_id: str) -> Category:
        category = self._categories.find_in_organization(organization_id, category_id)
        if category is None:
            raise NotFoundError.for_resource("Category", category_id)
        return category

    def require_active(self, organization_id: str, category_id: str) -> Category:
        category = self.get(organization_id, category_id)
        if not category.is_active:
            raise ValidationError(f"Category '{category.name}' is inactive")
        return category

    def update(self, organization_id: str, category_id: str, changes: Dict[str, Any]) -> Category:
        category = self.get(organization_id, category_id)
        if changes.get("name") and changes["name"].strip() != category.name:
            category.name = changes["name"].strip()
            self._ensure_unique(category)
        for field in _FIELDS:
            if changes.get(field) is not None:
                setattr(category, field, changes[field])
        if "parent_id" in changes:
            parent_id = changes["parent_id"]
            category.set_parent(self.get(organization_id, parent_id) if parent_id else None)
        return self._categories.update(category)

    def deactivate(self, organization_id: str, category_id: str) -> Category:
        category = self.get(organization_id, category_id)
        category.deactivate()
        updated = self._categories.update(category)
        logger.info("Category deactivated: %s", category_id)
        return updated

    def delete(self, organization_id: str, category_id: str) -> None:
        """
        Raises:
            ValidationError: If subcategories or articles still reference it
        """
        category = self.get(organization_id, category_id)
        if self._categories.find_children(organization_id, category.id):
            raise ValidationError("Category has subcategories")
        if self._articles.count(organization_id, {"category_id": category.id}):
            raise ValidationError("Category is used by knowledge articles")
        self._categories.delete(category.id)
        logger.info("Category deleted: %s", category_id)

    def _ensure_unique(self, category: Category) -> None:
        existing = self._categories.find_by_name(category.organization_id, category.name, category.type)
        if existing is not None and existing.id != category.id:
            raise ConflictError(f"Category '{category.name}' already exists")
