"""
Category Repository Interface
=============================
"""
from abc import abstractmethod
from typing import List, Optional

from servicedesk.domain.models.category import Category
from servicedesk.domain.repositories.base_repository import TenantRepository


class CategoryRepository(TenantRepository[Category]):

    @abstractmethod
    def find_by_name(self, organization_id: str, name: str, type: str) -> Optional[Category]:
        """Find a category by name (case-insensitive) within one type."""
        pass

    @abstractmethod
    def find_children(self, organization_id: str, parent_id: str) -> List[Category]:
        """Subcategories of a category."""
        pass
