"""
Base Repository Interface
=========================

Operations shared by every entity repository.
Implementations should be in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")

# Equality filters keyed by entity field path; list values match any element,
# None values are ignored and IS_NULL matches unset fields.
Filters = Dict[str, Any]


class _IsNull:
    def __repr__(self) -> str:
        return "IS_NULL"


IS_NULL = _IsNull()


class Repository(ABC, Generic[T]):
    """
    Abstract repository for entity persistence operations.
    """

    @abstractmethod
    def create(self, entity: T) -> T:
        """
        Create a new entity.

        Args:
            entity: Entity to create

        Returns:
            Created entity
        """
        pass

    @abstractmethod
    def update(self, entity: T) -> T:
        """
        Update an existing entity.

        Args:
            entity: Entity with updated data

        Returns:
            Updated entity

        Raises:
            NotFoundError: If the entity does not exist
        """
        pass

    @abstractmethod
    def find_by_id(self, entity_id: str) -> Optional[T]:
        """
        Find an entity by its ID.

        Args:
            entity_id: Unique entity identifier

        Returns:
            Entity if found, None otherwise
        """
        pass

    @abstractmethod
    def delete(self, entity_id: str) -> bool:
        """
        Delete an entity.

        Args:
            entity_id: Unique entity identifier

        Returns:
            True if the entity was found and deleted, False otherwise
        """
        pass


class TenantRepository(Repository[T]):
    """Repository of organization-scoped entities."""

    @abstractmethod
    def find_in_organization(self, organization_id: str, entity_id: str) -> Optional[T]:
        """
        Find an entity by ID within one organization.

        Args:
            organization_id: Tenant identifier
            entity_id: Unique entity identifier

        Returns:
            Entity if found in that organization, None otherwise
        """
        pass

    @abstractmethod
    def find_page(
        self,
        organization_id: str,
        filters: Optional[Filters] = None,
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
    ) -> Tuple[List[T], int]:
        """
        List entities of an organization, newest first.

        Args:
            organization_id: Tenant identifier
            filters: Field equality filters
            page: 1-based page number
            limit: Page size
            search: Case-insensitive text matched against the searchable fields

        Returns:
            Tuple of (entities on the page, total matching count)
        """
        pass

    @abstractmethod
    def count_by(self, organization_id: str, field: str, filters: Optional[Filters] = None) -> Dict[str, int]:
        """
        Count entities grouped by one field.

        Args:
            organization_id: Tenant identifier
            field: Field to group on
            filters: Field equality filters

        Returns:
            Mapping of field value to count
        """
        pass

    @abstractmethod
    def count(self, organization_id: str, filters: Optional[Filters] = None) -> int:
        """Count entities of an organization matching the filters."""
        pass
