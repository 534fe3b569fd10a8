"""
MongoDB Base Repository
=======================

Shared MongoDB persistence for entity repositories. Entities are stored
with their own string `id`; MongoDB's `_id` is never exposed.

Pydantic entities are converted with model_dump()/model_validate();
dataclass entities override `_to_entity` and `_to_document`.
"""
import re
from datetime import date, datetime
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection

from servicedesk.core.errors import NotFoundError
from servicedesk.domain.constants.fields import CommonFields
from servicedesk.domain.repositories.base_repository import IS_NULL, Filters
from servicedesk.utils.datetime_utils import ensure_aware, now

T = TypeVar("T")


def normalize_datetimes(value: Any) -> Any:
    """Recursively attach UTC to naive datetimes read back from MongoDB."""
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, dict):
        return {k: normalize_datetimes(v) for k, v in value.items()}
    if isinstance(value, list):
        return [normalize_datetimes(v) for v in value]
    return value


def encode_for_mongo(value: Any) -> Any:
    """BSON has no plain date type; store dates as ISO strings."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: encode_for_mongo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_for_mongo(v) for v in value]
    return value


class MongoBaseRepository(Generic[T]):
    """
    MongoDB implementation of the shared repository operations.

    Subclasses set `entity_class` and may set `searchable_fields` and
    `default_sort`.
    """

    entity_class: Type[Any] = None
    searchable_fields: Tuple[str, ...] = ()
    default_sort: List[Tuple[str, int]] = [(CommonFields.CREATED_AT, DESCENDING), (CommonFields.ID, DESCENDING)]

    def __init__(self, collection: Collection):
        """
        Initialize repository with a MongoDB collection.

        Args:
            collection: Collection holding this entity's documents
        """
        self._collection = collection

    def _to_entity(self, doc: dict) -> T:
        """Convert MongoDB document to entity."""
        if not doc:
            raise ValueError("Document cannot be empty")
        doc = dict(doc)
        doc.pop(CommonFields.MONGO_ID, None)
        return self.entity_class.model_validate(normalize_datetimes(doc))

    def _to_document(self, entity: T) -> dict:
        """Convert entity to MongoDB document."""
        return encode_for_mongo(entity.model_dump())

    def _build_query(
        self,
        organization_id: Optional[str] = None,
        filters: Optional[Filters] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        if organization_id is not None:
            query[CommonFields.ORGANIZATION_ID] = organization_id
        for field, value in (filters or {}).items():
            if value is None:
                continue
            if value is IS_NULL:
                query[field] = None
            elif isinstance(value, (list, tuple, set)):
                query[field] = {"$in": list(value)}
            else:
                query[field] = value
        if search and self.searchable_fields:
            pattern = {"$regex": re.escape(search.strip()), "$options": "i"}
            query["$or"] = [{field: pattern} for field in self.searchable_fields]
        return query

    def _find(self, query: Dict[str, Any], sort: Optional[List[Tuple[str, int]]] = None, limit: int = 0) -> List[T]:
        cursor = self._collection.find(query).sort(sort or self.default_sort)
        if limit:
            cursor = cursor.limit(limit)
        return [self._to_entity(doc) for doc in cursor]

    def _find_one(self, query: Dict[str, Any]) -> Optional[T]:
        doc = self._collection.find_one(query)
        return self._to_entity(doc) if doc else None

    def _page(
        self,
        query: Dict[str, Any],
        page: int,
        limit: int,
        sort: Optional[List[Tuple[str, int]]] = None,
    ) -> Tuple[List[T], int]:
        page = max(page, 1)
        limit = max(limit, 1)
        total = self._collection.count_documents(query)
        cursor = (
            self._collection.find(query)
            .sort(sort or self.default_sort)
            .skip((page - 1) * limit)
            .limit(limit)
        )
        return [self._to_entity(doc) for doc in cursor], total

    def create(self, entity: T) -> T:
        """Create a new entity."""
        self._collection.insert_one(self._to_document(entity))
        return entity

    def update(self, entity: T) -> T:
        """Update an existing entity."""
        entity.updated_at = now()
        doc = self._to_document(entity)
        result = self._collection.find_one_and_update(
            {CommonFields.ID: entity.id},
            {"$set": {k: v for k, v in doc.items() if k != CommonFields.CREATED_AT}},
            return_document=ReturnDocument.AFTER,
        )
        if not result:
            raise NotFoundError.for_resource(type(entity).__name__, entity.id)
        return self._to_entity(result)

    def find_by_id(self, entity_id: str) -> Optional[T]:
        return self._find_one({CommonFields.ID: entity_id})

    def delete(self, entity_id: str) -> bool:
        result = self._collection.delete_one({CommonFields.ID: entity_id})
        return result.deleted_count > 0

    def find_in_organization(self, organization_id: str, entity_id: str) -> Optional[T]:
        return self._find_one({CommonFields.ID: entity_id, CommonFields.ORGANIZATION_ID: organization_id})

    def find_page(
        self,
        organization_id: str,
        filters: Optional[Filters] = None,
        page: int = 1,
        limit: int = 20,
        search: Optional[str] = None,
    ) -> Tuple[List[T], int]:
        return self._page(self._build_query(organization_id, filters, search), page, limit)

    def count(self, organization_id: str, filters: Optional[Filters] = None) -> int:
        return self._collection.count_documents(self._build_query(organization_id, filters))

    def count_by(self, organization_id: str, field: str, filters: Optional[Filters] = None) -> Dict[str, int]:
        pipeline = [
            {"$match": self._build_query(organization_id, filters)},
            {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
        ]
        return {
            str(row["_id"]): row["count"]
            for row in self._collection.aggregate(pipeline)
            if row["_id"] is not None
        }
