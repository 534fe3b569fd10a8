"""
MongoDB Counter Repository
==========================
"""
from pymongo import ReturnDocument
from pymongo.collection import Collection

from servicedesk.domain.constants.fields import CounterFields
from servicedesk.domain.repositories.counter_repository import CounterRepository


class MongoCounterRepository(CounterRepository):
    """Sequences stored as {_id: name, seq: n}; incremented with $inc + upsert."""

    def __init__(self, collection: Collection):
        self._collection = collection

    def next_sequence(self, name: str) -> int:
        doc = self._collection.find_one_and_update(
            {CounterFields.ID: name},
            {"$inc": {CounterFields.SEQUENCE: 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(doc[CounterFields.SEQUENCE])
