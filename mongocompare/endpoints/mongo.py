from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pymongo.collection import Collection
from pymongo.command_cursor import CommandCursor
from pymongo.cursor import Cursor

from .base import CollectionHandle, SortSpec


class MongoCollectionHandle(CollectionHandle):
    """CollectionHandle backed by a pymongo collection."""

    def __init__(self, collection: Collection, batch_size: int = 0) -> None:
        self.collection = collection
        self.batch_size = batch_size

    @property
    def namespace(self) -> str:
        return self.collection.full_name

    def count(self, filter: Optional[Mapping[str, Any]] = None) -> int:
        return int(self.collection.count_documents(dict(filter or {})))

    def list_indexes(self) -> List[Dict[str, Any]]:
        with self.collection.list_indexes() as cursor:
            return [dict(index) for index in cursor]

    def find_one(self, filter: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        return self.collection.find_one(dict(filter))

    def find(
        self,
        filter: Optional[Mapping[str, Any]] = None,
        projection: Optional[Mapping[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        limit: int = 0,
    ) -> Cursor:
        cursor = self.collection.find(dict(filter or {}), projection=dict(projection) if projection else None)
        if sort:
            cursor = cursor.sort(list(sort))
        if limit > 0:
            cursor = cursor.limit(limit)
        if self.batch_size > 0:
            cursor = cursor.batch_size(self.batch_size)
        return cursor

    def aggregate_sample(self, size: int) -> CommandCursor:
        pipeline = [{"$sample": {"size": int(size)}}]
        return self.collection.aggregate(pipeline)

    def __repr__(self) -> str:
        return f"MongoCollectionHandle({self.namespace})"


__all__ = ["MongoCollectionHandle"]
