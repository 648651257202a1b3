import copy
import io
from typing import Any, Dict, Iterable, List, Optional

import pytest
from bson.son import SON
from pymongo.errors import OperationFailure

from mongocompare.common import PrintLogger
from mongocompare.config import CompareConfig, ConnectionSettings
from mongocompare.endpoints.base import CollectionHandle


class FakeCursor:
    def __init__(self, documents: Iterable[Dict[str, Any]]) -> None:
        self._documents = [copy.deepcopy(doc) for doc in documents]
        self.closed = False

    def __iter__(self):
        for doc in self._documents:
            if self.closed:
                return
            yield doc

    def close(self) -> None:
        self.closed = True


def id_index() -> SON:
    return SON([("v", 2), ("key", SON([("_id", 1)])), ("name", "_id_")])


class FakeCollection(CollectionHandle):
    """In-memory stand-in for a collection; $sample is deterministic."""

    def __init__(
        self,
        documents: Iterable[Dict[str, Any]] = (),
        indexes: Optional[List[Dict[str, Any]]] = None,
        name: str = "db.coll",
        sample_ids: Optional[List[Any]] = None,
        fail_on: Iterable[str] = (),
    ) -> None:
        self.documents = [dict(doc) for doc in documents]
        self.indexes = indexes if indexes is not None else [id_index()]
        self.name = name
        self.sample_ids = sample_ids
        self.fail_on = set(fail_on)
        self.cursors: List[FakeCursor] = []
        self.lookups: List[Any] = []

    @property
    def namespace(self) -> str:
        return self.name

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise OperationFailure(f"{operation} failed on {self.name}")

    def _cursor(self, documents) -> FakeCursor:
        cursor = FakeCursor(documents)
        self.cursors.append(cursor)
        return cursor

    def count(self, filter=None) -> int:
        self._maybe_fail("count")
        return len(self.documents)

    def list_indexes(self):
        self._maybe_fail("list_indexes")
        return copy.deepcopy(self.indexes)

    def find_one(self, filter):
        self._maybe_fail("find_one")
        self.lookups.append(filter["_id"])
        for doc in self.documents:
            if doc["_id"] == filter["_id"]:
                return copy.deepcopy(doc)
        return None

    def find(self, filter=None, projection=None, sort=None, limit=0):
        self._maybe_fail("find")
        docs = list(self.documents)
        if sort:
            field, direction = sort[0]
            docs.sort(key=lambda doc: doc[field], reverse=direction < 0)
        if projection:
            docs = [{key: doc[key] for key in projection if key in doc} for doc in docs]
        if limit:
            docs = docs[:limit]
        return self._cursor(docs)

    def aggregate_sample(self, size: int):
        self._maybe_fail("aggregate")
        if self.sample_ids is None:
            docs = self.documents[:size]
        else:
            by_id = {doc["_id"]: doc for doc in self.documents}
            docs = [by_id[_id] for _id in self.sample_ids[:size] if _id in by_id]
        return self._cursor(docs)


def make_docs(ids: Iterable[Any], **extra: Any) -> List[Dict[str, Any]]:
    return [dict({"_id": _id, "value": f"v{_id}"}, **extra) for _id in ids]


@pytest.fixture
def log_stream():
    return io.StringIO()


@pytest.fixture
def logger(log_stream):
    return PrintLogger(job_name="test", stream=log_stream)


@pytest.fixture
def config():
    return CompareConfig(
        source=ConnectionSettings(uri="mongodb://src", database="db", collection="coll"),
        target=ConnectionSettings(uri="mongodb://tgt", database="db", collection="coll"),
    )
