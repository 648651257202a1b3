import pytest
from bson.son import SON
from pymongo import DESCENDING

from mongocompare.config import CompareConfig, ConnectionSettings
from mongocompare.endpoints.factory import EndpointFactory
from mongocompare.endpoints.mongo import MongoCollectionHandle
from mongocompare.tools.mongo import MongoTool


class _StubCursor:
    def __init__(self, documents):
        self.documents = documents
        self.calls = []
        self.closed = False

    def sort(self, spec):
        self.calls.append(("sort", spec))
        return self

    def limit(self, value):
        self.calls.append(("limit", value))
        return self

    def batch_size(self, value):
        self.calls.append(("batch_size", value))
        return self

    def __iter__(self):
        return iter(self.documents)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True

    def close(self):
        self.closed = True


class _StubCollection:
    full_name = "db.coll"

    def __init__(self):
        self.calls = []
        self.index_cursor = _StubCursor([SON([("v", 2), ("key", SON([("_id", 1)])), ("name", "_id_")])])

    def count_documents(self, filter):
        self.calls.append(("count_documents", filter))
        return 3

    def list_indexes(self):
        return self.index_cursor

    def find_one(self, filter):
        self.calls.append(("find_one", filter))
        return {"_id": filter["_id"]}

    def find(self, filter, projection=None):
        self.calls.append(("find", filter, projection))
        return _StubCursor([{"_id": 1}])

    def aggregate(self, pipeline):
        self.calls.append(("aggregate", pipeline))
        return _StubCursor([])


class _StubClient:
    def __init__(self, uri, **kwargs):
        self.uri = uri
        self.kwargs = kwargs
        self.closed = False
        self.collection = _StubCollection()

    def __getitem__(self, name):
        return {"coll": self.collection}

    def close(self):
        self.closed = True


def _config():
    return CompareConfig(
        source=ConnectionSettings(uri="mongodb://src", username="u", password="p", database="db", collection="coll"),
        target=ConnectionSettings(uri="mongodb://tgt", database="db", collection="coll"),
    )


def test_handle_translates_operations():
    collection = _StubCollection()
    handle = MongoCollectionHandle(collection, batch_size=50)
    assert handle.namespace == "db.coll"
    assert handle.count() == 3
    assert handle.list_indexes()[0]["name"] == "_id_"
    assert collection.index_cursor.closed
    cursor = handle.find({}, {"_id": 1}, [("_id", DESCENDING)], limit=10)
    assert cursor.calls == [("sort", [("_id", DESCENDING)]), ("limit", 10), ("batch_size", 50)]
    handle.aggregate_sample(7)
    assert collection.calls[-1] == ("aggregate", [{"$sample": {"size": 7}}])
    assert handle.find_one({"_id": 4}) == {"_id": 4}


def test_tool_builds_clients_and_closes_them():
    tool = MongoTool.from_config(_config(), client_factory=_StubClient)
    source_client = tool.client("source")
    assert source_client.uri == "mongodb://src"
    assert source_client.kwargs == {"appname": "mongocompare", "username": "u", "password": "p"}
    assert tool.client("target").kwargs == {"appname": "mongocompare"}
    with pytest.raises(ValueError):
        tool.client("other")
    target_client = tool.client("target")
    tool.stop()
    assert source_client.closed and target_client.closed


def test_factory_builds_handles_from_tool():
    tool = MongoTool.from_config(_config(), client_factory=_StubClient)
    source, target = EndpointFactory.build_handles(tool)
    assert isinstance(source, MongoCollectionHandle)
    assert source.collection is tool.client("source").collection
    assert target.collection is tool.client("target").collection


def test_factory_requires_tool():
    with pytest.raises(ValueError):
        EndpointFactory.build_handle(None, "source")
