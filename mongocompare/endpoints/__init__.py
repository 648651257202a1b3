from .base import CollectionHandle, DocumentCursor
from .factory import EndpointFactory
from .mongo import MongoCollectionHandle

__all__ = ["CollectionHandle", "DocumentCursor", "EndpointFactory", "MongoCollectionHandle"]
