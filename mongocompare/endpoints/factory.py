from __future__ import annotations

from typing import Tuple

from .base import CollectionHandle
from .mongo import MongoCollectionHandle


class EndpointFactory:
    """Construct collection handles for the configured source and target."""

    @staticmethod
    def build_handle(tool, side: str, batch_size: int = 0) -> CollectionHandle:
        if tool is None:
            raise ValueError("Execution tool required for collection handle")
        settings = tool.settings(side)
        missing = settings.missing_fields()
        if missing:
            raise ValueError(f"{side} connection settings missing: {', '.join(missing)}")
        collection = tool.client(side)[settings.database][settings.collection]
        return MongoCollectionHandle(collection, batch_size=batch_size)

    @staticmethod
    def build_handles(tool, batch_size: int = 0) -> Tuple[CollectionHandle, CollectionHandle]:
        return (
            EndpointFactory.build_handle(tool, "source", batch_size=batch_size),
            EndpointFactory.build_handle(tool, "target", batch_size=batch_size),
        )


__all__ = ["EndpointFactory"]
