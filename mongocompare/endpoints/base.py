from __future__ import annotations

import abc
from typing import Any, Dict, Iterator, List, Mapping, Optional, Protocol, Sequence, Tuple

SortSpec = Sequence[Tuple[str, int]]


class DocumentCursor(Protocol):
    """Forward-only, lazily fetched sequence of documents that must be closed."""

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        ...

    def close(self) -> None:
        ...


class CollectionHandle(abc.ABC):
    """Read-only capability over one collection in one deployment."""

    @property
    @abc.abstractmethod
    def namespace(self) -> str:
        ...

    @abc.abstractmethod
    def count(self, filter: Optional[Mapping[str, Any]] = None) -> int:
        ...

    @abc.abstractmethod
    def list_indexes(self) -> List[Dict[str, Any]]:
        ...

    @abc.abstractmethod
    def find_one(self, filter: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        ...

    @abc.abstractmethod
    def find(
        self,
        filter: Optional[Mapping[str, Any]] = None,
        projection: Optional[Mapping[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        limit: int = 0,
    ) -> DocumentCursor:
        ...

    @abc.abstractmethod
    def aggregate_sample(self, size: int) -> DocumentCursor:
        ...


__all__ = ["CollectionHandle", "DocumentCursor", "SortSpec"]
