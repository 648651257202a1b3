from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import ALWAYS_IGNORED_INDEX_OPTIONS, merge_ignored_options
from .documents import documents_equal, ordered_pairs_equal

KeyPairs = Tuple[Tuple[str, Any], ...]


class IndexDescriptorError(RuntimeError):
    """Raised when an index listing entry does not have the expected shape."""

    def __init__(self, message: str, descriptor: Any = None) -> None:
        super().__init__(message)
        self.descriptor = descriptor


@dataclass(frozen=True)
class IndexDescriptor:
    name: str
    key: KeyPairs
    raw: Mapping[str, Any] = field(repr=False, compare=False, default_factory=dict)

    @staticmethod
    def from_document(document: Mapping[str, Any]) -> "IndexDescriptor":
        if not isinstance(document, Mapping):
            raise IndexDescriptorError(f"Index descriptor must be a document, got {type(document).__name__}", document)
        name = document.get("name")
        if not isinstance(name, str):
            raise IndexDescriptorError(f"Index descriptor has no string name: {name!r}", document)
        key = document.get("key")
        if not isinstance(key, Mapping):
            raise IndexDescriptorError(
                f"Index {name} key must be a document, got {type(key).__name__}",
                document,
            )
        return IndexDescriptor(name=name, key=tuple((str(k), v) for k, v in key.items()), raw=document)

    def unordered(self, ignored_options: Iterable[str] = ALWAYS_IGNORED_INDEX_OPTIONS) -> Dict[str, Any]:
        """Plain-dict view of the descriptor without the ignored options; the fetched document is untouched."""
        ignore = set(merge_ignored_options(ignored_options))
        return {key: _to_plain(value) for key, value in self.raw.items() if key not in ignore}


def _to_plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


@dataclass
class IndexComparison:
    source: List[IndexDescriptor]
    target: List[IndexDescriptor]
    listings_equal: bool
    key_order_mismatches: List[str] = field(default_factory=list)

    @property
    def equal(self) -> bool:
        return self.listings_equal and not self.key_order_mismatches


def parse_listing(documents: Iterable[Mapping[str, Any]]) -> List[IndexDescriptor]:
    return [IndexDescriptor.from_document(doc) for doc in documents]


def key_map(descriptors: Iterable[IndexDescriptor]) -> Dict[str, KeyPairs]:
    return {descriptor.name: descriptor.key for descriptor in descriptors}


def sort_by_name(descriptors: Sequence[IndexDescriptor]) -> List[IndexDescriptor]:
    return sorted(descriptors, key=lambda descriptor: descriptor.name)


def compare_index_listings(
    source_documents: Iterable[Mapping[str, Any]],
    target_documents: Iterable[Mapping[str, Any]],
    ignored_options: Optional[Iterable[str]] = None,
) -> IndexComparison:
    """
    Compare two index listings.

    Descriptors are compared as unordered documents after sorting by name and
    dropping the ignored options (``background`` is always among them). When that comparison succeeds, the key
    documents are compared again by name with field order preserved, since
    ``{a: 1, b: 1}`` and ``{b: 1, a: 1}`` are different indexes.
    """
    ignored = merge_ignored_options(ignored_options or ())
    source = parse_listing(source_documents)
    target = parse_listing(target_documents)

    source_sorted = [descriptor.unordered(ignored) for descriptor in sort_by_name(source)]
    target_sorted = [descriptor.unordered(ignored) for descriptor in sort_by_name(target)]
    listings_equal = len(source_sorted) == len(target_sorted) and all(
        documents_equal(left, right) for left, right in zip(source_sorted, target_sorted)
    )

    mismatches: List[str] = []
    if listings_equal:
        target_keys = key_map(target)
        for name, source_key in key_map(source).items():
            if not ordered_pairs_equal(source_key, target_keys.get(name)):
                mismatches.append(name)
    return IndexComparison(
        source=source,
        target=target,
        listings_equal=listings_equal,
        key_order_mismatches=mismatches,
    )


__all__ = [
    "IndexComparison",
    "IndexDescriptor",
    "IndexDescriptorError",
    "compare_index_listings",
    "key_map",
    "parse_listing",
    "sort_by_name",
]
