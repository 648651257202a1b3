from __future__ import annotations

from contextlib import closing
from typing import Any, Dict, Iterable, List, Optional

from bson import json_util
from pymongo import ASCENDING, DESCENDING

from mongocompare.documents import documents_equal, values_equal
from mongocompare.endpoints.base import CollectionHandle
from mongocompare.indexes import IndexDescriptorError, compare_index_listings

from .base import CheckOutcome, ReconCheck, ReconFatalError

MAX_REPORTED_IDS = 20
_DIRECTION_LABELS = {ASCENDING: "ascending", DESCENDING: "descending"}


def _format_id(value: Any) -> str:
    return str(value)


def _render_listing(listing: Iterable[Dict[str, Any]]) -> str:
    return json_util.dumps(list(listing))


def check_counts(source: CollectionHandle, target: CollectionHandle) -> CheckOutcome:
    source_count = source.count({})
    target_count = target.count({})
    detail = {"source_count": source_count, "target_count": target_count}
    if source_count == target_count:
        return CheckOutcome(True, detail=detail)
    detail["difference"] = target_count - source_count
    return CheckOutcome(
        False,
        [f"Document counts don't match. Source: {source_count}, Target: {target_count}"],
        detail,
    )


def compare_indexes(
    source: CollectionHandle,
    target: CollectionHandle,
    ignored_options: Optional[Iterable[str]] = None,
) -> CheckOutcome:
    source_listing = source.list_indexes()
    target_listing = target.list_indexes()
    try:
        comparison = compare_index_listings(source_listing, target_listing, ignored_options)
    except IndexDescriptorError as exc:
        raise ReconFatalError(f"Malformed index descriptor: {exc}") from exc

    detail: Dict[str, Any] = {
        "source_indexes": sorted(descriptor.name for descriptor in comparison.source),
        "target_indexes": sorted(descriptor.name for descriptor in comparison.target),
        "listings_equal": comparison.listings_equal,
    }
    if comparison.equal:
        return CheckOutcome(True, detail=detail)

    diagnostics = [f"Index key comparison failed on {name}" for name in comparison.key_order_mismatches]
    diagnostics.extend(
        [
            "Indexes are not the same. Source indexes:",
            _render_listing(source_listing),
            "Target indexes:",
            _render_listing(target_listing),
        ]
    )
    detail["key_order_mismatches"] = list(comparison.key_order_mismatches)
    return CheckOutcome(False, diagnostics, detail)


def compare_sample_content(
    source: CollectionHandle,
    target: CollectionHandle,
    sample_size: int,
    *,
    missing_document_fatal: bool = False,
) -> CheckOutcome:
    if sample_size <= 0:
        return CheckOutcome(True, detail={"sample_size": sample_size, "sampled": 0, "matches": 0})

    sampled = matches = 0
    mismatched: List[str] = []
    missing: List[str] = []
    diagnostics: List[str] = []
    with closing(source.aggregate_sample(sample_size)) as cursor:
        for document in cursor:
            doc_id = document.get("_id")
            sampled += 1
            target_document = target.find_one({"_id": doc_id})
            if target_document is None:
                if missing_document_fatal:
                    raise ReconFatalError(f"Target collection has no document with _id {_format_id(doc_id)}")
                missing.append(_format_id(doc_id))
                diagnostics.append(f"Target collection is missing document with _id {_format_id(doc_id)}")
                continue
            if documents_equal(document, target_document):
                matches += 1
            else:
                mismatched.append(_format_id(doc_id))
                diagnostics.append(f"Documents with _id {_format_id(doc_id)} do not have equal content")

    detail: Dict[str, Any] = {"sample_size": sample_size, "sampled": sampled, "matches": matches}
    if mismatched:
        detail["mismatched_ids"] = mismatched[:MAX_REPORTED_IDS]
    if missing:
        detail["missing_ids"] = missing[:MAX_REPORTED_IDS]
    return CheckOutcome(matches == sampled, diagnostics, detail)


def compare_ids(
    source: CollectionHandle,
    target: CollectionHandle,
    count: int,
    direction: int = ASCENDING,
) -> CheckOutcome:
    """
    Walk the first ``count`` ``_id`` values of both collections in ``direction``
    order and stop at the first point where they diverge.
    """
    if direction not in _DIRECTION_LABELS:
        raise ValueError(f"direction must be {ASCENDING} or {DESCENDING}, got {direction!r}")
    label = _DIRECTION_LABELS[direction]
    if count <= 0:
        return CheckOutcome(True, detail={"count": count, "direction": label, "compared": 0})

    projection = {"_id": 1}
    sort = [("_id", direction)]
    iteration = 0
    source_cursor = source.find({}, projection, sort, limit=count)
    with closing(source_cursor), closing(target.find({}, projection, sort, limit=count)) as target_cursor:
        source_iter = iter(source_cursor)
        target_iter = iter(target_cursor)
        while iteration < count:
            source_doc = next(source_iter, None)
            target_doc = next(target_iter, None)
            detail = {"count": count, "direction": label, "iteration": iteration}
            if source_doc is not None and target_doc is not None:
                source_id = source_doc.get("_id")
                target_id = target_doc.get("_id")
                if not values_equal(source_id, target_id, ordered=True):
                    detail.update(source_id=_format_id(source_id), target_id=_format_id(target_id))
                    return CheckOutcome(
                        False,
                        [
                            f"_id mismatch, iteration {iteration}, sort {direction} ({label}), "
                            f"Source _id: {_format_id(source_id)}, Target _id: {_format_id(target_id)}"
                        ],
                        detail,
                    )
            elif source_doc is not None:
                detail.update(missing_side="target", missing_id=_format_id(source_doc.get("_id")))
                return CheckOutcome(
                    False,
                    [f"Target collection is missing _id {_format_id(source_doc.get('_id'))} (end)"],
                    detail,
                )
            elif target_doc is not None:
                detail.update(missing_side="source", missing_id=_format_id(target_doc.get("_id")))
                return CheckOutcome(
                    False,
                    [f"Source collection is missing _id {_format_id(target_doc.get('_id'))} (end)"],
                    detail,
                )
            else:
                break
            iteration += 1
    return CheckOutcome(True, detail={"count": count, "direction": label, "compared": iteration})


class CountCheck(ReconCheck):
    _TYPE = "count"

    def _execute(self) -> CheckOutcome:
        return check_counts(self.context.source, self.context.target)


class IndexCheck(ReconCheck):
    _TYPE = "indexes"

    def _execute(self) -> CheckOutcome:
        ignored = self.cfg.get("ignored_options") or self.context.config.ignored_index_options
        return compare_indexes(self.context.source, self.context.target, ignored)


class SampleContentCheck(ReconCheck):
    _TYPE = "sample_content"

    def _execute(self) -> CheckOutcome:
        config = self.context.config
        sample_size = int(self.cfg.get("sample_size", config.sample_size))
        return compare_sample_content(
            self.context.source,
            self.context.target,
            sample_size,
            missing_document_fatal=bool(self.cfg.get("missing_document_fatal", config.missing_document_fatal)),
        )


class BoundaryKeyCheck(ReconCheck):
    _TYPE = "boundary_ids"

    def _execute(self) -> CheckOutcome:
        return compare_ids(
            self.context.source,
            self.context.target,
            int(self.cfg.get("count", 0)),
            int(self.cfg.get("direction", ASCENDING)),
        )


__all__ = [
    "BoundaryKeyCheck",
    "CountCheck",
    "IndexCheck",
    "SampleContentCheck",
    "check_counts",
    "compare_ids",
    "compare_indexes",
    "compare_sample_content",
]
