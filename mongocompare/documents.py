"""
Structural equality for BSON documents.

Two documents are equal when they carry the same field names with equal
values. Numeric values are compared by the value they decode to, the way the
server compares them: ``1``, ``Int64(1)``, ``1.0`` and ``Decimal128("1.0")``
are all equal, while ``True`` is only equal to ``True``. Field order inside
embedded documents is not significant; element order inside arrays is.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from bson.binary import Binary
from bson.decimal128 import Decimal128

_SEQUENCE_TYPES = (list, tuple)


def _numeric_value(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(value)
    if isinstance(value, Decimal):
        return value
    return None


def _numbers_equal(left: Decimal, right: Decimal) -> bool:
    if left.is_nan() or right.is_nan():
        return left.is_nan() and right.is_nan()
    return left == right


def _binary_parts(value: Any) -> Optional[tuple]:
    if isinstance(value, Binary):
        return (value.subtype, bytes(value))
    if isinstance(value, (bytes, bytearray)):
        return (0, bytes(value))
    return None


def _datetime_key(value: datetime) -> datetime:
    # naive BSON dates are UTC
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def values_equal(left: Any, right: Any, ordered: bool = False) -> bool:
    """
    Compare two BSON values recursively.

    With ``ordered`` set, embedded documents must also agree on field order,
    which is how the server compares documents used as keys.
    """
    left_num = _numeric_value(left)
    right_num = _numeric_value(right)
    if left_num is not None or right_num is not None:
        if left_num is None or right_num is None:
            return False
        return _numbers_equal(left_num, right_num)

    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right

    if isinstance(left, Mapping) or isinstance(right, Mapping):
        if not (isinstance(left, Mapping) and isinstance(right, Mapping)):
            return False
        if ordered:
            return ordered_pairs_equal(left, right, ordered=True)
        return documents_equal(left, right)

    if isinstance(left, _SEQUENCE_TYPES) or isinstance(right, _SEQUENCE_TYPES):
        if not (isinstance(left, _SEQUENCE_TYPES) and isinstance(right, _SEQUENCE_TYPES)):
            return False
        if len(left) != len(right):
            return False
        return all(values_equal(a, b, ordered) for a, b in zip(left, right))

    left_bin = _binary_parts(left)
    right_bin = _binary_parts(right)
    if left_bin is not None or right_bin is not None:
        return left_bin == right_bin

    if isinstance(left, datetime) and isinstance(right, datetime):
        if (left.tzinfo is None) != (right.tzinfo is None):
            return _datetime_key(left) == _datetime_key(right)
        return left == right

    if type(left) is not type(right) and not (isinstance(left, str) and isinstance(right, str)):
        return False
    return left == right


def documents_equal(left: Optional[Mapping[str, Any]], right: Optional[Mapping[str, Any]]) -> bool:
    """Compare two documents field by field, ignoring field order."""
    if left is None or right is None:
        return left is None and right is None
    if len(left) != len(right):
        return False
    for key, value in left.items():
        if key not in right:
            return False
        if not values_equal(value, right[key]):
            return False
    return True


def ordered_pairs_equal(left: Any, right: Any, ordered: bool = False) -> bool:
    """Compare two ordered key documents, field order included."""
    left_items = list(left.items()) if isinstance(left, Mapping) else list(left or [])
    right_items = list(right.items()) if isinstance(right, Mapping) else list(right or [])
    if len(left_items) != len(right_items):
        return False
    for (left_key, left_value), (right_key, right_value) in zip(left_items, right_items):
        if left_key != right_key or not values_equal(left_value, right_value, ordered):
            return False
    return True


__all__ = ["documents_equal", "ordered_pairs_equal", "values_equal"]
