from datetime import datetime, timezone

from bson.binary import Binary
from bson.decimal128 import Decimal128
from bson.int64 import Int64
from bson.objectid import ObjectId
from bson.son import SON

from mongocompare.documents import documents_equal, ordered_pairs_equal, values_equal


def test_numeric_types_compare_by_value():
    assert values_equal(1, 1.0)
    assert values_equal(Int64(5), 5)
    assert values_equal(Decimal128("1.50"), 1.5)
    assert values_equal(Decimal128("10"), Decimal128("1.0E+1"))
    assert not values_equal(Decimal128("0.1"), 0.1)
    assert not values_equal(2, 3)


def test_decimal_nan_equals_nan():
    assert values_equal(Decimal128("NaN"), float("nan"))
    assert not values_equal(Decimal128("NaN"), 0)


def test_bool_is_not_a_number():
    assert values_equal(True, True)
    assert not values_equal(True, 1)
    assert not values_equal(0, False)


def test_nested_documents_ignore_field_order_but_arrays_do_not():
    left = {"_id": 1, "a": {"x": 1, "y": [1, 2, {"z": Decimal128("3")}]}}
    right = SON([("a", SON([("y", [1, 2, {"z": 3}]), ("x", 1.0)])), ("_id", 1)])
    assert documents_equal(left, right)
    assert not documents_equal(left, {"_id": 1, "a": {"x": 1, "y": [2, 1, {"z": 3}]}})


def test_missing_or_extra_fields_differ():
    assert not documents_equal({"_id": 1, "a": 1}, {"_id": 1})
    assert not documents_equal({"_id": 1, "a": None}, {"_id": 1, "b": None})
    assert documents_equal(None, None)
    assert not documents_equal({"_id": 1}, None)


def test_binary_and_bytes():
    assert values_equal(Binary(b"abc", 0), b"abc")
    assert not values_equal(Binary(b"abc", 4), b"abc")


def test_scalar_types_must_match():
    oid = ObjectId()
    assert values_equal(oid, ObjectId(str(oid)))
    assert not values_equal(str(oid), oid)
    assert not values_equal("1", 1)
    assert values_equal(None, None)
    assert not values_equal(None, 0)


def test_datetimes_with_and_without_tzinfo():
    naive = datetime(2024, 5, 1, 12, 0, 0)
    aware = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
    assert values_equal(naive, aware)
    assert not values_equal(naive, datetime(2024, 5, 1, 12, 0, 1))


def test_ordered_pairs_respect_field_order():
    assert ordered_pairs_equal(SON([("a", 1), ("b", -1)]), [("a", 1.0), ("b", -1)])
    assert not ordered_pairs_equal(SON([("a", 1), ("b", -1)]), SON([("b", -1), ("a", 1)]))
    assert not ordered_pairs_equal([("a", 1)], None)


def test_ordered_mode_applies_field_order_at_every_depth():
    left = SON([("a", 1), ("b", SON([("x", 1), ("y", 2)]))])
    right = SON([("a", 1), ("b", SON([("y", 2), ("x", 1)]))])
    assert values_equal(left, right)
    assert not values_equal(left, right, ordered=True)
    assert not values_equal([SON([("a", 1), ("b", 2)])], [SON([("b", 2), ("a", 1)])], ordered=True)
    assert values_equal(SON([("a", Int64(1))]), SON([("a", 1.0)]), ordered=True)
