# tests/core/test_canonical.py
"""Tests for canonical JSON serialization and record hashing."""

import base64
import hashlib
from datetime import UTC, date, datetime, time, timedelta, timezone
from decimal import Decimal

import numpy as np
import pandas as pd
import pytest


class TestNormalizeValue:
    """Test _normalize_value handles Python primitives."""

    def test_string_passthrough(self) -> None:
        from fixturize.core.canonical import _normalize_value

        assert _normalize_value("hello") == "hello"

    def test_int_passthrough(self) -> None:
        from fixturize.core.canonical import _normalize_value

        assert _normalize_value(42) == 42

    def test_bool_stays_bool(self) -> None:
        from fixturize.core.canonical import _normalize_value

        assert _normalize_value(True) is True
        assert _normalize_value(False) is False

    def test_none_passthrough(self) -> None:
        from fixturize.core.canonical import _normalize_value

        assert _normalize_value(None) is None

    def test_big_int_is_tagged(self) -> None:
        from fixturize.core.canonical import MAX_SAFE_INT, _normalize_value

        assert _normalize_value(MAX_SAFE_INT) == MAX_SAFE_INT
        assert _normalize_value(MAX_SAFE_INT + 1) == {"__bigint__": str(MAX_SAFE_INT + 1)}
        assert _normalize_value(-(2**63)) == {"__bigint__": str(-(2**63))}


class TestNonFiniteRejection:
    """NaN and Infinity must be rejected, not silently converted."""

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), np.float32("nan"), np.float64("inf")])
    def test_non_finite_float_rejected(self, value: float) -> None:
        from fixturize.core.canonical import _normalize_value

        with pytest.raises(ValueError, match="non-finite float"):
            _normalize_value(value)

    @pytest.mark.parametrize("value", [Decimal("NaN"), Decimal("sNaN"), Decimal("Infinity"), Decimal("-Infinity")])
    def test_non_finite_decimal_rejected(self, value: Decimal) -> None:
        from fixturize.core.canonical import _normalize_value

        with pytest.raises(ValueError, match="non-finite Decimal"):
            _normalize_value(value)

    def test_numpy_array_with_nan_rejected(self) -> None:
        from fixturize.core.canonical import _normalize_value

        with pytest.raises(ValueError, match="NaN/Infinity found in NumPy array"):
            _normalize_value(np.array([[1.0, float("nan")], [2.0, 3.0]]))

    def test_numpy_string_array_passes(self) -> None:
        from fixturize.core.canonical import _normalize_value

        assert _normalize_value(np.array(["hello", "world"])) == ["hello", "world"]


class TestTypeTags:
    """Types JSON cannot represent carry an explicit tag."""

    def test_decimal_tagged(self) -> None:
        from fixturize.core.canonical import _normalize_value

        assert _normalize_value(Decimal("123.450")) == {"__decimal__": "123.450"}

    def test_bytes_tagged_base64(self) -> None:
        from fixturize.core.canonical import _normalize_value

        data = b"\x00\xffhello"
        assert _normalize_value(data) == {"__bytes__": base64.b64encode(data).decode("ascii")}
        assert _normalize_value(bytearray(data)) == _normalize_value(data)

    def test_naive_datetime_tagged_as_wall_clock(self) -> None:
        from fixturize.core.canonical import _normalize_value

        dt = datetime(2026, 1, 12, 10, 30, 0)  # noqa: DTZ001
        assert _normalize_value(dt) == {"__datetime__": "2026-01-12T10:30:00"}

    def test_aware_datetime_keeps_its_offset(self) -> None:
        from fixturize.core.canonical import _normalize_value

        dt = datetime(2026, 1, 12, 12, 30, 0, tzinfo=timezone(timedelta(hours=2)))
        assert _normalize_value(dt) == {"__datetime_tz__": "2026-01-12T12:30:00+02:00"}

    def test_date_and_time_tagged(self) -> None:
        from fixturize.core.canonical import _normalize_value

        assert _normalize_value(date(2026, 1, 12)) == {"__date__": "2026-01-12"}
        assert _normalize_value(time(9, 15)) == {"__time__": "09:15:00"}

    def test_pandas_timestamp_matches_datetime(self) -> None:
        from fixturize.core.canonical import _normalize_value

        ts = pd.Timestamp("2026-01-12 10:30:00")
        assert _normalize_value(ts) == _normalize_value(datetime(2026, 1, 12, 10, 30))  # noqa: DTZ001
        aware = pd.Timestamp("2026-01-12 10:30:00", tz="UTC")
        assert _normalize_value(aware) == _normalize_value(datetime(2026, 1, 12, 10, 30, tzinfo=UTC))

    def test_pandas_missing_values_to_none(self) -> None:
        from fixturize.core.canonical import _normalize_value

        assert _normalize_value(pd.NaT) is None
        assert _normalize_value(pd.NA) is None

    def test_numpy_scalars_to_python(self) -> None:
        from fixturize.core.canonical import _normalize_value

        assert type(_normalize_value(np.int64(42))) is int
        assert type(_normalize_value(np.float64(3.5))) is float
        assert _normalize_value(np.bool_(True)) is True


class TestCanonicalJson:
    def test_keys_sorted_without_whitespace(self) -> None:
        from fixturize.core.canonical import canonical_json

        assert canonical_json({"b": 1, "a": [True, None, "x"]}) == '{"a":[true,null,"x"],"b":1}'

    def test_tuple_encodes_as_list(self) -> None:
        from fixturize.core.canonical import canonical_json

        assert canonical_json((1, 2)) == canonical_json([1, 2])

    def test_unsupported_type_raises_type_error(self) -> None:
        from fixturize.core.canonical import canonical_json

        with pytest.raises(TypeError, match="Cannot canonicalize"):
            canonical_json({"value": object()})

    def test_stable_hash_is_sha256_of_canonical_json(self) -> None:
        from fixturize.core.canonical import canonical_json, stable_hash

        data = {"id": 1, "name": "x"}
        expected = hashlib.sha256(canonical_json(data).encode("utf-8")).hexdigest()
        assert stable_hash(data) == expected


class TestRecordHash:
    """record_hash identifies the exact rows a fixture would insert."""

    def test_known_digest(self) -> None:
        from fixturize.core.canonical import record_hash

        expected = hashlib.sha256(b'[{"id":1,"name":"x"}]').hexdigest()
        assert record_hash([{"id": 1, "name": "x"}]) == expected

    def test_column_order_within_record_is_irrelevant(self) -> None:
        from fixturize.core.canonical import record_hash

        assert record_hash([{"id": 1, "name": "x"}]) == record_hash([{"name": "x", "id": 1}])

    def test_record_order_matters(self) -> None:
        from fixturize.core.canonical import record_hash

        first = [{"id": 1}, {"id": 2}]
        assert record_hash(first) != record_hash(list(reversed(first)))

    def test_int_and_numeric_string_differ(self) -> None:
        from fixturize.core.canonical import record_hash

        assert record_hash([{"id": 1}]) != record_hash([{"id": "1"}])

    def test_bool_and_int_differ(self) -> None:
        from fixturize.core.canonical import record_hash

        assert record_hash([{"flag": True}]) != record_hash([{"flag": 1}])

    def test_int_and_equal_float_collide(self) -> None:
        """RFC 8785 serializes 1.0 as 1; numeric value, not Python type, is hashed."""
        from fixturize.core.canonical import record_hash

        assert record_hash([{"price": 1}]) == record_hash([{"price": 1.0}])

    def test_decimal_and_its_string_differ(self) -> None:
        from fixturize.core.canonical import record_hash

        assert record_hash([{"price": Decimal("1.50")}]) != record_hash([{"price": "1.50"}])

    def test_empty_record_set(self) -> None:
        from fixturize.core.canonical import record_hash

        assert record_hash([]) == hashlib.sha256(b"[]").hexdigest()

    def test_accepts_generators(self) -> None:
        from fixturize.core.canonical import record_hash

        rows = [{"id": 1}, {"id": 2}]
        assert record_hash(row for row in rows) == record_hash(rows)

    def test_naive_and_aware_datetimes_with_equal_instant_differ(self) -> None:
        """Drivers drop tzinfo, so 08:00 naive and 10:00+02:00 are stored as different rows."""
        from fixturize.core.canonical import record_hash

        naive = datetime(2024, 1, 1, 8, 0)  # noqa: DTZ001
        aware = datetime(2024, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        assert record_hash([{"at": naive}]) != record_hash([{"at": aware}])

    def test_same_instant_in_different_offsets_differ(self) -> None:
        from fixturize.core.canonical import record_hash

        utc = datetime(2024, 1, 1, 8, 0, tzinfo=UTC)
        plus_two = datetime(2024, 1, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        assert record_hash([{"at": utc}]) != record_hash([{"at": plus_two}])


class TestTagEscaping:
    """User mappings can never spell a type tag."""

    @pytest.mark.parametrize(
        ("value", "lookalike"),
        [
            (Decimal("1.5"), {"__decimal__": "1.5"}),
            (b"hi", {"__bytes__": "aGk="}),
            (date(2026, 1, 12), {"__date__": "2026-01-12"}),
            (time(9, 15), {"__time__": "09:15:00"}),
            (datetime(2026, 1, 12, 10, 30), {"__datetime__": "2026-01-12T10:30:00"}),  # noqa: DTZ001
            (2**60, {"__bigint__": str(2**60)}),
        ],
    )
    def test_tagged_value_differs_from_json_lookalike(self, value: object, lookalike: dict[str, str]) -> None:
        from fixturize.core.canonical import record_hash

        assert record_hash([{"c": value}]) != record_hash([{"c": lookalike}])

    def test_dunder_keys_escaped_at_every_level(self) -> None:
        from fixturize.core.canonical import canonical_json

        assert canonical_json({"__a": {"__b__": 1, "_c": 2}}) == '{"___a":{"___b__":1,"_c":2}}'

    def test_escaping_stays_injective(self) -> None:
        from fixturize.core.canonical import record_hash

        assert record_hash([{"c": {"__x": 1}}]) != record_hash([{"c": {"___x": 1}}])

    def test_object_array_elements_are_escaped(self) -> None:
        from fixturize.core.canonical import canonical_json

        array = np.array([{"__decimal__": "1.5"}], dtype=object)
        assert canonical_json(array) == canonical_json([{"__decimal__": "1.5"}])
        assert canonical_json(array) != canonical_json([Decimal("1.5")])
