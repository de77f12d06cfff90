# src/fixturize/core/canonical.py
"""
Canonical JSON serialization for fixture record hashing.

Two-phase approach:
1. Normalize: Convert Python, numpy and pandas values to JSON-safe
   primitives, tagging every type JSON cannot represent natively
2. Serialize: Produce deterministic JSON per RFC 8785/JCS (rfc8785 package)

Type tags make the encoding explicit instead of relying on how a value
happens to print. The string "1" and the integer 1 never collide, and neither
do a Decimal and the string holding its digits. Keys of user mappings that
start with "__" are escaped, so a JSON column value cannot impersonate a tag.
Integers and floats with the same numeric value (1 and 1.0) serialize
identically under RFC 8785.

IMPORTANT: NaN and Infinity are strictly REJECTED, not silently converted.
A fixture that wants a missing value should use None.
"""

from __future__ import annotations

import base64
import hashlib
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

import numpy as np
import pandas as pd
import rfc8785

# Version string naming the encoding behind record hashes
CANONICAL_VERSION = "sha256-rfc8785-tagged-v2"

# RFC 8785 numbers are IEEE 754 doubles; integers outside this range lose
# precision, so they are tagged and carried as strings instead.
MAX_SAFE_INT = 2**53 - 1


def _normalize_value(obj: Any) -> Any:
    """Convert a single value to a JSON-safe primitive or tagged object.

    NaN Policy: STRICT REJECTION
    - NaN and Infinity are invalid for float AND Decimal
    - Use None/pd.NA/NaT for intentional missing values

    Args:
        obj: Any Python value

    Returns:
        JSON-serializable primitive, or a single-key tag dict

    Raises:
        ValueError: If value contains NaN or Infinity
    """
    # Check for NaN/Infinity FIRST (before type coercion)
    if isinstance(obj, float | np.floating):
        if math.isnan(obj) or math.isinf(obj):
            raise ValueError(f"Cannot canonicalize non-finite float: {obj}. Use None for missing values, not NaN.")
        return float(obj)

    # bool is an int subclass; it must stay a JSON boolean
    if obj is None or isinstance(obj, str | bool):
        return obj

    if isinstance(obj, int | np.integer):
        value = int(obj)
        if abs(value) > MAX_SAFE_INT:
            return {"__bigint__": str(value)}
        return value

    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.ndarray):
        if obj.size > 0:
            try:
                if np.any(np.isnan(obj)) or np.any(np.isinf(obj)):
                    raise ValueError("NaN/Infinity found in NumPy array. Use None for missing values, not NaN.")
            except TypeError:
                # Non-numeric dtypes cannot hold NaN/Inf
                pass
        return [_normalize_for_canonical(x) for x in obj.tolist()]

    # Intentional missing values (NOT NaN - that's rejected above)
    if obj is pd.NA or obj is pd.NaT:
        return None

    # pd.Timestamp is a datetime subclass. Drivers store the wall-clock value
    # and discard tzinfo, so naive and aware values keep distinct tags and
    # aware values keep their own offset.
    if isinstance(obj, datetime):
        if obj.tzinfo is None:
            return {"__datetime__": obj.isoformat()}
        return {"__datetime_tz__": obj.isoformat()}

    if isinstance(obj, date):
        return {"__date__": obj.isoformat()}

    if isinstance(obj, time):
        return {"__time__": obj.isoformat()}

    if isinstance(obj, bytes | bytearray | memoryview):
        return {"__bytes__": base64.b64encode(bytes(obj)).decode("ascii")}

    if isinstance(obj, Decimal):
        if not obj.is_finite():  # Rejects NaN, sNaN, Infinity, -Infinity
            raise ValueError(f"Cannot canonicalize non-finite Decimal: {obj}. Use None for missing values, not NaN/Infinity.")
        return {"__decimal__": str(obj)}

    # Unknown types are left for rfc8785 to reject
    return obj


def _escape_key(key: Any) -> Any:
    """Prefix user keys that start with "__" so no mapping can spell a type tag.

    Escaped keys always start with "___" and unescaped keys never start with
    "__", so the mapping stays injective.
    """
    if isinstance(key, str) and key.startswith("__"):
        return "_" + key
    return key


def _normalize_for_canonical(data: Any) -> Any:
    """Recursively normalize a data structure for canonical JSON.

    Raises:
        ValueError: If data contains NaN, Infinity, or other non-finite values
    """
    if isinstance(data, Mapping):
        return {_escape_key(k): _normalize_for_canonical(v) for k, v in data.items()}
    if isinstance(data, list | tuple):
        return [_normalize_for_canonical(v) for v in data]
    return _normalize_value(data)


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON for hashing.

    Args:
        obj: Data structure to serialize

    Returns:
        Canonical JSON string (no whitespace, sorted keys)

    Raises:
        ValueError: If data contains NaN, Infinity, or other non-finite values
        TypeError: If data contains types that cannot be serialized
    """
    normalized = _normalize_for_canonical(obj)
    try:
        result: bytes = rfc8785.dumps(normalized)
    except (rfc8785.CanonicalizationError, TypeError) as e:
        raise TypeError(f"Cannot canonicalize value: {e}") from e
    return result.decode("utf-8")


def stable_hash(obj: Any) -> str:
    """Compute stable hash of object.

    Returns:
        SHA-256 hex digest of canonical JSON
    """
    canonical = canonical_json(obj)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def record_hash(records: Iterable[Mapping[str, Any]]) -> str:
    """Hash the ordered record sequence a fixture would insert.

    Record order is significant. Column order within a record is not,
    since RFC 8785 sorts object keys.

    Args:
        records: Ordered records, each a mapping of column name to value

    Returns:
        SHA-256 hex digest of the canonical encoding
    """
    return stable_hash([dict(record) for record in records])
