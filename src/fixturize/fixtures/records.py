# src/fixturize/fixtures/records.py
"""Build fixture records from tabular data."""

from __future__ import annotations

from typing import Any

import pandas as pd


def records_from_frame(frame: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a DataFrame into ordered fixture records.

    Missing values (NaN, NaT, pd.NA) become None so they insert as NULL and
    hash canonically. Other numpy/pandas scalars are left as-is; the record
    serializer normalizes them.

    Args:
        frame: One row per record, one column per table column

    Returns:
        List of column -> value dicts in row order

    Raises:
        ValueError: If column labels are not all strings
    """
    non_string = [label for label in frame.columns if not isinstance(label, str)]
    if non_string:
        raise ValueError(f"Fixture columns must be named by strings, got {non_string!r}")

    cleaned = frame.astype(object).where(frame.notna(), None)
    return [dict(zip(cleaned.columns, row, strict=True)) for row in cleaned.itertuples(index=False, name=None)]
