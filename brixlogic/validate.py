from __future__ import annotations
import pandas as pd
from typing import cast

from . import canon, exceptions
from .types import RecordFrame


def assert_records(df: pd.DataFrame) -> None:
    for col in canon.REQUIRED_COLS:
        if col not in df.columns:
            raise exceptions.RecordError(f"Missing required column '{col}'.")
    if not pd.api.types.is_datetime64_any_dtype(df[canon.DATE_COL]):
        raise exceptions.RecordError(f"'{canon.DATE_COL}' must be datetime64.")
    if getattr(df[canon.DATE_COL].dt, "tz", None) is not None:
        raise exceptions.RecordError(
            f"'{canon.DATE_COL}' must be naive local calendar dates."
        )
    if not df[canon.DATE_COL].is_monotonic_increasing:
        raise exceptions.RecordError(
            f"Records must be sorted ascending by '{canon.DATE_COL}'."
        )


def ensure(df: pd.DataFrame) -> RecordFrame:
    """Return a date-sorted RecordFrame, raising if columns are missing."""
    for col in canon.REQUIRED_COLS:
        if col not in df.columns:
            raise exceptions.RecordError(f"Missing required column '{col}'.")
    if df[canon.DATE_COL].is_monotonic_increasing and isinstance(df, RecordFrame):
        out = df
    else:
        out = df.sort_values(canon.DATE_COL, kind="mergesort")
        out.__class__ = RecordFrame
    assert_records(out)
    return cast(RecordFrame, out)
