# brixlogic/utils.py
from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, cast
import math

import numpy as np
import pandas as pd

from . import canon
from .types import ChartPoint, RecordFrame


def mean_half_up(total: float, count: int, decimals: int = canon.DECIMALS) -> float:
    """
    total / count computed in Decimal, then rounded half-up.

    The float total is first snapped to `canon.SUM_PRECISION` places, so
    9.0 + 9.01 (18.009999999999998 in binary) averages to 9.005 and
    rounds to 9.01.
    """
    if not math.isfinite(total) or not count:
        return float("nan")
    exact = Decimal(repr(round(float(total), canon.SUM_PRECISION))) / int(count)
    q = Decimal(1).scaleb(-decimals)
    return float(exact.quantize(q, rounding=ROUND_HALF_UP))


def mean_series(
    total: pd.Series, count: pd.Series, decimals: int = canon.DECIMALS
) -> pd.Series:
    """Element-wise mean_half_up over aligned total/count columns."""
    values = [mean_half_up(t, c, decimals) for t, c in zip(total, count)]
    return pd.Series(values, index=total.index, dtype=float)


def finite_rows(df: pd.DataFrame) -> pd.DataFrame:
    """Drop rows whose brix is NaN/inf so they never reach a sum or count."""
    if df.empty:
        return df
    brix = pd.to_numeric(df["brix"], errors="coerce").to_numpy(dtype=float)
    mask = np.isfinite(brix)
    if mask.all():
        return df
    return df.loc[mask]


def to_day(value) -> Optional[pd.Timestamp]:
    """
    Normalise a date-like to a naive midnight Timestamp on the local calendar.
    tz-aware inputs keep their wall-clock date.
    """
    if value is None:
        return None
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        return None
    if ts.tz is not None:
        ts = ts.tz_localize(None)
    return ts.normalize()


def _day_or_nat(value) -> pd.Timestamp:
    try:
        day = to_day(value)
    except (ValueError, TypeError, OverflowError):
        return pd.NaT
    return pd.NaT if day is None else day


def to_day_series(s: pd.Series) -> pd.Series:
    """
    Series form of to_day(); unparseable values become NaT.

    Values are parsed one by one so strings with different UTC offsets
    each keep their own wall-clock date.
    """
    if pd.api.types.is_datetime64_any_dtype(s):
        out = s if s.dt.tz is None else s.dt.tz_localize(None)
        return out.dt.normalize()
    days = s.map(_day_or_nat)
    return pd.to_datetime(days).astype("datetime64[ns]")


def iso_date(ts: pd.Timestamp) -> str:
    return ts.strftime(canon.DATE_FMT)


def month_day_labels(dates: pd.DatetimeIndex) -> pd.Index:
    return dates.strftime(canon.MONTH_DAY_FMT)


def reference_timestamp(
    label: str, reference_year: int = canon.REFERENCE_YEAR
) -> pd.Timestamp:
    """Place an MM-DD label on the reference year for chronological sorting."""
    return pd.Timestamp(f"{reference_year}-{label}")


def day_range(start: pd.Timestamp, end: pd.Timestamp) -> pd.DatetimeIndex:
    """Inclusive daily range; empty when end < start."""
    if end < start:
        return pd.DatetimeIndex([], name=canon.DATE_COL)
    return pd.date_range(start, end, freq="D", name=canon.DATE_COL)


def year_start(ts: pd.Timestamp) -> pd.Timestamp:
    return pd.Timestamp(year=ts.year, month=1, day=1)


def empty_record_frame() -> RecordFrame:
    """Return an empty RecordFrame with the canon columns and dtypes."""
    out = pd.DataFrame(
        {
            "farmland": pd.Series(dtype="object"),
            "sensor_id": pd.Series(dtype="object"),
            "variety": pd.Series(dtype="object"),
            "tag_no": pd.Series(dtype="int64"),
            "brix": pd.Series(dtype="float64"),
            "measure_date": pd.Series(dtype="datetime64[ns]"),
        }
    )
    out.__class__ = RecordFrame
    return cast(RecordFrame, out)


def frame_to_points(
    frame: pd.DataFrame,
    *,
    axis: str,
    labels: Iterable[str],
) -> List[ChartPoint]:
    """
    Turn a wide frame (one row per point, one column per series) into
    ChartPoints. NaN cells are left out of the point's series mapping.
    """
    cols = [str(c) for c in frame.columns]
    values = frame.to_numpy(dtype=float)
    out: List[ChartPoint] = []
    for label, row in zip(labels, values):
        series = {
            name: float(v) for name, v in zip(cols, row) if not np.isnan(v)
        }
        out.append(ChartPoint(label=str(label), series=series, axis=axis))
    return out
