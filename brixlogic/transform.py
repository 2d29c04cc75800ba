from __future__ import annotations
import pandas as pd
from typing import Iterable, List, Sequence

from . import canon, utils
from .types import YearlyAverage


def within_window(
    df: pd.DataFrame,
    start: pd.Timestamp | None = None,
    end: pd.Timestamp | None = None,
) -> pd.DataFrame:
    """Keep rows whose measure_date lies in [start, end]; None is unbounded."""
    if start is None and end is None:
        return df
    dates = df[canon.DATE_COL]
    mask = pd.Series(True, index=df.index)
    if start is not None:
        mask &= dates >= start
    if end is not None:
        mask &= dates <= end
    return df.loc[mask]


def totals(df: pd.DataFrame, keys: str | Sequence[str]) -> pd.DataFrame:
    """
    Sum and count brix per key. Only keys with at least one finite record
    appear, so count is never zero.

    Returns a DataFrame indexed by `keys` with columns ['total', 'count'].
    """
    d = utils.finite_rows(df)
    by = [keys] if isinstance(keys, str) else list(keys)
    out = d.groupby(by, sort=True)["brix"].agg(total="sum", count="count")
    return out


def average(agg: pd.DataFrame, decimals: int = canon.DECIMALS) -> pd.Series:
    """Decimal total / count per row, rounded half-up only here."""
    if agg.empty:
        return pd.Series(dtype=float, index=agg.index)
    return utils.mean_series(agg["total"], agg["count"], decimals)


def daily_aggregate(
    df: pd.DataFrame, farms: Iterable[str] = ()
) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Per-day totals over every date present in `df`.

    Returns (overall, per_farm):
      - overall: index measure_date, columns ['total', 'count']
      - per_farm: index (farmland, measure_date), same columns, only for the
        selected farms and only on days they have data
    """
    farms = list(farms)
    overall = totals(df, canon.DATE_COL)
    sel = df.loc[df["farmland"].isin(farms)] if farms else df.iloc[0:0]
    per_farm = totals(sel, ["farmland", canon.DATE_COL])
    return overall, per_farm


def cumulative_ytd(
    daily: pd.DataFrame,
    keys: Sequence[str] = (),
    decimals: int = canon.DECIMALS,
) -> pd.Series:
    """
    Year-to-date running average over a daily totals frame.

    Running sums restart whenever the calendar year changes and stay at
    full precision; only the emitted average is rounded. With `keys`
    (e.g. ['farmland']) each key keeps its own tracker, which only moves
    on days that key has data.
    """
    if daily.empty:
        return pd.Series(dtype=float, index=daily.index)
    dates = pd.DatetimeIndex(daily.index.get_level_values(canon.DATE_COL))
    groups = [daily.index.get_level_values(k) for k in keys] + [dates.year]
    running = daily[["total", "count"]].groupby(groups, sort=False).cumsum()
    return utils.mean_series(running["total"], running["count"], decimals)


def carry_forward(
    values: pd.Series,
    days: pd.DatetimeIndex,
    max_gap_days: int = 0,
) -> pd.Series:
    """
    Reindex a date-indexed series onto `days`, filling a missing day with
    the last known value when it is at most `max_gap_days` old.

    The last known value never crosses a year boundary, and only history
    from the calendar year of days[0] is used to seed the first day.
    """
    if len(days) == 0:
        return pd.Series(dtype=float, index=days)

    lo = utils.year_start(days[0])
    hist = values.loc[(values.index >= lo) & (values.index <= days[-1])]

    idx = hist.index.union(days)
    vals = hist.reindex(idx)
    seen = pd.Series(hist.index, index=hist.index).reindex(idx)

    years = idx.year
    last_val = vals.groupby(years).ffill()
    last_seen = seen.groupby(years).ffill()

    gap = (idx.to_series() - last_seen).dt.days
    return last_val.where(gap.le(max_gap_days)).reindex(days)


def yearly_averages(
    df: pd.DataFrame,
    *,
    descending: bool = False,
    decimals: int = canon.DECIMALS,
) -> List[YearlyAverage]:
    """Plain (non-cumulative) mean of all records per calendar year."""
    d = utils.finite_rows(df)
    if d.empty:
        return []
    years = d[canon.DATE_COL].dt.year.rename("year")
    agg = d.groupby(years)["brix"].agg(total="sum", count="count")
    avg = average(agg, decimals)
    out: List[YearlyAverage] = [
        {"year": str(y), "average": float(avg.at[y]), "count": int(agg.at[y, "count"])}
        for y in agg.index
    ]
    return sorted(out, key=lambda r: r["year"], reverse=descending)
