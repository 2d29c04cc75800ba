from __future__ import annotations
from typing import List

import pandas as pd

from . import canon, transform, utils
from .types import RecordFrame, ViewSelection


def resolve(
    store: RecordFrame,
    selection: ViewSelection,
    *,
    apply_window: bool = False,
) -> RecordFrame:
    """
    Reduce the store to the records a view should aggregate.

    Applied in order:
      1. year, only when the date window is off and year != 'ALL'
      2. variety, when not 'ALL'
      3. the inclusive date window, only if `apply_window` and the window is on

    Time-series views leave `apply_window` False: their running averages need
    the whole year's history, and the window only bounds the output axis.
    """
    df = store
    if not selection.date_window_enabled and selection.year != canon.ALL:
        df = df.loc[df[canon.DATE_COL].dt.year == int(selection.year)]
    if selection.variety != canon.ALL:
        df = df.loc[df["variety"] == selection.variety]
    if apply_window and selection.date_window_enabled:
        df = transform.within_window(
            df,
            utils.to_day(selection.window_start),
            utils.to_day(selection.window_end),
        )
    return df  # type: ignore[return-value]


def farm_options(store: RecordFrame) -> List[str]:
    return sorted(store["farmland"].unique().tolist())


def variety_options(store: RecordFrame) -> List[str]:
    return sorted(store["variety"].unique().tolist())


def year_options(store: RecordFrame) -> List[str]:
    """'ALL' followed by every year present, newest first."""
    years = sorted({str(y) for y in store[canon.DATE_COL].dt.year.unique()}, reverse=True)
    return [canon.ALL, *years]


def default_selection(store: RecordFrame) -> ViewSelection:
    """Selection a freshly loaded store opens with: everything, window spanning the data."""
    if store.empty:
        return ViewSelection()
    dates = store[canon.DATE_COL]
    return ViewSelection(
        window_start=pd.Timestamp(dates.min()).date(),
        window_end=pd.Timestamp(dates.max()).date(),
    )
