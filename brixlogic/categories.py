from __future__ import annotations
from typing import Iterable, List, Literal

import pandas as pd

from . import canon, transform, utils
from .exceptions import SelectionError, require
from .types import ChartPoint

CategoryKey = Literal["variety", "farmland"]


def by_category(
    df: pd.DataFrame,
    farms: Iterable[str] = (),
    *,
    by: CategoryKey = "variety",
    decimals: int = canon.DECIMALS,
) -> List[ChartPoint]:
    """
    Snapshot average per category bucket.

    Each point carries 'overall' (every record in the bucket) and one key
    per selected farm that has records in the bucket. Points are sorted by
    category label.

    Example:
        by_category(records, ["Farm A"])
        -> [ChartPoint(label="Hallabong", series={"overall": 11.2, "Farm A": 12.0}), ...]
    """
    require(by in ("variety", "farmland"), f"Unknown category key {by!r}", SelectionError)
    farms = list(farms)

    overall = transform.totals(df, by)
    if overall.empty:
        return []

    wide = transform.average(overall, decimals).to_frame(canon.OVERALL)

    if by == "farmland":
        # bucket == farm: a selected farm's value is its own bucket average
        avg = wide[canon.OVERALL]
        for f in farms:
            if f in avg.index:
                wide[f] = avg.where(avg.index == f)
    else:
        sel = df.loc[df["farmland"].isin(farms)] if farms else df.iloc[0:0]
        per_farm = transform.totals(sel, [by, "farmland"])
        if not per_farm.empty:
            farm_avg = transform.average(per_farm, decimals).unstack("farmland")
            present = [f for f in farms if f in farm_avg.columns]
            wide = wide.join(farm_avg[present], how="left")

    wide = wide.dropna(how="all").sort_index()
    return utils.frame_to_points(wide, axis=by, labels=wide.index)
