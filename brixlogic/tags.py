from __future__ import annotations
from typing import List

import pandas as pd

from . import canon, transform, utils
from .types import TagAverage, TagDetailRow


def heatmap(df: pd.DataFrame, decimals: int = canon.DECIMALS) -> List[TagAverage]:
    """Average brix per tag, ascending by tag number. Untagged (0) rows are skipped."""
    tagged = df.loc[df["tag_no"] != canon.UNTAGGED]
    agg = transform.totals(tagged, "tag_no")
    if agg.empty:
        return []
    avg = transform.average(agg, decimals)
    return [
        {"tag": int(t), "average": float(avg.at[t]), "count": int(agg.at[t, "count"])}
        for t in agg.index
    ]


def detail(df: pd.DataFrame, tag: int, decimals: int = canon.DECIMALS) -> List[TagDetailRow]:
    """Per-date average and record count for a single tag, ascending by date."""
    if int(tag) == canon.UNTAGGED:
        return []
    agg = transform.totals(df.loc[df["tag_no"] == int(tag)], canon.DATE_COL)
    if agg.empty:
        return []
    avg = transform.average(agg, decimals)
    return [
        {
            "date": utils.iso_date(d),
            "average": float(avg.at[d]),
            "count": int(agg.at[d, "count"]),
        }
        for d in agg.index
    ]
