from __future__ import annotations
from typing import Optional

import pandas as pd

from . import canon, transform, utils
from .config import EngineConfig, default_config
from .types import SeasonalOverlay


def overlay(
    df: pd.DataFrame,
    variety: str,
    *,
    config: Optional[EngineConfig] = None,
) -> SeasonalOverlay:
    """
    Overlay each year's daily average of one variety on a shared MM-DD axis.

    Daily values are plain averages of that date's records (not cumulative).
    Each point holds one key per year with data on that month-day; labels
    are ordered by their date in `config.reference_year`, so 02-29 falls
    between 02-28 and 03-01.
    """
    cfg = config or default_config()
    sub = df.loc[df["variety"] == variety]
    daily = transform.totals(sub, canon.DATE_COL)
    if daily.empty:
        return {"variety": variety, "years": [], "points": [], "yearly_averages": []}

    avg = transform.average(daily, cfg.decimals)
    dates = pd.DatetimeIndex(avg.index)
    long = pd.DataFrame(
        {
            "label": utils.month_day_labels(dates),
            "year": dates.year.astype(str),
            "avg": avg.to_numpy(),
        }
    )
    wide = long.pivot(index="label", columns="year", values="avg")
    wide = wide.sort_index(
        key=lambda idx: idx.map(lambda s: utils.reference_timestamp(s, cfg.reference_year))
    )
    years = sorted(str(c) for c in wide.columns)
    wide = wide[years]

    return {
        "variety": variety,
        "years": years,
        "points": utils.frame_to_points(wide, axis="month_day", labels=wide.index),
        "yearly_averages": transform.yearly_averages(sub, decimals=cfg.decimals),
    }
