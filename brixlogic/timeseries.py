from __future__ import annotations
import logging
from typing import Iterable, List, Optional

import pandas as pd

from . import canon, transform, utils
from .config import EngineConfig, default_config
from .types import ChartPoint

_logger = logging.getLogger(__name__)


def cumulative(
    df: pd.DataFrame,
    farms: Iterable[str],
    start,
    end,
    *,
    config: Optional[EngineConfig] = None,
) -> List[ChartPoint]:
    """
    Dense year-to-date cumulative series, one point per day of [start, end].

    - 'overall': cumulative average of every record in `df`, reset each
      1 January. Days without data repeat the last value only when it is at
      most `config.carry_forward_max_gap_days` old and from the same year.
    - one key per selected farm: its own year-to-date average, present only
      on days that farm has records. Farm values are never carried forward.

    `df` should be the full filtered subset, not clipped to the window;
    history before `start` feeds the running sums.
    """
    cfg = config or default_config()
    farms = list(farms)
    lo, hi = utils.to_day(start), utils.to_day(end)
    if lo is None or hi is None:
        return []
    days = utils.day_range(lo, hi)
    if len(days) == 0 or df.empty:
        return []

    overall_daily, farm_daily = transform.daily_aggregate(df, farms)
    if overall_daily.empty:
        return []

    overall_cum = transform.cumulative_ytd(overall_daily, decimals=cfg.decimals)
    wide = pd.DataFrame(index=days)
    wide[canon.OVERALL] = transform.carry_forward(
        overall_cum, days, cfg.carry_forward_max_gap_days
    )

    farm_cum = transform.cumulative_ytd(
        farm_daily, keys=["farmland"], decimals=cfg.decimals
    )
    present = set(farm_cum.index.get_level_values("farmland")) if len(farm_cum) else set()
    for farm in farms:
        if farm in present:
            wide[farm] = farm_cum.xs(farm, level="farmland").reindex(days)

    _logger.debug(
        "Cumulative series: %d days, %d farm(s) with data", len(days), len(present)
    )
    return utils.frame_to_points(
        wide, axis="date", labels=[utils.iso_date(d) for d in days]
    )


def cumulative_on_data_days(
    df: pd.DataFrame,
    start=None,
    end=None,
    *,
    series: str = canon.OVERALL,
    config: Optional[EngineConfig] = None,
) -> List[ChartPoint]:
    """
    Year-to-date cumulative average over all of `df`, emitted only for the
    dates that have records and fall inside [start, end] (sparse). Used for
    bar charts where a bar is drawn only where data exists.
    """
    cfg = config or default_config()
    overall_daily, _ = transform.daily_aggregate(df)
    if overall_daily.empty:
        return []
    cum = transform.cumulative_ytd(overall_daily, decimals=cfg.decimals)
    lo, hi = utils.to_day(start), utils.to_day(end)
    if lo is not None:
        cum = cum.loc[cum.index >= lo]
    if hi is not None:
        cum = cum.loc[cum.index <= hi]
    return [
        ChartPoint(label=utils.iso_date(d), series={series: float(v)}, axis="date")
        for d, v in cum.items()
    ]
