from __future__ import annotations
import logging
from typing import List, Optional

from . import canon, categories, filters, seasonal, tags, timeseries, transform, utils, validate
from .config import EngineConfig, default_config
from .types import (
    ChartPoint,
    DashboardView,
    FarmReport,
    RecordFrame,
    SeasonalOverlay,
    TagDetailRow,
    ViewSelection,
)

_logger = logging.getLogger(__name__)


def category_view(
    store: RecordFrame,
    selection: ViewSelection,
    config: Optional[EngineConfig] = None,
) -> List[ChartPoint]:
    """Variety snapshot, with the date window applied when it is on."""
    cfg = config or default_config()
    store = validate.ensure(store)
    subset = filters.resolve(store, selection, apply_window=True)
    return categories.by_category(
        subset, selection.selected_farms, by="variety", decimals=cfg.decimals
    )


def timeseries_view(
    store: RecordFrame,
    selection: ViewSelection,
    config: Optional[EngineConfig] = None,
) -> List[ChartPoint]:
    """
    Dense cumulative series over the selection's window. Missing bounds fall
    back to the first/last date of the filtered records.
    """
    store = validate.ensure(store)
    subset = filters.resolve(store, selection)
    if subset.empty:
        return []
    dates = subset[canon.DATE_COL]
    start = utils.to_day(selection.window_start) or dates.min()
    end = utils.to_day(selection.window_end) or dates.max()
    return timeseries.cumulative(
        subset, selection.selected_farms, start, end, config=config
    )


def dashboard(
    store: RecordFrame,
    selection: ViewSelection,
    config: Optional[EngineConfig] = None,
) -> DashboardView:
    """Main chart: time series when the date window is on, variety snapshot otherwise."""
    if selection.date_window_enabled:
        points = timeseries_view(store, selection, config)
        mode = "timeseries"
    else:
        points = category_view(store, selection, config)
        mode = "category"
    _logger.debug("Dashboard %s view: %d point(s)", mode, len(points))
    return {"mode": mode, "points": points}  # type: ignore[typeddict-item]


def _farm_window(store: RecordFrame, farm: str, start, end):
    farm_df = store.loc[store["farmland"] == farm]
    return farm_df, transform.within_window(farm_df, utils.to_day(start), utils.to_day(end))


def farm_report(
    store: RecordFrame,
    farm: str,
    start=None,
    end=None,
    config: Optional[EngineConfig] = None,
) -> FarmReport:
    """
    Single-farm analysis:
      - yearly averages over all of the farm's records, newest year first
      - cumulative year-to-date values on the days with data inside the window
      - tag heatmap over the farm's records inside the window
    """
    cfg = config or default_config()
    store = validate.ensure(store)
    farm_df, windowed = _farm_window(store, farm, start, end)
    return {
        "farm": farm,
        "yearly_averages": transform.yearly_averages(
            farm_df, descending=True, decimals=cfg.decimals
        ),
        "cumulative": timeseries.cumulative_on_data_days(
            farm_df, start, end, series=farm, config=cfg
        ),
        "tags": tags.heatmap(windowed, decimals=cfg.decimals),
    }


def tag_drilldown(
    store: RecordFrame,
    farm: str,
    tag: int,
    start=None,
    end=None,
    config: Optional[EngineConfig] = None,
) -> List[TagDetailRow]:
    cfg = config or default_config()
    store = validate.ensure(store)
    _, windowed = _farm_window(store, farm, start, end)
    return tags.detail(windowed, tag, decimals=cfg.decimals)


def yearly_trend(
    store: RecordFrame,
    variety: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> SeasonalOverlay:
    """
    Seasonal overlay for one variety. Without an explicit variety, use the
    configured preferred variety when the store has it, else the first one
    alphabetically.
    """
    cfg = config or default_config()
    store = validate.ensure(store)
    if variety is None:
        options = filters.variety_options(store)
        if not options:
            return {"variety": "", "years": [], "points": [], "yearly_averages": []}
        if cfg.preferred_variety in options:
            variety = cfg.preferred_variety
        else:
            variety = options[0]
    return seasonal.overlay(store, variety, config=cfg)  # type: ignore[arg-type]
