from __future__ import annotations
from typing import TypedDict, Literal, List, Dict, Optional, Tuple
from dataclasses import dataclass, field
from datetime import date
import math

import pandas as pd
from pydantic import BaseModel, field_validator

from . import canon


# Record store
class RecordFrame(pd.DataFrame):
    """
    Strongly-typed record store dataframe.

    Expected:
      - Columns: ['farmland', 'sensor_id', 'variety', 'tag_no', 'brix', 'measure_date']
      - 'measure_date' is naive datetime64, normalised to midnight
      - Rows sorted ascending by 'measure_date'
    """

    @property
    def _constructor(self):
        return RecordFrame

    @property
    def farmland(self) -> pd.Series:
        return self["farmland"]

    @property
    def sensor_id(self) -> pd.Series:
        return self["sensor_id"]

    @property
    def variety(self) -> pd.Series:
        return self["variety"]

    @property
    def tag_no(self) -> pd.Series:
        return self["tag_no"]

    @property
    def brix(self) -> pd.Series:
        return self["brix"]

    @property
    def measure_date(self) -> pd.Series:
        return self["measure_date"]


class MeasurementRecord(BaseModel):
    farmland: str
    sensor_id: str = ""
    variety: str
    tag_no: int = canon.UNTAGGED
    brix: float
    measure_date: date
    model_config = {"frozen": True}

    @field_validator("farmland", "variety")
    @classmethod
    def _non_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("sensor_id", mode="before")
    @classmethod
    def _sensor_as_str(cls, v: object) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("brix")
    @classmethod
    def _finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("brix must be a finite number")
        return v


class ViewSelection(BaseModel):
    selected_farms: Tuple[str, ...] = ()
    variety: str = canon.ALL
    year: str = canon.ALL
    date_window_enabled: bool = False
    window_start: Optional[date] = None
    window_end: Optional[date] = None

    @field_validator("selected_farms", mode="before")
    @classmethod
    def _dedupe_farms(cls, v: object) -> Tuple[str, ...]:
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        # keep caller order, drop repeats
        out = tuple(dict.fromkeys(str(f) for f in v))  # type: ignore[union-attr]
        if len(out) > canon.MAX_SELECTED_FARMS:
            raise ValueError(
                f"At most {canon.MAX_SELECTED_FARMS} farms can be selected, got {len(out)}."
            )
        return out

    @field_validator("year", mode="before")
    @classmethod
    def _year_label(cls, v: object) -> str:
        s = str(v).strip()
        if s != canon.ALL and not (len(s) == 4 and s.isdigit()):
            raise ValueError(f"year must be '{canon.ALL}' or a 4-digit year, got {s!r}")
        return s


# Chart output
@dataclass(frozen=True)
class ChartPoint:
    label: str  # ISO date, category label or MM-DD
    series: Dict[str, float] = field(default_factory=dict)
    axis: str = "date"

    def get(self, name: str) -> Optional[float]:
        return self.series.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.series

    def to_record(self) -> Dict[str, float | str]:
        """Flatten to the `{axis: label, series...}` shape renderers expect."""
        out: Dict[str, float | str] = {self.axis: self.label}
        out.update(self.series)
        return out


class TagAverage(TypedDict):
    tag: int
    average: float
    count: int


class TagDetailRow(TypedDict):
    date: str
    average: float
    count: int


class YearlyAverage(TypedDict):
    year: str
    average: float
    count: int


class SeasonalOverlay(TypedDict):
    variety: str
    years: List[str]
    points: List[ChartPoint]
    yearly_averages: List[YearlyAverage]


class FarmReport(TypedDict):
    farm: str
    yearly_averages: List[YearlyAverage]
    cumulative: List[ChartPoint]
    tags: List[TagAverage]


ViewMode = Literal["timeseries", "category"]


class DashboardView(TypedDict):
    mode: ViewMode
    points: List[ChartPoint]
