from . import (
    canon,
    config,
    exceptions,
    types,
    utils,
    ingest,
    validate,
    transform,
    filters,
    categories,
    timeseries,
    seasonal,
    tags,
    views,
)
from .config import EngineConfig, default_config
from .types import ChartPoint, MeasurementRecord, RecordFrame, ViewSelection

__all__ = [
    "canon",
    "config",
    "exceptions",
    "types",
    "utils",
    "ingest",
    "validate",
    "transform",
    "filters",
    "categories",
    "timeseries",
    "seasonal",
    "tags",
    "views",
    "EngineConfig",
    "default_config",
    "ChartPoint",
    "MeasurementRecord",
    "RecordFrame",
    "ViewSelection",
]
