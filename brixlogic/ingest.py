from __future__ import annotations
import logging
from typing import Iterable, Mapping, Optional

import pandas as pd
from pydantic import ValidationError

from . import canon, utils, validate
from .exceptions import IngestError
from .types import MeasurementRecord, RecordFrame

_logger = logging.getLogger(__name__)


def _auto_rename(df: pd.DataFrame, column_map: Mapping[str, str]) -> pd.DataFrame:
    # Accept both raw upload headers (FARMLAND, BRIX, ...) and canon names
    rename = {c: column_map[c] for c in df.columns if c in column_map}
    new = df.rename(columns=rename)
    if isinstance(new.index, pd.DatetimeIndex) and canon.DATE_COL not in new.columns:
        new = new.rename_axis(canon.DATE_COL).reset_index()
    return new


def _finalise(df: pd.DataFrame, source_rows: int) -> RecordFrame:
    out = (
        df[canon.REQUIRED_COLS]
        .sort_values(canon.DATE_COL, kind="mergesort")
        .reset_index(drop=True)
    )
    dropped = source_rows - len(out)
    if dropped:
        _logger.warning(
            "Dropped %d of %d rows with blank farm/variety, bad date or non-finite brix",
            dropped,
            source_rows,
        )
    _logger.debug("Record store built with %d rows", len(out))
    out.__class__ = RecordFrame
    return validate.ensure(out)


def from_dataframe(
    df: pd.DataFrame,
    *,
    column_map: Optional[Mapping[str, str]] = None,
) -> RecordFrame:
    """
    Normalise an already-parsed DataFrame into the record store:
      - columns: farmland, sensor_id, variety, tag_no, brix, measure_date
      - farm/variety trimmed, blank rows dropped
      - brix numeric and finite, otherwise the row is dropped
      - measure_date a naive midnight date on the local calendar
      - sorted ascending by measure_date (stable)
    """
    column_map = column_map or canon.COLUMN_MAP
    df = _auto_rename(df, column_map)

    for col in ("farmland", "variety", "brix", canon.DATE_COL):
        if col not in df.columns:
            raise IngestError(f"Missing required column: {col}")

    if df.empty:
        return utils.empty_record_frame()

    source_rows = len(df)
    out = pd.DataFrame(
        {
            "farmland": df["farmland"].astype("string").str.strip(),
            "sensor_id": (
                df["sensor_id"].astype("string").str.strip().fillna("")
                if "sensor_id" in df.columns
                else ""
            ),
            "variety": df["variety"].astype("string").str.strip(),
            "tag_no": (
                pd.to_numeric(df["tag_no"], errors="coerce")
                if "tag_no" in df.columns
                else canon.UNTAGGED
            ),
            "brix": pd.to_numeric(df["brix"], errors="coerce").astype(float),
            canon.DATE_COL: utils.to_day_series(df[canon.DATE_COL]),
        },
        index=df.index,
    )

    valid = (
        out["farmland"].fillna("").ne("")
        & out["variety"].fillna("").ne("")
        & out[canon.DATE_COL].notna()
    )
    out = utils.finite_rows(out.loc[valid])

    out = out.assign(
        farmland=out["farmland"].astype(str),
        sensor_id=out["sensor_id"].astype(str),
        variety=out["variety"].astype(str),
        tag_no=out["tag_no"].fillna(canon.UNTAGGED).astype("int64"),
    )
    return _finalise(out, source_rows)


def from_records(
    records: Iterable[MeasurementRecord | Mapping[str, object]],
) -> RecordFrame:
    """
    Build the record store from MeasurementRecord objects or plain mappings.
    Mappings that fail MeasurementRecord validation are dropped.
    """
    rows: list[dict] = []
    seen = 0
    for rec in records:
        seen += 1
        if not isinstance(rec, MeasurementRecord):
            try:
                rec = MeasurementRecord.model_validate(
                    {canon.COLUMN_MAP.get(k, k): v for k, v in rec.items()}
                )
            except ValidationError as exc:
                _logger.debug("Skipping invalid record %r: %s", rec, exc)
                continue
        rows.append(rec.model_dump())

    if not rows:
        if seen:
            _logger.warning("All %d records were invalid", seen)
        return utils.empty_record_frame()

    df = pd.DataFrame.from_records(rows)
    df[canon.DATE_COL] = utils.to_day_series(df[canon.DATE_COL])
    df["tag_no"] = df["tag_no"].astype("int64")
    df["brix"] = df["brix"].astype(float)
    return _finalise(df, seen)


def to_records(df: RecordFrame) -> list[MeasurementRecord]:
    """Inverse of from_records, for callers that want row objects back."""
    out: list[MeasurementRecord] = []
    for row in df[canon.REQUIRED_COLS].itertuples(index=False):
        out.append(
            MeasurementRecord(
                farmland=row.farmland,
                sensor_id=row.sensor_id,
                variety=row.variety,
                tag_no=int(row.tag_no),
                brix=float(row.brix),
                measure_date=row.measure_date.date(),
            )
        )
    return out
