from __future__ import annotations
from typing import Final, Dict

DATE_COL: Final[str] = "measure_date"
REQUIRED_COLS: Final[list[str]] = [
    "farmland",
    "sensor_id",
    "variety",
    "tag_no",
    "brix",
    "measure_date",
]

ALL: Final[str] = "ALL"
OVERALL: Final[str] = "overall"
UNTAGGED: Final[int] = 0
MAX_SELECTED_FARMS: Final[int] = 5

# Leap year so that 02-29 has a slot on the month-day axis
REFERENCE_YEAR: Final[int] = 2024
DECIMALS: Final[int] = 2
# Float running sums are snapped to this many places before dividing
SUM_PRECISION: Final[int] = 9

DATE_FMT: Final[str] = "%Y-%m-%d"
MONTH_DAY_FMT: Final[str] = "%m-%d"

# Raw upload header → canon column
COLUMN_MAP: Dict[str, str] = {
    "FARMLAND": "farmland",
    "MSSR_SN": "sensor_id",
    "VARIETY": "variety",
    "TAG_NO": "tag_no",
    "BRIX": "brix",
    "MEASURE_DATE": "measure_date",
}
