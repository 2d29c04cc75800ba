from __future__ import annotations

import calendar
from dataclasses import dataclass
from typing import Optional

from . import canon
from .exceptions import ConfigError, require


@dataclass
class EngineConfig:
    # Max whole days the overall series may repeat its last value (0 = never)
    carry_forward_max_gap_days: int = 0

    # Rounding applied when an average is emitted
    decimals: int = canon.DECIMALS

    # Year used to order month-day labels on the seasonal axis
    reference_year: int = canon.REFERENCE_YEAR

    # Variety opened first on the yearly trend view, if present
    preferred_variety: Optional[str] = None

    def __post_init__(self) -> None:
        require(
            self.carry_forward_max_gap_days >= 0,
            "carry_forward_max_gap_days must be >= 0",
            ConfigError,
        )
        require(self.decimals >= 0, "decimals must be >= 0", ConfigError)
        require(
            calendar.isleap(self.reference_year),
            "reference_year must be a leap year so 02-29 can be placed",
            ConfigError,
        )


def default_config() -> EngineConfig:
    return EngineConfig()
