"""Schema for one trading day of a fund's NAV history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class DailyRecord:
    date: str
    nav: float
    growth_rate: float | None
    cumulative_growth: float | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "nav": self.nav,
            "growthRate": self.growth_rate,
            "cumulativeGrowth": self.cumulative_growth,
        }
