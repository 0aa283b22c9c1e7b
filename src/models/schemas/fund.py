"""Schema for a tracked fund and its NAV history.

The latest-value fields are read-only views over the last history record so
the summary can never disagree with the series it summarizes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .daily_record import DailyRecord


@dataclass(frozen=True, slots=True)
class Fund:
    code: str
    name: str
    history: tuple[DailyRecord, ...]

    @property
    def latest(self) -> DailyRecord | None:
        return self.history[-1] if self.history else None

    @property
    def latest_nav(self) -> float | None:
        latest = self.latest
        return latest.nav if latest is not None else None

    @property
    def latest_date(self) -> str | None:
        latest = self.latest
        return latest.date if latest is not None else None

    @property
    def total_growth(self) -> float | None:
        latest = self.latest
        if latest is None:
            return None
        # A latest record without cumulative growth reads as no change.
        return latest.cumulative_growth if latest.cumulative_growth is not None else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "name": self.name,
            "history": [record.to_dict() for record in self.history],
            "latestNav": self.latest_nav,
            "latestDate": self.latest_date,
            "totalGrowth": self.total_growth,
        }
