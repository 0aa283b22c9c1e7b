"""Schema objects for core entities."""

from .daily_record import DailyRecord
from .fund import Fund
from .snapshot import FetchMetadata, FundSnapshot
from .tracked_fund import TrackedFundConfig

__all__ = ["DailyRecord", "Fund", "FetchMetadata", "FundSnapshot", "TrackedFundConfig"]
