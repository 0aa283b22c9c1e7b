"""Refresh-guarded holder for the snapshot currently shown on the dashboard."""

from __future__ import annotations

from collections.abc import Callable
import logging
import threading

from models.errors import FundDataError
from models.schemas import FundSnapshot

logger = logging.getLogger(__name__)


class DashboardState:
    def __init__(self, loader: Callable[[], FundSnapshot]) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self.snapshot: FundSnapshot | None = None
        self.error: str | None = None

    @property
    def loading(self) -> bool:
        return self._lock.locked()

    @property
    def data_date(self) -> str | None:
        if self.snapshot is None or not self.snapshot.funds:
            return None
        return self.snapshot.funds[0].latest_date

    def refresh(self) -> bool:
        """Load a new snapshot; returns False without doing anything if a load is in flight."""
        if not self._lock.acquire(blocking=False):
            logger.info("refresh ignored, a load is already in flight")
            return False
        try:
            self.snapshot = self._loader()
            self.error = None
        except FundDataError as exc:
            logger.error("fund data load failed: %s", exc)
            self.error = str(exc)
        finally:
            self._lock.release()
        return True
