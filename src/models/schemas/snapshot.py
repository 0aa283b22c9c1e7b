"""Schema for a consumer-side fetch result."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from models.enums import FetchPolicy

from .fund import Fund


@dataclass(frozen=True, slots=True)
class FetchMetadata:
    timestamp: datetime
    policy: FetchPolicy
    source: str | None
    is_synthetic: bool = False
    validation_errors: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class FundSnapshot:
    funds: tuple[Fund, ...]
    metadata: FetchMetadata
