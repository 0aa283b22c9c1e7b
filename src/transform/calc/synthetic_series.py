"""Deterministic synthetic NAV walk used when no published data can be fetched.

Business days only, seeded from the baseline date and fund code so the same
day always renders the same placeholder series.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

import numpy as np
import pandas as pd

from models.schemas import Fund, TrackedFundConfig
from transform.calc.growth import build_fund
from utils.hashing import stable_seed

START_NAV = 1.0
DAILY_VOLATILITY = 0.015
MIN_NAV = 0.001


def synthetic_prices(code: str, baseline_date: str, today: date | None = None) -> pd.DataFrame:
    end = pd.Timestamp(today or date.today())
    start = pd.Timestamp(baseline_date)
    days = pd.bdate_range(start=start, end=max(start, end))
    if days.empty:
        days = pd.DatetimeIndex([start])

    rng = np.random.default_rng(stable_seed(baseline_date, code))
    steps = rng.normal(loc=0.0, scale=DAILY_VOLATILITY, size=len(days))
    steps[0] = 0.0
    nav = np.maximum(START_NAV * np.cumprod(1.0 + steps), MIN_NAV).round(3)

    return pd.DataFrame({"date": days.strftime("%Y-%m-%d"), "nav": nav})


def build_synthetic_funds(
    registry: Sequence[TrackedFundConfig],
    baseline_date: str,
    today: date | None = None,
) -> list[Fund]:
    return [build_fund(config, synthetic_prices(config.code, baseline_date, today)) for config in registry]
