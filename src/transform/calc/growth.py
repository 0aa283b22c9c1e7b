"""Compute daily and cumulative growth over an ascending NAV series."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from models.errors import ComputeSkip
from models.schemas import DailyRecord, Fund, TrackedFundConfig


def _pct(value: float) -> float:
    # round() is exact on the binary value; "+ 0.0" folds -0.0 into 0.0.
    return round(float(value), 2) + 0.0


def _as_frame(prices: pd.DataFrame | Iterable[tuple[str, float]]) -> pd.DataFrame:
    if isinstance(prices, pd.DataFrame):
        return prices[["date", "nav"]]
    return pd.DataFrame(list(prices), columns=["date", "nav"])


def compute_daily_records(prices: pd.DataFrame | Iterable[tuple[str, float]]) -> list[DailyRecord]:
    frame = _as_frame(prices)
    if frame.empty:
        return []

    nav = frame["nav"].astype(float).reset_index(drop=True)
    base = nav.iloc[0]
    prev = nav.shift(1).fillna(base)

    growth_rate = (nav - prev) / prev * 100
    cumulative = (nav - base) / base * 100

    return [
        DailyRecord(
            date=str(day),
            nav=float(value),
            growth_rate=_pct(rate),
            cumulative_growth=_pct(cum),
        )
        for day, value, rate, cum in zip(frame["date"], nav, growth_rate, cumulative)
    ]


def build_fund(config: TrackedFundConfig, prices: pd.DataFrame | Iterable[tuple[str, float]]) -> Fund:
    history = compute_daily_records(prices)
    if not history:
        raise ComputeSkip(config.code, "upstream returned an empty series")
    return Fund(code=config.code, name=config.name, history=tuple(history))
