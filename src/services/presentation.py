"""View models for the dashboard cards and comparison chart.

Every displayed number comes straight from a fund's history; nothing here
recomputes growth.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import html

import pandas as pd

from models.enums import Trend
from models.schemas import Fund

UNAVAILABLE_TEXT = "Data unavailable"

# Chinese market convention: red for gains, green for losses.
TREND_COLORS: dict[Trend, str] = {
    Trend.UP: "#e03131",
    Trend.DOWN: "#2f9e44",
    Trend.FLAT: "#868e96",
    Trend.UNAVAILABLE: "#f59f00",
}

TREND_ARROWS: dict[Trend, str] = {Trend.UP: "▲", Trend.DOWN: "▼", Trend.FLAT: "■", Trend.UNAVAILABLE: "⚠"}


@dataclass(frozen=True, slots=True)
class FundCard:
    code: str
    name: str
    trend: Trend
    nav_text: str
    growth_text: str
    date_text: str

    @property
    def color(self) -> str:
        return TREND_COLORS[self.trend]


def trend_of(fund: Fund) -> Trend:
    if fund.latest_nav is None or not fund.latest_date:
        return Trend.UNAVAILABLE
    if fund.total_growth > 0:
        return Trend.UP
    if fund.total_growth < 0:
        return Trend.DOWN
    return Trend.FLAT


def build_card(fund: Fund) -> FundCard:
    trend = trend_of(fund)
    if trend is Trend.UNAVAILABLE:
        return FundCard(
            code=fund.code,
            name=fund.name,
            trend=trend,
            nav_text=UNAVAILABLE_TEXT,
            growth_text=UNAVAILABLE_TEXT,
            date_text="",
        )
    return FundCard(
        code=fund.code,
        name=fund.name,
        trend=trend,
        nav_text=f"{fund.latest_nav:.3f}",
        growth_text=f"{fund.total_growth:+.2f}%",
        date_text=fund.latest_date,
    )


def build_cards(funds: Sequence[Fund]) -> list[FundCard]:
    return [build_card(fund) for fund in funds]


def card_html(card: FundCard) -> str:
    """Card markup for the dashboard. Every text field is escaped; names, codes
    and dates arrive from the published file."""
    name, code = html.escape(card.name), html.escape(card.code)
    nav_text, growth_text = html.escape(card.nav_text), html.escape(card.growth_text)
    date_text = html.escape(card.date_text)
    return f"""
        <div class="fund-card" style="border-left: 4px solid {card.color};">
          <div class="name">{name} <span class="code">{code}</span></div>
          <div class="nav">{nav_text}</div>
          <div class="growth" style="color: {card.color};">{TREND_ARROWS[card.trend]} {growth_text}</div>
          <div class="date">{date_text}</div>
        </div>
        """


def chart_frame(funds: Sequence[Fund]) -> pd.DataFrame:
    rows = [
        {
            "date": record.date,
            "fund": f"{fund.name} ({fund.code})",
            "cumulativeGrowth": record.cumulative_growth,
        }
        for fund in funds
        for record in fund.history
        if record.cumulative_growth is not None
    ]
    frame = pd.DataFrame(rows, columns=["date", "fund", "cumulativeGrowth"])
    if not frame.empty:
        frame["date"] = pd.to_datetime(frame["date"], errors="coerce")
        frame = frame.dropna(subset=["date"]).sort_values(["fund", "date"]).reset_index(drop=True)
    return frame
