"""Parse Eastmoney kline strings (``"date,close"``) into an ordered price frame."""

from __future__ import annotations

from collections.abc import Iterable
import logging

import pandas as pd

logger = logging.getLogger(__name__)

PRICE_COLUMNS = ["date", "nav"]


def parse_klines(lines: Iterable[str], code: str = "") -> pd.DataFrame:
    rows: list[dict[str, object]] = []
    for line in lines:
        parts = str(line).split(",")
        if len(parts) < 2:
            logger.warning("fund=%s dropping malformed kline %r", code, line)
            continue
        date_str = parts[0].strip()
        nav = pd.to_numeric(parts[1].strip(), errors="coerce")
        if not date_str or pd.isna(nav) or nav <= 0:
            logger.warning("fund=%s dropping kline with unusable price %r", code, line)
            continue
        rows.append({"date": date_str, "nav": float(nav)})

    if not rows:
        return pd.DataFrame(columns=PRICE_COLUMNS)

    prices = pd.DataFrame(rows, columns=PRICE_COLUMNS)
    prices = prices.drop_duplicates(subset=["date"], keep="last")
    return prices.sort_values("date", kind="stable").reset_index(drop=True)
