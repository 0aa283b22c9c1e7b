"""Read daily forward-adjusted closing prices from the Eastmoney kline API."""

from __future__ import annotations

import logging
from typing import Any

import requests

from utils.retry import retry

logger = logging.getLogger(__name__)

KLINE_FIELDS = "f51,f53"  # date, close
DAILY_INTERVAL = "101"
FORWARD_ADJUSTED = "1"
OPEN_END_DATE = "20991231"


def sec_id(code: str) -> str:
    code = code.strip()
    if code.startswith(("5", "6")):
        return f"1.{code}"
    return f"0.{code}"


def kline_params(code: str, baseline_date: str) -> dict[str, str]:
    return {
        "secid": sec_id(code),
        "fields1": "f1",
        "fields2": KLINE_FIELDS,
        "klt": DAILY_INTERVAL,
        "fqt": FORWARD_ADJUSTED,
        "beg": baseline_date.replace("-", ""),
        "end": OPEN_END_DATE,
    }


def _extract_klines(payload: Any) -> list[str]:
    if not isinstance(payload, dict):
        return []
    data = payload.get("data") or {}
    if not isinstance(data, dict):
        return []
    klines = data.get("klines") or []
    return [str(line) for line in klines] if isinstance(klines, list) else []


def fetch_klines(
    code: str,
    baseline_date: str,
    url: str,
    session: requests.Session | None = None,
    timeout: float = 10.0,
    attempts: int = 3,
) -> list[str]:
    http = session or requests.Session()
    params = kline_params(code, baseline_date)

    def _get() -> Any:
        response = http.get(url, params=params, timeout=timeout)
        response.raise_for_status()
        return response.json()

    payload = retry(_get, attempts=attempts, retry_on=(requests.RequestException,))
    klines = _extract_klines(payload)
    logger.debug("fund=%s secid=%s klines=%d", code, params["secid"], len(klines))
    return klines
