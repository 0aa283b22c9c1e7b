"""Validate a published fund payload and remap it onto the local fund registry.

Fatal problems raise a ``FundDataError`` subclass; recoverable ones (a
mid-series record with a missing field, an upstream name that differs from
the registry) are appended to ``warnings``. A record missing a rate keeps
``None`` for it; a record missing its date or NAV is dropped.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from models.errors import InvalidHistoryError, MissingFundError, ShapeError
from models.schemas import DailyRecord, Fund, TrackedFundConfig
from utils.validation import missing_keys, to_float


def check_shape(payload: Any) -> list[dict[str, Any]]:
    if not isinstance(payload, list):
        raise ShapeError(f"Expected a JSON array of funds, got {type(payload).__name__}")
    if not payload:
        raise ShapeError("Published fund array is empty")
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise ShapeError(f"Element {index} is {type(item).__name__}, expected an object")
    return payload


def index_by_code(entries: list[dict[str, Any]]) -> dict[str, dict[str, Any]]:
    by_code: dict[str, dict[str, Any]] = {}
    for entry in entries:
        code = str(entry.get("code", "")).strip()
        if code and code not in by_code:
            by_code[code] = entry
    return by_code


def _check_history(code: str, entry: dict[str, Any]) -> list[Any]:
    history = entry.get("history")
    if history is None:
        raise InvalidHistoryError(code, "history is missing")
    if not isinstance(history, list):
        raise InvalidHistoryError(code, f"history is {type(history).__name__}, expected a list")
    if not history:
        raise InvalidHistoryError(code, "history is empty")

    latest = history[-1]
    if not isinstance(latest, dict):
        raise InvalidHistoryError(code, "latest history entry is not an object")
    if not latest.get("date"):
        raise InvalidHistoryError(code, "latest history entry has no date")
    if to_float(latest.get("nav")) is None:
        raise InvalidHistoryError(code, "latest history entry has no numeric nav")
    return history


def _normalize_record(code: str, index: int, raw: Any, warnings: list[str]) -> DailyRecord | None:
    if not isinstance(raw, dict):
        warnings.append(f"{code}: history[{index}] is not an object, dropped")
        return None

    missing = missing_keys(raw, {"date", "nav"})
    nav = to_float(raw.get("nav"))
    if missing or nav is None:
        warnings.append(f"{code}: history[{index}] missing or non-numeric {missing or ['nav']}, dropped")
        return None

    rates: dict[str, float | None] = {}
    for key in ("growthRate", "cumulativeGrowth"):
        value = to_float(raw.get(key))
        if value is None:
            warnings.append(f"{code}: history[{index}] has no numeric {key}, left empty")
        rates[key] = value

    return DailyRecord(
        date=str(raw["date"]),
        nav=nav,
        growth_rate=rates["growthRate"],
        cumulative_growth=rates["cumulativeGrowth"],
    )


def normalize_fund(config: TrackedFundConfig, entry: dict[str, Any], warnings: list[str]) -> Fund:
    code = str(entry.get("code", config.code)).strip()
    history = _check_history(code, entry)

    upstream_name = entry.get("name")
    if upstream_name and str(upstream_name).strip() != config.name:
        warnings.append(f"{code}: upstream name {upstream_name!r} replaced by registry name {config.name!r}")

    records: list[DailyRecord] = []
    for index, raw in enumerate(history):
        record = _normalize_record(code, index, raw, warnings)
        if record is not None:
            records.append(record)
    return Fund(code=code, name=config.name, history=tuple(records))


def normalize_payload(
    payload: Any,
    registry: Sequence[TrackedFundConfig],
) -> tuple[list[Fund], list[str]]:
    """Return one Fund per registry entry, in registry order, plus collected warnings."""
    entries = check_shape(payload)
    by_code = index_by_code(entries)
    warnings: list[str] = []

    matched: list[tuple[TrackedFundConfig, dict[str, Any]]] = []
    for config in registry:
        entry = by_code.get(config.code)
        if entry is None:
            raise MissingFundError(config.code, config.name)
        matched.append((config, entry))

    funds = [normalize_fund(config, entry, warnings) for config, entry in matched]

    known = {config.code for config in registry}
    extras = sorted(code for code in by_code if code not in known)
    if extras:
        warnings.append(f"ignored funds not in registry: {extras}")

    return funds, warnings
