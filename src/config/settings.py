"""Application settings loaded from environment variables."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import os
from pathlib import Path

from models.enums import FetchPolicy
from models.errors import ConfigError
from models.schemas.tracked_fund import TrackedFundConfig

REPO_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_BASELINE_DATE = "2025-12-01"
DEFAULT_UPSTREAM_URL = "https://push2his.eastmoney.com/api/qt/stock/kline/get"
DEFAULT_DATA_URLS = ("https://csuleiw.github.io/fund-tracker-backend/data/fund-data.json",)

DEFAULT_TRACKED_FUNDS = (
    TrackedFundConfig(code="588000", name="科创50ETF"),
    TrackedFundConfig(code="515980", name="人工智能ETF"),
    TrackedFundConfig(code="515100", name="红利ETF"),
    TrackedFundConfig(code="515030", name="新能源车ETF"),
    TrackedFundConfig(code="159338", name="信创ETF"),
)


@dataclass(frozen=True)
class Settings:
    app_env: str
    log_level: str
    baseline_date: str
    tracked_funds: tuple[TrackedFundConfig, ...]
    output_paths: tuple[Path, ...]
    data_urls: tuple[str, ...]
    fetch_policy: FetchPolicy
    upstream_url: str
    http_timeout_seconds: float


def _split(raw: str, sep: str) -> list[str]:
    return [part.strip() for part in raw.split(sep) if part.strip()]


def parse_baseline_date(value: str) -> str:
    try:
        return date.fromisoformat(value.strip()).isoformat()
    except ValueError as exc:
        raise ConfigError(f"Invalid baseline date: {value!r} (expected YYYY-MM-DD)") from exc


def parse_registry(raw: str) -> tuple[TrackedFundConfig, ...]:
    """Parse ``code:name;code:name`` into registry entries, keeping declared order."""
    funds: list[TrackedFundConfig] = []
    seen: set[str] = set()
    for item in _split(raw, ";"):
        code, sep, name = item.partition(":")
        code = code.strip()
        if not sep or not code or not name.strip():
            raise ConfigError(f"Invalid registry entry: {item!r} (expected code:name)")
        if code in seen:
            raise ConfigError(f"Duplicate fund code in registry: {code}")
        seen.add(code)
        funds.append(TrackedFundConfig(code=code, name=name.strip()))
    if not funds:
        raise ConfigError("Fund registry is empty")
    return tuple(funds)


def _output_paths(raw: str | None) -> tuple[Path, ...]:
    if raw is None:
        return (
            REPO_ROOT / "public" / "data" / "fund-data.json",
            REPO_ROOT / "data" / "fund-data.json",
        )
    paths = tuple(Path(part) for part in _split(raw, ","))
    if not paths:
        raise ConfigError("FUND_OUTPUT_PATHS must name at least one path")
    return paths


def _data_urls(raw: str | None) -> tuple[str, ...]:
    if raw is None:
        return DEFAULT_DATA_URLS
    urls = tuple(_split(raw, ","))
    if not urls:
        raise ConfigError("FUND_DATA_URLS must name at least one URL")
    return urls


def _fetch_policy(raw: str) -> FetchPolicy:
    try:
        return FetchPolicy(raw.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(policy.value for policy in FetchPolicy)
        raise ConfigError(f"Invalid FUND_FETCH_POLICY: {raw!r} (allowed: {allowed})") from exc


def get_settings() -> Settings:
    registry_raw = os.getenv("FUND_REGISTRY")
    return Settings(
        app_env=os.getenv("APP_ENV", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        baseline_date=parse_baseline_date(os.getenv("FUND_BASELINE_DATE", DEFAULT_BASELINE_DATE)),
        tracked_funds=parse_registry(registry_raw) if registry_raw else DEFAULT_TRACKED_FUNDS,
        output_paths=_output_paths(os.getenv("FUND_OUTPUT_PATHS")),
        data_urls=_data_urls(os.getenv("FUND_DATA_URLS")),
        fetch_policy=_fetch_policy(os.getenv("FUND_FETCH_POLICY", FetchPolicy.STRICT.value)),
        upstream_url=os.getenv("FUND_UPSTREAM_URL", DEFAULT_UPSTREAM_URL),
        http_timeout_seconds=float(os.getenv("FUND_HTTP_TIMEOUT_SECONDS", "10")),
    )


settings = get_settings()
