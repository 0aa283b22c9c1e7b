"""Fetch the published fund snapshot, validate it and apply the configured fetch policy."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date, datetime, timezone
import json
import logging
from pathlib import Path
import time
from typing import Any

import requests

from models.enums import FetchPolicy
from models.errors import FundDataError, ShapeError, TransportError
from models.schemas import FetchMetadata, FundSnapshot, TrackedFundConfig
from transform.calc.synthetic_series import build_synthetic_funds
from transform.normalize.payload_normalizer import normalize_payload

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _cache_buster() -> str:
    return str(int(time.time() * 1000))


def fetch_payload(url: str, session: requests.Session, timeout: float) -> Any:
    try:
        response = session.get(url, params={"t": _cache_buster()}, timeout=timeout)
    except requests.RequestException as exc:
        raise TransportError(f"Request to {url} failed: {exc}") from exc

    # Redirects count as failures; only a 2xx body is the published file.
    if not 200 <= response.status_code < 300:
        raise TransportError(f"HTTP {response.status_code}: {response.reason} ({url})")

    content_type = response.headers.get("content-type", "")
    if JSON_CONTENT_TYPE not in content_type.lower():
        logger.error("non-JSON response from %s: %s", url, response.text[:500])
        raise TransportError(f"Invalid content type {content_type!r} from {url}")

    try:
        return response.json()
    except ValueError as exc:
        raise ShapeError(f"Response from {url} is not valid JSON: {exc}") from exc


class FundDataService:
    """Loads a ``FundSnapshot`` under one fetch policy fixed at construction."""

    def __init__(
        self,
        urls: Sequence[str],
        registry: Sequence[TrackedFundConfig],
        policy: FetchPolicy = FetchPolicy.STRICT,
        baseline_date: str = "",
        session: requests.Session | None = None,
        timeout: float = 10.0,
        today: Callable[[], date] = date.today,
    ) -> None:
        if not urls:
            raise ValueError("At least one data URL is required")
        if policy is FetchPolicy.RESILIENT and not baseline_date:
            raise ValueError("The resilient policy needs a baseline date for its synthetic fallback")
        self.urls = tuple(urls)
        self.registry = tuple(registry)
        self.policy = policy
        self.baseline_date = baseline_date
        self.session = session or requests.Session()
        self.timeout = timeout
        self._today = today

    def _attempt(self, url: str, notes: list[str]) -> FundSnapshot:
        payload = fetch_payload(url, self.session, self.timeout)
        funds, warnings = normalize_payload(payload, self.registry)
        for warning in warnings:
            logger.warning("%s", warning)
        return FundSnapshot(
            funds=tuple(funds),
            metadata=FetchMetadata(
                timestamp=_utc_now(),
                policy=self.policy,
                source=url,
                validation_errors=tuple(notes + warnings),
            ),
        )

    def _synthetic(self, notes: list[str]) -> FundSnapshot:
        logger.warning("all %d data sources failed, serving synthetic data", len(self.urls))
        funds = build_synthetic_funds(self.registry, self.baseline_date, self._today())
        return FundSnapshot(
            funds=tuple(funds),
            metadata=FetchMetadata(
                timestamp=_utc_now(),
                policy=self.policy,
                source=None,
                is_synthetic=True,
                validation_errors=tuple(notes),
            ),
        )

    def load(self) -> FundSnapshot:
        if self.policy is FetchPolicy.STRICT:
            return self._attempt(self.urls[0], [])

        notes: list[str] = []
        for url in self.urls:
            try:
                return self._attempt(url, notes)
            except FundDataError as exc:
                logger.warning("data source %s failed: %s", url, exc)
                notes.append(f"{url}: {exc}")
        return self._synthetic(notes)


def load_local_snapshot(path: Path, registry: Sequence[TrackedFundConfig]) -> FundSnapshot:
    """Validate a fund-data file on disk, e.g. the copy a producer run just wrote."""
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ShapeError(f"{path} is not valid JSON: {exc}") from exc

    funds, warnings = normalize_payload(payload, registry)
    return FundSnapshot(
        funds=tuple(funds),
        metadata=FetchMetadata(
            timestamp=_utc_now(),
            policy=FetchPolicy.STRICT,
            source=str(path),
            validation_errors=tuple(warnings),
        ),
    )
