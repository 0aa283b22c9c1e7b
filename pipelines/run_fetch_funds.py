"""Pipeline entrypoint: fetch kline history per tracked fund, compute growth, publish JSON."""

from __future__ import annotations

import argparse
from collections.abc import Callable, Sequence
import logging
from pathlib import Path
import sys

import requests

# Allow running directly from repo root without package installation.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from config.settings import parse_baseline_date, settings  # noqa: E402
from extract.eastmoney_reader import fetch_klines  # noqa: E402
from load.write_snapshot import serialize_funds, write_snapshot  # noqa: E402
from models.errors import ComputeSkip  # noqa: E402
from models.schemas import Fund, TrackedFundConfig  # noqa: E402
from transform.calc.growth import build_fund  # noqa: E402
from transform.normalize.kline_parser import parse_klines  # noqa: E402
from utils.hashing import sha256_hex  # noqa: E402
from utils.logging_setup import configure_logging  # noqa: E402

logger = logging.getLogger("run_fetch_funds")

KlineFetcher = Callable[[TrackedFundConfig, str], list[str]]


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch tracked ETF NAV history and publish fund-data JSON.")
    parser.add_argument(
        "--baseline-date",
        default=settings.baseline_date,
        help=f"Baseline date in YYYY-MM-DD format (default: {settings.baseline_date}).",
    )
    parser.add_argument(
        "--output",
        action="append",
        default=None,
        help="Output JSON path; repeat for mirrored copies (default: configured output paths).",
    )
    parser.add_argument("--dry-run", action="store_true", help="Compute everything but write no files.")
    return parser.parse_args(argv)


def _eastmoney_fetcher(session: requests.Session) -> KlineFetcher:
    def fetch(config: TrackedFundConfig, baseline_date: str) -> list[str]:
        return fetch_klines(
            config.code,
            baseline_date,
            url=settings.upstream_url,
            session=session,
            timeout=settings.http_timeout_seconds,
        )

    return fetch


def _collect_funds(
    registry: Sequence[TrackedFundConfig],
    baseline_date: str,
    fetch: KlineFetcher,
) -> tuple[list[Fund], list[str]]:
    """Build funds in registry order; a failing fund is logged and left out."""
    funds: list[Fund] = []
    skipped: list[str] = []
    for config in registry:
        logger.info("fetching %s (%s)", config.name, config.code)
        try:
            prices = parse_klines(fetch(config, baseline_date), code=config.code)
            funds.append(build_fund(config, prices))
        except ComputeSkip as exc:
            logger.warning("%s", exc)
            skipped.append(config.code)
        except Exception as exc:  # per-fund isolation for upstream/parse failures
            logger.error("fetch failed for %s (%s): %s", config.name, config.code, exc)
            skipped.append(config.code)
    return funds, skipped


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(settings.log_level)

    baseline_date = parse_baseline_date(args.baseline_date)
    output_paths = [Path(p) for p in args.output] if args.output else list(settings.output_paths)

    with requests.Session() as session:
        funds, skipped = _collect_funds(settings.tracked_funds, baseline_date, _eastmoney_fetcher(session))

    if not funds:
        # Keep the last published snapshot; an empty array is unreadable downstream.
        logger.error("no fund produced data (skipped=%s), leaving outputs untouched", skipped)
        print("run_fetch_funds failed", f"baseline_date={baseline_date}", f"funds_skipped={skipped}")
        return 1

    content = serialize_funds(funds)
    logger.info("payload sha256=%s", sha256_hex(content))

    written: list[Path] = []
    if not args.dry_run:
        try:
            written = write_snapshot(funds, output_paths)
        except OSError as exc:
            logger.error("failed to write fund data: %s", exc)
            return 1

    print(
        "run_fetch_funds completed",
        f"baseline_date={baseline_date}",
        f"funds_written={len(funds)}",
        f"funds_skipped={skipped}",
        f"outputs={[str(path) for path in written]}",
        f"dry_run={args.dry_run}",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
