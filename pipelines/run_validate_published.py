"""Validate the published fund-data JSON against the local registry.

By default the served URL is checked. ``--file`` checks a local copy instead,
which is what the refresh orchestrators use right after a producer run.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path
import sys

# Allow running directly from repo root without package installation.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from config.settings import settings  # noqa: E402
from models.enums import FetchPolicy  # noqa: E402
from models.errors import FundDataError  # noqa: E402
from models.schemas import FundSnapshot  # noqa: E402
from services.fund_data_service import FundDataService, load_local_snapshot  # noqa: E402
from utils.logging_setup import configure_logging  # noqa: E402


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate the published fund-data JSON.")
    parser.add_argument(
        "--url",
        action="append",
        default=None,
        help="Candidate data URL; repeat for fallbacks (default: configured data URLs).",
    )
    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in FetchPolicy],
        default=settings.fetch_policy.value,
        help=f"Fetch policy (default: {settings.fetch_policy.value}).",
    )
    parser.add_argument(
        "--file",
        nargs="?",
        const=str(settings.output_paths[0]),
        default=None,
        help=f"Validate a local JSON file instead of a URL (bare flag: {settings.output_paths[0]}).",
    )
    return parser.parse_args(argv)


def _summary_lines(snapshot: FundSnapshot) -> list[str]:
    lines = []
    for fund in snapshot.funds:
        lines.append(
            f" - {fund.code} {fund.name}: latest_date={fund.latest_date} "
            f"latest_nav={fund.latest_nav} total_growth={fund.total_growth} records={len(fund.history)}"
        )
    for message in snapshot.metadata.validation_errors:
        lines.append(f" ! {message}")
    return lines


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    configure_logging(settings.log_level)

    try:
        if args.file:
            snapshot = load_local_snapshot(Path(args.file), settings.tracked_funds)
        else:
            service = FundDataService(
                urls=args.url or settings.data_urls,
                registry=settings.tracked_funds,
                policy=FetchPolicy(args.policy),
                baseline_date=settings.baseline_date,
                timeout=settings.http_timeout_seconds,
            )
            snapshot = service.load()
    except OSError as exc:
        print("run_validate_published failed", "error=OSError", f"detail={exc}")
        return 1
    except FundDataError as exc:
        print("run_validate_published failed", f"error={type(exc).__name__}", f"detail={exc}")
        return 1

    metadata = snapshot.metadata
    print(
        "run_validate_published passed",
        f"source={metadata.source}",
        f"synthetic={metadata.is_synthetic}",
        f"funds={len(snapshot.funds)}",
        f"warnings={len(metadata.validation_errors)}",
    )
    for line in _summary_lines(snapshot):
        print(line)
    return 1 if metadata.is_synthetic else 0


if __name__ == "__main__":
    raise SystemExit(main())
