"""Prefect flow to publish fresh fund data and validate the published copy."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
import subprocess
import sys
from typing import Sequence

from prefect import flow, get_run_logger, task

REPO_ROOT = Path(__file__).resolve().parents[2]

# Weekdays 16:30 Asia/Shanghai, after the A-share close.
DEFAULT_CRON = "30 16 * * 1-5"


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the fund data refresh flow via Prefect.")
    parser.add_argument("--baseline-date", default=None, help="Override the configured baseline date.")
    parser.add_argument("--skip-validate", action="store_true", help="Skip validating the published file.")
    parser.add_argument(
        "--serve",
        action="store_true",
        help=f"Serve the flow on a cron schedule instead of running it once (default cron: {DEFAULT_CRON}).",
    )
    parser.add_argument("--cron", default=DEFAULT_CRON, help="Cron expression used with --serve.")
    return parser.parse_args()


def _run_subprocess(command: Sequence[str]) -> tuple[int, str, str]:
    env = os.environ.copy()
    env.setdefault("PYTHONUNBUFFERED", "1")
    result = subprocess.run(
        command,
        cwd=REPO_ROOT,
        env=env,
        capture_output=True,
        text=True,
        check=False,
    )
    return result.returncode, result.stdout, result.stderr


@task(name="run-shell-step", retries=2, retry_delay_seconds=30)
def run_shell_step(name: str, command: list[str]) -> None:
    logger = get_run_logger()
    logger.info("Running step=%s command=%s", name, " ".join(command))
    return_code, stdout, stderr = _run_subprocess(command)
    if stdout.strip():
        logger.info(stdout.strip())
    if return_code != 0:
        if stderr.strip():
            logger.error(stderr.strip())
        raise RuntimeError(f"Step {name} failed with exit code {return_code}")
    # Pipeline logging goes to stderr, so a clean run still has output here.
    if stderr.strip():
        logger.info(stderr.strip())


@flow(name="fund-nav-refresh", log_prints=True)
def refresh_flow(baseline_date: str | None = None, validate: bool = True) -> None:
    python_bin = sys.executable

    fetch_cmd = [python_bin, "pipelines/run_fetch_funds.py"]
    if baseline_date:
        fetch_cmd.extend(["--baseline-date", baseline_date])
    run_shell_step("fetch_funds", fetch_cmd)

    if validate:
        run_shell_step("validate_published", [python_bin, "pipelines/run_validate_published.py", "--file"])


if __name__ == "__main__":
    args = _parse_args()
    if args.serve:
        refresh_flow.serve(
            name="fund-nav-refresh-daily",
            cron=args.cron,
            parameters={"baseline_date": args.baseline_date, "validate": not args.skip_validate},
        )
    else:
        refresh_flow(baseline_date=args.baseline_date, validate=not args.skip_validate)
