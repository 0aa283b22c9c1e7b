"""Pipeline entrypoint: publish fund data, then validate the published copy."""

from __future__ import annotations

import argparse
from pathlib import Path
import subprocess
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the full fund data refresh sequence.")
    parser.add_argument("--baseline-date", default=None, help="Override the configured baseline date.")
    parser.add_argument("--skip-validate", action="store_true", help="Skip validating the published file.")
    return parser.parse_args()


def _run_step(step_name: str, command: list[str]) -> None:
    print(f"[RUN] {step_name}: {' '.join(command)}", flush=True)
    subprocess.run(command, cwd=REPO_ROOT, check=True)


def main() -> int:
    args = _parse_args()
    python_bin = sys.executable

    fetch_cmd = [python_bin, "pipelines/run_fetch_funds.py"]
    if args.baseline_date:
        fetch_cmd.extend(["--baseline-date", args.baseline_date])
    _run_step("fetch_funds", fetch_cmd)

    if not args.skip_validate:
        _run_step(
            "validate_published",
            [python_bin, "pipelines/run_validate_published.py", "--file"],
        )
    print("run_refresh_all completed", f"validated={not args.skip_validate}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
