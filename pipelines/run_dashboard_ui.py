"""Launch the fund dashboard under Streamlit.

``--policy`` and ``--baseline-date`` are handed to the app through the same
environment variables the settings module reads, so one launch can try the
resilient fallback or a different baseline without touching the shell env.
Unrecognised arguments are passed through to ``streamlit run``.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import importlib.util
import os
from pathlib import Path
import subprocess
import sys

# Allow running directly from repo root without package installation.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from config.settings import parse_baseline_date  # noqa: E402
from models.enums import FetchPolicy  # noqa: E402
from models.errors import ConfigError  # noqa: E402

APP_PATH = Path(__file__).resolve().parents[1] / "apps" / "fund_dashboard_ui.py"


def _parse_args(argv: Sequence[str] | None = None) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(description="Launch the fund dashboard.")
    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in FetchPolicy],
        default=None,
        help="Fetch policy for this session (default: FUND_FETCH_POLICY or strict).",
    )
    parser.add_argument("--baseline-date", default=None, help="Baseline date shown by the dashboard.")
    parser.add_argument("--port", type=int, default=None, help="Port for the Streamlit server.")
    return parser.parse_known_args(argv)


def _streamlit_installed() -> bool:
    return importlib.util.find_spec("streamlit") is not None


def build_launch(args: argparse.Namespace, passthrough: Sequence[str]) -> tuple[list[str], dict[str, str]]:
    """Return the streamlit command line and the environment it runs with."""
    env = os.environ.copy()
    if args.policy:
        env["FUND_FETCH_POLICY"] = args.policy
    if args.baseline_date:
        env["FUND_BASELINE_DATE"] = parse_baseline_date(args.baseline_date)

    cmd = [sys.executable, "-m", "streamlit", "run", str(APP_PATH)]
    if args.port is not None:
        cmd.extend(["--server.port", str(args.port)])
    cmd.extend(passthrough)
    return cmd, env


def main(argv: Sequence[str] | None = None) -> int:
    args, passthrough = _parse_args(argv)

    if not _streamlit_installed():
        print('run_dashboard_ui failed: streamlit is not installed. Install with `pip install -e ".[ui]"`.')
        return 1
    if not APP_PATH.exists():
        print(f"run_dashboard_ui failed: app not found at {APP_PATH}")
        return 1

    try:
        cmd, env = build_launch(args, passthrough)
    except ConfigError as exc:
        print(f"run_dashboard_ui failed: {exc}")
        return 1

    return subprocess.run(cmd, env=env, check=False).returncode


if __name__ == "__main__":
    raise SystemExit(main())
