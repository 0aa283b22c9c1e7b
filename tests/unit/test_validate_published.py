from __future__ import annotations

from dataclasses import replace
import json
from pathlib import Path
import sys
import tempfile
import unittest
from unittest import mock

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT))

from pipelines import run_validate_published
from models.schemas import TrackedFundConfig

REGISTRY = (
    TrackedFundConfig(code="588000", name="科创50ETF"),
    TrackedFundConfig(code="515980", name="人工智能ETF"),
)


def _entry(code: str, name: str) -> dict[str, object]:
    return {
        "code": code,
        "name": name,
        "history": [
            {"date": "2025-12-01", "nav": 1.0, "growthRate": 0.0, "cumulativeGrowth": 0.0},
            {"date": "2025-12-02", "nav": 1.02, "growthRate": 2.0, "cumulativeGrowth": 2.0},
        ],
        "latestNav": 1.02,
        "latestDate": "2025-12-02",
        "totalGrowth": 2.0,
    }


class TestValidateLocalFile(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.output = Path(self._tmp.name) / "public" / "fund-data.json"
        self.output.parent.mkdir(parents=True)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, entries: list[dict[str, object]]) -> None:
        self.output.write_text(json.dumps(entries, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")

    def _run_main(self, argv: list[str]) -> tuple[int, list[str], mock.MagicMock]:
        patched_settings = replace(
            run_validate_published.settings,
            tracked_funds=REGISTRY,
            output_paths=(self.output,),
        )
        with mock.patch.object(run_validate_published, "settings", patched_settings), mock.patch.object(
            run_validate_published, "FundDataService"
        ) as service_cls, mock.patch("builtins.print") as printed:
            exit_code = run_validate_published.main(argv)
        lines = [" ".join(str(arg) for arg in call.args) for call in printed.call_args_list]
        return exit_code, lines, service_cls

    def test_bare_flag_checks_first_output_path(self) -> None:
        self._write([_entry(config.code, config.name) for config in REGISTRY])

        exit_code, lines, service_cls = self._run_main(["--file"])

        self.assertEqual(exit_code, 0)
        self.assertTrue(lines[0].startswith("run_validate_published passed"))
        self.assertIn(f"source={self.output}", lines[0])
        service_cls.assert_not_called()

    def test_explicit_path_is_used(self) -> None:
        other = Path(self._tmp.name) / "other.json"
        other.write_text(json.dumps([_entry(config.code, config.name) for config in REGISTRY]), encoding="utf-8")

        exit_code, lines, _ = self._run_main(["--file", str(other)])

        self.assertEqual(exit_code, 0)
        self.assertIn(f"source={other}", lines[0])

    def test_file_missing_a_tracked_fund_fails(self) -> None:
        self._write([_entry("588000", "科创50ETF")])

        exit_code, lines, _ = self._run_main(["--file"])

        self.assertEqual(exit_code, 1)
        self.assertIn("error=MissingFundError", lines[0])
        self.assertIn("515980", lines[0])

    def test_empty_array_fails(self) -> None:
        self._write([])

        exit_code, lines, _ = self._run_main(["--file"])

        self.assertEqual(exit_code, 1)
        self.assertIn("error=ShapeError", lines[0])

    def test_missing_file_fails(self) -> None:
        exit_code, lines, _ = self._run_main(["--file"])

        self.assertEqual(exit_code, 1)
        self.assertIn("error=OSError", lines[0])


if __name__ == "__main__":
    unittest.main()
