from __future__ import annotations

from datetime import date
from pathlib import Path
import json
import sys
import tempfile
import unittest
from unittest import mock

import requests

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "src"))

from config.settings import DEFAULT_TRACKED_FUNDS
from models.enums import FetchPolicy
from models.errors import InvalidHistoryError, MissingFundError, ShapeError, TransportError
from services.fund_data_service import FundDataService, load_local_snapshot

PRIMARY = "https://example.test/a/fund-data.json"
MIRROR = "https://example.test/b/fund-data.json"


class _Response:
    def __init__(
        self,
        payload: object = None,
        status_code: int = 200,
        content_type: str = "application/json; charset=utf-8",
        text: str = "",
    ) -> None:
        self.payload = payload
        self.status_code = status_code
        self.reason = "OK" if status_code < 400 else "Error"
        self.headers = {"content-type": content_type}
        self.text = text
        self.json_calls = 0

    def json(self) -> object:
        self.json_calls += 1
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class _Session:
    def __init__(self, responses: dict[str, object]) -> None:
        self.responses = responses
        self.calls: list[tuple[str, dict[str, str]]] = []

    def get(self, url: str, params: dict[str, str], timeout: float) -> _Response:
        self.calls.append((url, params))
        outcome = self.responses[url]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _payload() -> list[dict[str, object]]:
    return [
        {
            "code": config.code,
            "name": config.name,
            "history": [
                {"date": "2025-12-01", "nav": 1.0, "growthRate": 0, "cumulativeGrowth": 0},
                {"date": "2025-12-02", "nav": 1.01, "growthRate": 1.0, "cumulativeGrowth": 1.0},
            ],
            "latestNav": 1.01,
            "latestDate": "2025-12-02",
            "totalGrowth": 1.0,
        }
        for config in DEFAULT_TRACKED_FUNDS
    ]


def _service(session: _Session, policy: FetchPolicy, urls: tuple[str, ...] = (PRIMARY, MIRROR)) -> FundDataService:
    return FundDataService(
        urls=urls,
        registry=DEFAULT_TRACKED_FUNDS,
        policy=policy,
        baseline_date="2025-12-01",
        session=session,
        today=lambda: date(2025, 12, 5),
    )


class TestStrictPolicy(unittest.TestCase):
    def test_loads_normalized_snapshot(self) -> None:
        session = _Session({PRIMARY: _Response(_payload())})

        snapshot = _service(session, FetchPolicy.STRICT).load()

        self.assertEqual([f.code for f in snapshot.funds], [c.code for c in DEFAULT_TRACKED_FUNDS])
        self.assertEqual(snapshot.metadata.source, PRIMARY)
        self.assertFalse(snapshot.metadata.is_synthetic)
        self.assertEqual(snapshot.metadata.validation_errors, ())
        self.assertIs(snapshot.metadata.policy, FetchPolicy.STRICT)

    def test_cache_buster_changes_every_call(self) -> None:
        session = _Session({PRIMARY: _Response(_payload())})
        service = _service(session, FetchPolicy.STRICT)

        with mock.patch("services.fund_data_service.time.time", side_effect=[1765000000.5, 1765000001.25]):
            service.load()
            service.load()

        self.assertEqual(session.calls[0][1], {"t": "1765000000500"})
        self.assertEqual(session.calls[1][1], {"t": "1765000001250"})

    def test_html_content_type_fails_before_parsing(self) -> None:
        response = _Response(_payload(), content_type="text/html", text="<html>404</html>")
        session = _Session({PRIMARY: response})

        with self.assertLogs("services.fund_data_service", level="ERROR"):
            with self.assertRaises(TransportError):
                _service(session, FetchPolicy.STRICT).load()
        self.assertEqual(response.json_calls, 0)

    def test_http_error_status(self) -> None:
        session = _Session({PRIMARY: _Response(status_code=503)})

        with self.assertRaises(TransportError) as ctx:
            _service(session, FetchPolicy.STRICT).load()
        self.assertIn("503", str(ctx.exception))

    def test_redirect_status_is_not_success(self) -> None:
        response = _Response(_payload(), status_code=302)
        session = _Session({PRIMARY: response})

        with self.assertRaises(TransportError) as ctx:
            _service(session, FetchPolicy.STRICT).load()
        self.assertIn("302", str(ctx.exception))
        self.assertEqual(response.json_calls, 0)

    def test_network_failure(self) -> None:
        session = _Session({PRIMARY: requests.ConnectionError("refused")})

        with self.assertRaises(TransportError):
            _service(session, FetchPolicy.STRICT).load()

    def test_invalid_json_body(self) -> None:
        session = _Session({PRIMARY: _Response(ValueError("Expecting value"))})

        with self.assertRaises(ShapeError):
            _service(session, FetchPolicy.STRICT).load()

    def test_missing_fund_is_not_rescued_by_mirror(self) -> None:
        payload = [entry for entry in _payload() if entry["code"] != "515980"]
        session = _Session({PRIMARY: _Response(payload), MIRROR: _Response(_payload())})

        with self.assertRaises(MissingFundError) as ctx:
            _service(session, FetchPolicy.STRICT).load()

        self.assertEqual(ctx.exception.code, "515980")
        self.assertEqual([url for url, _ in session.calls], [PRIMARY])

    def test_empty_history_fails(self) -> None:
        payload = _payload()
        payload[3]["history"] = []
        session = _Session({PRIMARY: _Response(payload)})

        with self.assertRaises(InvalidHistoryError):
            _service(session, FetchPolicy.STRICT).load()


class TestResilientPolicy(unittest.TestCase):
    def test_first_valid_candidate_wins(self) -> None:
        session = _Session({PRIMARY: _Response([]), MIRROR: _Response(_payload())})

        with self.assertLogs("services.fund_data_service", level="WARNING"):
            snapshot = _service(session, FetchPolicy.RESILIENT).load()

        self.assertEqual(snapshot.metadata.source, MIRROR)
        self.assertFalse(snapshot.metadata.is_synthetic)
        self.assertEqual(len(snapshot.funds), len(DEFAULT_TRACKED_FUNDS))
        self.assertEqual(len(snapshot.metadata.validation_errors), 1)
        self.assertIn(PRIMARY, snapshot.metadata.validation_errors[0])
        self.assertEqual([url for url, _ in session.calls], [PRIMARY, MIRROR])

    def test_stops_at_first_success(self) -> None:
        session = _Session({PRIMARY: _Response(_payload()), MIRROR: _Response(_payload())})

        snapshot = _service(session, FetchPolicy.RESILIENT).load()

        self.assertEqual(snapshot.metadata.source, PRIMARY)
        self.assertEqual(len(session.calls), 1)

    def test_all_candidates_failing_serves_tagged_synthetic_data(self) -> None:
        session = _Session(
            {
                PRIMARY: _Response(status_code=404),
                MIRROR: _Response(_payload(), content_type="text/html"),
            }
        )

        with self.assertLogs("services.fund_data_service", level="WARNING"):
            snapshot = _service(session, FetchPolicy.RESILIENT).load()

        self.assertTrue(snapshot.metadata.is_synthetic)
        self.assertIsNone(snapshot.metadata.source)
        self.assertEqual(len(snapshot.metadata.validation_errors), 2)
        self.assertEqual([f.code for f in snapshot.funds], [c.code for c in DEFAULT_TRACKED_FUNDS])
        self.assertEqual([f.name for f in snapshot.funds], [c.name for c in DEFAULT_TRACKED_FUNDS])
        for fund in snapshot.funds:
            self.assertEqual(fund.history[0].date, "2025-12-01")
            self.assertEqual(fund.latest_date, "2025-12-05")

    def test_requires_baseline_for_fallback(self) -> None:
        with self.assertRaises(ValueError):
            FundDataService(urls=(PRIMARY,), registry=DEFAULT_TRACKED_FUNDS, policy=FetchPolicy.RESILIENT)


class TestLocalSnapshot(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "fund-data.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_valid_file_loads_in_registry_order(self) -> None:
        self.path.write_text(json.dumps(list(reversed(_payload())), ensure_ascii=False), encoding="utf-8")

        snapshot = load_local_snapshot(self.path, DEFAULT_TRACKED_FUNDS)

        self.assertEqual([fund.code for fund in snapshot.funds], [config.code for config in DEFAULT_TRACKED_FUNDS])
        self.assertEqual(snapshot.metadata.source, str(self.path))
        self.assertIs(snapshot.metadata.policy, FetchPolicy.STRICT)
        self.assertFalse(snapshot.metadata.is_synthetic)

    def test_empty_array_is_a_shape_error(self) -> None:
        self.path.write_text("[]\n", encoding="utf-8")

        with self.assertRaises(ShapeError):
            load_local_snapshot(self.path, DEFAULT_TRACKED_FUNDS)

    def test_truncated_file_is_a_shape_error(self) -> None:
        self.path.write_text('[{"code": "588000"', encoding="utf-8")

        with self.assertRaises(ShapeError):
            load_local_snapshot(self.path, DEFAULT_TRACKED_FUNDS)

    def test_missing_file_raises_oserror(self) -> None:
        with self.assertRaises(OSError):
            load_local_snapshot(self.path, DEFAULT_TRACKED_FUNDS)


if __name__ == "__main__":
    unittest.main()
