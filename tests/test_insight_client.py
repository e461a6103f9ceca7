from __future__ import annotations

import json
import sys
import unittest
from pathlib import Path
from unittest import mock

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

import requests

from atomik.chem.elements import get_element
from atomik.config import Settings
from atomik.insight.client import (
    Insight,
    InsightError,
    build_request,
    fetch_insight,
    parse_response,
)

PAYLOAD = {
    "funFact": "Diamond and graphite are both pure carbon.",
    "realWorldUse": "Steel making.",
    "bondingBehavior": "Forms four covalent bonds.",
}


def _gemini_body(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _response(body: dict | None = None, status_error: Exception | None = None, json_error: Exception | None = None):
    response = mock.Mock()
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body
    return response


class FetchInsightTests(unittest.TestCase):
    def setUp(self) -> None:
        self.carbon = get_element(6)
        self.settings = Settings(api_key="test-key", request_timeout=5.0)
        self.http = mock.Mock()

    def test_missing_key_skips_network(self) -> None:
        insight = fetch_insight(self.carbon, Settings(api_key=None), session=self.http)
        self.http.post.assert_not_called()
        self.assertTrue(insight.is_fallback)
        self.assertEqual(insight.fun_fact, "API Key is missing. Cannot fetch live data.")
        self.assertEqual(insight.real_world_use, "API Key is missing.")
        self.assertEqual(insight.bonding_behavior, "Unknown")

    def test_success(self) -> None:
        self.http.post.return_value = _response(_gemini_body(json.dumps(PAYLOAD)))
        insight = fetch_insight(self.carbon, self.settings, session=self.http)
        self.assertFalse(insight.is_fallback)
        self.assertEqual(insight.to_payload(), PAYLOAD)
        _, kwargs = self.http.post.call_args
        self.assertEqual(kwargs["timeout"], 5.0)
        self.assertEqual(kwargs["headers"]["x-goog-api-key"], "test-key")

    def _assert_unavailable(self, insight: Insight) -> None:
        self.assertTrue(insight.is_fallback)
        self.assertEqual(insight.fun_fact, "Could not load AI data for Carbon.")
        self.assertEqual(insight.real_world_use, "Information unavailable.")
        self.assertEqual(insight.bonding_behavior, "Information unavailable.")

    def test_http_error_falls_back(self) -> None:
        self.http.post.return_value = _response(status_error=requests.exceptions.HTTPError("403 Forbidden"))
        with self.assertLogs("atomik.insight.client", level="ERROR"):
            self._assert_unavailable(fetch_insight(self.carbon, self.settings, session=self.http))

    def test_timeout_falls_back(self) -> None:
        self.http.post.side_effect = requests.exceptions.Timeout("timed out")
        self._assert_unavailable(fetch_insight(self.carbon, self.settings, session=self.http))

    def test_connection_error_falls_back(self) -> None:
        self.http.post.side_effect = requests.exceptions.ConnectionError("offline")
        self._assert_unavailable(fetch_insight(self.carbon, self.settings, session=self.http))

    def test_malformed_json_falls_back(self) -> None:
        self.http.post.return_value = _response(_gemini_body("{not json"))
        self._assert_unavailable(fetch_insight(self.carbon, self.settings, session=self.http))

    def test_non_json_body_falls_back(self) -> None:
        self.http.post.return_value = _response(json_error=ValueError("No JSON object could be decoded"))
        self._assert_unavailable(fetch_insight(self.carbon, self.settings, session=self.http))

    def test_missing_field_falls_back(self) -> None:
        partial = {"funFact": "x", "realWorldUse": "y"}
        self.http.post.return_value = _response(_gemini_body(json.dumps(partial)))
        self._assert_unavailable(fetch_insight(self.carbon, self.settings, session=self.http))

    def test_empty_candidates_fall_back(self) -> None:
        self.http.post.return_value = _response({"candidates": []})
        self._assert_unavailable(fetch_insight(self.carbon, self.settings, session=self.http))

    def test_candidates_object_falls_back(self) -> None:
        self.http.post.return_value = _response({"candidates": {"first": {}}})
        self._assert_unavailable(fetch_insight(self.carbon, self.settings, session=self.http))

    def test_non_list_parts_fall_back(self) -> None:
        self.http.post.return_value = _response({"candidates": [{"content": {"parts": 5}}]})
        self._assert_unavailable(fetch_insight(self.carbon, self.settings, session=self.http))

    def test_non_object_body_falls_back(self) -> None:
        self.http.post.return_value = _response(["unexpected"])
        self._assert_unavailable(fetch_insight(self.carbon, self.settings, session=self.http))


class RequestShapeTests(unittest.TestCase):
    def test_build_request(self) -> None:
        settings = Settings(api_key="k", model="gemini-2.5-flash", endpoint="https://example.test/v1beta")
        url, headers, body = build_request(get_element(8), settings)
        self.assertEqual(url, "https://example.test/v1beta/models/gemini-2.5-flash:generateContent")
        self.assertEqual(headers["Content-Type"], "application/json")
        prompt = body["contents"][0]["parts"][0]["text"]
        self.assertIn("Oxygen (O)", prompt)
        self.assertIn("Grade 11", prompt)
        config = body["generationConfig"]
        self.assertEqual(config["responseMimeType"], "application/json")
        self.assertEqual(
            sorted(config["responseSchema"]["required"]),
            ["bondingBehavior", "funFact", "realWorldUse"],
        )

    def test_parse_response_joins_parts(self) -> None:
        text = json.dumps(PAYLOAD)
        body = {"candidates": [{"content": {"parts": [{"text": text[:10]}, {"text": text[10:]}]}}]}
        self.assertEqual(parse_response(body).fun_fact, PAYLOAD["funFact"])

    def test_parse_response_rejects_empty_text(self) -> None:
        with self.assertRaises(InsightError):
            parse_response(_gemini_body("  "))


class InsightPayloadTests(unittest.TestCase):
    def test_from_payload_strips_whitespace(self) -> None:
        insight = Insight.from_payload({**PAYLOAD, "funFact": "  spaced  "})
        self.assertEqual(insight.fun_fact, "spaced")

    def test_from_payload_rejects_non_objects(self) -> None:
        with self.assertRaises(InsightError):
            Insight.from_payload(["funFact"])
        with self.assertRaises(InsightError):
            Insight.from_payload({**PAYLOAD, "bondingBehavior": 3})


if __name__ == "__main__":
    unittest.main()
