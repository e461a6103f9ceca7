from __future__ import annotations

import json
import logging
from dataclasses import dataclass

import requests

from atomik.chem.elements import ElementRecord
from atomik.config import Settings, load_settings

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Provide 3 specific insights for the chemical element {name} ({symbol}) "
    "suitable for a Grade 11 chemistry student.\n"
    "1. A surprising or fun fact.\n"
    "2. A concrete real-world application.\n"
    "3. A brief explanation of its bonding behavior (ionic/covalent tendencies)."
)

PAYLOAD_FIELDS = ("funFact", "realWorldUse", "bondingBehavior")

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {field: {"type": "STRING"} for field in PAYLOAD_FIELDS},
    "required": list(PAYLOAD_FIELDS),
}


class InsightError(ValueError):
    """The insight API answered, but not with a usable payload."""


@dataclass(frozen=True)
class Insight:
    fun_fact: str
    real_world_use: str
    bonding_behavior: str
    is_fallback: bool = False

    @classmethod
    def from_payload(cls, payload: object) -> "Insight":
        if not isinstance(payload, dict):
            raise InsightError(f"Expected a JSON object, got {type(payload).__name__}")
        values = []
        for field in PAYLOAD_FIELDS:
            value = payload.get(field)
            if not isinstance(value, str) or not value.strip():
                raise InsightError(f"Missing or empty field {field!r}")
            values.append(value.strip())
        return cls(*values)

    def to_payload(self) -> dict[str, str]:
        return {
            "funFact": self.fun_fact,
            "realWorldUse": self.real_world_use,
            "bondingBehavior": self.bonding_behavior,
        }


def missing_key_insight() -> Insight:
    return Insight(
        fun_fact="API Key is missing. Cannot fetch live data.",
        real_world_use="API Key is missing.",
        bonding_behavior="Unknown",
        is_fallback=True,
    )


def unavailable_insight(element: ElementRecord) -> Insight:
    return Insight(
        fun_fact=f"Could not load AI data for {element.name}.",
        real_world_use="Information unavailable.",
        bonding_behavior="Information unavailable.",
        is_fallback=True,
    )


def build_prompt(element: ElementRecord) -> str:
    return PROMPT_TEMPLATE.format(name=element.name, symbol=element.symbol)


def build_request(element: ElementRecord, settings: Settings) -> tuple[str, dict, dict]:
    url = f"{settings.endpoint}/models/{settings.model}:generateContent"
    headers = {
        "Content-Type": "application/json",
        "x-goog-api-key": settings.api_key or "",
    }
    body = {
        "contents": [{"parts": [{"text": build_prompt(element)}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }
    return url, headers, body


def parse_response(data: dict) -> Insight:
    """Extract the JSON insight from a generateContent response body."""
    candidates = data.get("candidates") or []
    if not candidates:
        raise InsightError("No candidates returned")
    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = "".join(str(part.get("text") or "") for part in parts)
    if not text.strip():
        raise InsightError("No data returned")
    return Insight.from_payload(json.loads(text))


def fetch_insight(
    element: ElementRecord,
    settings: Settings | None = None,
    session: requests.Session | None = None,
) -> Insight:
    """Ask Gemini for three short facts about ``element``.

    Never raises: a missing key or any request/parse failure yields a
    fallback Insight with ``is_fallback`` set.
    """
    settings = settings or load_settings()
    if not settings.has_api_key:
        logger.warning("No Gemini API key configured; using placeholder insight for %s", element.symbol)
        return missing_key_insight()

    url, headers, body = build_request(element, settings)
    http = session or requests
    try:
        logger.info("Requesting insight for %s from %s", element.symbol, settings.model)
        response = http.post(url, json=body, headers=headers, timeout=settings.request_timeout)
        response.raise_for_status()
        return parse_response(response.json())
    except requests.exceptions.RequestException as exc:
        logger.error("Gemini API request failed for %s: %s", element.symbol, exc)
    except (ValueError, TypeError, KeyError, AttributeError) as exc:
        # JSONDecodeError and InsightError are ValueErrors; the others mean an unexpected body shape
        logger.error("Could not parse Gemini response for %s: %s", element.symbol, exc)
    return unavailable_insight(element)
