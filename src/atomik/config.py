"""
Configuration
=============
Settings for the Gemini insight client, logging and the initial theme.

Values come from the process environment, after ``load_dotenv()`` has merged
any ``.env`` file found from the working directory upwards.

Variables:
    GEMINI_API_KEY (or API_KEY): credential for the insight API.
    ATOMIK_GEMINI_MODEL: model name.
    ATOMIK_GEMINI_ENDPOINT: API base URL.
    ATOMIK_REQUEST_TIMEOUT: HTTP timeout in seconds.
    ATOMIK_LOG_LEVEL: logging level name (DEBUG, INFO, ...).
    ATOMIK_LOG_FILE: optional path of a log file.
    ATOMIK_THEME: initial theme name.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_TIMEOUT_S = 30.0
DEFAULT_THEME = "Atomik Dark"


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    endpoint: str = DEFAULT_ENDPOINT
    request_timeout: float = DEFAULT_TIMEOUT_S
    log_level: int = logging.INFO
    log_file: str | None = None
    theme: str = DEFAULT_THEME

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_TIMEOUT_S
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring invalid ATOMIK_REQUEST_TIMEOUT=%r", raw)
        return DEFAULT_TIMEOUT_S
    if value <= 0:
        logger.warning("Ignoring non-positive ATOMIK_REQUEST_TIMEOUT=%r", raw)
        return DEFAULT_TIMEOUT_S
    return value


def _parse_log_level(raw: str | None) -> int:
    if not raw:
        return logging.INFO
    level = logging.getLevelName(raw.strip().upper())
    if isinstance(level, int):
        return level
    logger.warning("Ignoring unknown ATOMIK_LOG_LEVEL=%r", raw)
    return logging.INFO


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from ``env``, or from ``.env`` plus ``os.environ`` when omitted."""
    if env is None:
        load_dotenv()
        env = os.environ
    api_key = (env.get("GEMINI_API_KEY") or env.get("API_KEY") or "").strip() or None
    return Settings(
        api_key=api_key,
        model=(env.get("ATOMIK_GEMINI_MODEL") or DEFAULT_MODEL).strip(),
        endpoint=(env.get("ATOMIK_GEMINI_ENDPOINT") or DEFAULT_ENDPOINT).strip().rstrip("/"),
        request_timeout=_parse_timeout(env.get("ATOMIK_REQUEST_TIMEOUT")),
        log_level=_parse_log_level(env.get("ATOMIK_LOG_LEVEL")),
        log_file=(env.get("ATOMIK_LOG_FILE") or "").strip() or None,
        theme=(env.get("ATOMIK_THEME") or DEFAULT_THEME).strip(),
    )
