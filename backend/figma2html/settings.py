"""Runtime settings: tunable parameters for LLM calls and HTTP.

All values read from environment variables with sensible defaults.
Infrastructure config (OAuth app, API keys, URLs) stays in figma2html/config.py.
"""

from __future__ import annotations

import os


def _int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


def _float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


# =====================================================================
# LLM
# =====================================================================

OPENAI_TEMPERATURE = _float("OPENAI_TEMPERATURE", 0.7)
OPENAI_MAX_TOKENS = _int("OPENAI_MAX_TOKENS", 9000)

GEMINI_TEMPERATURE = _float("GEMINI_TEMPERATURE", 0.7)
GEMINI_MAX_TOKENS = _int("GEMINI_MAX_TOKENS", 8192)


# =====================================================================
# HTTP / Cookies
# =====================================================================

FIGMA_HTTP_TIMEOUT = _float("FIGMA_HTTP_TIMEOUT", 60.0)

# Cookie lifetimes (seconds)
ACCESS_TOKEN_COOKIE_MAX_AGE = _int("ACCESS_TOKEN_COOKIE_MAX_AGE", 60 * 60 * 24 * 7)
REFRESH_TOKEN_COOKIE_MAX_AGE = _int("REFRESH_TOKEN_COOKIE_MAX_AGE", 60 * 60 * 24 * 30)
