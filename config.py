from __future__ import annotations

import os

API_URL = os.getenv("WORD_PROBLEMS_API_URL", "https://word-problem-be.vercel.app/api")

# Accept both ".../api" and ".../api/"; paths are joined with a leading slash
API_URL = API_URL.rstrip("/")

# Empty/unset means no client-side timeout: a pending call resolves or fails
_timeout_raw = os.getenv("WORD_PROBLEMS_HTTP_TIMEOUT", "").strip()
HTTP_TIMEOUT: float | None = float(_timeout_raw) if _timeout_raw else None

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
