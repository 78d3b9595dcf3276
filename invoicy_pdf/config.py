"""Runtime configuration loaded from environment variables."""

from __future__ import annotations

import os


def env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


def env_str(name: str, default: str = "") -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip()


HOST = env_str("INVOICY_HOST", "0.0.0.0") or "0.0.0.0"
PORT = env_int("INVOICY_PORT", 8080, minimum=1)

DEFAULT_MAX_CONCURRENT_RENDERS = max(4, min(32, os.cpu_count() or 4))
MAX_CONCURRENT_RENDERS = env_int(
    "INVOICY_MAX_CONCURRENT_RENDERS",
    DEFAULT_MAX_CONCURRENT_RENDERS,
    minimum=1,
)
MAX_INFLIGHT_RENDERS = env_int(
    "INVOICY_MAX_INFLIGHT_RENDERS",
    max(100, MAX_CONCURRENT_RENDERS * 4),
    minimum=1,
)
RENDER_QUEUE_TIMEOUT_MS = env_int("INVOICY_RENDER_QUEUE_TIMEOUT_MS", 120000, minimum=0)
RENDER_TIMEOUT_MS = env_int("INVOICY_RENDER_TIMEOUT_MS", 300000, minimum=1000)

MAX_BODY_BYTES = env_int("INVOICY_MAX_BODY_BYTES", 32 * 1024 * 1024, minimum=1024)
MAX_BUNDLE_ITEMS = env_int("INVOICY_MAX_BUNDLE_ITEMS", 50, minimum=1)
LISTEN_BACKLOG = env_int("INVOICY_LISTEN_BACKLOG", 512, minimum=1)

PAGE_FORMAT = env_str("INVOICY_PAGE_FORMAT", "A4") or "A4"
# Unit of the template coordinates; with "mm" the table columns run off an A4 page.
PAGE_UNIT = env_str("INVOICY_PAGE_UNIT", "pt") or "pt"
# Empty means issue/due dates are printed exactly as supplied.
DATE_FORMAT = env_str("INVOICY_DATE_FORMAT")
LOG_LEVEL = (env_str("INVOICY_LOG_LEVEL", "INFO") or "INFO").upper()
