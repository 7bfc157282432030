from __future__ import annotations

import os
from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def _get_env(name: str, default: str | None = None) -> str:
    value = os.getenv(name, default)
    if value is None:
        raise ValueError(f"Missing required environment variable: {name}")
    return value


def analytics_timezone() -> tzinfo:
    name = _get_env("ANALYTICS_TIMEZONE", "UTC")
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone in ANALYTICS_TIMEZONE: {name}") from exc


def index_precision() -> int:
    return int(_get_env("ANALYTICS_INDEX_PRECISION", "2"))


def log_level() -> str:
    return _get_env("ANALYTICS_LOG_LEVEL", "INFO").upper()


def cors_origins() -> list[str]:
    raw = _get_env(
        "ANALYTICS_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    )
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
