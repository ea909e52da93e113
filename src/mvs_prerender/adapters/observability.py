"""Runtime logging configuration with optional bounded file retention."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

_CONFIGURED = False


def _int_env(name: str, default: int, *, minimum: int, maximum: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return max(minimum, min(maximum, value))


def configure_runtime_logging() -> None:
    """Configure stderr logging, plus a rotating file when a log path is set."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    level_name = os.environ.get("MVS_PRERENDER_LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
    level = getattr(logging, level_name, logging.WARNING)
    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(stream_handler)

    raw_log_path = os.environ.get("MVS_PRERENDER_LOG_PATH", "").strip()
    if raw_log_path:
        log_path = Path(raw_log_path)
        max_bytes = _int_env(
            "MVS_PRERENDER_LOG_MAX_BYTES",
            1024 * 1024,
            minimum=64 * 1024,
            maximum=100 * 1024 * 1024,
        )
        backup_count = _int_env("MVS_PRERENDER_LOG_BACKUP_COUNT", 3, minimum=1, maximum=120)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    _CONFIGURED = True
