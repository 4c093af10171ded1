from __future__ import annotations

import json
import logging
import time
from typing import Any

from satchel.core.runtime.settings import Settings


def _now_ms() -> int:
    return int(time.time() * 1000)


def log_event(logger: logging.Logger, *, settings: Settings, level: int, event: str, **fields: Any) -> None:
    """Emit an event log.

    - text format: one-liner `event key=value ...`
    - json format: one JSON object per line
    """
    if not logger.isEnabledFor(level):
        return
    if settings.log_format.lower() == "json":
        payload = {"ts_ms": _now_ms(), "event": event, **fields}
        logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))
        return

    # text
    parts = [event]
    for k, v in fields.items():
        parts.append(f"{k}={v}")
    logger.log(level, " ".join(parts))


def configure_logging(settings: Settings) -> None:
    fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    if (settings.log_format or "text").lower() == "json":
        # JSON payload already includes timestamp; keep formatter minimal.
        fmt = "%(message)s"
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=fmt,
    )
