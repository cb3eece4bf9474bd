"""Structured logging helpers for the ragnator pipeline."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

import orjson

EVENT_LOGGER_NAME = "ragnator.events"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def configure_logger() -> logging.Logger:
    logger = logging.getLogger(EVENT_LOGGER_NAME)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    return logger


def log_event(event: str, **payload: Any) -> None:
    logger = configure_logger()
    data: Dict[str, Any] = {"event": event, **payload}
    logger.info(orjson.dumps(data, default=str).decode("utf-8"))
