"""Logging helpers for provider calls that end in a fallback."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict

from farm_engine.exceptions import QuotaExceededError

__all__ = ["QUOTA_WINDOW", "log_fallback", "reset_warnings", "warn_once"]

QUOTA_WINDOW = 60.0
_MAX_CODES = 256

_last_seen: OrderedDict[str, float] = OrderedDict()


def warn_once(logger: logging.Logger, code: str, message: str, window: float = QUOTA_WINDOW) -> bool:
    """Log ``code: message`` unless ``code`` already warned within ``window`` seconds.

    Returns ``True`` when the warning was emitted. Only the most recent
    codes are remembered.
    """

    now = time.monotonic()
    last = _last_seen.get(code)
    if last is not None and now - last <= window:
        return False
    _last_seen[code] = now
    _last_seen.move_to_end(code)
    while len(_last_seen) > _MAX_CODES:
        _last_seen.popitem(last=False)
    logger.warning("%s: %s", code, message)
    return True


def log_fallback(logger: logging.Logger, call: str, err: Exception, fallback: str) -> None:
    """Report a provider failure that the caller absorbed with ``fallback``.

    Rate limiting is throttled per call; other failures are logged with
    their traceback.
    """

    if isinstance(err, QuotaExceededError):
        warn_once(logger, f"{call}_quota", f"quota exceeded, {fallback}")
    else:
        logger.error("%s failed, %s: %s", call, fallback, err, exc_info=err)


def reset_warnings() -> None:
    _last_seen.clear()
