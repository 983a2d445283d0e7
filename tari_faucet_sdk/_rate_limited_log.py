"""
Thread-safe rate-limited logging utilities.

Keeps a flapping provider from flooding the logs while a transaction is
being polled, while still logging the first occurrence of each message.
"""
import logging
import threading
from typing import Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

# Messages logged within the last interval; entries expire after an hour at most
_log_cache: TTLCache = TTLCache(maxsize=256, ttl=3600)
_log_cache_lock = threading.RLock()


def rate_limited_log(
    message: str,
    level: str = "warning",
    interval: float = 60,
    logger_instance: Optional[logging.Logger] = None,
    key: Optional[str] = None
) -> bool:
    """
    Log a message at most once per ``interval`` seconds.

    Args:
        message: Message to log
        level: Log level (debug, info, warning, error, critical)
        interval: Minimum interval between identical logs in seconds
        logger_instance: Logger to use (defaults to module logger)
        key: Deduplication key (defaults to level and message)

    Returns:
        True if the message was logged, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)
    cache_key = key or f"{level}:{message}"

    with _log_cache_lock:
        now = _log_cache.timer()
        last = _log_cache.get(cache_key)
        if last is not None and now - last < interval:
            return False
        _log_cache[cache_key] = now

    log_method(message)
    return True


def reset_rate_limits() -> None:
    """Forget every suppressed message"""
    with _log_cache_lock:
        _log_cache.clear()
