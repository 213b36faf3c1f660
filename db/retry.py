"""Retry decorator for idempotent store reads."""

import functools
import time

from errors import StoreUnavailable
from logger import get_logger

logger = get_logger(__name__)

DEFAULT_READ_RETRIES = 3


def retry_on_unavailable(initial_delay=0.05, backoff_factor=2):
    """Retry a service read method on StoreUnavailable with exponential backoff.

    The number of retries comes from the service's ``read_retries`` attribute.
    Only wrap idempotent reads. Writes must surface StoreUnavailable
    immediately so a retried insert cannot duplicate a side effect.

    Args:
        initial_delay: Seconds to wait before the first retry.
        backoff_factor: Multiplier applied to the delay on each retry.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            max_retries = getattr(self, "read_retries", DEFAULT_READ_RETRIES)
            last_exception = None

            for attempt in range(max_retries + 1):
                try:
                    return func(self, *args, **kwargs)
                except StoreUnavailable as e:
                    last_exception = e
                    if attempt == max_retries:
                        break

                    wait_time = initial_delay * (backoff_factor**attempt)
                    logger.warning(
                        f"Store unavailable in {func.__name__} (attempt {attempt + 1}): "
                        f"{e}. Retrying in {wait_time}s..."
                    )
                    time.sleep(wait_time)

            logger.error(
                f"Permanently failed {func.__name__} after {max_retries + 1} attempts."
            )
            raise last_exception

        return wrapper

    return decorator
