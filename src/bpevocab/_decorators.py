"""Reusable decorators for vocabulary loading."""

import functools
import logging
import time
from typing import Callable

log = logging.getLogger(__name__)


def log_elapsed(label: str) -> Callable[[Callable], Callable]:
    """Log execution time of the wrapped callable under ``label``."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            # log elapsed time even if the wrapped call raises
            finally:
                elapsed = time.perf_counter() - start
                log.debug(f"{label} took {elapsed * 1000:.2f} ms")

        return wrapper

    return decorator
