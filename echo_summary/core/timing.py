"""
Stage timing for debugging.

Functions decorated with @timer print their execution time when the
ECHO_DEBUG environment variable is set to "1" at call time, so the CLI's
--debug flag turns timing on as well.
"""

import functools
import os
import time
from typing import Callable, ParamSpec, TypeVar

P = ParamSpec("P")
R = TypeVar("R")


def timing_enabled() -> bool:
    return os.getenv("ECHO_DEBUG") == "1"


def timer(func: Callable[P, R]) -> Callable[P, R]:
    """
    Decorator that prints execution time when ECHO_DEBUG=1.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        if not timing_enabled():
            return func(*args, **kwargs)
        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            print(f"[ECHO_DEBUG] {func.__name__}: {elapsed_ms:.2f}ms")

    return wrapper
