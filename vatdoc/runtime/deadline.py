"""Hard deadlines for blocking calls."""

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TypeVar

T = TypeVar("T")


class DeadlineExceededError(Exception):
    """Raised when a call does not finish before its deadline."""


def run_with_deadline(
    func: Callable[[], T],
    timeout_seconds: float,
    *,
    name: str = "deadline",
) -> T:
    """Run ``func`` in a worker thread and wait at most ``timeout_seconds``.

    On expiry the worker is abandoned, not killed: its eventual result is
    discarded and the caller gets DeadlineExceededError immediately.
    Exceptions raised by ``func`` propagate unchanged.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
    future = executor.submit(func)
    try:
        return future.result(timeout=timeout_seconds)
    except FutureTimeoutError as exc:
        if future.done():
            raise
        future.cancel()
        raise DeadlineExceededError(
            f"{name} exceeded {timeout_seconds:g}s deadline"
        ) from exc
    finally:
        executor.shutdown(wait=False)
