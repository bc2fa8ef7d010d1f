import threading
import time
from concurrent.futures import TimeoutError as FutureTimeoutError

import pytest

from vatdoc.runtime.deadline import DeadlineExceededError, run_with_deadline


class TestRunWithDeadline:
    def test_returns_result(self) -> None:
        assert run_with_deadline(lambda: 42, 1) == 42

    def test_propagates_exceptions_unchanged(self) -> None:
        def boom() -> None:
            raise KeyError("missing")

        with pytest.raises(KeyError, match="missing"):
            run_with_deadline(boom, 1)

    def test_raises_on_expiry_without_waiting_for_worker(self) -> None:
        release = threading.Event()
        started = time.monotonic()
        try:
            with pytest.raises(DeadlineExceededError, match="slow-call exceeded 0.1s"):
                run_with_deadline(lambda: release.wait(5), 0.1, name="slow-call")
        finally:
            release.set()
        assert time.monotonic() - started < 1

    def test_timeout_raised_by_the_call_is_not_a_deadline(self) -> None:
        def times_out() -> None:
            raise FutureTimeoutError("socket timeout")

        with pytest.raises(FutureTimeoutError) as exc_info:
            run_with_deadline(times_out, 1)
        assert not isinstance(exc_info.value, DeadlineExceededError)
