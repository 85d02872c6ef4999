"""Unit tests for /src/ai/context.py"""

import threading
from time import monotonic

import pytest

from src.ai.context import SearchContext
from src.core.exceptions import (
    EngineInterruptedError,
    SearchCancelledError,
    SearchTimeoutError,
)


def test_no_deadline() -> None:
    context = SearchContext()
    assert context.deadline is None
    assert context.remaining() is None
    assert not context.is_expired
    assert not context.is_cancelled
    context.check()


def test_cancel() -> None:
    context = SearchContext()
    context.cancel()
    assert context.is_cancelled
    with pytest.raises(SearchCancelledError):
        context.check()
    with pytest.raises(SearchCancelledError):
        context.sleep(0)


def test_expired_deadline() -> None:
    context = SearchContext(deadline=monotonic() - 1)
    assert context.is_expired
    assert context.remaining() == 0.0
    with pytest.raises(SearchTimeoutError):
        context.check()


def test_sleep_stops_at_the_deadline() -> None:
    """Asked to sleep for a minute, gives up after (at most) the remaining 50ms"""
    context = SearchContext.with_timeout(0.05)
    started = monotonic()
    with pytest.raises(SearchTimeoutError):
        context.sleep(60)
    assert monotonic() - started < 5


def test_cancel_from_another_thread_wakes_the_sleeper() -> None:
    context = SearchContext()
    timer = threading.Timer(0.05, context.cancel)
    timer.start()
    started = monotonic()
    try:
        with pytest.raises(SearchCancelledError):
            context.sleep(60)
    finally:
        timer.cancel()
    assert monotonic() - started < 5


def test_both_errors_are_interruptions() -> None:
    assert issubclass(SearchCancelledError, EngineInterruptedError)
    assert issubclass(SearchTimeoutError, EngineInterruptedError)
