"""
Cancellation signal + optional deadline shared between the caller and a move-selection engine.

The engines only call `check()` (between units of work) and `sleep()` (artificial thinking time):
both raise as soon as the caller cancelled or the deadline passed.
"""

from __future__ import annotations

import threading
from time import monotonic
from typing import Optional

from src.core.exceptions import SearchCancelledError, SearchTimeoutError


class SearchContext:
    def __init__(self, deadline: Optional[float] = None) -> None:
        """`deadline` is a time.monotonic() timestamp. None: no time limit."""
        self._cancelled = threading.Event()
        self._deadline = deadline

    @classmethod
    def with_timeout(cls, seconds: float) -> SearchContext:
        return cls(deadline=monotonic() + seconds)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def is_expired(self) -> bool:
        return self._deadline is not None and monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline (never negative), None without a deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - monotonic())

    def cancel(self) -> None:
        """Can be called from any thread."""
        self._cancelled.set()

    def check(self) -> None:
        if self.is_cancelled:
            raise SearchCancelledError("Move search was cancelled")
        if self.is_expired:
            raise SearchTimeoutError("Move search ran out of time")

    def sleep(self, seconds: float) -> None:
        """
        Wait for `seconds`, but wake up as soon as the search gets cancelled or the deadline passes.
        Raises in both of those cases.
        """
        self.check()
        wait = max(0.0, seconds)
        remaining = self.remaining()
        if remaining is not None:
            wait = min(wait, remaining)

        if self._cancelled.wait(wait):
            raise SearchCancelledError("Move search was cancelled")
        self.check()
