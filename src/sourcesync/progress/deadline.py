#
# SPDX-FileCopyrightText: Copyright (c) 2025 provide.io llc. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
#

"""A cancellable deadline shared by the network call and the progress relay."""

from __future__ import annotations

from collections.abc import Callable
import threading
import time

from sourcesync.errors import SyncTimeoutError

MIN_TIMEOUT_MINUTES = 1


def clamp_timeout(timeout_minutes: int | None) -> int:
    """Timeouts below one minute (or missing) become one minute."""
    if timeout_minutes is None or timeout_minutes < MIN_TIMEOUT_MINUTES:
        return MIN_TIMEOUT_MINUTES
    return int(timeout_minutes)


class Deadline:
    """Expires at a fixed monotonic instant, or earlier when cancelled.

    Safe to share between threads: the event loop cancels it, transport
    callbacks and the relay consumer poll it.
    """

    def __init__(
        self,
        seconds: float,
        *,
        timeout_minutes: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._clock = clock
        self._expires_at = clock() + seconds
        self._cancelled = threading.Event()
        self.timeout_minutes = timeout_minutes

    @classmethod
    def from_minutes(cls, timeout_minutes: int | None, **kwargs) -> Deadline:
        minutes = clamp_timeout(timeout_minutes)
        return cls(minutes * 60.0, timeout_minutes=minutes, **kwargs)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.cancelled or self._clock() >= self._expires_at

    def remaining(self) -> float:
        if self.cancelled:
            return 0.0
        return max(0.0, self._expires_at - self._clock())

    def cancel(self) -> None:
        self._cancelled.set()

    def check(self) -> None:
        """Raise :class:`SyncTimeoutError` once the deadline has passed."""
        if self.expired:
            raise SyncTimeoutError(self.timeout_minutes)


# 🔼⚙️🔚
