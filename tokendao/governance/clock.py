"""
Clock Sources

The DAO never sleeps: every deadline is a comparison against the current
timestamp supplied by a clock. Block height is only consulted by the
block-offset proposal id scheme.
"""

import time
from abc import ABC, abstractmethod
from typing import Optional


class Clock(ABC):
    """Monotonic time and block-height source."""

    @abstractmethod
    def now(self) -> int:
        """Current timestamp in whole seconds."""

    @abstractmethod
    def block_height(self) -> int:
        """Current block height."""


class SystemClock(Clock):
    """
    Wall-clock time; block height is derived from a genesis timestamp and
    a fixed block interval.
    """

    def __init__(self, genesis_time: Optional[int] = None, block_time: int = 12):
        if block_time <= 0:
            raise ValueError("block_time must be positive")
        self.genesis_time = int(time.time()) if genesis_time is None else genesis_time
        self.block_time = block_time
        self._last = 0

    def now(self) -> int:
        # Never report a timestamp older than one already handed out
        self._last = max(self._last, int(time.time()))
        return self._last

    def block_height(self) -> int:
        return max(0, (self.now() - self.genesis_time) // self.block_time)


class ManualClock(Clock):
    """Clock advanced explicitly, for tests and simulations."""

    def __init__(self, start: int = 1_700_000_000, block_height: int = 1):
        self._now = start
        self._height = block_height

    def now(self) -> int:
        return self._now

    def block_height(self) -> int:
        return self._height

    def increase(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("Clock cannot move backwards")
        self._now += seconds
        return self._now

    def increase_to(self, timestamp: int) -> int:
        if timestamp < self._now:
            raise ValueError(f"Clock cannot move backwards ({timestamp} < {self._now})")
        self._now = timestamp
        return self._now

    def mine(self, blocks: int = 1) -> int:
        if blocks < 0:
            raise ValueError("Cannot mine a negative number of blocks")
        self._height += blocks
        return self._height

    def __repr__(self) -> str:
        return f"<ManualClock now={self._now} height={self._height}>"
