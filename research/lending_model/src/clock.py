"""Block time source"""
import time
from typing import Optional


class Clock:
    """Timestamp in seconds, advanced explicitly so runs are deterministic"""

    def __init__(self, now: Optional[int] = None):
        self._now = int(time.time()) if now is None else now

    @property
    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("Clock cannot move backwards")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> None:
        if timestamp < self._now:
            raise ValueError("Clock cannot move backwards")
        self._now = timestamp
