from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Protocol

Sleeper = Callable[[float], None]


class DelayPolicy(Protocol):
    def delay(self, attempt: int) -> float:
        """Seconds to wait before the request numbered ``attempt`` (zero based)."""


@dataclass(frozen=True, slots=True)
class NoDelay:
    def delay(self, attempt: int) -> float:
        return 0.0


@dataclass(frozen=True, slots=True)
class FixedDelay:
    seconds: float

    def __post_init__(self) -> None:
        if self.seconds < 0:
            raise ValueError("Delay must not be negative.")

    def delay(self, attempt: int) -> float:
        return self.seconds


def pause(policy: DelayPolicy, attempt: int, sleep: Sleeper = time.sleep) -> float:
    seconds = policy.delay(attempt)
    if seconds > 0:
        sleep(seconds)
    return seconds
