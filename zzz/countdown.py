"""The countdown loop.

The loop keeps a local counter of seconds left, decremented once per tick,
and every ``skew_check`` seconds recomputes it from the deadline frozen
before the loop started.
"""

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import structlog

from .config import DEFAULT_FREQ, DEFAULT_SKEW_CHECK
from .ui import StatusLine

log = structlog.get_logger(__name__)


@dataclass
class LoopState:
    duration: int
    remaining: int
    until_check: int
    total_skew: int = 0
    resyncs: int = 0

    @property
    def elapsed(self) -> int:
        return self.duration - self.remaining


class Countdown:
    def __init__(
        self,
        duration: int,
        deadline: float,
        freq: int = DEFAULT_FREQ,
        skew_check: int = DEFAULT_SKEW_CHECK,
        status: Optional[StatusLine] = None,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if duration < 0:
            raise ValueError("duration must not be negative")
        if freq < 1:
            raise ValueError("freq must be at least one second")
        if skew_check < 1:
            raise ValueError("skew_check must be at least one second")
        self.deadline = deadline
        self.freq = freq
        self.skew_check = skew_check
        self.status = status
        self.state = LoopState(duration=duration, remaining=duration, until_check=skew_check)
        self._sleep = sleep or time.sleep
        self._clock = clock or time.time

    @property
    def finished(self) -> bool:
        return self.state.remaining < self.freq

    def resync(self) -> int:
        """Pull the counter back in line with the deadline.

        Returns the number of seconds removed from the counter. The
        counter is never raised, so the display never runs backwards.
        """
        state = self.state
        actual = max(0, int(round(self.deadline - self._clock())))
        corrected = min(state.remaining, actual)
        correction = state.remaining - corrected
        state.remaining = corrected
        state.total_skew += correction
        state.resyncs += 1
        state.until_check = self.skew_check
        if correction > 0:
            log.debug("skew corrected", correction=correction, remaining=corrected, at=datetime.now().isoformat())
        return correction

    def step(self) -> None:
        state = self.state
        if self.status is not None:
            self.status.draw(state.duration, state.remaining)
        self._sleep(self.freq)
        state.remaining -= self.freq
        state.until_check -= self.freq
        if state.until_check <= 0:
            self.resync()

    def run(self) -> LoopState:
        while not self.finished:
            self.step()

        # whatever is left is less than one tick
        self._sleep(self.state.remaining)
        self.state.remaining = 0
        if self.status is not None:
            self.status.clear()

        log.debug(
            "countdown finished",
            total_skew=self.state.total_skew,
            duration=self.state.duration,
            resyncs=self.state.resyncs,
            expected_finish=datetime.fromtimestamp(self.deadline).isoformat(),
            actual_finish=datetime.fromtimestamp(self._clock()).isoformat(),
        )
        return self.state
