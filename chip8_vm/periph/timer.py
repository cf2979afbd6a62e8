"""
CHIP-8 Virtual Machine - Delay / Sound Timers

Two 8-bit down-counters that decrement at 60Hz and stop at zero.

  DT  Delay timer. Programs write it (Fx15) and poll it (Fx07) for timing.
  ST  Sound timer. Written by Fx18; the buzzer sounds while it is nonzero.

The 60Hz cadence is wall-clock driven and independent of instruction
rate: after every instruction the emulator calls update(), which ticks
once if at least TIMER_PERIOD_US has elapsed since the last tick.
"""

import time
from typing import Callable

from ..config import TIMER_PERIOD_US


class TimerPeripheral:
    """Delay + sound timer pair with an elapsed-time tick gate.

    clock is a callable returning monotonic microseconds. Tests pass a
    fake so ticks are deterministic.
    """

    def __init__(self, clock: Callable[[], int] = None,
                 period_us: int = TIMER_PERIOD_US):
        self._clock = clock or (lambda: time.monotonic_ns() // 1000)
        self.period_us = period_us
        self._delay = 0
        self._sound = 0
        self.should_beep = False
        self._last_tick = self._clock()

    # --- Counter access (8-bit) ---

    @property
    def delay(self) -> int:
        return self._delay

    @delay.setter
    def delay(self, value: int):
        self._delay = value & 0xFF

    @property
    def sound(self) -> int:
        return self._sound

    @sound.setter
    def sound(self, value: int):
        self._sound = value & 0xFF

    # --- Ticking ---

    def tick(self):
        """Decrement both timers once, flooring at zero.

        should_beep reflects whether the sound timer was nonzero for
        this tick.
        """
        self.should_beep = self._sound > 0
        if self._delay > 0:
            self._delay -= 1
        if self._sound > 0:
            self._sound -= 1

    def update(self) -> bool:
        """Tick if a full period has elapsed since the last tick.

        Returns True if a tick happened.
        """
        now = self._clock()
        if now - self._last_tick >= self.period_us:
            self.tick()
            self._last_tick = now
            return True
        return False

    def reset(self):
        """Reset timer state."""
        self._delay = 0
        self._sound = 0
        self.should_beep = False
        self._last_tick = self._clock()
