"""
Fixed-cadence host loop.

Calls emu.step() cpu_hz times per second, polls input before each step,
redraws when the emulator reports a new frame and switches the beeper
with should_beep. Timer ticks are the emulator's business; this loop
only paces instructions.

Drivers are duck-typed (see pygame_drivers.py). Tests inject fakes plus
fake clock/sleep functions.
"""

import logging
import time
from typing import Callable, Optional

from ..config import DEFAULT_CPU_HZ
from ..emu import Chip8Emulator, StopReason

log = logging.getLogger(__name__)


class HostLoop:
    """Drive a Chip8Emulator from a window, keyboard and beeper."""

    def __init__(self, emu: Chip8Emulator, display, keypad, audio=None,
                 cpu_hz: int = DEFAULT_CPU_HZ,
                 clock: Callable[[], float] = time.perf_counter,
                 sleep: Callable[[float], None] = time.sleep):
        if cpu_hz <= 0:
            raise ValueError(f"cpu_hz must be positive, got {cpu_hz}")
        self.emu = emu
        self.display = display
        self.keypad = keypad
        self.audio = audio
        self.cpu_hz = cpu_hz
        self._clock = clock
        self._sleep = sleep

    def run(self, max_steps: Optional[int] = None) -> Optional[StopReason]:
        """Run until quit, an emulator stop condition or max_steps.

        Returns None when the user quit, otherwise the StopReason.
        """
        period = 1.0 / self.cpu_hz
        next_step = self._clock()
        steps = 0
        try:
            while max_steps is None or steps < max_steps:
                if not self.keypad.poll(self.emu):
                    log.info("Quit requested after %d steps", steps)
                    return None

                reason = self.emu.run(max_steps=1)
                if reason is not StopReason.TIMEOUT:
                    return reason
                steps += 1

                if self.emu.consume_frame():
                    self.display.draw(self.emu.display)
                if self.audio is not None:
                    self.audio.set_beep(self.emu.should_beep)

                next_step += period
                delay = next_step - self._clock()
                if delay > 0:
                    self._sleep(delay)
                elif delay < -0.25:
                    # Far behind (debugger pause, window drag): resync
                    next_step = self._clock()
            return StopReason.TIMEOUT
        finally:
            if self.audio is not None:
                self.audio.set_beep(False)
