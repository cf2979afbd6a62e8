import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from chip8_vm import Chip8Emulator


class FakeClock:
    """Monotonic microsecond clock that only moves when told to."""

    def __init__(self, start: int = 0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, us: int):
        self.now += us


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def emu(clock):
    """Fresh emulator with a frozen timer clock and a fixed RNG seed."""
    return Chip8Emulator(seed=1234, clock=clock)
