"""
CHIP-8 Virtual Machine - Host Loop Tests

HostLoop is exercised with fake drivers and a fake clock/sleep pair so
no window or audio device is needed.
"""

import pytest

from chip8_vm import StopReason
from chip8_vm.host.keymap import QWERTY_KEYMAP, key_for_name
from chip8_vm.host.loop import HostLoop


class FakeDisplay:
    def __init__(self):
        self.frames = []

    def draw(self, pixels):
        self.frames.append(list(pixels))


class FakeKeypad:
    """Replays a script of per-poll actions: None, ('press', k), ('release', k) or 'quit'."""

    def __init__(self, script=()):
        self.script = list(script)
        self.polls = 0

    def poll(self, emu) -> bool:
        self.polls += 1
        if not self.script:
            return True
        action = self.script.pop(0)
        if action == 'quit':
            return False
        if action is not None:
            kind, key = action
            if kind == 'press':
                emu.press_key(key)
            else:
                emu.release_key(key)
        return True


class FakeAudio:
    def __init__(self):
        self.calls = []

    def set_beep(self, on):
        self.calls.append(on)


class FakeTime:
    """perf_counter/sleep pair where sleeping advances the clock."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def clock(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def _words(*words):
    data = bytearray()
    for w in words:
        data += bytes([w >> 8, w & 0xFF])
    return bytes(data)


def _loop(emu, keypad=None, audio=None, cpu_hz=500, t=None):
    t = t or FakeTime()
    display = FakeDisplay()
    loop = HostLoop(emu, display, keypad or FakeKeypad(), audio,
                    cpu_hz=cpu_hz, clock=t.clock, sleep=t.sleep)
    return loop, display, t


class TestHostLoop:

    def test_rejects_nonpositive_rate(self, emu):
        with pytest.raises(ValueError):
            HostLoop(emu, FakeDisplay(), FakeKeypad(), cpu_hz=0)

    def test_max_steps(self, emu):
        emu.load_rom(_words(0x1200))
        loop, _, _ = _loop(emu)
        assert loop.run(max_steps=10) is StopReason.TIMEOUT
        assert emu.steps == 10

    def test_quit_returns_none(self, emu):
        emu.load_rom(_words(0x1200))
        loop, _, _ = _loop(emu, keypad=FakeKeypad([None, None, 'quit']))
        assert loop.run(max_steps=100) is None
        assert emu.steps == 2

    def test_error_stops_loop(self, emu):
        emu.load_rom(_words(0x6001, 0x00FF))
        loop, _, _ = _loop(emu)
        assert loop.run(max_steps=100) is StopReason.ILLEGAL
        assert emu.regs.V[0] == 1

    def test_paces_with_sleep(self, emu):
        emu.load_rom(_words(0x1200))
        loop, _, t = _loop(emu, cpu_hz=500)
        loop.run(max_steps=4)
        assert len(t.sleeps) == 4
        assert all(s == pytest.approx(0.002) for s in t.sleeps)

    def test_draws_on_timer_tick(self, emu, clock):
        emu.load_rom(_words(0x1200))
        loop, display, _ = _loop(emu)
        clock.advance(16667)
        loop.run(max_steps=3)
        assert len(display.frames) == 1
        assert len(display.frames[0]) == 2048

    def test_beeper_follows_sound_timer(self, emu, clock):
        emu.load_rom(_words(0x1200))
        emu.timer.sound = 1
        audio = FakeAudio()
        loop, _, _ = _loop(emu, audio=audio)
        clock.advance(16667)
        loop.run(max_steps=2)
        # on after the tick, then forced off when the loop exits
        assert audio.calls == [True, True, False]

    def test_key_press_releases_key_wait(self, emu):
        emu.load_rom(_words(0xF50A, 0x1202))
        keypad = FakeKeypad([None, None, ('press', 0xE)])
        loop, _, _ = _loop(emu, keypad=keypad)
        loop.run(max_steps=3)
        assert emu.regs.V[5] == 0xE
        assert emu.regs.PC == 0x202


class TestKeymap:

    def test_layout(self):
        assert key_for_name('1') == 0x1
        assert key_for_name('4') == 0xC
        assert key_for_name('q') == 0x4
        assert key_for_name('x') == 0x0
        assert key_for_name('v') == 0xF

    def test_case_insensitive(self):
        assert key_for_name('Q') == 0x4

    def test_unmapped(self):
        assert key_for_name('p') is None

    def test_covers_all_keys(self):
        assert sorted(QWERTY_KEYMAP.values()) == list(range(16))

    def test_custom_keymap(self):
        assert key_for_name('k', {'k': 0x7}) == 0x7
