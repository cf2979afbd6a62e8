"""
CHIP-8 Virtual Machine - Peripheral Tests (timers, display, keypad)
"""

import pytest

from chip8_vm.periph.display import Display
from chip8_vm.periph.keypad import Keypad
from chip8_vm.periph.timer import TimerPeripheral


class TestTimer:

    def test_counters_are_8_bit(self, clock):
        timer = TimerPeripheral(clock=clock)
        timer.delay = 0x1FF
        timer.sound = 0x100
        assert timer.delay == 0xFF
        assert timer.sound == 0

    def test_tick_floors_at_zero(self, clock):
        timer = TimerPeripheral(clock=clock)
        timer.delay = 1
        timer.tick()
        timer.tick()
        assert timer.delay == 0
        assert timer.sound == 0
        assert not timer.should_beep

    def test_update_gates_on_period(self, clock):
        timer = TimerPeripheral(clock=clock)
        timer.delay = 10
        assert not timer.update()
        clock.advance(16666)
        assert not timer.update()
        clock.advance(1)
        assert timer.update()
        assert timer.delay == 9
        # The period restarts from the tick
        clock.advance(16666)
        assert not timer.update()

    def test_one_tick_per_update(self, clock):
        """A long stall still yields a single tick per call"""
        timer = TimerPeripheral(clock=clock)
        timer.delay = 10
        clock.advance(16667 * 5)
        assert timer.update()
        assert timer.delay == 9

    def test_beep_follows_sound(self, clock):
        timer = TimerPeripheral(clock=clock)
        timer.sound = 1
        timer.tick()
        assert timer.should_beep
        timer.tick()
        assert not timer.should_beep

    def test_reset(self, clock):
        timer = TimerPeripheral(clock=clock)
        timer.delay = 5
        timer.sound = 5
        timer.tick()
        timer.reset()
        assert (timer.delay, timer.sound, timer.should_beep) == (0, 0, False)


class TestDisplay:

    def test_blank(self):
        d = Display()
        assert len(d.pixels) == 2048
        assert not any(d.pixels)

    def test_set_get_row_major(self):
        d = Display()
        d.set(3, 2, True)
        assert d.pixels[2 * 64 + 3]
        assert d.get(3, 2)

    def test_draw_sprite_xor(self):
        d = Display()
        assert not d.draw_sprite(0, 0, bytes([0xC0]))
        assert d.get(0, 0) and d.get(1, 0)
        assert d.draw_sprite(1, 0, bytes([0x80]))
        assert d.get(0, 0)
        assert not d.get(1, 0)

    def test_draw_sprite_horizontal_wrap(self):
        d = Display()
        d.draw_sprite(60, 0, bytes([0xFF]))
        assert [x for x in range(64) if d.get(x, 0)] == [0, 1, 2, 3, 60, 61, 62, 63]

    def test_clear_keeps_buffer_identity(self):
        d = Display()
        buf = d.pixels
        d.draw_sprite(5, 5, bytes([0xFF]))
        d.clear()
        assert d.pixels is buf
        assert not any(buf)

    def test_reset_keeps_buffer_identity(self):
        d = Display()
        buf = d.pixels
        d.set(1, 1, True)
        d.reset()
        assert d.pixels is buf
        assert not any(buf)

    def test_render_text(self):
        d = Display()
        d.set(0, 0, True)
        d.set(63, 31, True)
        lines = d.render_text().split('\n')
        assert len(lines) == 32
        assert lines[0] == '#' + '.' * 63
        assert lines[31] == '.' * 63 + '#'


class TestKeypad:

    def test_press_release(self):
        kp = Keypad()
        kp.press(0xA)
        assert kp.is_pressed(0xA)
        kp.release(0xA)
        assert not kp.is_pressed(0xA)

    def test_first_pressed(self):
        kp = Keypad()
        assert kp.first_pressed() is None
        kp.press(9)
        kp.press(2)
        assert kp.first_pressed() == 2

    def test_out_of_range(self):
        kp = Keypad()
        with pytest.raises(ValueError):
            kp.press(16)
        with pytest.raises(ValueError):
            kp.release(-1)

    def test_is_pressed_uses_low_nibble(self):
        """Register values above $F select key (value & $F)"""
        kp = Keypad()
        kp.press(1)
        assert kp.is_pressed(0x11)
        assert not kp.is_pressed(0x12)

    def test_keys_is_a_copy(self):
        kp = Keypad()
        kp.keys[0] = True
        assert not kp.is_pressed(0)

    def test_reset(self):
        kp = Keypad()
        kp.press(3)
        kp.reset()
        assert kp.keys == [False] * 16
