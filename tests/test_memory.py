"""
CHIP-8 Virtual Machine - Memory Tests

Font placement, ROM loading limits, bounds checking and the debug
helpers (snapshot diff, hexdump).
"""

import pytest

from chip8_vm.config import MAX_ROM_SIZE, MEMORY_SIZE
from chip8_vm.errors import MemoryAccessError, RomTooLarge
from chip8_vm.mem.memory import FONT, Memory, font_address


class TestFont:

    def test_font_is_80_bytes(self):
        assert len(FONT) == 80

    def test_font_loaded_at_050(self):
        mem = Memory()
        assert mem.read_block(0x050, 80) == FONT

    def test_font_address(self):
        assert font_address(0x0) == 0x050
        assert font_address(0xA) == 0x050 + 50
        assert font_address(0xF) == 0x09B

    def test_font_address_uses_low_nibble(self):
        assert font_address(0x1A) == font_address(0xA)


class TestRomLoading:

    def test_load_at_200(self):
        mem = Memory()
        mem.load_rom(bytes([1, 2, 3, 4]))
        assert mem.read_block(0x200, 4) == bytes([1, 2, 3, 4])
        assert mem.read8(0x204) == 0

    def test_largest_rom_fits(self):
        mem = Memory()
        mem.load_rom(bytes([0xAB]) * MAX_ROM_SIZE)
        assert mem.read8(0x200) == 0xAB
        assert mem.read8(0xFFF) == 0xAB

    def test_rom_too_large(self):
        mem = Memory()
        before = mem.snapshot()
        with pytest.raises(RomTooLarge) as exc:
            mem.load_rom(bytes([0xAB]) * (MAX_ROM_SIZE + 1))
        assert exc.value.size == 3585
        assert exc.value.limit == 3584
        assert mem.snapshot() == before

    def test_reset_keeps_font(self):
        mem = Memory()
        mem.load_rom(bytes([0xFF]) * 16)
        mem.write8(0x050, 0x00)
        mem.reset()
        assert mem.read8(0x200) == 0
        assert mem.read_block(0x050, 80) == FONT


class TestAccess:

    def test_write8_masks(self):
        mem = Memory()
        mem.write8(0x300, 0x1FF)
        assert mem.read8(0x300) == 0xFF

    def test_read16_big_endian(self):
        mem = Memory()
        mem.write_block(0x300, bytes([0x12, 0x34]))
        assert mem.read16(0x300) == 0x1234

    def test_write16(self):
        mem = Memory()
        mem.write16(0x300, 0xBEEF)
        assert mem.read8(0x300) == 0xBE
        assert mem.read8(0x301) == 0xEF

    def test_last_byte_accessible(self):
        mem = Memory()
        mem.write8(MEMORY_SIZE - 1, 0x42)
        assert mem.read8(0xFFF) == 0x42

    def test_read_out_of_range(self):
        mem = Memory()
        with pytest.raises(MemoryAccessError) as exc:
            mem.read8(0x1000)
        assert exc.value.address == 0x1000
        assert not exc.value.write

    def test_block_write_past_end(self):
        mem = Memory()
        with pytest.raises(MemoryAccessError) as exc:
            mem.write_block(0xFFE, bytes(3))
        assert exc.value.write
        assert mem.read8(0xFFE) == 0

    def test_negative_address(self):
        mem = Memory()
        with pytest.raises(MemoryAccessError):
            mem.read8(-1)

    def test_len(self):
        assert len(Memory()) == 4096


class TestDebugHelpers:

    def test_diff_snapshots(self):
        mem = Memory()
        a = mem.snapshot(0x200, 0x20F)
        mem.write8(0x205, 0x99)
        b = mem.snapshot(0x200, 0x20F)
        assert mem.diff_snapshots(a, b, base_addr=0x200) == {0x205: (0x00, 0x99)}

    def test_hexdump(self):
        mem = Memory()
        mem.load_rom(b"AB\x00\x01")
        lines = mem.hexdump(0x200, 32).split('\n')
        assert len(lines) == 2
        assert lines[0].startswith("200  41 42 00 01 00")
        assert lines[0].endswith("AB..............")
        assert lines[1].startswith("210  ")

    def test_hexdump_stops_at_end(self):
        mem = Memory()
        lines = mem.hexdump(0xFF0, 256).split('\n')
        assert len(lines) == 1
        assert lines[0].startswith("FF0")
