"""
CHIP-8 Virtual Machine - 4K Memory with Built-in Font

Memory map:
  $000-$1FF  Reserved (interpreter area on the original machines)
  $050-$09F  Hex font sprites 0-F, 5 bytes each, copied in at construction
  $200-$FFF  Program space

Memory is a flat bytearray. There are no I/O registers or write-protected
regions on this machine: the display and keypad live outside the address
space and are reached only through dedicated instructions.

Out-of-range accesses raise MemoryAccessError instead of wrapping, so a
runaway I register shows up as an error rather than silent corruption.
"""

import logging
from typing import Dict

from ..config import MEMORY_SIZE, PROGRAM_START, MAX_ROM_SIZE, FONT_ADDR, FONT_GLYPH_SIZE
from ..errors import MemoryAccessError, RomTooLarge

log = logging.getLogger(__name__)


# 16 glyphs x 5 rows. Each row uses the high nibble only (4 pixels wide).
FONT = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


def font_address(digit: int) -> int:
    """Address of the sprite for hex digit 0-F (only the low nibble is used)."""
    return FONT_ADDR + (digit & 0x0F) * FONT_GLYPH_SIZE


class Memory:
    """4096-byte CHIP-8 address space.

    The font table is preloaded at $050; everything else starts at zero.
    """

    SIZE = MEMORY_SIZE

    def __init__(self):
        self._mem = bytearray(MEMORY_SIZE)
        self._mem[FONT_ADDR:FONT_ADDR + len(FONT)] = FONT

    def __len__(self) -> int:
        return len(self._mem)

    def _check(self, addr: int, length: int = 1, write: bool = False):
        if addr < 0 or addr + length > MEMORY_SIZE:
            bad = addr if addr < 0 or addr >= MEMORY_SIZE else MEMORY_SIZE
            raise MemoryAccessError(bad, write)

    # --- Core read/write ---

    def read8(self, addr: int) -> int:
        self._check(addr)
        return self._mem[addr]

    def write8(self, addr: int, value: int):
        self._check(addr, write=True)
        self._mem[addr] = value & 0xFF

    def read16(self, addr: int) -> int:
        """Read 16-bit value (big-endian, the order opcodes are stored in)."""
        self._check(addr, 2)
        return (self._mem[addr] << 8) | self._mem[addr + 1]

    def write16(self, addr: int, value: int):
        """Write 16-bit value (big-endian)."""
        self._check(addr, 2, write=True)
        self._mem[addr] = (value >> 8) & 0xFF
        self._mem[addr + 1] = value & 0xFF

    def read_block(self, addr: int, length: int) -> bytes:
        self._check(addr, length)
        return bytes(self._mem[addr:addr + length])

    def write_block(self, addr: int, data: bytes):
        self._check(addr, len(data), write=True)
        self._mem[addr:addr + len(data)] = data

    # --- Bulk load ---

    def load_rom(self, data: bytes):
        """Copy a ROM image into program space starting at $200.

        Raises RomTooLarge (and leaves memory untouched) if the image
        does not fit below $1000.
        """
        data = bytes(data)
        if len(data) > MAX_ROM_SIZE:
            raise RomTooLarge(len(data), MAX_ROM_SIZE)
        self._mem[PROGRAM_START:PROGRAM_START + len(data)] = data
        log.debug("Loaded %d bytes at $%03X", len(data), PROGRAM_START)

    def reset(self):
        """Zero all memory and reinstall the font."""
        self._mem[:] = bytes(MEMORY_SIZE)
        self._mem[FONT_ADDR:FONT_ADDR + len(FONT)] = FONT

    # --- Snapshots (diff memory across a run) ---

    def snapshot(self, start: int = 0x000, end: int = MEMORY_SIZE - 1) -> bytes:
        """Copy of memory from start to end inclusive."""
        return bytes(self._mem[start:end + 1])

    def diff_snapshots(self, snap_a: bytes, snap_b: bytes,
                       base_addr: int = 0x000) -> Dict[int, tuple]:
        """Compare two snapshots, return {addr: (old, new)} for changed bytes."""
        changes = {}
        for i in range(min(len(snap_a), len(snap_b))):
            if snap_a[i] != snap_b[i]:
                changes[base_addr + i] = (snap_a[i], snap_b[i])
        return changes

    # --- Hex dump ---

    def hexdump(self, start: int, length: int = 256) -> str:
        """Produce a hex dump of memory for debugging."""
        lines = []
        end = min(start + length, MEMORY_SIZE)
        for addr in range(start, end, 16):
            row = self._mem[addr:min(addr + 16, end)]
            hex_bytes = ' '.join(f'{b:02X}' for b in row)
            ascii_bytes = ''.join(chr(b) if 0x20 <= b < 0x7F else '.' for b in row)
            lines.append(f'{addr:03X}  {hex_bytes:<47}  {ascii_bytes}')
        return '\n'.join(lines)
