"""
CHIP-8 Virtual Machine
======================
An interpreter for the canonical CHIP-8 instruction set: 4K memory,
V0-VF, I, a 16-level call stack, 60Hz delay/sound timers, a 64x32
monochrome display and a 16-key hex keypad.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌──────────┐    ┌────────────────┐
    │ ROM      │───>│  Memory  │───>│ Decoder  │───>│ Chip8Emulator  │
    │ (bytes)  │    │ ($200+)  │    │ (Instr.) │    │ (step / run)   │
    └──────────┘    └──────────┘    └──────────┘    └────────────────┘
                                                       │   │   │
                                         timers ◄──────┘   │   └──► display
                                                        keypad

    - mem/memory.py:     4K bytearray, font table, ROM loading
    - cpu/regs.py:       V0-VF, I, PC, call stack
    - cpu/decoder.py:    opcode word -> Instruction (mnemonic + fields)
    - cpu/alu.py:        flag-producing 8-bit arithmetic
    - periph/:           timers, display, keypad
    - emu.py:            fetch/decode/execute loop and opcode handlers
    - host/:             pygame window, keyboard, beeper and host loop

The core never imports host/ and never sleeps: the host decides how often
to call step().
"""

__version__ = "0.1.0"

from .errors import (
    Chip8Error, RomTooLarge, UnknownOpcode, StackOverflow, StackUnderflow,
    MemoryAccessError,
)
from .cpu.decoder import Instruction, decode, fetch
from .emu import Chip8Emulator, StopReason
