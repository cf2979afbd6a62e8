"""
CHIP-8 Virtual Machine - Main Emulator Class

This is the top-level class that integrates:
  - CPU registers (regs.py)
  - 4K memory + font (memory.py)
  - Opcode fetch/decode (decoder.py)
  - ALU operations (alu.py)
  - Peripherals: timers, display, keypad

Execution model (one call to step()):
  1. Fetch the opcode word at PC
  2. Advance PC by 2
  3. Decode into an Instruction (UnknownOpcode if no pattern matches)
  4. Execute the handler -> update registers, memory, display
  5. Let the timers tick if a 60Hz period has elapsed; on a tick, flag
     the display for redraw and latch the beep state

The host calls step() at its own cadence and polls display_updated and
should_beep afterwards. Nothing here sleeps or blocks.

LD Vx, K (Fx0A) waits for a key by rewinding PC when no key is down, so
the same instruction is decoded again on the next step. awaiting_key
reports the target register while that is happening.

Termination reasons for run():
  - TIMEOUT:  max_steps executed
  - BREAK:    breakpoint address hit
  - ILLEGAL:  undefined opcode
  - STACK:    call stack overflow or underflow
  - MEMORY:   access outside $000-$FFF
"""

import logging
import random
from collections import deque
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Set

from .config import TRACE_BUFFER_SIZE
from .cpu.regs import Registers
from .cpu.decoder import Instruction, decode, fetch
from .cpu import alu
from .errors import (
    Chip8Error, MemoryAccessError, StackOverflow, StackUnderflow, UnknownOpcode,
)
from .mem.memory import Memory, font_address
from .periph.display import Display
from .periph.keypad import Keypad
from .periph.timer import TimerPeripheral

log = logging.getLogger(__name__)


class StopReason(Enum):
    TIMEOUT = 'TIMEOUT'
    BREAK = 'BREAK'
    ILLEGAL = 'ILLEGAL'
    STACK = 'STACK'
    MEMORY = 'MEMORY'


class Chip8Emulator:
    """CHIP-8 virtual machine.

    Usage:
        emu = Chip8Emulator()
        emu.load_rom('roms/PONG')
        while running:
            emu.step()
            if emu.consume_frame():
                renderer.draw(emu.display)
            audio.set_beep(emu.should_beep)
    """

    DEFAULT_MAX_STEPS = 10_000_000

    def __init__(self, seed: Optional[int] = None,
                 clock: Optional[Callable[[], int]] = None):
        # Core components
        self.regs = Registers()
        self.mem = Memory()

        # Peripherals
        self.timer = TimerPeripheral(clock=clock)
        self.screen = Display()
        self.keypad = Keypad()

        self.rng = random.Random(seed)

        # Host-facing flags
        self.display_updated = False
        self.should_beep = False
        self.awaiting_key: Optional[int] = None

        # Breakpoints: set of PC addresses that trigger BREAK in run()
        self._breakpoints: Set[int] = set()
        self.last_error: Optional[Chip8Error] = None
        self.steps = 0

        # Trace output: the most recent TRACE_BUFFER_SIZE lines only
        self._trace = False
        self._trace_output = deque(maxlen=TRACE_BUFFER_SIZE)

        # Instruction dispatch table (built in _build_dispatch)
        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def load_rom(self, path_or_data):
        """Load a ROM image from a file path or bytes at $200.

        Raises RomTooLarge if it does not fit. Registers are left at
        their current values (power-on values after construction).
        """
        if isinstance(path_or_data, (str, Path)):
            data = Path(path_or_data).read_bytes()
            source = str(path_or_data)
        else:
            data = bytes(path_or_data)
            source = '<bytes>'
        self.mem.load_rom(data)
        log.info("Loaded ROM %s (%d bytes)", source, len(data))

    def reset(self):
        """Return every component to power-on state. The ROM is cleared too."""
        self.regs.reset()
        self.mem.reset()
        self.timer.reset()
        self.screen.reset()
        self.keypad.reset()
        self.display_updated = False
        self.should_beep = False
        self.awaiting_key = None
        self.last_error = None
        self.steps = 0
        self._trace_output.clear()

    # ══════════════════════════════════════════════
    # Host interface
    # ══════════════════════════════════════════════

    @property
    def display(self) -> List[bool]:
        """2048 booleans, row-major 64x32."""
        return self.screen.pixels

    def press_key(self, key: int):
        self.keypad.press(key)

    def release_key(self, key: int):
        self.keypad.release(key)

    def consume_frame(self) -> bool:
        """Return display_updated and clear it."""
        updated = self.display_updated
        self.display_updated = False
        return updated

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Instruction:
        """Execute one instruction and maybe one timer tick.

        Returns the executed Instruction. Chip8Error subclasses propagate
        to the caller; PC then points past the faulting instruction.
        """
        pc = self.regs.PC
        opcode = fetch(self.mem, pc)
        self.regs.PC = (pc + 2) & 0xFFFF

        ins = decode(opcode, pc)

        if self._trace:
            line = f"${pc:03X}: {ins.opcode:04X} {ins.mnemonic:7s} {self.regs.display()}"
            self._trace_output.append(line)
            log.debug(line)

        self._dispatch[ins.mnemonic](ins)
        self.steps += 1

        if self.timer.update():
            self.display_updated = True
            self.should_beep = self.timer.should_beep

        return ins

    def run(self, max_steps: int = None) -> StopReason:
        """Step until a breakpoint, an error, or max_steps.

        Errors are kept on last_error and turned into a StopReason so the
        host can report them and exit cleanly.
        """
        if max_steps is None:
            max_steps = self.DEFAULT_MAX_STEPS

        for _ in range(max_steps):
            if self.regs.PC in self._breakpoints:
                log.info("Breakpoint hit at $%03X", self.regs.PC)
                return StopReason.BREAK
            try:
                self.step()
            except UnknownOpcode as e:
                return self._stop(StopReason.ILLEGAL, e)
            except (StackOverflow, StackUnderflow) as e:
                return self._stop(StopReason.STACK, e)
            except MemoryAccessError as e:
                return self._stop(StopReason.MEMORY, e)

        return StopReason.TIMEOUT

    def _stop(self, reason: StopReason, error: Chip8Error) -> StopReason:
        self.last_error = error
        log.error("Execution stopped (%s): %s", reason.value, error)
        return reason

    # --- Breakpoints / trace ---

    def add_breakpoint(self, addr: int):
        self._breakpoints.add(addr & 0xFFFF)

    def remove_breakpoint(self, addr: int):
        self._breakpoints.discard(addr & 0xFFFF)

    def enable_trace(self, enabled: bool = True):
        self._trace = enabled

    @property
    def trace_output(self) -> List[str]:
        """Most recent trace lines, oldest first."""
        return list(self._trace_output)

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(ins). PC already points at the next
    # instruction, so "skip" means one more += 2.

    def _build_dispatch(self) -> dict:
        """Build mnemonic -> handler dispatch table."""
        return {
            # ── Display / flow ──
            'CLS':    self._op_cls,
            'RET':    self._op_ret,
            'JP':     self._op_jp,
            'CALL':   self._op_call,
            'JP_V0':  self._op_jp_v0,

            # ── Conditional skips ──
            'SE_VB':  self._op_se_vb,
            'SNE_VB': self._op_sne_vb,
            'SE_VV':  self._op_se_vv,
            'SNE_VV': self._op_sne_vv,
            'SKP':    self._op_skp,
            'SKNP':   self._op_sknp,

            # ── Loads ──
            'LD_VB':  self._op_ld_vb,
            'LD_VV':  self._op_ld_vv,
            'LD_I':   self._op_ld_i,
            'LD_VDT': self._op_ld_vdt,
            'LD_VK':  self._op_ld_vk,
            'LD_DTV': self._op_ld_dtv,
            'LD_STV': self._op_ld_stv,
            'LD_FV':  self._op_ld_fv,
            'LD_BV':  self._op_ld_bv,
            'LD_IVX': self._op_ld_ivx,
            'LD_VXI': self._op_ld_vxi,

            # ── Arithmetic / logic ──
            'ADD_VB': self._op_add_vb,
            'ADD_VV': self._op_add_vv,
            'ADD_IV': self._op_add_iv,
            'OR':     self._op_or,
            'AND':    self._op_and,
            'XOR':    self._op_xor,
            'SUB':    self._op_sub,
            'SUBN':   self._op_subn,
            'SHR':    self._op_shr,
            'SHL':    self._op_shl,
            'RND':    self._op_rnd,

            # ── Graphics ──
            'DRW':    self._op_drw,
        }

    def _skip_if(self, condition: bool):
        if condition:
            self.regs.PC = (self.regs.PC + 2) & 0xFFFF

    def _set_with_flag(self, x: int, result: tuple):
        """Store (value, flag) from an ALU op. VF is written last."""
        value, flag = result
        self.regs.V[x] = value
        self.regs.VF = flag

    # --- Display / flow ---

    def _op_cls(self, ins: Instruction):
        self.screen.clear()

    def _op_ret(self, ins: Instruction):
        self.regs.PC = self.regs.pop()

    def _op_jp(self, ins: Instruction):
        self.regs.PC = ins.nnn

    def _op_call(self, ins: Instruction):
        self.regs.push(self.regs.PC)
        self.regs.PC = ins.nnn

    def _op_jp_v0(self, ins: Instruction):
        self.regs.PC = (ins.nnn + self.regs.V[0]) & 0xFFFF

    # --- Conditional skips ---

    def _op_se_vb(self, ins: Instruction):
        self._skip_if(self.regs.V[ins.x] == ins.nn)

    def _op_sne_vb(self, ins: Instruction):
        self._skip_if(self.regs.V[ins.x] != ins.nn)

    def _op_se_vv(self, ins: Instruction):
        self._skip_if(self.regs.V[ins.x] == self.regs.V[ins.y])

    def _op_sne_vv(self, ins: Instruction):
        self._skip_if(self.regs.V[ins.x] != self.regs.V[ins.y])

    def _op_skp(self, ins: Instruction):
        self._skip_if(self.keypad.is_pressed(self.regs.V[ins.x]))

    def _op_sknp(self, ins: Instruction):
        self._skip_if(not self.keypad.is_pressed(self.regs.V[ins.x]))

    # --- Loads ---

    def _op_ld_vb(self, ins: Instruction):
        self.regs.V[ins.x] = ins.nn

    def _op_ld_vv(self, ins: Instruction):
        self.regs.V[ins.x] = self.regs.V[ins.y]

    def _op_ld_i(self, ins: Instruction):
        self.regs.I = ins.nnn

    def _op_ld_vdt(self, ins: Instruction):
        self.regs.V[ins.x] = self.timer.delay

    def _op_ld_vk(self, ins: Instruction):
        """Wait for a key: rewind PC until one is down."""
        key = self.keypad.first_pressed()
        if key is None:
            self.regs.PC = (self.regs.PC - 2) & 0xFFFF
            self.awaiting_key = ins.x
            return
        self.regs.V[ins.x] = key
        self.awaiting_key = None

    def _op_ld_dtv(self, ins: Instruction):
        self.timer.delay = self.regs.V[ins.x]

    def _op_ld_stv(self, ins: Instruction):
        self.timer.sound = self.regs.V[ins.x]

    def _op_ld_fv(self, ins: Instruction):
        self.regs.I = font_address(self.regs.V[ins.x])

    def _op_ld_bv(self, ins: Instruction):
        self.mem.write_block(self.regs.I, bytes(alu.bcd(self.regs.V[ins.x])))

    def _op_ld_ivx(self, ins: Instruction):
        """Store V0..Vx at I..I+x. I is unchanged."""
        self.mem.write_block(self.regs.I, bytes(self.regs.V[:ins.x + 1]))

    def _op_ld_vxi(self, ins: Instruction):
        """Load V0..Vx from I..I+x. I is unchanged."""
        self.regs.V[:ins.x + 1] = self.mem.read_block(self.regs.I, ins.x + 1)

    # --- Arithmetic / logic ---

    def _op_add_vb(self, ins: Instruction):
        # No carry flag for the immediate form
        self.regs.V[ins.x] = (self.regs.V[ins.x] + ins.nn) & 0xFF

    def _op_add_vv(self, ins: Instruction):
        self._set_with_flag(ins.x, alu.add8(self.regs.V[ins.x], self.regs.V[ins.y]))

    def _op_add_iv(self, ins: Instruction):
        self.regs.I = (self.regs.I + self.regs.V[ins.x]) & 0xFFFF

    def _op_or(self, ins: Instruction):
        self.regs.V[ins.x] |= self.regs.V[ins.y]

    def _op_and(self, ins: Instruction):
        self.regs.V[ins.x] &= self.regs.V[ins.y]

    def _op_xor(self, ins: Instruction):
        self.regs.V[ins.x] ^= self.regs.V[ins.y]

    def _op_sub(self, ins: Instruction):
        self._set_with_flag(ins.x, alu.sub8(self.regs.V[ins.x], self.regs.V[ins.y]))

    def _op_subn(self, ins: Instruction):
        self._set_with_flag(ins.x, alu.sub8(self.regs.V[ins.y], self.regs.V[ins.x]))

    def _op_shr(self, ins: Instruction):
        self._set_with_flag(ins.x, alu.shr8(self.regs.V[ins.x]))

    def _op_shl(self, ins: Instruction):
        self._set_with_flag(ins.x, alu.shl8(self.regs.V[ins.x]))

    def _op_rnd(self, ins: Instruction):
        self.regs.V[ins.x] = self.rng.getrandbits(8) & ins.nn

    # --- Graphics ---

    def _op_drw(self, ins: Instruction):
        """Draw an n-row sprite from I at (Vx, Vy). VF = collision."""
        x = self.regs.V[ins.x]
        y = self.regs.V[ins.y]
        self.regs.VF = 0
        rows = self.mem.read_block(self.regs.I, ins.n)
        if self.screen.draw_sprite(x, y, rows):
            self.regs.VF = 1
