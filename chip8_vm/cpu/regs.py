"""
CHIP-8 Virtual Machine - CPU Register Set + Call Stack

Register model:
  V0-VF  16 x 8-bit general purpose registers
         VF doubles as the flag register (carry, borrow, shifted-out bit,
         sprite collision) and is overwritten by any instruction that
         produces a flag.
  I      16-bit index register (memory address for DRW, BCD, block ld/st)
  PC     16-bit program counter, starts at $200
  SP     Stack pointer, counts live frames (0-16)
  stack  16 return addresses

Stack discipline: SP is incremented before the write on CALL and
decremented after the read on RET. Overflow and underflow raise instead
of corrupting state.
"""

from ..config import NUM_REGISTERS, STACK_DEPTH, PROGRAM_START, FLAG_REGISTER
from ..errors import StackOverflow, StackUnderflow


class Registers:
    """CHIP-8 register file."""

    __slots__ = ('V', 'I', 'PC', 'SP', 'stack')

    def __init__(self):
        self.V = bytearray(NUM_REGISTERS)   # bytearray enforces 0-255
        self.I: int = 0
        self.PC: int = PROGRAM_START
        self.SP: int = 0
        self.stack = [0] * STACK_DEPTH

    # --- VF flag access ---

    @property
    def VF(self) -> int:
        return self.V[FLAG_REGISTER]

    @VF.setter
    def VF(self, value: int):
        self.V[FLAG_REGISTER] = value & 0xFF

    # --- Stack operations ---

    def push(self, addr: int):
        """Push a return address. Raises StackOverflow at 16 live frames."""
        if self.SP >= STACK_DEPTH:
            raise StackOverflow(self.PC)
        self.SP += 1
        self.stack[self.SP - 1] = addr & 0xFFFF

    def pop(self) -> int:
        """Pop a return address. Raises StackUnderflow on an empty stack."""
        if self.SP <= 0:
            raise StackUnderflow(self.PC)
        addr = self.stack[self.SP - 1]
        self.SP -= 1
        return addr

    # --- Display ---

    def display(self) -> str:
        """Format register state for trace output."""
        v = ' '.join(f'{r:02X}' for r in self.V)
        return (f"PC={self.PC:03X} I={self.I:03X} SP={self.SP:X} "
                f"V=[{v}]")

    def reset(self):
        """Reset to power-on state."""
        self.V[:] = bytes(NUM_REGISTERS)
        self.I = 0
        self.PC = PROGRAM_START
        self.SP = 0
        self.stack = [0] * STACK_DEPTH
