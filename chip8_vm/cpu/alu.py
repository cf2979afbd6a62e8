"""
CHIP-8 Virtual Machine - ALU Operations

Each flag-producing operation returns a tuple (result_byte, vf). The
caller stores the result in Vx first and then writes VF, so when x == F
the flag wins.

Flag conventions (canonical CHIP-8):
  ADD   VF = 1 if the 9-bit sum exceeds 255
  SUB   VF = 1 if Vx > Vy before the subtraction (no borrow)
  SUBN  VF = 1 if Vy > Vx before the subtraction (no borrow)
  SHR   VF = bit 0 of Vx before the shift
  SHL   VF = bit 7 of Vx before the shift

SHR/SHL shift Vx in place; Vy is ignored.
"""


def add8(a: int, b: int) -> tuple:
    """Add two bytes, wrapping. VF = carry out of bit 7."""
    result = a + b
    return (result & 0xFF, 1 if result > 0xFF else 0)


def sub8(a: int, b: int) -> tuple:
    """a - b, wrapping. VF = 1 when a > b."""
    return ((a - b) & 0xFF, 1 if a > b else 0)


def shr8(a: int) -> tuple:
    """Logical shift right. VF = bit shifted out of bit 0."""
    return ((a >> 1) & 0xFF, a & 0x01)


def shl8(a: int) -> tuple:
    """Shift left, dropping bit 7. VF = bit shifted out of bit 7."""
    return ((a << 1) & 0xFF, (a >> 7) & 0x01)


def bcd(value: int) -> tuple:
    """Split a byte into (hundreds, tens, units)."""
    value &= 0xFF
    return (value // 100, (value // 10) % 10, value % 10)
