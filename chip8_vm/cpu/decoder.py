"""
CHIP-8 Virtual Machine - Opcode Fetch / Decode

Every instruction is one 16-bit big-endian word split into nibbles:

    op   bits 15-12   instruction family
    x    bits 11-8    register index
    y    bits  7-4    register index
    n    bits  3-0    4-bit immediate (sprite height, sub-op)
    nn   bits  7-0    8-bit immediate
    nnn  bits 11-0    12-bit address

Families 0x0, 0x5, 0x8, 0x9, 0xE and 0xF overload the leading nibble and
are told apart by the low nibble or low byte. The table below is matched
as (mask, pattern) pairs; anything that falls through is UnknownOpcode.

Mnemonics follow Cowgod's technical reference, with an operand-kind
suffix where one mnemonic covers several encodings (LD_VB = LD Vx, byte).
"""

from dataclasses import dataclass

from ..errors import UnknownOpcode


# ──────────────────────────────────────────────
# Opcode table
# ──────────────────────────────────────────────
# Format: (mask, pattern, mnemonic)
# Ordered so exact matches (00E0, 00EE) come before wider ones.

OPCODES = [
    (0xFFFF, 0x00E0, 'CLS'),      # clear display
    (0xFFFF, 0x00EE, 'RET'),      # return from subroutine
    (0xF000, 0x1000, 'JP'),       # JP nnn
    (0xF000, 0x2000, 'CALL'),     # CALL nnn
    (0xF000, 0x3000, 'SE_VB'),    # SE Vx, nn
    (0xF000, 0x4000, 'SNE_VB'),   # SNE Vx, nn
    (0xF00F, 0x5000, 'SE_VV'),    # SE Vx, Vy
    (0xF000, 0x6000, 'LD_VB'),    # LD Vx, nn
    (0xF000, 0x7000, 'ADD_VB'),   # ADD Vx, nn
    (0xF00F, 0x8000, 'LD_VV'),    # LD Vx, Vy
    (0xF00F, 0x8001, 'OR'),       # OR Vx, Vy
    (0xF00F, 0x8002, 'AND'),      # AND Vx, Vy
    (0xF00F, 0x8003, 'XOR'),      # XOR Vx, Vy
    (0xF00F, 0x8004, 'ADD_VV'),   # ADD Vx, Vy   (VF = carry)
    (0xF00F, 0x8005, 'SUB'),      # SUB Vx, Vy   (VF = no borrow)
    (0xF00F, 0x8006, 'SHR'),      # SHR Vx       (VF = bit 0)
    (0xF00F, 0x8007, 'SUBN'),     # SUBN Vx, Vy  (VF = no borrow)
    (0xF00F, 0x800E, 'SHL'),      # SHL Vx       (VF = bit 7)
    (0xF00F, 0x9000, 'SNE_VV'),   # SNE Vx, Vy
    (0xF000, 0xA000, 'LD_I'),     # LD I, nnn
    (0xF000, 0xB000, 'JP_V0'),    # JP V0, nnn
    (0xF000, 0xC000, 'RND'),      # RND Vx, nn
    (0xF000, 0xD000, 'DRW'),      # DRW Vx, Vy, n
    (0xF0FF, 0xE09E, 'SKP'),      # SKP Vx
    (0xF0FF, 0xE0A1, 'SKNP'),     # SKNP Vx
    (0xF0FF, 0xF007, 'LD_VDT'),   # LD Vx, DT
    (0xF0FF, 0xF00A, 'LD_VK'),    # LD Vx, K     (wait for key)
    (0xF0FF, 0xF015, 'LD_DTV'),   # LD DT, Vx
    (0xF0FF, 0xF018, 'LD_STV'),   # LD ST, Vx
    (0xF0FF, 0xF01E, 'ADD_IV'),   # ADD I, Vx
    (0xF0FF, 0xF029, 'LD_FV'),    # LD F, Vx     (font sprite address)
    (0xF0FF, 0xF033, 'LD_BV'),    # LD B, Vx     (BCD)
    (0xF0FF, 0xF055, 'LD_IVX'),   # LD [I], Vx
    (0xF0FF, 0xF065, 'LD_VXI'),   # LD Vx, [I]
]

MNEMONICS = frozenset(mnem for _, _, mnem in OPCODES)

# Per-family lookup so decode only scans the handful of patterns that
# share a leading nibble.
_BY_FAMILY = {}
for _mask, _pattern, _mnem in OPCODES:
    _BY_FAMILY.setdefault(_pattern >> 12, []).append((_mask, _pattern, _mnem))


@dataclass(frozen=True)
class Instruction:
    """A decoded opcode with all of its fields extracted."""
    opcode: int
    mnemonic: str
    op: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    def __str__(self) -> str:
        return f"{self.opcode:04X} {self.mnemonic}"


def fetch(memory, pc: int) -> int:
    """Read the big-endian opcode word at pc. Does not advance pc."""
    return (memory.read8(pc) << 8) | memory.read8(pc + 1)


def decode(opcode: int, pc: int = None) -> Instruction:
    """Decode a 16-bit opcode into an Instruction.

    Raises UnknownOpcode if no pattern matches (e.g. $00FF, $5xy1).
    """
    opcode &= 0xFFFF
    op = opcode >> 12
    for mask, pattern, mnem in _BY_FAMILY.get(op, ()):
        if opcode & mask == pattern:
            return Instruction(
                opcode=opcode,
                mnemonic=mnem,
                op=op,
                x=(opcode >> 8) & 0xF,
                y=(opcode >> 4) & 0xF,
                n=opcode & 0xF,
                nn=opcode & 0xFF,
                nnn=opcode & 0xFFF,
            )
    raise UnknownOpcode(opcode, pc)
