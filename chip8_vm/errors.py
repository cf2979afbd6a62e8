"""
CHIP-8 Virtual Machine - Error Types

Every failure the core can report derives from Chip8Error so a host can
catch one type, print a diagnostic and exit cleanly.
"""


class Chip8Error(Exception):
    """Base class for all virtual machine errors."""


class RomTooLarge(Chip8Error):
    """Raised when a ROM does not fit between 0x200 and the end of memory."""
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"ROM is {size} bytes, maximum is {limit} bytes")


class UnknownOpcode(Chip8Error):
    """Raised when an opcode matches no instruction pattern."""
    def __init__(self, opcode: int, pc: int = None):
        self.opcode = opcode
        self.pc = pc
        where = f" at ${pc:03X}" if pc is not None else ""
        super().__init__(f"Unknown opcode ${opcode:04X}{where}")


class StackOverflow(Chip8Error):
    """Raised by a CALL when all 16 stack frames are in use."""
    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"Stack overflow: CALL with 16 frames live (PC=${pc:03X})")


class StackUnderflow(Chip8Error):
    """Raised by a RET with no frame on the stack."""
    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"Stack underflow: RET with empty stack (PC=${pc:03X})")


class MemoryAccessError(Chip8Error):
    """Raised on a read or write outside the 4K address space."""
    def __init__(self, address: int, write: bool = False):
        self.address = address
        self.write = write
        kind = "write" if write else "read"
        super().__init__(f"Memory {kind} out of range: ${address:04X}")
