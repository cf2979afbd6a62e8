"""
CHIP-8 Virtual Machine - 16-Key Hex Keypad

Original COSMAC VIP layout:

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

The host input driver calls press()/release() with a key index 0x0-0xF.
SKP/SKNP read single keys; LD Vx, K scans for the lowest pressed key.
"""

from typing import List, Optional

from ..config import NUM_KEYS


class Keypad:
    """Pressed/released state for the 16 keys."""

    def __init__(self):
        self._keys: List[bool] = [False] * NUM_KEYS

    @staticmethod
    def _check(key: int):
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key index out of range: {key!r} (expected 0-15)")

    # --- Host side ---

    def press(self, key: int):
        self._check(key)
        self._keys[key] = True

    def release(self, key: int):
        self._check(key)
        self._keys[key] = False

    # --- Instruction side ---

    def is_pressed(self, key: int) -> bool:
        """State of key (value & $F). SKP/SKNP pass a full register byte."""
        return self._keys[key & 0x0F]

    def first_pressed(self) -> Optional[int]:
        """Lowest-numbered pressed key, or None."""
        for key, pressed in enumerate(self._keys):
            if pressed:
                return key
        return None

    @property
    def keys(self) -> List[bool]:
        return list(self._keys)

    def reset(self):
        """Release all keys."""
        self._keys = [False] * NUM_KEYS
