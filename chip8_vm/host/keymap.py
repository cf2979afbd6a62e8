"""
Keyboard -> keypad mapping.

The left-hand 4x4 block of a QWERTY keyboard stands in for the hex pad:

    1 2 3 4        1 2 3 C
    Q W E R   ->   4 5 6 D
    A S D F        7 8 9 E
    Z X C V        A 0 B F

Keys are stored by pygame key name so this module imports without pygame.
"""

from typing import Dict, Optional

QWERTY_KEYMAP: Dict[str, int] = {
    '1': 0x1, '2': 0x2, '3': 0x3, '4': 0xC,
    'q': 0x4, 'w': 0x5, 'e': 0x6, 'r': 0xD,
    'a': 0x7, 's': 0x8, 'd': 0x9, 'f': 0xE,
    'z': 0xA, 'x': 0x0, 'c': 0xB, 'v': 0xF,
}


def key_for_name(name: str, keymap: Dict[str, int] = None) -> Optional[int]:
    """Keypad index for a keyboard key name, or None if unmapped."""
    keymap = QWERTY_KEYMAP if keymap is None else keymap
    return keymap.get(name.lower())
