"""
CHIP-8 Virtual Machine - 64x32 Monochrome Display

The frame buffer is a flat list of 2048 booleans, row-major:
index = y * 64 + x. Only CLS and DRW change it.

Sprites are 8 pixels wide and 1-15 rows tall, one byte per row, most
significant bit leftmost. Drawing XORs each set bit onto the screen and
wraps coordinates around both edges. A collision is reported when a lit
pixel is turned off.

The list object never changes identity: clear() and reset() blank it in
place, so a renderer may hold on to `pixels` across frames. When to
redraw is the emulator's call (display_updated, set on each timer tick).
"""

from typing import List

from ..config import DISPLAY_WIDTH, DISPLAY_HEIGHT, DISPLAY_SIZE


class Display:
    """64x32 frame buffer."""

    WIDTH = DISPLAY_WIDTH
    HEIGHT = DISPLAY_HEIGHT

    def __init__(self):
        self._pixels: List[bool] = [False] * DISPLAY_SIZE

    @property
    def pixels(self) -> List[bool]:
        """The live frame buffer. Renderers must treat it as read-only."""
        return self._pixels

    def get(self, x: int, y: int) -> bool:
        return self._pixels[(y % DISPLAY_HEIGHT) * DISPLAY_WIDTH + (x % DISPLAY_WIDTH)]

    def set(self, x: int, y: int, value: bool):
        self._pixels[(y % DISPLAY_HEIGHT) * DISPLAY_WIDTH + (x % DISPLAY_WIDTH)] = bool(value)

    def clear(self):
        self._pixels[:] = [False] * DISPLAY_SIZE

    def draw_sprite(self, x: int, y: int, rows: bytes) -> bool:
        """XOR a sprite onto the screen at (x, y) with toroidal wrap.

        Returns True if any lit pixel was turned off.
        """
        collision = False
        pixels = self._pixels
        for row, bits in enumerate(rows):
            py = (y + row) % DISPLAY_HEIGHT
            for bit in range(8):
                if not (bits >> (7 - bit)) & 1:
                    continue
                idx = py * DISPLAY_WIDTH + (x + bit) % DISPLAY_WIDTH
                if pixels[idx]:
                    collision = True
                pixels[idx] = not pixels[idx]
        return collision

    def rows(self) -> List[List[bool]]:
        return [self._pixels[r * DISPLAY_WIDTH:(r + 1) * DISPLAY_WIDTH]
                for r in range(DISPLAY_HEIGHT)]

    def render_text(self, on: str = '#', off: str = '.') -> str:
        """Render the frame as text, one line per row (headless mode)."""
        return '\n'.join(''.join(on if p else off for p in row) for row in self.rows())

    def reset(self):
        self.clear()
