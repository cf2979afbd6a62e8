"""
pygame drivers: window renderer, keyboard input and beeper.

Each driver wraps one pygame subsystem and exposes only what HostLoop
needs, so the loop can be tested with plain fakes:

  DisplayDriver.draw(pixels)        pixels = 2048 bools, row-major 64x32
  KeypadDriver.poll(emu) -> bool    applies key edges, False on quit
  AudioDriver.set_beep(on)          start/stop a square wave
"""

import logging
from array import array

import pygame

from ..config import (
    DISPLAY_WIDTH, DISPLAY_HEIGHT, WINDOW_SCALE, WINDOW_TITLE, BG_COLOR, FG_COLOR,
    BEEP_FREQUENCY, BEEP_VOLUME, AUDIO_SAMPLE_RATE,
)
from .keymap import QWERTY_KEYMAP

log = logging.getLogger(__name__)


class DisplayDriver:
    """Draws the frame buffer as scaled rectangles."""

    def __init__(self, scale: int = WINDOW_SCALE, bg_color=BG_COLOR, fg_color=FG_COLOR,
                 title: str = WINDOW_TITLE):
        self.scale = max(1, int(scale))
        self.bg_color = bg_color
        self.fg_color = fg_color
        self.surface = pygame.display.set_mode(
            (DISPLAY_WIDTH * self.scale, DISPLAY_HEIGHT * self.scale))
        pygame.display.set_caption(title)
        self.surface.fill(self.bg_color)
        pygame.display.flip()

    def draw(self, pixels):
        self.surface.fill(self.bg_color)
        s = self.scale
        for idx, lit in enumerate(pixels):
            if lit:
                x = idx % DISPLAY_WIDTH
                y = idx // DISPLAY_WIDTH
                pygame.draw.rect(self.surface, self.fg_color, pygame.Rect(x * s, y * s, s, s))
        pygame.display.flip()


class KeypadDriver:
    """Turns pygame key events into keypad press/release calls.

    Escape or closing the window requests quit.
    """

    def __init__(self, keymap=None):
        keymap = QWERTY_KEYMAP if keymap is None else keymap
        self._keycodes = {pygame.key.key_code(name): key for name, key in keymap.items()}

    def poll(self, emu) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type not in (pygame.KEYDOWN, pygame.KEYUP):
                continue
            if event.key == pygame.K_ESCAPE:
                return False
            key = self._keycodes.get(event.key)
            if key is None:
                continue
            if event.type == pygame.KEYDOWN:
                emu.press_key(key)
            else:
                emu.release_key(key)
        return True


class AudioDriver:
    """Looping square-wave tone switched on while the sound timer runs."""

    def __init__(self, frequency: int = BEEP_FREQUENCY, volume: float = BEEP_VOLUME,
                 sample_rate: int = AUDIO_SAMPLE_RATE):
        pygame.mixer.init(frequency=sample_rate, size=-16, channels=1)
        # One full period; looped by play(-1)
        period = max(2, sample_rate // frequency)
        amplitude = int(32767 * volume)
        wave = array('h', (amplitude if i < period // 2 else -amplitude for i in range(period)))
        self._sound = pygame.mixer.Sound(buffer=wave.tobytes())
        self._playing = False

    def set_beep(self, on: bool):
        if on and not self._playing:
            self._sound.play(loops=-1)
            self._playing = True
        elif not on and self._playing:
            self._sound.stop()
            self._playing = False


def init_pygame(scale: int = WINDOW_SCALE, bg_color=BG_COLOR, fg_color=FG_COLOR,
                audio: bool = True):
    """Initialise pygame and build the three drivers.

    Returns (display, keypad, audio). audio is None if the mixer is
    unavailable or disabled.
    """
    pygame.init()
    display = DisplayDriver(scale=scale, bg_color=bg_color, fg_color=fg_color)
    keypad = KeypadDriver()
    audio_driver = None
    if audio:
        try:
            audio_driver = AudioDriver()
        except pygame.error as e:
            log.warning("Audio disabled: %s", e)
    return display, keypad, audio_driver
