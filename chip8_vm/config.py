"""
CHIP-8 Virtual Machine - Machine Constants and Host Profiles

Memory map:
  $000-$1FF  Reserved (interpreter area on the original machines)
  $050-$09F  Built-in hex font, 16 glyphs x 5 bytes
  $200-$FFF  Program space (ROM is loaded here)

Timing:
  Delay and sound timers count down at 60Hz. Instruction rate is chosen
  by the host; 540 instructions/second (9 per timer tick) is the common
  default for canonical ROMs.
"""

# =============================================================================
#  MEMORY MAP
# =============================================================================
MEMORY_SIZE = 4096
PROGRAM_START = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - PROGRAM_START   # 3584 bytes
FONT_ADDR = 0x050
FONT_GLYPH_SIZE = 5

# =============================================================================
#  CPU
# =============================================================================
NUM_REGISTERS = 16
STACK_DEPTH = 16
FLAG_REGISTER = 0xF
NUM_KEYS = 16

# =============================================================================
#  DISPLAY
# =============================================================================
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
DISPLAY_SIZE = DISPLAY_WIDTH * DISPLAY_HEIGHT

# =============================================================================
#  TIMING
# =============================================================================
TIMER_HZ = 60
TIMER_PERIOD_US = 16667          # 1 / 60 s, rounded to the microsecond
DEFAULT_CPU_HZ = 540

# =============================================================================
#  DEBUG
# =============================================================================
TRACE_BUFFER_SIZE = 4096         # trace lines kept in memory (all go to log.debug)

# =============================================================================
#  HOST (window / audio)
# =============================================================================
WINDOW_SCALE = 15
WINDOW_TITLE = "CHIP-8 Emulator"
BG_COLOR = (0, 0, 0)
FG_COLOR = (255, 255, 255)

BEEP_FREQUENCY = 250             # Hz, square wave
BEEP_VOLUME = 0.1
AUDIO_SAMPLE_RATE = 44100


# Named presets for the host loop. The CLI picks one with --profile and
# lets individual flags override fields.
HOST_PROFILES = {
    "default": {
        "cpu_hz": DEFAULT_CPU_HZ,
        "scale": WINDOW_SCALE,
        "bg_color": BG_COLOR,
        "fg_color": FG_COLOR,
        "description": "540 Hz, white on black",
    },
    "slow": {
        "cpu_hz": 300,
        "scale": WINDOW_SCALE,
        "bg_color": BG_COLOR,
        "fg_color": FG_COLOR,
        "description": "300 Hz, for early ROMs written for the COSMAC VIP",
    },
    "fast": {
        "cpu_hz": 1000,
        "scale": 10,
        "bg_color": (16, 24, 16),
        "fg_color": (112, 255, 112),
        "description": "1000 Hz, smaller green phosphor window",
    },
}
