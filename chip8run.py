#!/usr/bin/env python3
"""
chip8run - CHIP-8 Virtual Machine CLI

Usage:
    python chip8run.py <rom> [--profile default|slow|fast] [--hz 540] [--scale 15]
                             [--headless --max-steps N] [--seed N] [--trace]
                             [--dump] [--log-dir DIR] [--verbose]

Examples:
    python chip8run.py roms/PONG
    python chip8run.py roms/IBM --headless --max-steps 200
    python chip8run.py roms/TEST --headless --max-steps 5000 --trace --log-dir logs
"""

import argparse
import logging
import sys
from pathlib import Path

from chip8_vm import __version__, Chip8Emulator, Chip8Error, StopReason
from chip8_vm.config import HOST_PROFILES, PROGRAM_START
from chip8_vm.log_setup import setup_logging


def parse_address(text: str) -> int:
    """Address for --break: $2A0, 0x2A0 or plain decimal."""
    text = text.strip()
    if text.startswith("$"):
        return int(text[1:], 16)
    return int(text, 0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8run",
        description="CHIP-8 virtual machine",
        epilog="Profiles: " + ", ".join(
            f"{name} ({p['description']})" for name, p in HOST_PROFILES.items()),
    )
    parser.add_argument("rom", help="Path to a raw CHIP-8 ROM image")
    parser.add_argument("--profile", default="default", choices=list(HOST_PROFILES.keys()),
                        help="Host preset (default: default)")
    parser.add_argument("--hz", type=int, default=None,
                        help="Instructions per second (overrides profile)")
    parser.add_argument("--scale", type=int, default=None,
                        help="Window pixels per CHIP-8 pixel (overrides profile)")
    parser.add_argument("--headless", action="store_true",
                        help="Run without a window and print the final frame")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="Stop after this many instructions")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the RND instruction")
    parser.add_argument("--break", dest="breakpoints", action="append", default=[],
                        type=parse_address,
                        metavar="ADDR", help="Stop when PC reaches ADDR (repeatable)")
    parser.add_argument("--trace", action="store_true",
                        help="Log every executed instruction at DEBUG")
    parser.add_argument("--dump", action="store_true",
                        help="Print registers, a hexdump and bytes written since load on exit")
    parser.add_argument("--no-audio", action="store_true", help="Disable the beeper")
    parser.add_argument("--log-dir", type=Path, default=None,
                        help="Write a DEBUG log file into this directory")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show INFO messages on the console")
    parser.add_argument("--version", action="version", version=f"chip8run {__version__}")
    return parser


def _dump(emu: Chip8Emulator, loaded: bytes):
    """Registers, a program-space hexdump and every byte written since load."""
    print(emu.regs.display())
    print(f"DT={emu.timer.delay:02X} ST={emu.timer.sound:02X} steps={emu.steps}")
    print(emu.mem.hexdump(PROGRAM_START, 256))
    changes = emu.mem.diff_snapshots(loaded, emu.mem.snapshot(PROGRAM_START), PROGRAM_START)
    print(f"Program space writes: {len(changes)}")
    for addr, (old, new) in sorted(changes.items()):
        print(f"  ${addr:03X}: {old:02X} -> {new:02X}")


def run_headless(emu: Chip8Emulator, max_steps) -> StopReason:
    reason = emu.run(max_steps=max_steps)
    print(emu.screen.render_text())
    return reason


def run_windowed(emu: Chip8Emulator, profile: dict, args) -> StopReason:
    # pygame is only needed for the window, keep headless runs free of it
    from chip8_vm.host.pygame_drivers import init_pygame
    from chip8_vm.host.loop import HostLoop
    import pygame

    display, keypad, audio = init_pygame(
        scale=args.scale or profile["scale"],
        bg_color=profile["bg_color"],
        fg_color=profile["fg_color"],
        audio=not args.no_audio,
    )
    try:
        loop = HostLoop(emu, display, keypad, audio, cpu_hz=args.hz or profile["cpu_hz"])
        return loop.run(max_steps=args.max_steps)
    finally:
        pygame.quit()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    console_level = logging.INFO if args.verbose else logging.WARNING
    if args.trace and args.log_dir is None:
        console_level = logging.DEBUG
    log = setup_logging(console_level=console_level, log_dir=args.log_dir)

    profile = HOST_PROFILES[args.profile]

    emu = Chip8Emulator(seed=args.seed)
    emu.enable_trace(args.trace)
    for addr in args.breakpoints:
        emu.add_breakpoint(addr)

    try:
        emu.load_rom(args.rom)
    except FileNotFoundError:
        print(f"Error: File not found: {args.rom}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading {args.rom}: {e}", file=sys.stderr)
        return 1
    except Chip8Error as e:
        print(f"Load error: {e}", file=sys.stderr)
        return 1

    loaded = emu.mem.snapshot(PROGRAM_START)

    try:
        if args.headless:
            reason = run_headless(emu, args.max_steps)
        else:
            reason = run_windowed(emu, profile, args)
    except Exception as e:
        print(f"Internal emulator error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 2

    if args.dump:
        _dump(emu, loaded)

    if reason is None or reason in (StopReason.TIMEOUT, StopReason.BREAK):
        log.info("Stopped: %s after %d steps", reason.value if reason else "QUIT", emu.steps)
        return 0

    print(f"Emulation stopped: {emu.last_error}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
