"""
CHIP-8 Virtual Machine - Logging Setup

Every module logs through logging.getLogger(__name__), so all records end
up under the "chip8_vm" logger configured here.

  console   rich RichHandler, WARNING by default (--verbose: INFO,
            --trace without --log-dir: DEBUG so traced opcodes show)
  file      only with --log-dir; always DEBUG, one file per run:
            ``<log_dir>/<name>_YYYYMMDD_HHMMSS.log``
"""

from __future__ import annotations
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.logging import RichHandler

LOGGER_NAME = "chip8_vm"

FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"


def _run_log_handler(name: str, log_dir: Path) -> logging.FileHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    handler = logging.FileHandler(str(log_dir / f"{name}_{stamp}.log"), encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    name: str = LOGGER_NAME,
    level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """Attach the console (and optional run-log) handlers to the VM logger.

    The first call wins: if the logger already has handlers it is
    returned unchanged.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(level)

    run_log = None
    if log_dir is not None:
        run_log = _run_log_handler(name, Path(log_dir))
        logger.addHandler(run_log)

    # markup off: trace lines contain [..] register dumps
    console = RichHandler(
        level=console_level,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    console.setLevel(console_level)
    logger.addHandler(console)

    if run_log is not None:
        logger.info("Run log: %s (console level %s)",
                    run_log.baseFilename, logging.getLevelName(console_level))

    return logger
