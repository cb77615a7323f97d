"""Coloured console logging with an optional append-only log file."""

from __future__ import annotations

import inspect
import sys
import threading
import time
from enum import Enum, auto
from pathlib import Path
from typing import Any, Optional, Union

_RESET = "\033[0m"

_log_lock = threading.Lock()
_log_path: Optional[Path] = Path("log.txt")


class LogLevel(Enum):
    NORMAL = auto()
    LOOP = auto()
    WARNING = auto()
    ERROR = auto()
    CRITICAL = auto()


_COLORS = {
    LogLevel.NORMAL: "\033[1;32m",
    LogLevel.LOOP: "\033[1;32m",
    LogLevel.WARNING: "\033[1;33m",
    LogLevel.ERROR: "\033[1;31m",
    LogLevel.CRITICAL: "\033[1;41m",
}

_NAMES = {
    LogLevel.NORMAL: "LOG",
    LogLevel.LOOP: "LOOP",
    LogLevel.WARNING: "WARNING",
    LogLevel.ERROR: "ERROR",
    LogLevel.CRITICAL: "CRITICAL",
}


def set_log_file(path: Union[str, Path, None]) -> Optional[Path]:
    """Direct file output to ``path`` (None disables it); return the previous path."""
    global _log_path
    with _log_lock:
        previous = _log_path
        _log_path = Path(path) if path is not None else None
    return previous


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


class Logger:
    """A log record bound to a level and a source location."""

    def __init__(self, level: LogLevel, file: str = "", line: int = 0) -> None:
        self.level = level
        self.file = file.rpartition("/")[2]
        self.line = line

    def color_code(self) -> str:
        """Return the ANSI colour sequence for this level."""
        return _COLORS.get(self.level, _RESET)

    def level_name(self) -> str:
        """Return the label printed for this level."""
        return _NAMES.get(self.level, "UNKNOWN")

    def write(self, *args: Any) -> str:
        """Concatenate ``args``, print them and append to the log file; return the message."""
        message = "".join(_format_value(arg) for arg in args)
        name = self.level_name()
        location = f"{{{self.file}:{self.line}}}"
        with _log_lock:
            sys.stdout.write(
                f"{self.color_code()}[{name}] {location} {message}{_RESET}\n"
            )
            sys.stdout.flush()
            if self.level is not LogLevel.LOOP and _log_path is not None:
                timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
                with _log_path.open("a", encoding="utf-8") as handle:
                    handle.write(f"[{timestamp}][{name}] {location} {message}\n")
        return message


def _caller() -> tuple[str, int]:
    frame = inspect.currentframe()
    target = frame.f_back.f_back if frame and frame.f_back else None
    if target is None:
        return "", 0
    return target.f_code.co_filename.replace("\\", "/"), target.f_lineno


def log(*args: Any) -> str:
    """Log a normal message."""
    return Logger(LogLevel.NORMAL, *_caller()).write(*args)


def warn(*args: Any) -> str:
    """Log a warning."""
    return Logger(LogLevel.WARNING, *_caller()).write(*args)


def error(*args: Any) -> str:
    """Log an error."""
    return Logger(LogLevel.ERROR, *_caller()).write(*args)


def critical(*args: Any) -> str:
    """Log a critical failure."""
    return Logger(LogLevel.CRITICAL, *_caller()).write(*args)


def loop(*args: Any) -> str:
    """Log a per-frame message; these never reach the log file."""
    return Logger(LogLevel.LOOP, *_caller()).write(*args)