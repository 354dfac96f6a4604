"""Levelled logger writing timestamped lines to stdout and a file."""

from __future__ import annotations

import enum
import sys
import threading
from datetime import datetime
from typing import IO, Any


class LogLevel(enum.IntEnum):
    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def format_message(template: str, *args: Any) -> str:
    """Fill each "{}" in turn with an argument.

    When the placeholders run out, the next argument is appended and the
    rest are dropped; unused placeholders stay as they are.
    """
    parts: list[str] = []
    rest = template
    for arg in args:
        head, found, tail = rest.partition("{}")
        parts.append(head + _render(arg))
        if not found:
            rest = ""
            break
        rest = tail
    parts.append(rest)
    return "".join(parts)


class Logger:
    """Writes messages at or above its level to stdout and an optional file."""

    def __init__(self, log_file: str = "", level: LogLevel = LogLevel.INFO) -> None:
        self.level = level
        self.log_file_path = ""
        self._file: IO[str] | None = None
        self._lock = threading.Lock()
        if log_file:
            self.set_log_file(log_file)

    def __enter__(self) -> Logger:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def set_level(self, level: LogLevel) -> None:
        self.level = level

    def set_log_file(self, log_file: str) -> None:
        """Append further output to log_file, closing any previous file."""
        with self._lock:
            if self._file is not None:
                self._file.close()
            self.log_file_path = log_file
            self._file = open(log_file, "a", encoding="utf-8")

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None

    def debug(self, message: str, *args: Any) -> None:
        self._log(LogLevel.DEBUG, message, args)

    def info(self, message: str, *args: Any) -> None:
        self._log(LogLevel.INFO, message, args)

    def warning(self, message: str, *args: Any) -> None:
        self._log(LogLevel.WARNING, message, args)

    def error(self, message: str, *args: Any) -> None:
        self._log(LogLevel.ERROR, message, args)

    def _log(self, level: LogLevel, message: str, args: tuple[Any, ...]) -> None:
        if self.level > level:
            return
        text = format_message(message, *args) if args else message
        now = datetime.now()
        stamp = now.strftime("%Y-%m-%d %H:%M:%S") + f".{now.microsecond // 1000:03d}"
        line = f"[{stamp}] [{level.name}] {text}\n"
        with self._lock:
            sys.stdout.write(line)
            if self._file is not None:
                self._file.write(line)
                self._file.flush()