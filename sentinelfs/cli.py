"""Command-line option parsing for the sync daemon."""

from __future__ import annotations

import sys
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass
from typing import NoReturn

VERSION_TEXT = "SentinelFS-Neo v1.0.0"

USAGE = """
Usage: sentinelfs-neo [OPTIONS]

Options:
  --session <CODE>      Session code (required for CLI mode)
  --path <PATH>         Directory to sync (required for CLI mode)
  --port <PORT>         Network port (default: 8080)
  --gui                 Launch graphical interface (GTK3)
  --verbose             Verbose logging
  --daemon              Run as daemon
  --config <FILE>       Configuration file
  --help                Show this help
  --version             Show version

Modes:
  CLI Mode (default):   ./sentinelfs-neo --session CODE --path /sync/dir
  GUI Mode:             ./sentinelfs-neo --gui
"""

_TEXT_OPTIONS = {
    "--session": "session_code",
    "--path": "sync_path",
    "--config": "config_file",
}


@dataclass
class Config:
    """Settings for one run of the daemon."""

    session_code: str = ""
    sync_path: str = ""
    port: int = 8080
    verbose: bool = False
    daemon_mode: bool = False
    discovery_interval: int = 5000
    remesh_threshold: int = 100
    config_file: str = ""


def _emit(text: str) -> str:
    out = sys.stdout
    out.write(text + "\n")
    out.flush()
    return text


def print_usage() -> str:
    """Write the usage text to standard output and return it."""
    return _emit(USAGE)


def print_version() -> str:
    """Write the version line to standard output and return it."""
    return _emit(VERSION_TEXT)


def _fail(message: str) -> NoReturn:
    print(message, file=sys.stderr)
    print_usage()
    raise SystemExit(1)


def parse_arguments(argv: Sequence[str] | None = None) -> Config:
    """Build a Config from the arguments that follow the program name.

    Raises SystemExit(0) after --help or --version, and SystemExit(1) on an
    unknown option or when --session or --path is missing.
    """
    pending = deque(sys.argv[1:] if argv is None else argv)
    config = Config()
    while pending:
        arg = pending.popleft()
        if arg in _TEXT_OPTIONS and pending:
            setattr(config, _TEXT_OPTIONS[arg], pending.popleft())
        elif arg == "--port" and pending:
            value = pending.popleft()
            try:
                config.port = int(value)
            except ValueError:
                _fail(f"Error: invalid port: {value}")
        elif arg == "--verbose":
            config.verbose = True
        elif arg == "--daemon":
            config.daemon_mode = True
        elif arg == "--help":
            print_usage()
            raise SystemExit(0)
        elif arg == "--version":
            print_version()
            raise SystemExit(0)
        else:
            _fail(f"Unknown option: {arg}")

    if not config.session_code:
        _fail("Error: --session is required")
    if not config.sync_path:
        _fail("Error: --path is required")
    return config