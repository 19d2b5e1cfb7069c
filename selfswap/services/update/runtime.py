"""Locate the Python runtime used to start updater and relaunch processes."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from selfswap.services.update.constants import WINDOWED_EXECUTABLE_NAME

_LOGGER = logging.getLogger(__name__)

__all__ = ["default_executable", "has_interactive_console", "resolve_executable"]


def resolve_executable() -> Path:
    """Return the runtime executable for spawning child processes.

    Without an attached console the windowed interpreter is preferred when one
    is installed next to the default executable, so relaunched GUI programs do
    not open a console window.
    """

    executable = default_executable()
    if not has_interactive_console():
        windowed = executable.with_name(WINDOWED_EXECUTABLE_NAME)
        if windowed.exists():
            _LOGGER.debug("No console attached; using windowed runtime %s", windowed)
            return windowed.absolute()
    return executable.absolute()


def default_executable() -> Path:
    """Return the console interpreter of the current runtime."""

    if sys.executable:
        return Path(sys.executable)
    root = Path(sys.base_exec_prefix)
    if os.name == "nt":
        return root / "python.exe"
    return root / "bin" / "python3"


def has_interactive_console() -> bool:
    """Return ``True`` when standard input and output are attached to a terminal."""

    for stream in (sys.stdin, sys.stdout):
        if stream is None:
            return False
        is_tty = getattr(stream, "isatty", None)
        if not callable(is_tty):
            return False
        try:
            if not is_tty():
                return False
        except (OSError, ValueError):
            return False
    return True
