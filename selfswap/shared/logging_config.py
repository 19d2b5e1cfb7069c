"""Central logging configuration for updater processes.

Every process generation started by the updater runs detached from the
program that requested the update, so its diagnostics end up in a log file
at a deterministic location rather than only on a console that may already be
gone.  Repeated calls do not register duplicate handlers.

Two environment variables allow customising where the log file is written:

``SELFSWAP_LOG_FILE``
    Absolute path to the log file that should be created.

``SELFSWAP_LOG_DIR``
    Directory where the default log file name will be created.  Ignored when
    ``SELFSWAP_LOG_FILE`` is present.

``SELFSWAP_LOG_VERBOSITY`` is read by the updater command line to pick the
minimum severity written to the file.
"""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from pathlib import Path
from typing import Iterable

LOG_FILE_ENV = "SELFSWAP_LOG_FILE"
LOG_DIR_ENV = "SELFSWAP_LOG_DIR"
LOG_VERBOSITY_ENV = "SELFSWAP_LOG_VERBOSITY"
_DEFAULT_DIRNAME = ".selfswap"
_DEFAULT_LOGNAME = "updater.log"
_CONFIGURED = False
_LOG_PATH: Path | None = None
_HANDLER_TAG = "_selfswap_logging_handler"
_FILE_HANDLER: logging.FileHandler | None = None


class LogVerbosity(str, Enum):
    """Verbosity levels supported by the updater log file."""

    DISABLED = "disabled"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    VERBOSE = "verbose"


_VERBOSITY_LEVELS: dict[LogVerbosity, int] = {
    LogVerbosity.DISABLED: logging.CRITICAL + 1,
    LogVerbosity.ERROR: logging.ERROR,
    LogVerbosity.WARNING: logging.WARNING,
    LogVerbosity.INFO: logging.INFO,
    LogVerbosity.VERBOSE: logging.DEBUG,
}

_DEFAULT_VERBOSITY = LogVerbosity.VERBOSE
_CURRENT_VERBOSITY = _DEFAULT_VERBOSITY


def ensure_app_logging(*, console: bool = True) -> Path:
    """Configure the root logger for an updater process.

    The first invocation installs a file handler and, when ``console`` is set
    and stderr is an interactive terminal, a console handler at INFO level.
    Subsequent calls are no-ops and return the already configured log file
    path.
    """

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER

    if _CONFIGURED and _LOG_PATH is not None:
        return _LOG_PATH

    log_path = _resolve_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(process)d] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(_VERBOSITY_LEVELS[_CURRENT_VERBOSITY])
    file_handler.setFormatter(formatter)
    setattr(file_handler, _HANDLER_TAG, True)
    root.addHandler(file_handler)
    _FILE_HANDLER = file_handler

    if console and _should_log_to_stderr(root.handlers):
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(logging.INFO)
        stream_handler.setFormatter(formatter)
        setattr(stream_handler, _HANDLER_TAG, True)
        root.addHandler(stream_handler)

    _CONFIGURED = True
    _LOG_PATH = log_path

    logging.getLogger(__name__).debug(
        "Writing updater logs to %s (verbosity=%s)",
        log_path,
        _CURRENT_VERBOSITY.value,
    )
    return log_path


def set_file_log_verbosity(verbosity: LogVerbosity | str) -> None:
    """Adjust the minimum severity recorded in the updater log file."""

    global _CURRENT_VERBOSITY

    if isinstance(verbosity, str):
        try:
            verbosity = LogVerbosity(verbosity.lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported log verbosity: {verbosity}") from exc

    ensure_app_logging()
    handler = _FILE_HANDLER
    if handler is None:  # pragma: no cover - defensive
        return

    _CURRENT_VERBOSITY = verbosity
    handler.setLevel(_VERBOSITY_LEVELS[verbosity])


def get_file_log_verbosity() -> LogVerbosity:
    return _CURRENT_VERBOSITY


def _resolve_log_path() -> Path:
    env_file = os.environ.get(LOG_FILE_ENV)
    if env_file:
        return Path(env_file).expanduser()

    env_dir = os.environ.get(LOG_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser() / _DEFAULT_LOGNAME

    return Path.home() / _DEFAULT_DIRNAME / "logs" / _DEFAULT_LOGNAME


def _should_log_to_stderr(handlers: Iterable[logging.Handler]) -> bool:
    stderr = getattr(sys, "stderr", None)
    if stderr is None:
        return False
    is_tty = getattr(stderr, "isatty", None)
    if not callable(is_tty):
        return False
    try:
        if not is_tty():
            return False
    except (OSError, ValueError):
        return False

    for handler in handlers:
        if isinstance(handler, logging.StreamHandler) and handler.stream is stderr:
            return False
    return True


def _reset_for_tests() -> None:
    """Remove handlers installed by :func:`ensure_app_logging`."""

    global _CONFIGURED, _LOG_PATH, _FILE_HANDLER, _CURRENT_VERBOSITY

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    _CONFIGURED = False
    _LOG_PATH = None
    _FILE_HANDLER = None
    _CURRENT_VERBOSITY = _DEFAULT_VERBOSITY


__all__ = [
    "LOG_DIR_ENV",
    "LOG_FILE_ENV",
    "LOG_VERBOSITY_ENV",
    "LogVerbosity",
    "ensure_app_logging",
    "get_file_log_verbosity",
    "set_file_log_verbosity",
]
