"""Entry point of the updater process started from the temporary payload."""

from __future__ import annotations

import logging
import os
import sys
from typing import Sequence

from selfswap.app.version import get_app_version
from selfswap.services.update.handoff import decode_arguments
from selfswap.services.update.protocol import ReplacementProtocol
from selfswap.shared.logging_config import (
    LOG_VERBOSITY_ENV,
    ensure_app_logging,
    set_file_log_verbosity,
)

_LOGGER = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    """Run one updater generation and return the process exit status.

    Accepts ``--remote <url> --local <path> [--args <token> ...]``.  Returns
    ``0`` once the updated artifact has been started and ``1`` after printing a
    one-line error description to stderr.  Diagnostics only go to the log
    file, stderr is reserved for that line.
    """

    arguments = list(sys.argv[1:] if argv is None else argv)
    _configure_logging()

    try:
        request = decode_arguments(arguments)
        _LOGGER.info("Updater %s handling %s", get_app_version(), request.local_destination)
        ReplacementProtocol(request).run()
    except (Exception, KeyboardInterrupt) as exc:
        _LOGGER.error("Update failed", exc_info=True)
        print(_single_line(exc), file=sys.stderr)
        return 1
    return 0


def _configure_logging() -> None:
    try:
        ensure_app_logging(console=False)
    except OSError as exc:
        print(f"Updater logging unavailable: {exc}", file=sys.stderr)
        return

    verbosity = os.environ.get(LOG_VERBOSITY_ENV, "").strip()
    if not verbosity:
        return
    try:
        set_file_log_verbosity(verbosity)
    except ValueError:
        _LOGGER.warning("Ignoring unsupported %s=%r", LOG_VERBOSITY_ENV, verbosity)


def _single_line(exc: BaseException) -> str:
    message = " ".join(str(exc).split())
    name = type(exc).__name__
    return f"{name}: {message}" if message else name


__all__ = ["main"]
