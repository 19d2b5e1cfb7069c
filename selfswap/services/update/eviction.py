"""Move the installed artifact aside so the new version can take its place."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from selfswap.app.config import get_eviction_config
from selfswap.services.update.constants import BACKUP_SUFFIX
from selfswap.services.update.models import (
    InterruptedWaitError,
    RetryPolicy,
    UpdateIOError,
)

_LOGGER = logging.getLogger(__name__)

__all__ = ["backup_path_for", "configured_policy", "evict"]


def backup_path_for(destination: Path) -> Path:
    """Return the backup location for ``destination``.

    The last extension of the filename is replaced with ``.sik``; a filename
    without an extension gets the suffix appended.
    """

    return destination.with_name(destination.stem + BACKUP_SUFFIX)


def evict(destination: Path, policy: RetryPolicy | None = None) -> Path:
    """Rename ``destination`` to its backup path, retrying while it is locked.

    The previous process generation may still hold the artifact open for a
    moment after it exits, so the rename is retried ``policy.max_attempts``
    times with ``policy.delay`` seconds between attempts.  Returns the backup
    path.
    """

    policy = policy or configured_policy()
    backup = backup_path_for(destination)
    attempts = max(1, policy.max_attempts)
    last_error: OSError | None = None

    for attempt in range(1, attempts + 1):
        try:
            os.replace(destination, backup)
        except OSError as exc:
            last_error = exc
            _LOGGER.debug(
                "Attempt %d/%d to move %s aside failed: %s",
                attempt,
                attempts,
                destination,
                exc,
            )
        else:
            _LOGGER.info("Moved %s to backup %s", destination, backup)
            return backup

        if attempt < attempts:
            try:
                policy.sleep(policy.delay)
            except KeyboardInterrupt as exc:
                raise InterruptedWaitError(
                    f"Interrupted while waiting to move {destination} aside"
                ) from exc

    _LOGGER.warning("Giving up moving %s aside after %d attempts", destination, attempts)
    raise UpdateIOError(f"Failed to move {destination} to {backup}: {last_error}") from last_error


def configured_policy() -> RetryPolicy:
    """Return the retry policy described by the updater configuration."""

    config = get_eviction_config()
    return RetryPolicy(max_attempts=config.max_attempts, delay=config.delay_seconds)
