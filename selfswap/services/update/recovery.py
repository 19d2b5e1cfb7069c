"""Manual recovery helpers for an interrupted update.

An update that fails after the installed artifact was moved aside leaves the
previous version at its backup path.  Nothing restores it automatically; these
helpers are meant for an operator or for the host program's own recovery UI.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from selfswap.services.update.eviction import backup_path_for
from selfswap.services.update.models import UpdateError, UpdateIOError

_LOGGER = logging.getLogger(__name__)

__all__ = ["find_backup", "restore_backup"]


def find_backup(local_destination: str | Path) -> Path | None:
    """Return the backup left beside ``local_destination`` if there is one."""

    backup = backup_path_for(Path(local_destination).absolute())
    if backup.is_file():
        return backup
    return None


def restore_backup(local_destination: str | Path, *, overwrite: bool = False) -> Path:
    """Move the backup of ``local_destination`` back into place.

    Refuses to replace an existing artifact unless ``overwrite`` is set.  The
    backup is consumed by the move.
    """

    destination = Path(local_destination).absolute()
    backup = find_backup(destination)
    if backup is None:
        raise UpdateError(f"No backup found for {destination}")
    if destination.exists() and not overwrite:
        raise UpdateError(f"{destination} already exists; refusing to overwrite it")

    try:
        os.replace(backup, destination)
    except OSError as exc:
        raise UpdateIOError(f"Failed to restore {backup} to {destination}: {exc}") from exc
    _LOGGER.info("Restored %s from backup %s", destination, backup)
    return destination
