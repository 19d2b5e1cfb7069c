"""Service tying the staleness check to the self-update launcher."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable

from selfswap.services.update.payload import update
from selfswap.services.update.runtime import resolve_executable
from selfswap.services.update.spawner import ProcessSpawner
from selfswap.services.update.staleness import (
    RemoteTimestampSource,
    UrlTimestampSource,
    is_up_to_date,
)

_LOGGER = logging.getLogger(__name__)


class UpdateService:
    """Check one remote artifact against its installed copy and replace it."""

    def __init__(
        self,
        remote_location: str,
        local_destination: str | Path,
        *,
        timestamp_source: RemoteTimestampSource | None = None,
        spawner: ProcessSpawner | None = None,
        runtime_resolver: Callable[[], Path] = resolve_executable,
    ) -> None:
        self._remote_location = remote_location
        self._local_destination = Path(local_destination).absolute()
        self._timestamp_source = timestamp_source or UrlTimestampSource(remote_location)
        self._spawner = spawner
        self._runtime_resolver = runtime_resolver

    @property
    def local_destination(self) -> Path:
        return self._local_destination

    def is_update_available(self) -> bool:
        available = not is_up_to_date(self._timestamp_source, self._local_destination)
        if available:
            _LOGGER.info("Update available for %s from %s", self._local_destination, self._remote_location)
        else:
            _LOGGER.debug("%s is up to date", self._local_destination)
        return available

    def download_and_install(self, restart_arguments: Iterable[str] = ()) -> None:
        """Hand the update off to a new process; the caller must exit afterwards."""

        update(
            self._remote_location,
            self._local_destination,
            restart_arguments,
            spawner=self._spawner,
            runtime_resolver=self._runtime_resolver,
        )

    def check_for_updates(self, restart_arguments: Iterable[str] = ()) -> bool:
        if not self.is_update_available():
            return False

        self.download_and_install(restart_arguments)
        return True


__all__ = ["UpdateService"]
