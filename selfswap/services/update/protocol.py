"""State machine run by the updater process to swap the installed artifact."""

from __future__ import annotations

import logging
import shutil
from http.client import HTTPException
from pathlib import Path
from typing import BinaryIO, Callable, ContextManager
from urllib.request import urlopen

from selfswap.services.update.constants import PARTIAL_DOWNLOAD_SUFFIX
from selfswap.services.update.eviction import configured_policy, evict
from selfswap.services.update.models import (
    MalformedInputError,
    ProcessSpec,
    ProtocolState,
    RetryPolicy,
    UpdateIOError,
    UpdateRequest,
)
from selfswap.services.update.runtime import resolve_executable
from selfswap.services.update.spawner import DetachedProcessSpawner, ProcessSpawner

_LOGGER = logging.getLogger(__name__)

__all__ = ["ReplacementProtocol", "build_relaunch_spec", "fetch"]

RemoteOpener = Callable[[str], ContextManager[BinaryIO]]


class ReplacementProtocol:
    """Evict, fetch, install and relaunch the artifact named by a request.

    The protocol runs once per updater process.  When the destination does
    not exist the eviction step is skipped, which also makes a rerun after a
    failed fetch continue straight from the download.
    """

    def __init__(
        self,
        request: UpdateRequest,
        *,
        policy: RetryPolicy | None = None,
        spawner: ProcessSpawner | None = None,
        opener: RemoteOpener | None = None,
        runtime_resolver: Callable[[], Path] = resolve_executable,
    ) -> None:
        self._request = request
        self._policy = policy or configured_policy()
        self._spawner = spawner or DetachedProcessSpawner()
        self._opener = opener or urlopen
        self._runtime_resolver = runtime_resolver
        self.state = ProtocolState.START

    @property
    def request(self) -> UpdateRequest:
        return self._request

    def run(self) -> None:
        destination = self._request.local_destination
        _LOGGER.info(
            "Updating %s from %s", destination, self._request.remote_location
        )

        if destination.exists():
            self._enter(ProtocolState.EVICT_EXISTING)
            evict(destination, self._policy)
        else:
            _LOGGER.debug("Nothing installed at %s; skipping eviction", destination)

        self._enter(ProtocolState.FETCH)
        fetch(self._request.remote_location, destination, opener=self._opener)

        self._enter(ProtocolState.INSTALLED)
        spec = build_relaunch_spec(self._request, self._runtime_resolver())

        self._enter(ProtocolState.RELAUNCH)
        self._spawner.spawn(spec)

        self._enter(ProtocolState.DONE)

    def _enter(self, state: ProtocolState) -> None:
        _LOGGER.debug("Update state %s -> %s", self.state.value, state.value)
        self.state = state


def fetch(
    remote_location: str,
    destination: Path,
    *,
    opener: RemoteOpener | None = None,
) -> Path:
    """Download ``remote_location`` to ``destination``, replacing any file there."""

    opener = opener or urlopen
    partial = destination.with_name(destination.name + PARTIAL_DOWNLOAD_SUFFIX)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        with opener(remote_location) as response, partial.open("wb") as target:
            shutil.copyfileobj(response, target)
        partial.replace(destination)
    except ValueError as exc:
        _discard(partial)
        raise MalformedInputError(f"Invalid remote location {remote_location!r}: {exc}") from exc
    except (OSError, HTTPException) as exc:
        _discard(partial)
        raise UpdateIOError(f"Failed to download {remote_location}: {exc}") from exc
    except BaseException:
        _discard(partial)
        raise
    _LOGGER.info("Installed %s (%d bytes)", destination, destination.stat().st_size)
    return destination


def build_relaunch_spec(request: UpdateRequest, executable: Path) -> ProcessSpec:
    """Return the process description that starts the installed artifact."""

    destination = request.local_destination
    return ProcessSpec(
        executable=executable,
        arguments=(str(destination), *request.restart_arguments),
        working_directory=destination.parent,
        inherit_io=True,
    )


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        return
    except OSError:
        _LOGGER.debug("Unable to remove partial download at %s", path, exc_info=True)
