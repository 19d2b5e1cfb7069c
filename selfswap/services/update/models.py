"""Data models used by the update service."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Tuple

from selfswap.services.update.constants import (
    DEFAULT_EVICTION_ATTEMPTS,
    DEFAULT_EVICTION_DELAY,
)


class UpdateError(RuntimeError):
    """Raised when an update cannot be prepared, fetched or installed."""


class MalformedInputError(UpdateError):
    """Raised when a handoff message lacks a required flag or value."""


class UpdateIOError(UpdateError):
    """Raised when a filesystem, network or process operation fails."""


class InterruptedWaitError(UpdateError):
    """Raised when the eviction retry wait is interrupted."""


@dataclass(frozen=True)
class UpdateRequest:
    """Describe which artifact to fetch, where to put it and how to relaunch it."""

    remote_location: str
    local_destination: Path
    restart_arguments: Tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        remote_location: str,
        local_destination: str | Path,
        restart_arguments: Iterable[str] = (),
    ) -> "UpdateRequest":
        return cls(
            remote_location=str(remote_location),
            local_destination=Path(local_destination).expanduser().absolute(),
            restart_arguments=tuple(str(argument) for argument in restart_arguments),
        )


@dataclass(frozen=True)
class ProcessSpec:
    """Describe a child process to launch without waiting for it."""

    executable: Path
    arguments: Tuple[str, ...] = ()
    working_directory: Path | None = None
    inherit_io: bool = True

    @property
    def command(self) -> Tuple[str, ...]:
        return (str(self.executable), *self.arguments)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry budget used while waiting for a locked artifact."""

    max_attempts: int = DEFAULT_EVICTION_ATTEMPTS
    delay: float = DEFAULT_EVICTION_DELAY
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False, repr=False)


class ProtocolState(str, Enum):
    """Steps of the replacement protocol in execution order."""

    START = "start"
    EVICT_EXISTING = "evict_existing"
    FETCH = "fetch"
    INSTALLED = "installed"
    RELAUNCH = "relaunch"
    DONE = "done"
