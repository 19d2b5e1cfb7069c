"""Process launchers used to hand control to the next updater generation."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Any, Protocol

from selfswap.services.update.models import ProcessSpec, UpdateIOError

_LOGGER = logging.getLogger(__name__)

# Detached children stay referenced for the life of this process so their
# handles are never collected while they still run.
_LAUNCHED: list[subprocess.Popen] = []


class ProcessSpawner(Protocol):
    """Protocol describing a fire-and-forget child process launch."""

    def spawn(self, spec: ProcessSpec) -> None:
        """Start the process described by ``spec`` without waiting for it."""


class DetachedProcessSpawner:
    """Start child processes in their own session so they outlive the parent."""

    def spawn(self, spec: ProcessSpec) -> None:
        command = list(spec.command)
        _LOGGER.info("Starting %s", command[0])
        _LOGGER.debug("Process command: %s (cwd=%s)", command, spec.working_directory)
        popen_kwargs: dict[str, Any] = {"close_fds": True}
        if os.name == "nt":  # pragma: no cover - exercised on Windows
            creationflags = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", 0)
            if creationflags:
                popen_kwargs["creationflags"] = creationflags
        else:
            popen_kwargs["start_new_session"] = True
        if not spec.inherit_io:
            popen_kwargs["stdin"] = subprocess.DEVNULL
            popen_kwargs["stdout"] = subprocess.DEVNULL
            popen_kwargs["stderr"] = subprocess.DEVNULL
        try:
            process = subprocess.Popen(
                command,
                cwd=str(spec.working_directory) if spec.working_directory else None,
                **popen_kwargs,
            )
        except OSError as exc:
            raise UpdateIOError(f"Failed to start {command[0]}: {exc}") from exc
        _LAUNCHED.append(process)
        _LOGGER.debug("Started process %s", process.pid)


__all__ = ["DetachedProcessSpawner", "ProcessSpawner"]
