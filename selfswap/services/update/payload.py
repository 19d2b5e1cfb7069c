"""Build the temporary updater payload and hand control to it.

The running program cannot replace its own artifact while it still executes
from it.  :func:`update` therefore packs the updater logic into a temporary
zip application, starts it with the handoff message describing the update and
returns.  The caller must exit right afterwards so the updater process can
move the old artifact out of the way.
"""

from __future__ import annotations

import datetime
import json
import logging
import os
import tempfile
import textwrap
import zipfile
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Callable, Iterable, Iterator
from urllib.parse import urlsplit

from selfswap.app.config import get_payload_config
from selfswap.app.version import get_app_version
from selfswap.services.update.constants import (
    DEFAULT_PAYLOAD_PREFIX,
    PAYLOAD_DESCRIPTOR_NAME,
    PAYLOAD_RESOURCE_SUFFIXES,
    PAYLOAD_SUFFIX,
    UPDATER_PREFIX_ENV,
)
from selfswap.services.update.handoff import encode_request
from selfswap.services.update.models import (
    MalformedInputError,
    ProcessSpec,
    UpdateIOError,
    UpdateRequest,
)
from selfswap.services.update.runtime import resolve_executable
from selfswap.services.update.spawner import DetachedProcessSpawner, ProcessSpawner

_LOGGER = logging.getLogger(__name__)

__all__ = ["build_payload", "build_updater_spec", "resolve_payload_prefix", "update"]

_PACKAGE = __name__.split(".")[0]

_BOOTSTRAP = textwrap.dedent(
    """
    from selfswap.services.update.cli import main

    raise SystemExit(main())
    """
).lstrip()


def update(
    remote_location: str,
    local_destination: str | Path,
    restart_arguments: Iterable[str] = (),
    *,
    spawner: ProcessSpawner | None = None,
    runtime_resolver: Callable[[], Path] = resolve_executable,
) -> None:
    """Start replacing ``local_destination`` with the artifact at ``remote_location``.

    ``restart_arguments`` are passed unchanged to the updated artifact once it
    is relaunched.  The calling process must terminate promptly after this
    returns.
    """

    if not urlsplit(str(remote_location)).scheme:
        raise MalformedInputError(f"Remote location is not a URL: {remote_location!r}")

    request = UpdateRequest.create(remote_location, local_destination, restart_arguments)
    payload_path = build_payload(request)
    spec = build_updater_spec(payload_path, request, runtime_resolver())
    (spawner or DetachedProcessSpawner()).spawn(spec)
    _LOGGER.info("Updater started from %s; exit now to release %s", payload_path, request.local_destination)


def build_updater_spec(payload_path: Path, request: UpdateRequest, executable: Path) -> ProcessSpec:
    """Return the process description that runs ``payload_path`` for ``request``."""

    return ProcessSpec(
        executable=executable,
        arguments=(str(payload_path), *encode_request(request)),
        working_directory=None,
        inherit_io=True,
    )


def build_payload(request: UpdateRequest, *, prefix: str | None = None) -> Path:
    """Write a self-contained updater zip application and return its path."""

    prefix = prefix or resolve_payload_prefix()
    try:
        handle, name = tempfile.mkstemp(prefix=prefix, suffix=PAYLOAD_SUFFIX)
    except OSError as exc:
        raise UpdateIOError(f"Failed to create updater payload: {exc}") from exc

    payload_path = Path(name)
    try:
        with os.fdopen(handle, "wb") as stream, zipfile.ZipFile(
            stream, "w", compression=zipfile.ZIP_DEFLATED
        ) as archive:
            archive.writestr("__main__.py", _BOOTSTRAP)
            for entry_name, data in _iter_package_files():
                archive.writestr(entry_name, data)
            archive.writestr(
                PAYLOAD_DESCRIPTOR_NAME,
                json.dumps(_describe(request), indent=2, sort_keys=True),
            )
    except OSError as exc:
        _discard(payload_path)
        raise UpdateIOError(f"Failed to write updater payload {payload_path}: {exc}") from exc

    _LOGGER.debug("Wrote updater payload %s", payload_path)
    return payload_path


def resolve_payload_prefix() -> str:
    """Return the filename prefix for temporary payloads."""

    override = os.environ.get(UPDATER_PREFIX_ENV, "").strip()
    if override:
        return override
    configured = get_payload_config().prefix
    if configured:
        return configured
    return DEFAULT_PAYLOAD_PREFIX


def _iter_package_files(
    root: Traversable | None = None, base: str = _PACKAGE
) -> Iterator[tuple[str, bytes]]:
    # ``importlib.resources`` also reads from a zip application, which is how
    # an updated program usually runs.
    root = root or resources.files(_PACKAGE)
    for entry in sorted(root.iterdir(), key=lambda item: item.name):
        if entry.is_dir():
            if entry.name == "__pycache__":
                continue
            yield from _iter_package_files(entry, f"{base}/{entry.name}")
        elif entry.name.endswith(PAYLOAD_RESOURCE_SUFFIXES) or entry.name == "VERSION":
            yield f"{base}/{entry.name}", entry.read_bytes()


def _describe(request: UpdateRequest) -> dict[str, str]:
    # Diagnostics only; the updater process reads its arguments instead.
    return {
        "remote": request.remote_location,
        "local_name": request.local_destination.name,
        "updater_version": get_app_version(),
        "created": datetime.datetime.now(datetime.timezone.utc).isoformat(timespec="seconds"),
    }


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        return
    except OSError:
        _LOGGER.debug("Unable to remove incomplete payload %s", path, exc_info=True)
