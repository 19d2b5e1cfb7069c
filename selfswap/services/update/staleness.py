"""Decide whether a local artifact needs to be fetched again."""

from __future__ import annotations

import logging
from datetime import timezone
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Protocol
from urllib.request import Request, urlopen

from selfswap.services.update.models import UpdateIOError

_LOGGER = logging.getLogger(__name__)

__all__ = ["RemoteTimestampSource", "UrlTimestampSource", "is_up_to_date"]


class RemoteTimestampSource(Protocol):
    """Anything able to report when the remote artifact last changed."""

    def last_modified(self) -> int:
        """Return milliseconds since the epoch, or ``0`` when unknown."""


class UrlTimestampSource:
    """Read the ``Last-Modified`` header of a URL with a ``HEAD`` request."""

    def __init__(self, url: str) -> None:
        self._url = url

    @property
    def url(self) -> str:
        return self._url

    def last_modified(self) -> int:
        try:
            with urlopen(Request(self._url, method="HEAD")) as response:  # nosec - caller supplied URL
                header = response.headers.get("Last-Modified")
        except OSError as exc:
            raise UpdateIOError(f"Failed to query {self._url}: {exc}") from exc
        return _parse_http_date(header)


def is_up_to_date(remote: str | RemoteTimestampSource, local_path: str | Path) -> bool:
    """Return ``True`` when ``local_path`` is newer than the remote artifact.

    A missing local file is never up to date and the remote is not contacted
    in that case.  An unknown remote timestamp, or one equal to the local
    modification time, also counts as stale.
    """

    local_path = Path(local_path)
    if not local_path.exists():
        _LOGGER.debug("%s does not exist; update required", local_path)
        return False

    source = UrlTimestampSource(remote) if isinstance(remote, str) else remote
    remote_modified = source.last_modified()
    local_modified = int(local_path.stat().st_mtime * 1000)

    up_to_date = remote_modified != 0 and remote_modified < local_modified
    _LOGGER.debug(
        "Remote modified %d, local modified %d: %s",
        remote_modified,
        local_modified,
        "up to date" if up_to_date else "update required",
    )
    return up_to_date


def _parse_http_date(value: str | None) -> int:
    if not value:
        return 0
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        _LOGGER.debug("Ignoring unparsable Last-Modified header %r", value)
        return 0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp() * 1000)
