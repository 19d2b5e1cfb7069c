"""Public API for the update service package."""

from __future__ import annotations

from selfswap.services.update.constants import (
    ARGS_FLAG,
    BACKUP_SUFFIX,
    DEFAULT_PAYLOAD_PREFIX,
    LOCAL_FLAG,
    REMOTE_FLAG,
    UPDATER_PREFIX_ENV,
)
from selfswap.services.update.context import find_update_context
from selfswap.services.update.eviction import backup_path_for, evict
from selfswap.services.update.handoff import decode_arguments, encode_request
from selfswap.services.update.models import (
    InterruptedWaitError,
    MalformedInputError,
    ProcessSpec,
    ProtocolState,
    RetryPolicy,
    UpdateError,
    UpdateIOError,
    UpdateRequest,
)
from selfswap.services.update.payload import build_payload, update
from selfswap.services.update.protocol import ReplacementProtocol, fetch
from selfswap.services.update.recovery import find_backup, restore_backup
from selfswap.services.update.runtime import resolve_executable
from selfswap.services.update.service import UpdateService
from selfswap.services.update.spawner import DetachedProcessSpawner, ProcessSpawner
from selfswap.services.update.staleness import (
    RemoteTimestampSource,
    UrlTimestampSource,
    is_up_to_date,
)

__all__ = [
    "ARGS_FLAG",
    "BACKUP_SUFFIX",
    "DEFAULT_PAYLOAD_PREFIX",
    "LOCAL_FLAG",
    "REMOTE_FLAG",
    "UPDATER_PREFIX_ENV",
    "DetachedProcessSpawner",
    "InterruptedWaitError",
    "MalformedInputError",
    "ProcessSpawner",
    "ProcessSpec",
    "ProtocolState",
    "RemoteTimestampSource",
    "ReplacementProtocol",
    "RetryPolicy",
    "UpdateError",
    "UpdateIOError",
    "UpdateRequest",
    "UpdateService",
    "UrlTimestampSource",
    "backup_path_for",
    "build_payload",
    "decode_arguments",
    "encode_request",
    "evict",
    "fetch",
    "find_backup",
    "find_update_context",
    "is_up_to_date",
    "resolve_executable",
    "restore_backup",
    "update",
]
