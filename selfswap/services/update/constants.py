"""Constants shared across the update service modules."""

from __future__ import annotations

REMOTE_FLAG = "--remote"
LOCAL_FLAG = "--local"
ARGS_FLAG = "--args"

BACKUP_SUFFIX = ".sik"
PARTIAL_DOWNLOAD_SUFFIX = ".part"

PAYLOAD_SUFFIX = ".pyz"
DEFAULT_PAYLOAD_PREFIX = "selfswap-updater"
PAYLOAD_DESCRIPTOR_NAME = "PAYLOAD-INFO.json"
PAYLOAD_RESOURCE_SUFFIXES = (".py", ".json")

DEFAULT_EVICTION_ATTEMPTS = 10
DEFAULT_EVICTION_DELAY = 1.0  # seconds

WINDOWED_EXECUTABLE_NAME = "pythonw.exe"

UPDATER_PREFIX_ENV = "SELFSWAP_UPDATER_PREFIX"
