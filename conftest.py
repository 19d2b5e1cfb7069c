"""Pytest configuration applied to the entire test suite."""

from __future__ import annotations

from typing import Iterator

import pytest

from selfswap.app.config import reset_app_config_cache
from selfswap.app.version import get_app_version
from selfswap.shared import logging_config


@pytest.fixture(autouse=True)
def _isolate_updater_state(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> Iterator[None]:
    """Keep log files, payload prefixes and caches out of the user's environment."""

    log_dir = tmp_path_factory.mktemp("logs")
    monkeypatch.setenv(logging_config.LOG_DIR_ENV, str(log_dir))
    monkeypatch.delenv(logging_config.LOG_FILE_ENV, raising=False)
    monkeypatch.delenv("SELFSWAP_UPDATER_PREFIX", raising=False)
    monkeypatch.delenv(logging_config.LOG_VERBOSITY_ENV, raising=False)
    reset_app_config_cache()
    get_app_version.cache_clear()
    logging_config._reset_for_tests()
    try:
        yield
    finally:
        logging_config._reset_for_tests()
        reset_app_config_cache()
        get_app_version.cache_clear()
