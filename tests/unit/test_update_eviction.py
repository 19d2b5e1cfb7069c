from __future__ import annotations

import os
from pathlib import Path

import pytest

from selfswap.app import config as app_config
from selfswap.services.update import (
    InterruptedWaitError,
    RetryPolicy,
    UpdateIOError,
    backup_path_for,
    evict,
)
from selfswap.services.update.eviction import configured_policy

from tests.unit.update_service_test_utils import instant_policy


class LockedUntil:
    """Fail ``os.replace`` until the given attempt, like a file held open by a process."""

    def __init__(self, release_on_attempt: int) -> None:
        self.release_on_attempt = release_on_attempt
        self.attempts = 0
        self._real_replace = os.replace

    def __call__(self, source, target) -> None:
        self.attempts += 1
        if self.attempts < self.release_on_attempt:
            raise PermissionError(13, "The process cannot access the file", str(source))
        self._real_replace(source, target)


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("tool.pyz", "tool.sik"),
        ("app.tar.gz", "app.tar.sik"),
        ("launcher", "launcher.sik"),
    ],
)
def test_backup_path_replaces_last_extension(tmp_path: Path, filename: str, expected: str) -> None:
    assert backup_path_for(tmp_path / filename) == tmp_path / expected


def test_evict_moves_artifact_to_backup(tmp_path: Path) -> None:
    destination = tmp_path / "tool.pyz"
    destination.write_bytes(b"old release \x00\xff")
    policy, sleep = instant_policy()

    backup = evict(destination, policy)

    assert backup == tmp_path / "tool.sik"
    assert not destination.exists()
    assert backup.read_bytes() == b"old release \x00\xff"
    assert sleep.delays == []


def test_evict_replaces_previous_backup(tmp_path: Path) -> None:
    destination = tmp_path / "tool.pyz"
    destination.write_bytes(b"current")
    (tmp_path / "tool.sik").write_bytes(b"stale backup")
    policy, _ = instant_policy()

    backup = evict(destination, policy)

    assert backup.read_bytes() == b"current"


@pytest.mark.parametrize("release_on_attempt", [2, 5, 10])
def test_evict_succeeds_once_lock_is_released(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, release_on_attempt: int
) -> None:
    destination = tmp_path / "tool.pyz"
    destination.write_bytes(b"old")
    lock = LockedUntil(release_on_attempt)
    monkeypatch.setattr("selfswap.services.update.eviction.os.replace", lock)
    policy, sleep = instant_policy()

    backup = evict(destination, policy)

    assert lock.attempts == release_on_attempt
    assert sleep.delays == [1.0] * (release_on_attempt - 1)
    assert backup.read_bytes() == b"old"


def test_evict_gives_up_after_ten_attempts(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    destination = tmp_path / "tool.pyz"
    destination.write_bytes(b"old")
    lock = LockedUntil(release_on_attempt=11)
    monkeypatch.setattr("selfswap.services.update.eviction.os.replace", lock)
    policy, sleep = instant_policy()

    with pytest.raises(UpdateIOError) as excinfo:
        evict(destination, policy)

    assert lock.attempts == 10
    assert sleep.delays == [1.0] * 9
    assert isinstance(excinfo.value.__cause__, PermissionError)
    assert destination.read_bytes() == b"old"
    assert not backup_path_for(destination).exists()


def test_interrupted_wait_aborts_retry_loop(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    destination = tmp_path / "tool.pyz"
    destination.write_bytes(b"old")
    lock = LockedUntil(release_on_attempt=5)
    monkeypatch.setattr("selfswap.services.update.eviction.os.replace", lock)

    def interrupted(delay: float) -> None:
        raise KeyboardInterrupt

    with pytest.raises(InterruptedWaitError):
        evict(destination, RetryPolicy(max_attempts=10, delay=1.0, sleep=interrupted))

    assert lock.attempts == 1


def test_configured_policy_reads_eviction_settings(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    config_path = tmp_path / "selfswap.json"
    config_path.write_text(
        '{"eviction": {"max_attempts": 3, "delay_seconds": 0.25}}', encoding="utf-8"
    )

    app_config.reset_app_config_cache()
    monkeypatch.setattr(app_config, "_APP_CONFIG_CACHE", app_config.load_app_config(config_path))

    policy = configured_policy()

    assert policy.max_attempts == 3
    assert policy.delay == 0.25


def test_default_policy_matches_bundled_configuration() -> None:
    policy = configured_policy()

    assert policy.max_attempts == 10
    assert policy.delay == 1.0
