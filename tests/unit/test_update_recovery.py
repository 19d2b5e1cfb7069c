from __future__ import annotations

from pathlib import Path

import pytest

from selfswap.services.update import UpdateError, find_backup, restore_backup


def test_find_backup_returns_none_without_backup(tmp_path: Path) -> None:
    assert find_backup(tmp_path / "tool.pyz") is None


def test_restore_backup_after_failed_fetch(tmp_path: Path) -> None:
    destination = tmp_path / "tool.pyz"
    (tmp_path / "tool.sik").write_bytes(b"previous release")

    restored = restore_backup(destination)

    assert restored == destination
    assert destination.read_bytes() == b"previous release"
    assert find_backup(destination) is None


def test_restore_refuses_to_replace_installed_artifact(tmp_path: Path) -> None:
    destination = tmp_path / "tool.pyz"
    destination.write_bytes(b"new release")
    (tmp_path / "tool.sik").write_bytes(b"previous release")

    with pytest.raises(UpdateError, match="already exists"):
        restore_backup(destination)

    restore_backup(destination, overwrite=True)
    assert destination.read_bytes() == b"previous release"


def test_restore_without_backup_fails(tmp_path: Path) -> None:
    with pytest.raises(UpdateError, match="No backup"):
        restore_backup(tmp_path / "tool.pyz")
