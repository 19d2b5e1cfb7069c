from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()


@pytest.fixture
def payload_tempdir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Write updater payloads under the test's temporary directory."""

    payloads = tmp_path / "payloads"
    payloads.mkdir()
    monkeypatch.setattr("tempfile.tempdir", str(payloads))
    return payloads
