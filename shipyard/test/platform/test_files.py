from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from shipyard.platform.files import atomic_write_text


def test_atomic_write_creates_file(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "deployment.yaml"
    atomic_write_text(path, "image: acme/web:v1.0.0\n")
    assert path.read_text(encoding="utf-8") == "image: acme/web:v1.0.0\n"


def test_atomic_write_replaces_and_leaves_no_temp_files(tmp_path: Path) -> None:
    path = tmp_path / "README.md"
    path.write_text("old\n", encoding="utf-8")

    atomic_write_text(path, "new\n")

    assert path.read_text(encoding="utf-8") == "new\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["README.md"]


@pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
def test_atomic_write_preserves_mode(tmp_path: Path) -> None:
    path = tmp_path / "deploy.sh"
    path.write_text("echo old\n", encoding="utf-8")
    path.chmod(0o750)

    atomic_write_text(path, "echo new\n")

    assert stat.S_IMODE(path.stat().st_mode) == 0o750


def test_failed_replace_keeps_original(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "README.md"
    path.write_text("original\n", encoding="utf-8")

    def boom(src: object, dst: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", boom)

    with pytest.raises(OSError, match="disk full"):
        atomic_write_text(path, "partial")

    assert path.read_text(encoding="utf-8") == "original\n"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["README.md"]
