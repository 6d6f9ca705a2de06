"""Tests for local file collection."""

from __future__ import annotations

from pathlib import Path

import pytest

from gitguard.exceptions import ScanError
from gitguard.scan.collector import collect_files


def _write(root: Path, relative: str, content: str = "x = 1\n") -> None:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a small mixed project tree."""
    root = tmp_path / "project"
    _write(root, "app.py", "print('hi')\n")
    _write(root, "src/index.ts", "export const a = 1;\n")
    _write(root, "src/util/helpers.js")
    _write(root, "README.md", "# readme\n")
    _write(root, "node_modules/lib/index.js")
    _write(root, "dist/bundle.js")
    _write(root, ".hidden/secret.py")
    _write(root, "vendor/pkg/mod.go")
    return root


def test_collects_code_files_only(project: Path) -> None:
    """Non-code files and excluded directories are skipped."""
    files = collect_files(project)

    assert sorted(files) == ["app.py", "src/index.ts", "src/util/helpers.js"]
    assert files["app.py"] == "print('hi')\n"


def test_max_files_limit(project: Path) -> None:
    """Collection stops at max_files."""
    files = collect_files(project, max_files=2)
    assert len(files) == 2


def test_walk_order_is_stable(project: Path) -> None:
    """Files are visited in sorted order so limits are deterministic."""
    assert list(collect_files(project, max_files=1)) == ["app.py"]


def test_unreadable_file_is_skipped(tmp_path: Path) -> None:
    """Binary content is ignored."""
    (tmp_path / "blob.py").write_bytes(b"\xff\xfe\x00bad")
    _write(tmp_path, "ok.py")

    assert list(collect_files(tmp_path)) == ["ok.py"]


def test_uppercase_extension(tmp_path: Path) -> None:
    """Extensions are matched case-insensitively."""
    _write(tmp_path, "Main.JAVA")
    assert list(collect_files(tmp_path)) == ["Main.JAVA"]


def test_not_a_directory(tmp_path: Path) -> None:
    """A file path is rejected."""
    target = tmp_path / "file.py"
    target.write_text("", encoding="utf-8")
    with pytest.raises(ScanError, match="Not a directory"):
        collect_files(target)


def test_non_positive_limit(tmp_path: Path) -> None:
    """max_files must be at least one."""
    with pytest.raises(ScanError, match="must be positive"):
        collect_files(tmp_path, max_files=0)
