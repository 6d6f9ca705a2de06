"""Collect local source files for a remote scan."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from gitguard.config import DEFAULT_MAX_FILES
from gitguard.exceptions import ScanError

logger = logging.getLogger(__name__)

CODE_EXTENSIONS = frozenset(
    {
        ".ts",
        ".tsx",
        ".js",
        ".jsx",
        ".mjs",
        ".cjs",
        ".py",
        ".rb",
        ".java",
        ".go",
        ".rs",
        ".php",
        ".c",
        ".cpp",
        ".cs",
        ".swift",
        ".kt",
        ".scala",
    }
)

EXCLUDE_DIRS = frozenset(
    {
        "node_modules",
        "dist",
        "build",
        ".next",
        ".git",
        "coverage",
        "__pycache__",
        "vendor",
    }
)


def _skip_dir(name: str) -> bool:
    return name in EXCLUDE_DIRS or name.startswith(".")


def collect_files(root: Path | str, max_files: int = DEFAULT_MAX_FILES) -> dict[str, str]:
    """Read up to ``max_files`` code files below ``root``.

    Hidden and dependency/build directories are skipped; files that cannot
    be decoded as UTF-8 are ignored.

    Args:
        root: Directory to scan.
        max_files: Maximum number of files returned.

    Returns:
        Mapping of POSIX relative path to file content.

    Raises:
        ScanError: If ``root`` is not a directory or ``max_files`` is not positive.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise ScanError(f"Not a directory: {root_path}")
    if max_files < 1:
        raise ScanError(f"max_files must be positive, got {max_files}")

    files: dict[str, str] = {}
    for current, dirnames, filenames in os.walk(root_path):
        dirnames[:] = sorted(d for d in dirnames if not _skip_dir(d))
        for filename in sorted(filenames):
            path = Path(current) / filename
            if path.suffix.lower() not in CODE_EXTENSIONS:
                continue
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.debug("Skipping unreadable file %s: %s", path, exc)
                continue
            files[path.relative_to(root_path).as_posix()] = content
            if len(files) >= max_files:
                logger.info("File limit reached (%d), remaining files ignored", max_files)
                return files
    return files


__all__ = ["CODE_EXTENSIONS", "EXCLUDE_DIRS", "collect_files"]
