"""Source tree scanning for publishable files."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from scripts.registry.errors import ScanError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceFile:
    """A file found under a source root during one scan pass."""

    path: Path  # Absolute path
    relative_path: str  # Relative to the source root, "/"-separated
    extension: str


def _raise_scan_error(error: OSError) -> None:
    raise ScanError(
        f"Cannot read directory: {error.strerror or error}",
        file=error.filename,
    )


def scan_files(root: Path | str, extensions: list[str]) -> list[Path]:
    """Recursively collect files under root whose names end with an extension.

    Traversal is depth-first. Symlinked files are treated as ordinary files;
    symlinked directories are not descended into.

    Args:
        root: Directory to scan.
        extensions: Accepted filename suffixes (e.g., [".ts", ".tsx"]).

    Returns:
        Absolute paths of matching files.

    Raises:
        ScanError: If root or any directory beneath it cannot be read.
    """
    root = Path(root).absolute()
    if not root.is_dir():
        raise ScanError("Source directory does not exist", file=str(root))

    suffixes = tuple(extensions)
    files: list[Path] = []

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_scan_error):
        # Stable order keeps progress output reproducible between runs
        dirnames.sort()
        for filename in sorted(filenames):
            if filename.endswith(suffixes):
                files.append(Path(dirpath) / filename)

    return files


def scan_source_tree(
    source_root: Path | str,
    subdirs: list[str],
    extensions: list[str],
) -> list[SourceFile]:
    """Scan the configured subtrees of a source root.

    Subtrees that do not exist are skipped. The source root itself must exist.

    Args:
        source_root: The source root (e.g., <project>/src).
        subdirs: Subtrees to scan, in order.
        extensions: Accepted filename suffixes.

    Returns:
        SourceFile entries in scan order.

    Raises:
        ScanError: If the source root or an existing subtree cannot be read.
    """
    source_root = Path(source_root).absolute()
    if not source_root.is_dir():
        raise ScanError("Source root does not exist", file=str(source_root))

    results: list[SourceFile] = []
    for subdir in subdirs:
        scan_root = source_root / subdir
        if not os.path.lexists(scan_root):
            logger.debug("Source subtree %s not present, skipping", scan_root)
            continue

        for path in scan_files(scan_root, extensions):
            relative = path.relative_to(source_root).as_posix()
            results.append(
                SourceFile(
                    path=path,
                    relative_path=relative,
                    extension=next(ext for ext in extensions if path.name.endswith(ext)),
                )
            )

    return results


def count_files(root: Path | str, extensions: list[str]) -> int:
    """Count matching files under root, returning 0 when root is absent."""
    root = Path(root)
    if not root.is_dir():
        return 0
    return len(scan_files(root, extensions))
