"""
File system traversal: walk directories and collect Move source files.

This module provides the file enumerator every analysis consumes. It walks a
source (or test) root recursively and collects every `.move` file. Symlinked
files are collected; symlinked directories are not descended into unless
asked for.

Typical usage:
    from pathlib import Path
    from moveguard.traversal import find_move_files

    sources = find_move_files(Path("./sources"))

    # Skip some directories by name
    sources = find_move_files(Path("./sources"), ignore_dirs={"build", "examples"})
"""

import logging
from pathlib import Path
from typing import AbstractSet, Callable, FrozenSet, Optional

logger = logging.getLogger(__name__)

MOVE_EXTENSION = ".move"

# Nothing is skipped unless the caller names directories
DEFAULT_IGNORE_DIRS: FrozenSet[str] = frozenset()


def is_move_file(path: Path) -> bool:
    """
    Check if a file is a Move source file (.move extension, exact case).

    Examples:
        >>> is_move_file(Path("coin.move"))
        True
        >>> is_move_file(Path("Move.toml"))
        False
    """
    return path.suffix == MOVE_EXTENSION


def should_ignore_directory(dir_path: Path, ignore_dirs: AbstractSet[str]) -> bool:
    """
    Check if a directory should be skipped during traversal.

    Only the directory name is compared, not the full path.

    Examples:
        >>> should_ignore_directory(Path(".git"), {".git"})
        True
        >>> should_ignore_directory(Path("sources"), {".git"})
        False
    """
    return dir_path.name in ignore_dirs


def find_move_files(
    root: Path,
    ignore_dirs: Optional[AbstractSet[str]] = None,
    follow_symlinks: bool = False,
    filter_fn: Optional[Callable[[Path], bool]] = None,
) -> list[Path]:
    """
    Recursively find all Move source files under `root`.

    Args:
        root: Directory to start traversal from.
        ignore_dirs: Directory names to skip. If None, nothing is skipped.
        follow_symlinks: If True, also descend into symlinked directories.
                         Symlinked files are always collected.
        filter_fn: Optional extra predicate; only files for which it returns
                   True are collected.

    Returns:
        Sorted list of paths. A root that does not exist yields an empty list,
        since a project without sources or tests is an empty corpus.

    Raises:
        NotADirectoryError: If `root` exists but is not a directory.
        OSError: If a directory cannot be listed. Traversal failures abort the
                 analysis rather than producing a partial corpus.
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    if not root.exists():
        logger.info("Directory does not exist, treating as empty: %s", root)
        return []

    if not root.is_dir():
        logger.error("Root path is not a directory: %s", root)
        raise NotADirectoryError(f"Root path is not a directory: {root}")

    logger.debug("Starting traversal from: %s (ignore_dirs=%s)", root, sorted(ignore_dirs))

    collected_files: list[Path] = []

    def _walk_directory(current_dir: Path) -> None:
        for entry in current_dir.iterdir():
            if entry.is_dir():
                if entry.is_symlink() and not follow_symlinks:
                    logger.debug("Not descending into symlinked directory: %s", entry)
                    continue
                if should_ignore_directory(entry, ignore_dirs):
                    logger.debug("Ignoring directory: %s", entry)
                    continue
                _walk_directory(entry)
            elif entry.is_file() and is_move_file(entry):
                if filter_fn is not None and not filter_fn(entry):
                    logger.debug("Filtered out by custom filter: %s", entry)
                    continue
                collected_files.append(entry)

    _walk_directory(root)

    # Sort for deterministic ordering
    collected_files.sort()

    logger.info("Traversal complete: found %d Move file(s) in %s", len(collected_files), root)
    return collected_files
