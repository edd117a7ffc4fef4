"""Directory tree collection.

This module walks a directory tree once and returns an immutable snapshot of
every directory below the root. Nothing here renames anything: the snapshot
is taken in full before the first rename so that renaming never invalidates
the walk.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .errors import CollectionError, InvalidRootError
from .sanitizer import WINDOWS_MAX_PATH

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryEntry:
    """A single directory discovered during collection."""

    path: Path
    name: str
    parent: Path
    depth: int

    @classmethod
    def from_path(cls, path: Path, root: Path) -> DirectoryEntry:
        """Build an entry for *path*, measuring its depth below *root*."""
        return cls(path=path, name=path.name, parent=path.parent, depth=calculate_depth(path, root))


@dataclass
class CollectionResult:
    """Snapshot of the directories found under a root."""

    root: Path
    entries: list[DirectoryEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    skipped_symlinks: list[Path] = field(default_factory=list)

    @property
    def total_found(self) -> int:
        return len(self.entries)


def calculate_depth(path: Path, root: Path) -> int:
    """Return the number of path components of *path* below *root*.

    The root itself has depth 0 and a direct child has depth 1.
    """
    relative = os.path.relpath(path, root)
    if relative == os.curdir:
        return 0
    return relative.count(os.sep) + 1


def validate_path_under_root(path: Path, root: Path) -> None:
    """Raise ``ValueError`` if *path* resolves to a location outside *root*.

    *root* itself counts as inside. The comparison is per path component,
    so ``/data-old`` is not inside ``/data``.
    """
    if not path.resolve().is_relative_to(root.resolve()):
        raise ValueError(f"Path {path} is not under root {root}")


def _list_subdirectories(directory: Path, follow_symlinks: bool) -> tuple[list[Path], list[Path]]:
    """Return ``(subdirectories, skipped_symlinks)`` directly inside *directory*.

    Raises ``OSError`` if the directory cannot be listed.
    """
    subdirs: list[Path] = []
    skipped: list[Path] = []
    with os.scandir(directory) as it:
        for dir_entry in it:
            if dir_entry.is_symlink():
                # is_dir() follows the link; dangling links and links to files are ignored.
                if not dir_entry.is_dir():
                    continue
                if follow_symlinks:
                    subdirs.append(Path(dir_entry.path))
                else:
                    skipped.append(Path(dir_entry.path))
            elif dir_entry.is_dir(follow_symlinks=False):
                subdirs.append(Path(dir_entry.path))
    subdirs.sort(key=str)
    skipped.sort(key=str)
    return subdirs, skipped


def collect_directories(
    root: Path | str,
    *,
    skip_inaccessible: bool = True,
    max_depth: int = 0,
    follow_symlinks: bool = False,
) -> CollectionResult:
    """Walk the tree under *root* and collect every directory below it.

    Files are ignored and the root itself is not part of the result. The
    entries come back in walk order; callers decide the processing order.

    Args:
        root: Root directory to walk.
        skip_inaccessible: When a directory cannot be listed, record a warning
            and carry on with the rest of the tree. The unreadable directory
            itself stays in the result so it can still be renamed. When
            ``False``, the failure is logged as an error and counts as a hard
            error, but the walk still covers the rest of the tree.
        max_depth: When positive, directories deeper than this are neither
            collected nor descended into.
        follow_symlinks: Collect and descend into symlinked directories.
            By default they are only reported in ``skipped_symlinks``.

    Returns:
        A ``CollectionResult`` holding the entries and any warnings.

    Raises:
        InvalidRootError: If *root* does not exist or is not a directory.
        CollectionError: If the root cannot be read, or a hard error
            occurred and no directory was collected.
    """
    root = Path(root)
    if not root.exists():
        raise InvalidRootError(f"Root path does not exist: {root}")
    if not root.is_dir():
        raise InvalidRootError(f"Root path is not a directory: {root}")
    root = root.resolve()

    result = CollectionResult(root=root)
    visited: set[str] = {os.path.realpath(root)}
    pending: list[Path] = [root]
    hard_error: OSError | None = None

    while pending:
        directory = pending.pop()
        try:
            subdirs, skipped = _list_subdirectories(directory, follow_symlinks)
        except OSError as exc:
            if directory == root:
                raise CollectionError(f"Cannot read root directory {root}: {exc}") from exc
            # The directory stays collected; only its descendants are lost.
            message = f"Cannot read directory {directory}: {exc.strerror or exc}"
            result.warnings.append(message)
            if skip_inaccessible:
                logger.warning(message)
            else:
                logger.error(message)
                hard_error = exc
            continue

        result.skipped_symlinks.extend(skipped)

        for path in subdirs:
            entry = DirectoryEntry.from_path(path, root)
            if max_depth > 0 and entry.depth > max_depth:
                continue
            result.entries.append(entry)

            path_len = len(str(path))
            if path_len > WINDOWS_MAX_PATH:
                result.warnings.append(
                    f"Path length {path_len} exceeds Windows MAX_PATH ({WINDOWS_MAX_PATH}): {path}"
                )

            if max_depth > 0 and entry.depth >= max_depth:
                continue
            if follow_symlinks:
                real = os.path.realpath(path)
                if real in visited:
                    continue
                visited.add(real)
            pending.append(path)

    if hard_error is not None and not result.entries:
        raise CollectionError(f"Directory walk failed under {root}: {hard_error}") from hard_error

    logger.debug(
        "Collected %d directories under %s (%d warnings)",
        result.total_found,
        root,
        len(result.warnings),
    )
    return result
