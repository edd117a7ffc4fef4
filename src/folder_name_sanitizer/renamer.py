"""Single-directory renames with collision resolution, and JSON log writing."""

from __future__ import annotations

import errno
import json
import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from .sanitizer import DEFAULT_MAX_NAME_LENGTH
from .scanner import DirectoryEntry, validate_path_under_root

logger = logging.getLogger(__name__)

DEFAULT_MAX_COLLISION_ATTEMPTS: int = 1000
CONFLICT_SUFFIX: str = "_conflict"


@dataclass(frozen=True)
class RenameResult:
    """Outcome of processing one directory.

    ``was_renamed`` is ``True`` whenever the directory needed a new name;
    ``success`` tells whether that rename was performed (or simulated).
    A failed rename keeps the attempted destination in ``final_path`` and
    the exception in ``failure``.
    """

    success: bool
    original_path: Path
    final_path: Path
    was_renamed: bool
    failure: Exception | None = None

    @property
    def original_name(self) -> str:
        return self.original_path.name

    @property
    def final_name(self) -> str:
        return self.final_path.name

    @property
    def error_message(self) -> str | None:
        if self.failure is None:
            return None
        return str(self.failure)


def _split_extension(name: str) -> tuple[str, str]:
    """Split *name* into ``(stem, extension)``.

    A leading dot (``.config``) or a trailing dot does not start an extension.
    """
    dot_idx = name.rfind(".")
    if dot_idx <= 0 or dot_idx == len(name) - 1:
        return name, ""
    return name[:dot_idx], name[dot_idx:]


def _numbered_candidates(desired: str, max_length: int, attempts: int) -> Iterator[str]:
    """Yield ``stem_1.ext``, ``stem_2.ext``, ... for *desired*, at most *attempts* names.

    The suffix is inserted before the extension: ``report.old`` -> ``report_1.old``.
    """
    stem, ext = _split_extension(desired)
    for counter in range(1, attempts + 1):
        suffix = f"_{counter}"
        # Ensure we don't exceed max_length with the suffix.
        max_stem_len = max_length - len(ext) - len(suffix)
        if max_stem_len < 1:
            # Extreme edge case: extension + suffix alone exceed max_length.
            yield (stem + suffix)[:max_length]
        elif len(stem) + len(suffix) + len(ext) > max_length:
            yield stem[:max_stem_len] + suffix + ext
        else:
            yield stem + suffix + ext


def _validate_desired_name(name: str) -> None:
    if not name or name in (os.curdir, os.pardir):
        raise ValueError(f"Invalid directory name: {name!r}")
    separators = {os.sep, "\x00"} | ({os.altsep} if os.altsep else set())
    if any(sep in name for sep in separators):
        raise ValueError(f"Directory name must not contain a path separator: {name!r}")


class RenameProcessor:
    """Renames one directory at a time, never overwriting an existing entry.

    In simulation mode nothing is touched on disk, but every simulated
    destination is remembered so that later simulated renames in the same
    run see it as taken. Call ``reset()`` before starting a new run.
    """

    def __init__(
        self,
        *,
        max_collision_attempts: int = DEFAULT_MAX_COLLISION_ATTEMPTS,
        max_length: int = DEFAULT_MAX_NAME_LENGTH,
    ) -> None:
        if max_collision_attempts <= 0:
            max_collision_attempts = DEFAULT_MAX_COLLISION_ATTEMPTS
        self.max_collision_attempts: int = max_collision_attempts
        self.max_length: int = max_length
        self._claimed: set[Path] = set()

    def reset(self) -> None:
        """Forget destinations claimed by earlier simulated renames."""
        self._claimed.clear()

    def _is_taken(self, path: Path) -> bool:
        # lexists: a dangling symlink still occupies the name.
        return os.path.lexists(path) or path in self._claimed

    def resolve_collision(self, parent: Path, desired_name: str) -> Path:
        """Return a free path for *desired_name* inside *parent*.

        If the plain name is taken, numbered variants are tried in order.
        When all ``max_collision_attempts`` variants are taken, the name gets
        the fixed ``_conflict`` suffix without checking whether that is free.
        """
        target = parent / desired_name
        if not self._is_taken(target):
            return target

        for candidate in _numbered_candidates(
            desired_name, self.max_length, self.max_collision_attempts
        ):
            path = parent / candidate
            if not self._is_taken(path):
                logger.debug("Name collision on %s resolved as %s", target, path.name)
                return path

        # Same length cap as the numbered candidates.
        keep = max(self.max_length - len(CONFLICT_SUFFIX), 1)
        fallback = parent / f"{desired_name[:keep]}{CONFLICT_SUFFIX}"
        logger.warning(
            "No free name for %s after %d attempts; falling back to %s",
            target,
            self.max_collision_attempts,
            fallback.name,
        )
        return fallback

    def process_rename(
        self,
        entry: DirectoryEntry,
        desired_name: str,
        simulate_only: bool = False,
    ) -> RenameResult:
        """Rename *entry* to *desired_name*, or to a collision-free variant of it.

        Filesystem failures are captured in the returned result so that the
        caller can carry on with the next directory.

        Raises:
            ValueError: If *desired_name* is empty or contains a path separator,
                or the destination would land outside the entry's parent.
        """
        _validate_desired_name(desired_name)

        if desired_name == entry.name:
            return RenameResult(
                success=True,
                original_path=entry.path,
                final_path=entry.path,
                was_renamed=False,
            )

        final_path = self.resolve_collision(entry.parent, desired_name)
        validate_path_under_root(final_path, entry.parent)

        if simulate_only:
            self._claimed.add(final_path)
            logger.info("[dry-run] %s -> %s", entry.path, final_path.name)
            return RenameResult(
                success=True,
                original_path=entry.path,
                final_path=final_path,
                was_renamed=True,
            )

        # Pre-flight check.
        failure: OSError
        if not os.path.lexists(entry.path):
            failure = FileNotFoundError(
                errno.ENOENT, "Source no longer exists", str(entry.path)
            )
        else:
            try:
                os.rename(entry.path, final_path)
            except OSError as exc:
                failure = exc
            else:
                logger.info("Renamed %s -> %s", entry.path, final_path.name)
                return RenameResult(
                    success=True,
                    original_path=entry.path,
                    final_path=final_path,
                    was_renamed=True,
                )

        logger.warning("Failed to rename %s to %s: %s", entry.path, final_path.name, failure)
        return RenameResult(
            success=False,
            original_path=entry.path,
            final_path=final_path,
            was_renamed=True,
            failure=failure,
        )


def write_rename_log(
    results: Iterable[RenameResult],
    root: Path,
    log_file: Path,
    *,
    simulated: bool = False,
) -> None:
    """Write a JSON log file recording all attempted renames.

    The log contains a ``renames`` array of successful renames and an
    ``errors`` array of failures, suitable for auditing.
    """
    renames: list[dict[str, str]] = []
    errors: list[dict[str, str]] = []

    for result in results:
        if result.failure is not None:
            entry: dict[str, str] = {"source": str(result.original_path)}
            if result.error_message:
                entry["error"] = result.error_message
            errors.append(entry)
        elif result.was_renamed:
            renames.append(
                {
                    "source": str(result.original_path),
                    "destination": str(result.final_path),
                }
            )

    log_data = {
        "timestamp": datetime.now(UTC).isoformat(),
        "root": str(root),
        "simulated": simulated,
        "total_renames": len(renames),
        "total_errors": len(errors),
        "renames": renames,
        "errors": errors,
    }

    log_file.parent.mkdir(parents=True, exist_ok=True)
    log_file.write_text(json.dumps(log_data, indent=2) + "\n", encoding="utf-8")


def generate_log_filename() -> str:
    """Generate a timestamped log filename like ``rename_log_20260209_153045.json``."""
    now = datetime.now(UTC)
    return f"rename_log_{now.strftime('%Y%m%d_%H%M%S')}.json"
