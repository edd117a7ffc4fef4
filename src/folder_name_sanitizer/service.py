"""Orchestration: collect, order bottom-up, sanitize, rename, summarize.

A run is a single serial pass over a snapshot of the tree. Deeper
directories are always processed before their ancestors, so when a parent is
finally renamed every rename beneath it has already happened under the old
parent path.
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Protocol

from .errors import RenameFailedError, SanitizationFailedError, SanitizerError
from .renamer import DEFAULT_MAX_COLLISION_ATTEMPTS, RenameProcessor, RenameResult
from .sanitizer import DEFAULT_MAX_NAME_LENGTH, sanitize_name
from .scanner import CollectionResult, DirectoryEntry, collect_directories

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessingSummary:
    """Final counts of a run. Built once, after the last directory."""

    total_found: int
    processed: int
    renamed: int
    skipped: int
    errored: int
    elapsed: timedelta
    simulated: bool = False
    results: tuple[RenameResult, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def renames(self) -> tuple[RenameResult, ...]:
        """Results of directories that were (or in a dry run, would be) renamed."""
        return tuple(r for r in self.results if r.success and r.was_renamed)

    @property
    def failures(self) -> tuple[RenameResult, ...]:
        return tuple(r for r in self.results if r.failure is not None)

    @property
    def failed(self) -> bool:
        """``True`` when every processed directory errored and none was renamed."""
        return self.processed > 0 and self.errored == self.processed and self.renamed == 0


class ProgressReporter(Protocol):
    """Receives events from a run, synchronously and in order."""

    def report_progress(self, current: int, total: int, name: str) -> None: ...

    def report_error(self, error: Exception) -> None: ...

    def report_complete(self, summary: ProcessingSummary) -> None: ...


class NullReporter:
    """Reporter that ignores every event."""

    def report_progress(self, current: int, total: int, name: str) -> None:
        pass

    def report_error(self, error: Exception) -> None:
        pass

    def report_complete(self, summary: ProcessingSummary) -> None:
        pass


def sort_bottom_up(entries: Iterable[DirectoryEntry]) -> list[DirectoryEntry]:
    """Return *entries* deepest first, ties broken by path for reproducibility."""
    return sorted(entries, key=lambda entry: (-entry.depth, str(entry.path)))


class SanitizationService:
    """Runs a full sanitization pass over a directory tree.

    Every collaborator can be swapped: *sanitizer* maps a name to its safe
    form, *collector* snapshots the tree, *processor* performs renames and
    *reporter* receives progress, error and completion events.
    """

    def __init__(
        self,
        *,
        sanitizer: Callable[[str], str] = sanitize_name,
        collector: Callable[[Path], CollectionResult] = collect_directories,
        processor: RenameProcessor | None = None,
        reporter: ProgressReporter | None = None,
    ) -> None:
        self.sanitizer: Callable[[str], str] = sanitizer
        self.collector: Callable[[Path], CollectionResult] = collector
        self.processor: RenameProcessor = processor if processor is not None else RenameProcessor()
        self.reporter: ProgressReporter = reporter if reporter is not None else NullReporter()

    def sanitize_directory(
        self, root: Path | str, simulate_only: bool = False
    ) -> ProcessingSummary:
        """Sanitize every directory name below *root*.

        Per-directory failures are reported and counted but never stop the
        run.

        Returns:
            The ``ProcessingSummary`` of the run.

        Raises:
            InvalidRootError: If *root* is not an existing directory.
            CollectionError: If the tree could not be collected at all.
            SanitizationFailedError: If every directory failed and none was
                renamed.
        """
        start = time.perf_counter()
        logger.debug("Starting %s of %s", "dry run" if simulate_only else "sanitization", root)

        try:
            collection = self.collector(Path(root))
        except SanitizerError as exc:
            self.reporter.report_error(exc)
            raise

        entries = sort_bottom_up(collection.entries)
        total = len(entries)
        self.processor.reset()

        processed = renamed = skipped = errored = 0
        results: list[RenameResult] = []

        for index, entry in enumerate(entries, start=1):
            self.reporter.report_progress(index, total, entry.name)
            processed += 1

            try:
                desired = self.sanitizer(entry.name)
                result = self.processor.process_rename(entry, desired, simulate_only)
            except (OSError, ValueError) as exc:
                errored += 1
                logger.warning("Failed to process %s: %s", entry.path, exc)
                results.append(
                    RenameResult(
                        success=False,
                        original_path=entry.path,
                        final_path=entry.path,
                        was_renamed=False,
                        failure=exc,
                    )
                )
                self.reporter.report_error(RenameFailedError(entry.path, exc))
                continue

            results.append(result)
            if result.failure is not None:
                errored += 1
                self.reporter.report_error(RenameFailedError(entry.path, result.failure))
            elif result.success and result.was_renamed:
                renamed += 1
            elif not result.was_renamed:
                skipped += 1

        summary = ProcessingSummary(
            total_found=total,
            processed=processed,
            renamed=renamed,
            skipped=skipped,
            errored=errored,
            elapsed=timedelta(seconds=time.perf_counter() - start),
            simulated=simulate_only,
            results=tuple(results),
            warnings=tuple(collection.warnings),
        )
        logger.info(
            "Processed %d of %d directories: %d renamed, %d skipped, %d errors",
            processed,
            total,
            renamed,
            skipped,
            errored,
        )
        self.reporter.report_complete(summary)

        if summary.failed:
            raise SanitizationFailedError(summary)
        return summary


def sanitize_directory(
    root: Path | str,
    *,
    simulate_only: bool = False,
    reporter: ProgressReporter | None = None,
    max_length: int = DEFAULT_MAX_NAME_LENGTH,
    skip_inaccessible: bool = True,
    max_depth: int = 0,
    follow_symlinks: bool = False,
    max_collision_attempts: int = DEFAULT_MAX_COLLISION_ATTEMPTS,
) -> ProcessingSummary:
    """Build a ``SanitizationService`` from plain options and run it once."""
    service = SanitizationService(
        sanitizer=functools.partial(sanitize_name, max_length=max_length),
        collector=functools.partial(
            collect_directories,
            skip_inaccessible=skip_inaccessible,
            max_depth=max_depth,
            follow_symlinks=follow_symlinks,
        ),
        processor=RenameProcessor(
            max_collision_attempts=max_collision_attempts,
            max_length=max_length,
        ),
        reporter=reporter,
    )
    return service.sanitize_directory(root, simulate_only=simulate_only)
