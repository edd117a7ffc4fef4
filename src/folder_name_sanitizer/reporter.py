"""Plain-text progress reporting and summary formatting."""

from __future__ import annotations

import sys
from typing import TextIO

from .service import ProcessingSummary


def format_summary(summary: ProcessingSummary, *, verbose: bool = False) -> str:
    """Format a run summary as a human-readable string.

    In normal mode, shows the counts and the list of renames.
    In verbose mode, also shows collection warnings.
    """
    lines: list[str] = []

    if summary.simulated:
        lines.append("=== DRY RUN SUMMARY ===")
        lines.append("No changes were made to the file system")
    else:
        lines.append("=== PROCESSING SUMMARY ===")

    lines.append(f"Total folders found: {summary.total_found}")
    lines.append(f"Folders processed: {summary.processed}")
    lines.append(f"Folders renamed: {summary.renamed}")
    lines.append(f"Folders skipped: {summary.skipped}")
    if summary.errored:
        lines.append(f"Errors encountered: {summary.errored}")
    lines.append(f"Time elapsed: {summary.elapsed.total_seconds():.3f}s")

    if summary.renames:
        lines.append("")
        heading = "Would rename" if summary.simulated else "Renamed"
        lines.append(f"{heading} {len(summary.renames)} folders:")
        for result in summary.renames:
            lines.append(f"  [dir]  {result.original_name} -> {result.final_name}")
            lines.append(f"         in {result.original_path.parent}")

    if verbose and summary.warnings:
        lines.append("")
        lines.append(f"Warnings ({len(summary.warnings)}):")
        for warning in summary.warnings:
            lines.append(f"  ! {warning}")

    lines.append("")
    if summary.renamed > 0:
        if summary.simulated:
            lines.append(
                f"{summary.renamed} folders would be renamed. Use --write to apply changes."
            )
        else:
            lines.append(f"Successfully sanitized {summary.renamed} folder names.")
    elif summary.total_found > 0 and summary.errored == 0:
        lines.append("All folder names are already compatible.")
    elif summary.total_found == 0:
        lines.append("No folders found.")

    return "\n".join(lines)


class CLIReporter:
    """Prints progress to *out* and errors to *err*.

    Progress lines are only printed in verbose mode; errors and the final
    summary are always printed.
    """

    def __init__(
        self,
        *,
        verbose: bool = False,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.verbose: bool = verbose
        self.out: TextIO = out if out is not None else sys.stdout
        self.err: TextIO = err if err is not None else sys.stderr
        self.error_count: int = 0

    def report_progress(self, current: int, total: int, name: str) -> None:
        if self.verbose:
            print(f"[{current}/{total}] Processing: {name}", file=self.out)

    def report_error(self, error: Exception) -> None:
        self.error_count += 1
        print(f"Error: {error}", file=self.err)

    def report_complete(self, summary: ProcessingSummary) -> None:
        print("\n" + format_summary(summary, verbose=self.verbose), file=self.out)
