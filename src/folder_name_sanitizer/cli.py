"""Command-line interface and main entry point for folder-name-sanitizer."""

from __future__ import annotations

import argparse
import functools
import logging
import sys
from pathlib import Path

from .errors import SanitizationFailedError, SanitizerError
from .renamer import generate_log_filename, write_rename_log
from .reporter import CLIReporter
from .sanitizer import DEFAULT_MAX_NAME_LENGTH, ELLIPSIS_MARKER
from .service import sanitize_directory


def create_parser() -> argparse.ArgumentParser:
    """Create and return the argument parser."""

    parser = argparse.ArgumentParser(
        prog="folder-name-sanitizer",
        description=(
            "Recursively rename directories so that every name is valid on Windows. "
            "Removes control characters, replaces forbidden characters, converts "
            "non-ASCII characters to their closest ASCII equivalent, trims trailing "
            "dots and spaces, handles reserved device names and enforces the "
            "name-length limit. Name collisions get a numbered suffix."
        ),
    )
    parser.add_argument(
        "path",
        type=Path,
        help="Root directory to sanitize recursively. The root itself is never renamed.",
    )
    parser.add_argument(
        "--write",
        action="store_true",
        default=False,
        help="Actually perform renames. Without this flag, only a dry-run is shown.",
    )
    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        default=False,
        help="Skip interactive confirmation when --write is used.",
    )
    parser.add_argument(
        "--max-length",
        type=int,
        default=DEFAULT_MAX_NAME_LENGTH,
        help=f"Maximum folder name length before truncation (default: {DEFAULT_MAX_NAME_LENGTH}).",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=0,
        help="Do not collect folders deeper than this below the root (default: 0, unlimited).",
    )
    parser.add_argument(
        "--follow-symlinks",
        action="store_true",
        default=False,
        help="Follow symbolic links. By default, symlinks are reported but not followed.",
    )
    parser.add_argument(
        "--no-skip-inaccessible",
        dest="skip_inaccessible",
        action="store_false",
        default=True,
        help="Stop collecting at the first folder that cannot be read.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Custom path for the JSON rename log. Default: rename_log_<timestamp>.json",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Show progress for every folder and collection warnings.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to ``sys.argv[1:]``).

    Returns:
        Exit code: 0 on success, 1 on error, 2 on user cancellation.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Extract typed values from argparse namespace.
    root_arg: Path = args.path
    write: bool = args.write
    yes: bool = args.yes
    max_length: int = args.max_length
    max_depth: int = args.max_depth
    follow_symlinks: bool = args.follow_symlinks
    skip_inaccessible: bool = args.skip_inaccessible
    log_file_arg: Path | None = args.log_file
    verbose: bool = args.verbose

    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Validate root path.
    root = root_arg.resolve()
    if not root.is_dir():
        print(f"Error: '{root_arg}' is not a directory.", file=sys.stderr)
        return 1

    if max_length <= len(ELLIPSIS_MARKER):
        print(
            f"Error: --max-length must be greater than {len(ELLIPSIS_MARKER)}.",
            file=sys.stderr,
        )
        return 1

    if max_depth < 0:
        print("Error: --max-depth must not be negative.", file=sys.stderr)
        return 1

    reporter = CLIReporter(verbose=verbose)
    run = functools.partial(
        sanitize_directory,
        root,
        reporter=reporter,
        max_length=max_length,
        max_depth=max_depth,
        follow_symlinks=follow_symlinks,
        skip_inaccessible=skip_inaccessible,
    )

    # Dry run first: always when --write is missing, and as a preview before confirming.
    if not write or not yes:
        try:
            preview = run(simulate_only=True)
        except SanitizationFailedError:
            return 1
        except SanitizerError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

        if not write:
            return 0

        if preview.renamed == 0:
            print("\nNo renames needed. All folder names are already compatible.")
            return 0

        # Interactive confirmation.
        try:
            response = input(f"\nRename {preview.renamed} folders? [y/N] ")
        except (EOFError, KeyboardInterrupt):
            print("\nCancelled.")
            return 2
        if response.strip().lower() not in ("y", "yes"):
            print("Cancelled.")
            return 2

    log_file = log_file_arg if log_file_arg is not None else Path(generate_log_filename())
    try:
        summary = run(simulate_only=False)
    except SanitizationFailedError as exc:
        write_rename_log(exc.summary.results, root, log_file)
        print(f"Log written to: {log_file}")
        return 1
    except SanitizerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    write_rename_log(summary.results, root, log_file)
    print(f"Log written to: {log_file}")
    return 0
