"""Public API: re-exports all public symbols from the package.

The package ``__init__.py`` re-exports everything from here via
``from .folder_name_sanitizer import *``.
"""

from __future__ import annotations

# CLI entry point
from .cli import main

# Errors
from .errors import (
    CollectionError,
    InvalidRootError,
    RenameFailedError,
    SanitizationFailedError,
    SanitizerError,
)

# Renamer: single renames, collision resolution and logging
from .renamer import (
    DEFAULT_MAX_COLLISION_ATTEMPTS,
    RenameProcessor,
    RenameResult,
    generate_log_filename,
    write_rename_log,
)

# Reporter: plain-text output
from .reporter import CLIReporter, format_summary

# Sanitizer: pure functions and constants
from .sanitizer import (
    CONTROL_CHARS,
    DEFAULT_MAX_NAME_LENGTH,
    EMPTY_NAME_PLACEHOLDER,
    FORBIDDEN_CHARS,
    RESERVED_NAMES,
    WINDOWS_MAX_PATH,
    handle_reserved_names,
    is_name_safe,
    replace_forbidden_chars,
    sanitize_name,
    sanitize_name_with_issues,
    strip_control_chars,
    transliterate_char,
    transliterate_non_ascii,
    trim_dots_and_spaces,
    truncate_name,
)

# Scanner: tree collection and data classes
from .scanner import (
    CollectionResult,
    DirectoryEntry,
    calculate_depth,
    collect_directories,
    validate_path_under_root,
)

# Service: orchestration
from .service import (
    NullReporter,
    ProcessingSummary,
    ProgressReporter,
    SanitizationService,
    sanitize_directory,
    sort_bottom_up,
)

# TUI entry point
from .tui import tui_main

__all__ = [
    # CLI
    "main",
    "tui_main",
    # Errors
    "SanitizerError",
    "InvalidRootError",
    "CollectionError",
    "RenameFailedError",
    "SanitizationFailedError",
    # Sanitizer functions
    "sanitize_name",
    "sanitize_name_with_issues",
    "is_name_safe",
    "strip_control_chars",
    "replace_forbidden_chars",
    "transliterate_char",
    "transliterate_non_ascii",
    "trim_dots_and_spaces",
    "handle_reserved_names",
    "truncate_name",
    # Sanitizer constants
    "FORBIDDEN_CHARS",
    "CONTROL_CHARS",
    "RESERVED_NAMES",
    "EMPTY_NAME_PLACEHOLDER",
    "DEFAULT_MAX_NAME_LENGTH",
    "WINDOWS_MAX_PATH",
    # Scanner
    "DirectoryEntry",
    "CollectionResult",
    "calculate_depth",
    "collect_directories",
    "validate_path_under_root",
    # Renamer
    "DEFAULT_MAX_COLLISION_ATTEMPTS",
    "RenameProcessor",
    "RenameResult",
    "generate_log_filename",
    "write_rename_log",
    # Service
    "ProcessingSummary",
    "ProgressReporter",
    "NullReporter",
    "SanitizationService",
    "sanitize_directory",
    "sort_bottom_up",
    # Reporter
    "CLIReporter",
    "format_summary",
]

if __name__ == "__main__":
    raise SystemExit(main())
