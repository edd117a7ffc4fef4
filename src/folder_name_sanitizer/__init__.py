__all__ = (  # noqa: F405
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
)

from .folder_name_sanitizer import *  # noqa: F403
