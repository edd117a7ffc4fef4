"""Exceptions raised by folder-name-sanitizer."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .service import ProcessingSummary


class SanitizerError(Exception):
    """Base error for the project."""


class InvalidRootError(SanitizerError, ValueError):
    """The root path does not exist or is not a directory."""


class CollectionError(SanitizerError):
    """No directory could be enumerated under the root."""


class RenameFailedError(SanitizerError):
    """A single directory could not be processed; the run carries on."""

    def __init__(self, path: Path, cause: Exception) -> None:
        super().__init__(f"{path}: {cause}")
        self.path: Path = path
        self.cause: Exception = cause


class SanitizationFailedError(SanitizerError):
    """Every processed directory failed and nothing was renamed."""

    def __init__(self, summary: ProcessingSummary) -> None:
        super().__init__(
            f"sanitization completed with {summary.errored} errors and no successful renames"
        )
        self.summary: ProcessingSummary = summary
