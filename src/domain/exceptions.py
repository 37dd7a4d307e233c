"""Exceptions raised by the problem import pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.models.importing import ImportResult


class ProblemImportError(Exception):
    """Base exception for problem import failures."""

    pass


class UnsupportedFormatError(ProblemImportError):
    """File extension is not one of the recognised document/spreadsheet types."""

    def __init__(self, file_name: str):
        self.file_name = file_name
        super().__init__(f"Unsupported file type: {file_name}")


class FileReadError(ProblemImportError):
    """Raw bytes of an uploaded file could not be read."""

    pass


class FileParseError(ProblemImportError):
    """Format-specific structural failure (bad DOCX, PDF or workbook)."""

    def __init__(self, message: str, extension: str | None = None):
        self.extension = extension
        super().__init__(message)


class NoMatchesFoundError(ProblemImportError):
    """No candidate problems were found. Benign: nothing is written."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"No problems found in {source}")


class MetadataLoadError(ProblemImportError):
    """External metadata catalog could not be fetched."""

    pass


class PersistenceError(ProblemImportError):
    """Final write of the merged collection failed.

    The computed result is kept on the exception so the commit can be retried.
    """

    def __init__(self, message: str, result: ImportResult | None = None):
        self.result = result
        super().__init__(message)


class ImportInProgressError(ProblemImportError):
    """Another import for the same user is still running."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"An import is already running for user {user_id}")


class StaleResultError(ProblemImportError):
    """Result belongs to a request that a newer one has superseded."""

    pass


class URLParsingError(ValueError):
    """Invalid URL format or unable to parse URL."""

    pass


class LinkImportError(ProblemImportError):
    """Problems behind a list/study plan/tag link could not be fetched."""

    pass
