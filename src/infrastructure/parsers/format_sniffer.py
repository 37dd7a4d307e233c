"""Classify uploaded files by extension."""

from enum import Enum

DOCUMENT_EXTENSIONS = frozenset({"txt", "md", "markdown", "docx", "pdf"})
SPREADSHEET_EXTENSIONS = frozenset({"xlsx", "xls", "csv"})


class FileKind(str, Enum):
    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    UNSUPPORTED = "unsupported"


def file_extension(file_name: str) -> str:
    """Lowercased text after the last dot; empty when there is none."""
    if "." not in file_name:
        return ""
    return file_name.rsplit(".", 1)[1].strip().lower()


def sniff_format(file_name: str) -> FileKind:
    extension = file_extension(file_name)
    if extension in DOCUMENT_EXTENSIONS:
        return FileKind.DOCUMENT
    if extension in SPREADSHEET_EXTENSIONS:
        return FileKind.SPREADSHEET
    return FileKind.UNSUPPORTED
