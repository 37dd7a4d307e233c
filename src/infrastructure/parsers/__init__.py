"""Parsers for extracting problem data from uploaded files."""

from .document_extractors import (
    DOCUMENT_EXTRACTORS,
    DocxExtractor,
    PdfExtractor,
    PlainTextExtractor,
    extract_text,
    register_extractor,
)
from .format_sniffer import FileKind, file_extension, sniff_format
from .interfaces import DocumentStoreProtocol, HTTPClientProtocol, TextExtractorProtocol
from .spreadsheet_reader import read_grid

__all__ = [
    "DOCUMENT_EXTRACTORS",
    "DocumentStoreProtocol",
    "DocxExtractor",
    "FileKind",
    "HTTPClientProtocol",
    "PdfExtractor",
    "PlainTextExtractor",
    "TextExtractorProtocol",
    "extract_text",
    "file_extension",
    "read_grid",
    "register_extractor",
    "sniff_format",
]
