"""Unit tests for format sniffing and document text extraction."""

import io
import zipfile

import pytest
from pypdf import PdfWriter

from domain.exceptions import FileParseError, UnsupportedFormatError
from infrastructure.parsers import document_extractors
from infrastructure.parsers.document_extractors import (
    DocxExtractor,
    PdfExtractor,
    extract_text,
    register_extractor,
)
from infrastructure.parsers.format_sniffer import FileKind, file_extension, sniff_format

DOCX_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
    "<w:body>"
    "<w:p><w:r><w:rPr><w:b/></w:rPr><w:t>Week 1</w:t></w:r></w:p>"
    '<w:p><w:r><w:t xml:space="preserve">Solve </w:t></w:r>'
    "<w:r><w:t>https://leetcode.com/problems/two-sum/</w:t></w:r></w:p>"
    "<w:p><w:r><w:t>Then</w:t><w:tab/><w:t>https://leetcode.com/problems/lru-cache/</w:t></w:r></w:p>"
    "</w:body></w:document>"
)


def make_docx(document_xml: str = DOCX_XML) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("[Content_Types].xml", "<Types/>")
        archive.writestr("word/document.xml", document_xml)
    return buffer.getvalue()


@pytest.mark.parametrize(
    "file_name, expected",
    [
        ("notes.txt", FileKind.DOCUMENT),
        ("README.MD", FileKind.DOCUMENT),
        ("plan.markdown", FileKind.DOCUMENT),
        ("Sheet.Docx", FileKind.DOCUMENT),
        ("week.pdf", FileKind.DOCUMENT),
        ("problems.xlsx", FileKind.SPREADSHEET),
        ("old.XLS", FileKind.SPREADSHEET),
        ("export.csv", FileKind.SPREADSHEET),
        ("image.png", FileKind.UNSUPPORTED),
        ("noextension", FileKind.UNSUPPORTED),
        ("archive.csv.zip", FileKind.UNSUPPORTED),
    ],
)
def test_sniff_format(file_name, expected):
    assert sniff_format(file_name) == expected


def test_file_extension_uses_last_suffix():
    assert file_extension("my.problems.CSV") == "csv"
    assert file_extension("plain") == ""


def test_plain_text_strips_bom():
    data = "\ufeffhttps://leetcode.com/problems/two-sum/".encode("utf-8")
    assert extract_text(data, "txt") == "https://leetcode.com/problems/two-sum/"


def test_docx_extracts_paragraph_text_only():
    text = DocxExtractor().extract(make_docx())

    assert text.splitlines() == [
        "Week 1",
        "Solve https://leetcode.com/problems/two-sum/",
        "Then\thttps://leetcode.com/problems/lru-cache/",
    ]


def test_docx_malformed_archive_raises_parse_error():
    with pytest.raises(FileParseError):
        extract_text(b"definitely not a zip", "docx")


def test_docx_missing_body_part_raises_parse_error():
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("word/styles.xml", "<styles/>")

    with pytest.raises(FileParseError):
        DocxExtractor().extract(buffer.getvalue())


def test_pdf_unreadable_document_raises_parse_error():
    with pytest.raises(FileParseError):
        PdfExtractor().extract(b"this is not a pdf")


def test_pdf_page_without_text_layer_raises_parse_error():
    writer = PdfWriter()
    writer.add_blank_page(width=72, height=72)
    buffer = io.BytesIO()
    writer.write(buffer)

    with pytest.raises(FileParseError, match="no text layer"):
        PdfExtractor().extract(buffer.getvalue())


class _FakePage:
    def __init__(self, text):
        self.text = text

    def extract_text(self):
        return self.text


def test_pdf_pages_are_joined_in_order(monkeypatch):
    class FakeReader:
        def __init__(self, stream):
            self.pages = [_FakePage("page one"), _FakePage("page two"), _FakePage("page three")]

    monkeypatch.setattr(document_extractors, "PdfReader", FakeReader)

    assert PdfExtractor().extract(b"%PDF") == "page one\npage two\npage three"


def test_extract_text_unknown_extension():
    with pytest.raises(UnsupportedFormatError):
        extract_text(b"", "rtf")


def test_register_extractor(monkeypatch):
    class UpperExtractor:
        def extract(self, data: bytes) -> str:
            return data.decode().upper()

    monkeypatch.setitem(document_extractors.DOCUMENT_EXTRACTORS, "rst", None)
    register_extractor("RST", UpperExtractor())

    assert extract_text(b"abc", "rst") == "ABC"
