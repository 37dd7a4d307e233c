"""Extract plain text from text-bearing documents."""

import io
import zipfile

from bs4 import BeautifulSoup
from loguru import logger
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from domain.exceptions import FileParseError, FileReadError, UnsupportedFormatError

from .interfaces import TextExtractorProtocol

DOCX_BODY_PART = "word/document.xml"


def _is_word_tag(*names: str):
    """Match WordprocessingML elements (w: prefix) by local name."""

    def matcher(tag) -> bool:
        return tag.prefix == "w" and tag.name in names

    return matcher


class PlainTextExtractor:
    """txt / md / markdown."""

    def extract(self, data: bytes) -> str:
        try:
            return data.decode("utf-8-sig", errors="replace")
        except (AttributeError, TypeError) as e:
            raise FileReadError(f"Failed to read text file: {e}") from e


class DocxExtractor:
    """Body text of an OOXML word document, one line per paragraph."""

    def extract(self, data: bytes) -> str:
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                xml = archive.read(DOCX_BODY_PART)
        except (zipfile.BadZipFile, KeyError) as e:
            raise FileParseError(f"Failed to parse DOCX file: {e}", "docx") from e

        soup = BeautifulSoup(xml, "xml")
        body = soup.find(_is_word_tag("body"))
        if body is None:
            raise FileParseError("Failed to parse DOCX file: document has no body", "docx")

        paragraphs = []
        for paragraph in body.find_all(_is_word_tag("p")):
            parts = []
            for node in paragraph.find_all(_is_word_tag("t", "tab", "br")):
                if node.name == "t":
                    parts.append(node.get_text())
                elif node.name == "tab":
                    parts.append("\t")
                else:
                    parts.append("\n")
            paragraphs.append("".join(parts))

        logger.debug(f"Extracted {len(paragraphs)} paragraph(s) from DOCX")
        return "\n".join(paragraphs)


class PdfExtractor:
    """Text layer of every page, in page order. No OCR."""

    def extract(self, data: bytes) -> str:
        try:
            reader = PdfReader(io.BytesIO(data))
            pages = list(reader.pages)
        except (PdfReadError, ValueError, OSError) as e:
            raise FileParseError(
                f"Failed to parse PDF file. Make sure it is not encrypted or corrupt: {e}", "pdf"
            ) from e

        texts = []
        for number, page in enumerate(pages, start=1):
            try:
                text = page.extract_text()
            except (PdfReadError, ValueError, KeyError) as e:
                raise FileParseError(f"Failed to read text of PDF page {number}: {e}", "pdf") from e
            if not text or not text.strip():
                raise FileParseError(
                    f"PDF page {number} has no text layer (scanned documents are not supported)",
                    "pdf",
                )
            texts.append(text)

        logger.debug(f"Extracted text from {len(texts)} PDF page(s)")
        return "\n".join(texts)


_plain_text = PlainTextExtractor()

DOCUMENT_EXTRACTORS: dict[str, TextExtractorProtocol] = {
    "txt": _plain_text,
    "md": _plain_text,
    "markdown": _plain_text,
    "docx": DocxExtractor(),
    "pdf": PdfExtractor(),
}


def register_extractor(extension: str, extractor: TextExtractorProtocol) -> None:
    DOCUMENT_EXTRACTORS[extension.lower()] = extractor


def extract_text(data: bytes, extension: str) -> str:
    """Dispatch to the extractor registered for the extension."""
    extractor = DOCUMENT_EXTRACTORS.get(extension.lower())
    if extractor is None:
        raise UnsupportedFormatError(f"*.{extension}")
    return extractor.extract(data)
