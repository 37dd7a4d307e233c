"""Process-wide, load-once catalog of problem difficulty/topic metadata."""

import asyncio
import csv
import io
import re
from typing import Iterator

from loguru import logger

from domain.exceptions import MetadataLoadError
from domain.models import VALID_DIFFICULTIES, MetadataEntry
from infrastructure.errors import HTTPClientError
from infrastructure.parsers.interfaces import HTTPClientProtocol

# Leading rows of the sheet export are banner/header rows
HEADER_ROWS = 3
TITLE_COLUMN = 1
TOPIC_COLUMN = 5
DIFFICULTY_COLUMN = 6


def _cell(row: list[str], index: int) -> str:
    return row[index].strip() if index < len(row) and row[index] else ""


def parse_catalog_csv(text: str) -> dict[str, MetadataEntry]:
    """
    Build the key -> entry table. Each titled row is registered under its
    hyphen-slug form and its raw lowercase form.
    """
    rows = [row for row in csv.reader(io.StringIO(text)) if row and row != [""]]

    entries: dict[str, MetadataEntry] = {}
    for row in rows[HEADER_ROWS:]:
        title = _cell(row, TITLE_COLUMN)
        if not title:
            continue
        difficulty = _cell(row, DIFFICULTY_COLUMN)
        entry = MetadataEntry(
            difficulty=difficulty if difficulty in VALID_DIFFICULTIES else None,
            topic=_cell(row, TOPIC_COLUMN) or None,
        )
        lowered = title.lower()
        entries[re.sub(r"\s+", "-", lowered)] = entry
        entries[lowered] = entry
    return entries


class MetadataCatalog:
    """Lazily loaded lookup table; injected wherever matching happens."""

    def __init__(self, http_client: HTTPClientProtocol, source_url: str):
        """
        Initialize catalog.

        Args:
            http_client: Client used to download the CSV export
            source_url: CSV export URL
        """
        self.http_client = http_client
        self.source_url = source_url
        self._entries: dict[str, MetadataEntry] = {}
        self._loaded = False
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    def __len__(self) -> int:
        return len(self._entries)

    async def load(self) -> None:
        """
        Fetch the catalog once. Later calls are no-ops; a failed load leaves
        the catalog empty so the next call retries.
        """
        if self._loaded:
            return

        async with self._lock:
            if self._loaded:
                return

            logger.info(f"Loading metadata catalog from {self.source_url}")
            try:
                text = await self.http_client.get_text(self.source_url)
                entries = parse_catalog_csv(text)
            except (HTTPClientError, csv.Error) as e:
                self._entries = {}
                logger.warning(f"Failed to load metadata catalog: {e}")
                raise MetadataLoadError(f"Failed to load metadata catalog: {e}") from e

            self._entries = entries
            self._loaded = True
            logger.info(f"Metadata catalog loaded with {len(entries)} key(s)")

    def invalidate(self) -> None:
        """Drop cached entries; the next ``load`` fetches again."""
        self._entries = {}
        self._loaded = False

    def lookup(self, key: str) -> MetadataEntry | None:
        return self._entries.get(key)

    def items(self) -> Iterator[tuple[str, MetadataEntry]]:
        return iter(list(self._entries.items()))
