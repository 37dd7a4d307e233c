"""Resolve free-form problem names to metadata catalog entries."""

import re
from typing import Iterable, Mapping, Protocol

from loguru import logger

from domain.aliases import NEETCODE_ALIASES
from domain.models import Difficulty, MetadataEntry, ProblemRecord

UNCATEGORIZED = "Uncategorized"


class CatalogProtocol(Protocol):
    """Read access to a loaded metadata catalog."""

    def lookup(self, key: str) -> MetadataEntry | None:
        ...

    def items(self) -> Iterable[tuple[str, MetadataEntry]]:
        ...


class MetadataMatcher:
    """
    Tiered lookup, first hit wins:
    alias table, exact slug key, exact spaced key, then containment scan.
    """

    def __init__(self, catalog: CatalogProtocol, aliases: Mapping[str, str] | None = None):
        self.catalog = catalog
        self.aliases = NEETCODE_ALIASES if aliases is None else aliases

    def match(self, name: str | None) -> MetadataEntry | None:
        if not name:
            return None

        clean = name.strip().lower()
        if not clean:
            return None
        clean = self.aliases.get(clean, clean)

        slug = re.sub(r"\s+", "-", clean)
        entry = self.catalog.lookup(slug)
        if entry is not None:
            return entry

        entry = self.catalog.lookup(clean.replace("-", " "))
        if entry is not None:
            return entry

        # Unranked: the first registered key satisfying containment wins
        for key, entry in self.catalog.items():
            if key in clean or clean in key:
                logger.debug(f"Containment match '{name}' -> '{key}'")
                return entry

        return None

    def enrich(self, record: ProblemRecord) -> bool:
        """
        Fill Unknown difficulty and empty type from the catalog.
        Returns True when a catalog entry was found.
        """
        entry = self.match(record.title) or self.match(record.title_slug)
        if entry is None:
            if not record.type:
                record.type = UNCATEGORIZED
            return False

        if record.difficulty == Difficulty.UNKNOWN and entry.difficulty:
            record.difficulty = Difficulty.parse(entry.difficulty)
        if not record.type:
            record.type = entry.topic or UNCATEGORIZED
        return True
