"""Value objects for the external problem metadata catalog."""

from dataclasses import dataclass

VALID_DIFFICULTIES = ("Easy", "Medium", "Hard")


@dataclass(frozen=True)
class MetadataEntry:
    """Catalog row: difficulty and topic of a known problem.

    ``difficulty`` is None when the source cell was not Easy/Medium/Hard.
    """

    difficulty: str | None
    topic: str | None = None
