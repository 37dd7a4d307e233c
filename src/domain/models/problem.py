"""Tracked problem records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: Any) -> Difficulty:
        """Case-insensitive parse; anything unrecognised is Unknown."""
        if value is None:
            return cls.UNKNOWN
        text = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return cls.UNKNOWN


class Status(str, Enum):
    TODO = "Todo"
    IN_PROGRESS = "In Progress"
    DONE = "Done"
    POSTPONED = "Postponed"

    @classmethod
    def parse(cls, value: Any) -> Status:
        if value is None:
            return cls.TODO
        text = str(value).strip().lower()
        if text in ("not opened", "todo"):
            return cls.TODO
        for member in cls:
            if member.value.lower() == text:
                return member
        return cls.TODO


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class ProblemRecord:
    """One problem tracked in a user's collection, keyed by ``title_slug``."""

    title: str
    title_slug: str
    difficulty: Difficulty = Difficulty.UNKNOWN
    type: str | None = None
    status: Status = Status.TODO
    url: str | None = None
    source_sheets: set[str] = field(default_factory=set)
    completed_date: str | None = None
    added_at: str | None = None

    def set_status(self, status: Status, when: str | None = None) -> None:
        """Change status, stamping or clearing ``completed_date``."""
        if status == Status.DONE and self.status != Status.DONE:
            self.completed_date = when or utc_now_iso()
        elif status != Status.DONE:
            self.completed_date = None
        self.status = status

    @property
    def topics(self) -> list[str]:
        """Individual topic labels of a comma/semicolon/slash separated ``type``."""
        if not self.type:
            return []
        parts = self.type.replace(";", ",").replace("/", ",").split(",")
        return [p.strip() for p in parts if p.strip()]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "title": self.title,
            "titleSlug": self.title_slug,
            "difficulty": self.difficulty.value,
            "status": self.status.value,
            "sourceSheets": sorted(self.source_sheets),
        }
        if self.type is not None:
            data["type"] = self.type
        if self.url is not None:
            data["url"] = self.url
        if self.completed_date is not None:
            data["completedDate"] = self.completed_date
        if self.added_at is not None:
            data["addedAt"] = self.added_at
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProblemRecord:
        return cls(
            title=data.get("title") or data.get("titleSlug", ""),
            title_slug=data["titleSlug"],
            difficulty=Difficulty.parse(data.get("difficulty")),
            type=data.get("type"),
            status=Status.parse(data.get("status")),
            url=data.get("url"),
            source_sheets=set(data.get("sourceSheets") or []),
            completed_date=data.get("completedDate"),
            added_at=data.get("addedAt"),
        )
