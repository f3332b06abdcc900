"""Data classes for the topic catalog and per-topic interaction state."""
from dataclasses import dataclass
from typing import Optional

DIFFICULTIES = ("beginner", "intermediate", "advanced")
DEFAULT_DIFFICULTY = "beginner"
DIFFICULTY_FILTERS = ("all",) + DIFFICULTIES


@dataclass(frozen=True)
class Example:
    title: str
    code: str = ""
    runnable: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class Topic:
    key: str
    title: str
    description: str = ""
    difficulty: str = DEFAULT_DIFFICULTY
    examples: tuple[Example, ...] = ()


@dataclass(frozen=True)
class Category:
    key: str
    title: str
    description: str = ""
    glyph: str = ""
    topics: tuple[Topic, ...] = ()


@dataclass
class InteractionRecord:
    """User state for one topic. A missing record means all defaults."""
    completed: bool = False
    bookmarked: bool = False
    expanded: bool = False
    note: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "completed": self.completed,
            "bookmarked": self.bookmarked,
            "expanded": self.expanded,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "InteractionRecord":
        note = raw.get("note")
        if note is not None and not isinstance(note, str):
            raise ValueError(f"Note must be a string or null, got {type(note).__name__}")
        return cls(
            completed=bool(raw.get("completed", False)),
            bookmarked=bool(raw.get("bookmarked", False)),
            expanded=bool(raw.get("expanded", False)),
            note=note,
        )


@dataclass(frozen=True)
class Selection:
    active_category: str
    difficulty_filter: str = "all"
    search_query: str = ""
