"""Read-only index over the topic catalog."""
import logging
from typing import Iterator, Optional

from topic_tutor.models import Category, Example, Topic, DIFFICULTIES, DEFAULT_DIFFICULTY

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "core-python"


class CatalogError(ValueError):
    """Raised when catalog source data is malformed. Fatal at startup."""


def _require(raw: dict, field: str, where: str) -> str:
    value = raw.get(field)
    if value is None or not str(value).strip():
        raise CatalogError(f"{where} is missing required field '{field}'")
    return str(value).strip()


def _example_from_dict(raw: dict, where: str) -> Example:
    if not isinstance(raw, dict):
        raise CatalogError(f"{where} must be a mapping")
    runnable = raw.get("runnable")
    note = raw.get("note")
    return Example(
        title=_require(raw, "title", where),
        code=str(raw.get("code") or ""),
        runnable=str(runnable) if runnable is not None else None,
        note=str(note) if note is not None else None,
    )


def _topic_from_dict(raw: dict, where: str) -> Topic:
    if not isinstance(raw, dict):
        raise CatalogError(f"{where} must be a mapping")
    key = _require(raw, "id", where)
    where = f"topic '{key}'"
    difficulty = str(raw.get("difficulty") or DEFAULT_DIFFICULTY).strip().lower()
    if difficulty not in DIFFICULTIES:
        raise CatalogError(f"{where} has unknown difficulty '{raw.get('difficulty')}'")
    examples = tuple(
        _example_from_dict(item, f"{where} example {i}")
        for i, item in enumerate(raw.get("examples") or [], 1)
    )
    return Topic(
        key=key,
        title=_require(raw, "title", where),
        description=str(raw.get("description") or ""),
        difficulty=difficulty,
        examples=examples,
    )


def _category_from_dict(raw: dict, position: int) -> Category:
    if not isinstance(raw, dict):
        raise CatalogError(f"category {position} must be a mapping")
    key = _require(raw, "id", f"category {position}")
    topics = tuple(
        _topic_from_dict(item, f"category '{key}' topic {i}")
        for i, item in enumerate(raw.get("topics") or [], 1)
    )
    return Category(
        key=key,
        title=str(raw.get("title") or key),
        description=str(raw.get("description") or ""),
        glyph=str(raw.get("glyph") or ""),
        topics=topics,
    )


class CatalogIndex:
    """Immutable lookup structure over categories and their ordered topics."""

    def __init__(self, categories: list[Category], default_key: Optional[str] = None):
        if not categories:
            raise CatalogError("Catalog must declare at least one category")
        self._categories: dict[str, Category] = {}
        self._topics: dict[str, Topic] = {}
        self._topic_category: dict[str, str] = {}
        for category in categories:
            if category.key in self._categories:
                raise CatalogError(f"Duplicate category id: {category.key}")
            self._categories[category.key] = category
            for topic in category.topics:
                previous = self._topic_category.get(topic.key)
                if previous is not None:
                    raise CatalogError(
                        f"Duplicate topic id: {topic.key} (in {previous} and {category.key})"
                    )
                self._topics[topic.key] = topic
                self._topic_category[topic.key] = category.key

        if default_key is None:
            default_key = DEFAULT_CATEGORY if DEFAULT_CATEGORY in self._categories else categories[0].key
        elif default_key not in self._categories:
            raise CatalogError(f"Default category '{default_key}' is not in the catalog")
        self._default_key = default_key
        logger.debug(
            "Catalog indexed: %d categories, %d topics, default %s",
            len(self._categories), len(self._topics), default_key,
        )

    @property
    def default_category(self) -> Category:
        return self._categories[self._default_key]

    def categories(self) -> tuple[Category, ...]:
        return tuple(self._categories.values())

    def has_category(self, key) -> bool:
        return isinstance(key, str) and key in self._categories

    def category(self, key) -> Category:
        """Return the category for key, or the default category if key is unknown."""
        if self.has_category(key):
            return self._categories[key]
        return self.default_category

    def all_topics(self) -> Iterator[Topic]:
        """Yield every topic in category order, then topic order."""
        for category in self._categories.values():
            yield from category.topics

    def topic(self, key: str) -> Optional[Topic]:
        return self._topics.get(key)

    def category_of(self, topic_key: str) -> Optional[str]:
        return self._topic_category.get(topic_key)

    def topic_count(self) -> int:
        return len(self._topics)


def build_catalog(raw: dict, default_key: Optional[str] = None) -> CatalogIndex:
    """Build a CatalogIndex from pre-parsed catalog data."""
    if not isinstance(raw, dict):
        raise CatalogError("Catalog source root must be a mapping")
    entries = raw.get("categories")
    if not isinstance(entries, list):
        raise CatalogError("Catalog source must contain a 'categories' list")
    categories = [_category_from_dict(entry, i) for i, entry in enumerate(entries, 1)]
    return CatalogIndex(categories, default_key=default_key)
