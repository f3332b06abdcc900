"""Navigation and filter state: active category, difficulty and search text."""
import logging
from functools import lru_cache
from typing import Optional

from topic_tutor.catalog import CatalogIndex
from topic_tutor.models import Category, Selection, Topic, DIFFICULTY_FILTERS
from topic_tutor.search import filtered_topics, normalize_query
from topic_tutor.signals import Signal

logger = logging.getLogger(__name__)


class SelectionController:
    """Owns the Selection and recomputes the filtered topic list on change.

    The three axes are independent: switching category keeps the difficulty
    filter and the search text. Invalid inputs are ignored and the previous
    state is kept.

    Signals:
        on_filtered(topics): the derived topic list after an accepted change.
        on_selection(selection): the new Selection snapshot.
        on_close_panel(): emitted on every accepted category change; the view
            decides whether to close its navigation panel.
    """

    def __init__(
        self,
        catalog: CatalogIndex,
        active_category: Optional[str] = None,
        difficulty_filter: str = "all",
        search_query: str = "",
    ):
        self.catalog = catalog
        if active_category is not None and not catalog.has_category(active_category):
            logger.warning(
                "Unknown category %r, falling back to %s", active_category, catalog.default_category.key
            )
        self._category = catalog.category(active_category).key
        difficulty = _normalize_difficulty(difficulty_filter)
        if difficulty is None:
            logger.warning("Unknown difficulty filter %r, falling back to 'all'", difficulty_filter)
            difficulty = "all"
        self._difficulty = difficulty
        self._query = search_query if isinstance(search_query, str) else ""

        self.on_filtered = Signal("filtered-topics")
        self.on_selection = Signal("selection")
        self.on_close_panel = Signal("close-panel")
        # Per-controller memo keyed on (category, difficulty, normalized query).
        self._derive = lru_cache(maxsize=64)(self._compute)

    @property
    def active_category(self) -> str:
        return self._category

    @property
    def active_category_data(self) -> Category:
        return self.catalog.category(self._category)

    @property
    def difficulty_filter(self) -> str:
        return self._difficulty

    @property
    def search_query(self) -> str:
        return self._query

    @property
    def selection(self) -> Selection:
        return Selection(self._category, self._difficulty, self._query)

    def _compute(self, category: str, difficulty: str, query: str) -> tuple[Topic, ...]:
        return filtered_topics(self.catalog, category, difficulty, query)

    def filtered_topics(self) -> tuple[Topic, ...]:
        return self._derive(self._category, self._difficulty, normalize_query(self._query))

    def _changed(self) -> None:
        self.on_selection.emit(self.selection)
        self.on_filtered.emit(self.filtered_topics())

    def set_category(self, key) -> bool:
        if not self.catalog.has_category(key):
            logger.warning("Ignoring unknown category %r", key)
            return False
        changed = key != self._category
        self._category = key
        if changed:
            logger.debug("Category -> %s", key)
            self._changed()
        self.on_close_panel.emit()
        return True

    def set_difficulty_filter(self, level) -> bool:
        difficulty = _normalize_difficulty(level)
        if difficulty is None:
            logger.warning("Ignoring unknown difficulty filter %r", level)
            return False
        if difficulty != self._difficulty:
            self._difficulty = difficulty
            logger.debug("Difficulty -> %s", difficulty)
            self._changed()
        return True

    def set_search_query(self, text) -> bool:
        if text is None:
            text = ""
        if not isinstance(text, str):
            logger.warning("Ignoring non-text search query %r", text)
            return False
        if normalize_query(text) != normalize_query(self._query):
            self._query = text
            self._changed()
        return True

    def clear_search_query(self) -> bool:
        return self.set_search_query("")


def _normalize_difficulty(level) -> Optional[str]:
    if not isinstance(level, str):
        return None
    value = level.strip().lower()
    return value if value in DIFFICULTY_FILTERS else None
