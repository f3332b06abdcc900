"""Completion progress and dashboard statistics."""
from typing import Callable

from topic_tutor.catalog import CatalogIndex
from topic_tutor.interactions import InteractionStore
from topic_tutor.signals import Signal

XP_PER_COMPLETION = 10
XP_PER_BOOKMARK = 5
XP_PER_LEVEL = 100


def _percent(done: int, total: int) -> int:
    if total <= 0:
        return 0
    # Integer round-half-up of 100 * done / total.
    value = (200 * done + total) // (2 * total)
    return max(0, min(100, value))


def completed_in_catalog(catalog: CatalogIndex, store: InteractionStore) -> int:
    """Completed topics that exist in catalog. Records for other keys are ignored."""
    return sum(1 for key in store.completed_keys() if catalog.topic(key) is not None)


def progress_percent(catalog: CatalogIndex, store: InteractionStore) -> int:
    """Percentage of all catalog topics marked complete, independent of any filter."""
    return _percent(completed_in_catalog(catalog, store), catalog.topic_count())


def category_progress(catalog: CatalogIndex, store: InteractionStore, key: str) -> int:
    topics = catalog.category(key).topics
    done = sum(1 for topic in topics if store.is_completed(topic.key))
    return _percent(done, len(topics))


def get_progress_label(percent: int) -> str:
    if percent >= 100:
        return "MASTERED"
    elif percent >= 75:
        return "ADVANCED"
    elif percent >= 25:
        return "LEARNING"
    elif percent > 0:
        return "STARTED"
    return "NOT STARTED"


def get_progress_color(percent: int) -> str:
    if percent >= 100:
        return "green"
    elif percent >= 75:
        return "cyan"
    elif percent >= 25:
        return "yellow"
    elif percent > 0:
        return "dark_orange"
    return "red"


def categories_completed(catalog: CatalogIndex, store: InteractionStore) -> int:
    """Count non-empty categories whose topics are all complete."""
    return sum(
        1
        for category in catalog.categories()
        if category.topics and all(store.is_completed(t.key) for t in category.topics)
    )


def get_study_stats(catalog: CatalogIndex, store: InteractionStore) -> dict:
    completed = completed_in_catalog(catalog, store)
    bookmarked = sum(1 for key in store.bookmarked_keys() if catalog.topic(key) is not None)
    xp = completed * XP_PER_COMPLETION + bookmarked * XP_PER_BOOKMARK
    level = xp // XP_PER_LEVEL + 1
    return {
        "total_topics": catalog.topic_count(),
        "completed_count": completed,
        "bookmarked_count": bookmarked,
        "categories_completed": categories_completed(catalog, store),
        "total_categories": len(catalog.categories()),
        "xp": xp,
        "level": level,
        "xp_for_next_level": level * XP_PER_LEVEL,
        "progress": progress_percent(catalog, store),
    }


class ProgressTracker:
    """Pushes the global progress percentage to subscribers when it changes."""

    def __init__(self, catalog: CatalogIndex, store: InteractionStore):
        self.catalog = catalog
        self.store = store
        self.on_progress = Signal("progress")
        self._percent = progress_percent(catalog, store)
        self._detach = store.on_counts.subscribe(self._on_counts)

    @property
    def percent(self) -> int:
        return self._percent

    def subscribe(self, callback: Callable[[int], None]) -> Callable[[], None]:
        return self.on_progress.subscribe(callback)

    def _on_counts(self, completed: int, bookmarked: int) -> None:
        percent = progress_percent(self.catalog, self.store)
        if percent != self._percent:
            self._percent = percent
            self.on_progress.emit(percent)

    def close(self) -> None:
        self._detach()
