"""Wires the catalog, interaction store, selection and persistence together."""
import logging

from topic_tutor.catalog import CatalogIndex
from topic_tutor.db import (
    init_db, load_interactions, save_record, get_setting, set_setting, reset_all_progress,
)
from topic_tutor.history import record_activity, record_search
from topic_tutor.interactions import InteractionStore
from topic_tutor.models import InteractionRecord, Selection
from topic_tutor.progress import ProgressTracker
from topic_tutor.selection import SelectionController
from topic_tutor.shortcuts import ShortcutDispatcher

logger = logging.getLogger(__name__)


class TutorSession:
    """One user's session over a catalog, persisted to a SQLite database.

    Every component is owned here and handed to consumers by reference.
    """

    def __init__(self, catalog: CatalogIndex, db_path: str):
        self.catalog = catalog
        self.db_path = db_path
        self.store = InteractionStore()
        self.controller = SelectionController(catalog)
        self.progress = ProgressTracker(catalog, self.store)
        self.shortcuts = ShortcutDispatcher()

    def load(self) -> "TutorSession":
        """Restore persisted state and start saving changes."""
        init_db(self.db_path)
        self.progress.close()
        self.store = InteractionStore.from_dict(load_interactions(self.db_path))
        dropped = self.store.retain(topic.key for topic in self.catalog.all_topics())
        if dropped:
            logger.warning("Ignoring saved state for removed topics: %s", ", ".join(sorted(dropped)))
        self.progress = ProgressTracker(self.catalog, self.store)
        self.controller = SelectionController(
            self.catalog,
            active_category=get_setting(self.db_path, "active_category"),
            difficulty_filter=get_setting(self.db_path, "difficulty_filter", "all"),
        )
        self.store.on_change.subscribe(self._persist_record)
        self.controller.on_selection.subscribe(self._persist_selection)
        return self

    def _persist_record(self, key: str, record: InteractionRecord) -> None:
        save_record(self.db_path, key, record.to_dict())

    def _persist_selection(self, selection: Selection) -> None:
        set_setting(self.db_path, "active_category", selection.active_category)
        set_setting(self.db_path, "difficulty_filter", selection.difficulty_filter)

    def toggle_completed(self, key: str) -> bool:
        completed = self.store.toggle_completed(key)
        if completed:
            record_activity(self.db_path, key, "completed")
        return completed

    def reset(self) -> None:
        """Clear all progress, notes, search history and activity. Settings are kept."""
        self.store.clear()
        reset_all_progress(self.db_path)

    def search(self, query: str) -> None:
        self.controller.set_search_query(query)
        record_search(self.db_path, query)

    def resolve_topic(self, text: str):
        """Find a topic by key, or by its 1-based position in the current list."""
        topic = self.catalog.topic(text)
        if topic is not None:
            return topic
        if text.isdigit():
            topics = self.controller.filtered_topics()
            index = int(text) - 1
            if 0 <= index < len(topics):
                return topics[index]
        return None
