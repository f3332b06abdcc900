"""Per-topic interaction state: completion, bookmarks, expansion and notes."""
import logging
from dataclasses import replace
from typing import Callable, Iterable, Optional

from topic_tutor.models import InteractionRecord
from topic_tutor.signals import Signal

logger = logging.getLogger(__name__)


class InteractionStore:
    """Mutable per-topic state keyed by topic key.

    Records are created lazily on the first write. Completion and bookmark
    counters are maintained on every write so summary views can read them
    without scanning. Every mutation notifies subscribers once, after the
    record and counters are updated.
    """

    def __init__(self):
        self._records: dict[str, InteractionRecord] = {}
        self._completed = 0
        self._bookmarked = 0
        self._topic_signals: dict[str, Signal] = {}
        self.on_change = Signal("interaction-change")
        self.on_counts = Signal("interaction-counts")

    # -- reads -------------------------------------------------------------

    def _peek(self, key: str) -> Optional[InteractionRecord]:
        return self._records.get(key)

    def record(self, key: str) -> InteractionRecord:
        """Return a copy of the record for key (defaults when absent)."""
        current = self._peek(key)
        return replace(current) if current is not None else InteractionRecord()

    def is_completed(self, key: str) -> bool:
        current = self._peek(key)
        return current is not None and current.completed

    def is_bookmarked(self, key: str) -> bool:
        current = self._peek(key)
        return current is not None and current.bookmarked

    def is_expanded(self, key: str) -> bool:
        current = self._peek(key)
        return current is not None and current.expanded

    def get_note(self, key: str) -> Optional[str]:
        """Return the note for key, or None if the topic was never annotated."""
        current = self._peek(key)
        return current.note if current is not None else None

    def completed_count(self) -> int:
        return self._completed

    def bookmarked_count(self) -> int:
        return self._bookmarked

    def completed_keys(self) -> set[str]:
        return {key for key, rec in self._records.items() if rec.completed}

    def bookmarked_keys(self) -> set[str]:
        return {key for key, rec in self._records.items() if rec.bookmarked}

    def __contains__(self, key: str) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)

    # -- writes ------------------------------------------------------------

    def _ensure(self, key: str) -> InteractionRecord:
        current = self._records.get(key)
        if current is None:
            current = InteractionRecord()
            self._records[key] = current
        return current

    def _notify(self, key: str, counts_changed: bool) -> None:
        snapshot = self.record(key)
        topic_signal = self._topic_signals.get(key)
        if topic_signal is not None:
            topic_signal.emit(snapshot)
        self.on_change.emit(key, snapshot)
        if counts_changed:
            self.on_counts.emit(self._completed, self._bookmarked)

    def toggle_completed(self, key: str) -> bool:
        """Flip completion for key and return the new value."""
        current = self._ensure(key)
        current.completed = not current.completed
        self._completed += 1 if current.completed else -1
        logger.debug("Topic %s completed=%s", key, current.completed)
        self._notify(key, counts_changed=True)
        return current.completed

    def toggle_bookmark(self, key: str) -> bool:
        """Flip the bookmark for key and return the new value."""
        current = self._ensure(key)
        current.bookmarked = not current.bookmarked
        self._bookmarked += 1 if current.bookmarked else -1
        logger.debug("Topic %s bookmarked=%s", key, current.bookmarked)
        self._notify(key, counts_changed=True)
        return current.bookmarked

    def toggle_expanded(self, key: str) -> bool:
        current = self._ensure(key)
        current.expanded = not current.expanded
        self._notify(key, counts_changed=False)
        return current.expanded

    def save_note(self, key: str, text: str) -> None:
        """Overwrite the note for key. An empty string is a valid note."""
        if not isinstance(text, str):
            raise TypeError(f"Note text must be a string, got {type(text).__name__}")
        current = self._ensure(key)
        current.note = text
        self._notify(key, counts_changed=False)

    def delete_note(self, key: str) -> bool:
        """Remove the note for key. Returns False if there was nothing to delete."""
        current = self._peek(key)
        if current is None or current.note is None:
            return False
        current.note = None
        self._notify(key, counts_changed=False)
        return True

    # -- subscriptions -----------------------------------------------------

    def subscribe_topic(self, key: str, callback: Callable) -> Callable[[], None]:
        """Call callback(record) whenever the record for key changes."""
        topic_signal = self._topic_signals.get(key)
        if topic_signal is None:
            topic_signal = self._topic_signals[key] = Signal(f"topic:{key}")
        unsubscribe = topic_signal.subscribe(callback)

        def _unsubscribe() -> None:
            unsubscribe()
            if not self._topic_signals.get(key):
                self._topic_signals.pop(key, None)

        return _unsubscribe

    # -- persistence -------------------------------------------------------

    def to_dict(self) -> dict:
        """Serialize as {topic_key: record dict}."""
        return {key: rec.to_dict() for key, rec in self._records.items()}

    @classmethod
    def from_dict(cls, data: dict) -> "InteractionStore":
        """Build a fresh store from to_dict() output."""
        if not isinstance(data, dict):
            raise ValueError("Interaction data must be a mapping of topic key to record")
        store = cls()
        for key, raw in data.items():
            if not isinstance(raw, dict):
                raise ValueError(f"Record for '{key}' must be a mapping")
            store._records[str(key)] = InteractionRecord.from_dict(raw)
        store._recount()
        return store

    def _recount(self) -> None:
        self._completed = sum(1 for rec in self._records.values() if rec.completed)
        self._bookmarked = sum(1 for rec in self._records.values() if rec.bookmarked)

    def retain(self, keys: Iterable[str]) -> list[str]:
        """Drop records whose key is not in keys. Returns the dropped keys."""
        keep = set(keys)
        dropped = [key for key in self._records if key not in keep]
        if not dropped:
            return []
        before = (self._completed, self._bookmarked)
        for key in dropped:
            del self._records[key]
        self._recount()
        logger.info("Dropped %d interaction records for unknown topics", len(dropped))
        if (self._completed, self._bookmarked) != before:
            self.on_counts.emit(self._completed, self._bookmarked)
        return dropped

    def clear(self) -> None:
        """Forget every record. Each cleared topic is notified with default state."""
        keys = list(self._records)
        before = (self._completed, self._bookmarked)
        self._records.clear()
        self._completed = self._bookmarked = 0
        for key in keys:
            self._notify(key, counts_changed=False)
        if before != (0, 0):
            self.on_counts.emit(0, 0)
