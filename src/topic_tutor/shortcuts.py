"""Keyboard shortcut dispatch: raw key combinations to named intents."""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

FOCUS_SEARCH = "focus_search"
CLOSE_PANEL = "close_panel"
INTENTS = (FOCUS_SEARCH, CLOSE_PANEL)

SEARCH_KEY = "k"
ESCAPE_KEY = "Escape"


@dataclass
class KeyEvent:
    """One physical key press as delivered by the input layer."""
    key: str
    ctrl_or_meta: bool = False
    alt_key: bool = False
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


def match_intent(event: KeyEvent) -> Optional[str]:
    if event.ctrl_or_meta and not event.alt_key and event.key == SEARCH_KEY:
        return FOCUS_SEARCH
    if event.key == ESCAPE_KEY:
        return CLOSE_PANEL
    return None


class ShortcutDispatcher:
    """Routes key events to registered intent handlers.

    Assumes exactly one event per physical key press; repeat suppression is
    the input layer's job.
    """

    def __init__(self):
        self._handlers: dict[str, Callable[[], None]] = {}

    def register(self, intent: str, handler: Callable[[], None]) -> None:
        if intent not in INTENTS:
            raise ValueError(f"Unknown shortcut intent: {intent}")
        self._handlers[intent] = handler

    def unregister(self, intent: str) -> None:
        self._handlers.pop(intent, None)

    def dispatch(self, event: KeyEvent) -> bool:
        """Run the handler for event. Returns True if a handler ran."""
        intent = match_intent(event)
        if intent is None:
            return False
        handler = self._handlers.get(intent)
        if handler is None:
            return False
        if intent == FOCUS_SEARCH:
            event.prevent_default()
        logger.debug("Shortcut %s -> %s", event.key, intent)
        handler()
        return True


def parse_key_combo(text: str) -> Optional[KeyEvent]:
    """Parse a typed combination such as "ctrl+k", "cmd+k" or "esc"."""
    parts = [part.strip() for part in text.strip().split("+") if part.strip()]
    if not parts:
        return None
    *modifiers, key = parts
    ctrl_or_meta = False
    alt_key = False
    for modifier in modifiers:
        name = modifier.lower()
        if name in ("ctrl", "control", "cmd", "meta", "^"):
            ctrl_or_meta = True
        elif name in ("alt", "option"):
            alt_key = True
        else:
            return None
    if key.startswith("^") and len(key) == 2:
        ctrl_or_meta, key = True, key[1]
    if key.lower() in ("esc", "escape"):
        key = ESCAPE_KEY
    elif len(key) == 1:
        key = key.lower()
    return KeyEvent(key=key, ctrl_or_meta=ctrl_or_meta, alt_key=alt_key)
