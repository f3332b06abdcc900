"""Filtering of a category's topics by difficulty and search text."""
import logging

from topic_tutor.catalog import CatalogIndex
from topic_tutor.models import Topic, DIFFICULTY_FILTERS

logger = logging.getLogger(__name__)


def normalize_query(text) -> str:
    if text is None:
        return ""
    return str(text).strip().lower()


def topic_matches(topic: Topic, query: str) -> bool:
    """Substring match of an already-normalized query against a topic's text."""
    if not query:
        return True
    if query in topic.title.lower() or query in topic.description.lower():
        return True
    return any(
        query in example.title.lower() or query in example.code.lower()
        for example in topic.examples
    )


def filtered_topics(
    catalog: CatalogIndex,
    active_category: str,
    difficulty_filter: str = "all",
    search_query: str = "",
) -> tuple[Topic, ...]:
    """Topics of active_category narrowed by difficulty, then by search text.

    Output keeps the catalog's topic order. Search never spans categories.
    A difficulty outside the enumeration matches nothing.
    """
    difficulty = normalize_query(difficulty_filter) or "all"
    if difficulty not in DIFFICULTY_FILTERS:
        logger.warning("Unknown difficulty filter %r matches no topics", difficulty_filter)
        return ()
    topics = catalog.category(active_category).topics
    if difficulty != "all":
        topics = tuple(t for t in topics if t.difficulty.lower() == difficulty)
    query = normalize_query(search_query)
    if query:
        topics = tuple(t for t in topics if topic_matches(t, query))
    return topics


def search_all(catalog: CatalogIndex, query: str) -> list[Topic]:
    """Match query against every topic in the catalog, in catalog order."""
    normalized = normalize_query(query)
    if not normalized:
        return []
    return [topic for topic in catalog.all_topics() if topic_matches(topic, normalized)]
