"""Tests for data model classes."""
import dataclasses

import pytest

from topic_tutor.models import Category, Example, InteractionRecord, Selection, Topic, DIFFICULTY_FILTERS


def test_topic_defaults():
    t = Topic(key="closures", title="Closures")
    assert t.difficulty == "beginner"
    assert t.description == ""
    assert t.examples == ()


def test_topic_is_immutable():
    t = Topic(key="closures", title="Closures")
    with pytest.raises(dataclasses.FrozenInstanceError):
        t.title = "Other"


def test_example_defaults():
    e = Example(title="Counter")
    assert e.code == ""
    assert e.runnable is None
    assert e.note is None


def test_category_creation():
    topic = Topic(key="a", title="A")
    c = Category(key="core", title="Core", glyph="*", topics=(topic,))
    assert c.topics[0] is topic
    assert c.description == ""


def test_interaction_record_defaults():
    r = InteractionRecord()
    assert r.completed is False
    assert r.bookmarked is False
    assert r.expanded is False
    assert r.note is None


def test_interaction_record_dict_shape():
    r = InteractionRecord(completed=True, note="")
    assert r.to_dict() == {"completed": True, "bookmarked": False, "expanded": False, "note": ""}
    assert InteractionRecord.from_dict(r.to_dict()) == r


def test_interaction_record_from_partial_dict():
    r = InteractionRecord.from_dict({"bookmarked": 1, "extra": "ignored"})
    assert r.bookmarked is True
    assert r.completed is False
    assert r.note is None


def test_interaction_record_rejects_non_string_note():
    with pytest.raises(ValueError):
        InteractionRecord.from_dict({"note": 42})


def test_selection_defaults():
    s = Selection(active_category="core")
    assert s.difficulty_filter == "all"
    assert s.search_query == ""


def test_difficulty_filters():
    assert DIFFICULTY_FILTERS == ("all", "beginner", "intermediate", "advanced")
