from unittest.mock import patch

import pytest
from rich.console import Console

from topic_tutor.app import ViewState, attach_view, handle_command, main
from topic_tutor.history import get_search_history, get_study_goals
from topic_tutor.session import TutorSession


@pytest.fixture
def session(tmp_db, sample_catalog):
    return TutorSession(sample_catalog, tmp_db).load()


@pytest.fixture
def out():
    console = Console(record=True, width=120)
    with patch("topic_tutor.app.console", console):
        yield console


def test_quit_returns_false(session, out):
    assert handle_command(session, ViewState(), "quit") is False
    assert handle_command(session, ViewState(), "q") is False


def test_unknown_command(session, out):
    assert handle_command(session, ViewState(), "frobnicate") is True
    assert "Unknown command" in out.export_text()


def test_list_shows_topics(session, out):
    handle_command(session, ViewState(), "list")
    text = out.export_text()
    assert "Variables" in text
    assert "Metaclasses" in text
    assert "Descriptors" not in text


def test_level_filters_topics(session, out):
    handle_command(session, ViewState(), "level advanced")
    assert session.controller.difficulty_filter == "advanced"
    text = out.export_text()
    assert "Metaclasses" in text
    assert "Variables" not in text


def test_bad_level_is_reported(session, out):
    handle_command(session, ViewState(), "level expert")
    assert session.controller.difficulty_filter == "all"
    assert "Level must be one of" in out.export_text()


def test_cat_switches_category(session, out):
    handle_command(session, ViewState(), "cat adv")
    assert session.controller.active_category == "adv"
    handle_command(session, ViewState(), "cat nope")
    assert session.controller.active_category == "adv"
    assert "Unknown category: nope" in out.export_text()


def test_search_and_clear(session, out, tmp_db):
    handle_command(session, ViewState(), "search loops")
    assert session.controller.search_query == "loops"
    assert get_search_history(tmp_db) == ["loops"]
    handle_command(session, ViewState(), "clear")
    assert session.controller.search_query == ""


def test_done_by_position(session, out):
    handle_command(session, ViewState(), "done 1")
    assert session.store.is_completed("A")
    assert "Variables: completed" in out.export_text()


def test_bookmark_unknown_topic(session, out):
    handle_command(session, ViewState(), "bookmark ZZ")
    assert session.store.bookmarked_count() == 0
    assert "Unknown topic: ZZ" in out.export_text()


def test_show_expands_topic(session, out):
    handle_command(session, ViewState(), "show B")
    assert session.store.is_expanded("B")
    assert "range(3)" in out.export_text()
    handle_command(session, ViewState(), "show B")
    assert not session.store.is_expanded("B")


def test_note_and_delnote(session, out):
    with patch("topic_tutor.app.Prompt.ask", return_value="remember this"):
        handle_command(session, ViewState(), "note A")
    assert session.store.get_note("A") == "remember this"
    handle_command(session, ViewState(), "delnote A")
    assert session.store.get_note("A") is None
    handle_command(session, ViewState(), "delnote A")
    assert "No note to delete." in out.export_text()


def test_find_spans_categories(session, out):
    handle_command(session, ViewState(), "find hooks")
    assert "Descriptors" in out.export_text()


def test_dashboard(session, out):
    handle_command(session, ViewState(), "done A")
    handle_command(session, ViewState(), "dashboard")
    text = out.export_text()
    assert "Overall Progress: 25%" in text
    assert "Completed: 1/4" in text


def test_ctrl_k_prompts_for_search(session, out):
    view = ViewState()
    attach_view(session, view)
    with patch("topic_tutor.app.Prompt.ask", return_value="meta") as ask:
        handle_command(session, view, "ctrl+k")
    ask.assert_called_once()
    assert session.controller.search_query == "meta"
    assert "Metaclasses" in out.export_text()


def test_escape_closes_panel(session, out):
    view = ViewState(panel_open=True)
    attach_view(session, view)
    handle_command(session, view, "esc")
    assert view.panel_open is False


def test_shortcut_without_handler(session, out):
    handle_command(session, ViewState(), "esc")
    assert "No action for that key." in out.export_text()


def test_category_change_closes_panel_when_narrow(session):
    console = Console(record=True, width=60)
    with patch("topic_tutor.app.console", console):
        view = ViewState(panel_open=True)
        attach_view(session, view)
        handle_command(session, view, "cat adv")
    assert view.panel_open is False


def test_category_change_keeps_panel_when_wide(session, out):
    view = ViewState(panel_open=True)
    attach_view(session, view)
    handle_command(session, view, "cat adv")
    assert view.panel_open is True


def test_progress_is_announced(session, out):
    attach_view(session, ViewState())
    handle_command(session, ViewState(), "done D")
    assert "Overall progress: 25%" in out.export_text()


def test_goals_show_and_update(session, out, tmp_db):
    handle_command(session, ViewState(), "goals daily_topics=5")
    assert "Goals updated." in out.export_text()
    handle_command(session, ViewState(), "goals daily_topics=zero")
    handle_command(session, ViewState(), "goals")
    assert get_study_goals(tmp_db)["daily_topics"] == 5


def test_main_exits_cleanly_on_bad_catalog(tmp_path, monkeypatch, out):
    bad = tmp_path / "catalog.json"
    bad.write_text("{not json")
    monkeypatch.setenv("TOPIC_TUTOR_CATALOG", str(bad))
    with pytest.raises(SystemExit) as exc:
        main()
    assert exc.value.code == 1
    assert "Cannot load catalog" in out.export_text()


def test_reset_asks_for_confirmation(session, out):
    handle_command(session, ViewState(), "done A")
    with patch("topic_tutor.app.Prompt.ask", return_value="n"):
        handle_command(session, ViewState(), "reset")
    assert session.store.is_completed("A")
    with patch("topic_tutor.app.Prompt.ask", return_value="y"):
        handle_command(session, ViewState(), "reset")
    assert not session.store.is_completed("A")
    assert "Progress reset." in out.export_text()
