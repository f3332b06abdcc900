"""Search history, study activity streaks and daily goals."""
import json
from datetime import date, datetime, timedelta

from topic_tutor.db import get_connection, get_setting, set_setting
from topic_tutor.search import normalize_query

SEARCH_HISTORY_LIMIT = 10
DEFAULT_GOALS = {"daily_topics": 3, "weekly_topics": 15, "streak_goal": 7}


def record_search(db_path: str, query: str) -> None:
    """Remember a search, most recent first, keeping the last SEARCH_HISTORY_LIMIT."""
    normalized = normalize_query(query)
    if not normalized:
        return
    conn = get_connection(db_path)
    conn.execute("DELETE FROM search_history WHERE query = ?", (normalized,))
    conn.execute(
        "INSERT INTO search_history (query, searched_at) VALUES (?, ?)",
        (normalized, datetime.now().isoformat()),
    )
    conn.execute(
        """DELETE FROM search_history WHERE id NOT IN (
            SELECT id FROM search_history ORDER BY id DESC LIMIT ?)""",
        (SEARCH_HISTORY_LIMIT,),
    )
    conn.commit()
    conn.close()


def get_search_history(db_path: str) -> list[str]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT query FROM search_history ORDER BY id DESC").fetchall()
    conn.close()
    return [row["query"] for row in rows]


def record_activity(db_path: str, topic_key: str, action: str, on: date | None = None) -> None:
    day = (on or date.today()).isoformat()
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO activity_log (topic_key, action, occurred_on) VALUES (?, ?, ?)",
        (topic_key, action, day),
    )
    conn.commit()
    conn.close()


def completed_on(db_path: str, day: date) -> int:
    """Number of distinct topics completed on day."""
    conn = get_connection(db_path)
    count = conn.execute(
        "SELECT COUNT(DISTINCT topic_key) FROM activity_log WHERE action = 'completed' AND occurred_on = ?",
        (day.isoformat(),),
    ).fetchone()[0]
    conn.close()
    return count


def get_streak(db_path: str, today: date | None = None) -> int:
    """Consecutive days with a completion, ending today or yesterday."""
    today = today or date.today()
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT DISTINCT occurred_on FROM activity_log WHERE action = 'completed'"
    ).fetchall()
    conn.close()
    days = {date.fromisoformat(row["occurred_on"]) for row in rows}
    if today in days:
        cursor = today
    elif today - timedelta(days=1) in days:
        cursor = today - timedelta(days=1)
    else:
        return 0
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def get_study_goals(db_path: str) -> dict:
    goals = dict(DEFAULT_GOALS)
    saved = get_setting(db_path, "study_goals")
    if saved:
        goals.update({k: v for k, v in json.loads(saved).items() if k in DEFAULT_GOALS})
    return goals


def update_study_goals(db_path: str, **changes) -> dict:
    for name, value in changes.items():
        if name not in DEFAULT_GOALS:
            raise ValueError(f"Unknown study goal: {name}")
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ValueError(f"Goal '{name}' must be a positive integer")
    goals = get_study_goals(db_path)
    goals.update(changes)
    set_setting(db_path, "study_goals", json.dumps(goals))
    return goals


def check_daily_goal(db_path: str, today: date | None = None) -> dict:
    target = get_study_goals(db_path)["daily_topics"]
    current = completed_on(db_path, today or date.today())
    return {
        "met": current >= target,
        "progress": min(round(current / target * 100, 1), 100.0),
        "target": target,
        "current": current,
    }
