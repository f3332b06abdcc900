"""Database initialization, connection management and interaction persistence."""
import logging
import os
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = os.environ.get(
    "TOPIC_TUTOR_DB", str(Path.home() / ".topic_tutor" / "tutor.db")
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS interaction_records (
    topic_key TEXT PRIMARY KEY,
    completed INTEGER NOT NULL DEFAULT 0,
    bookmarked INTEGER NOT NULL DEFAULT 0,
    expanded INTEGER NOT NULL DEFAULT 0,
    note TEXT
);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);

CREATE TABLE IF NOT EXISTS search_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    query TEXT NOT NULL UNIQUE,
    searched_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS activity_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    topic_key TEXT NOT NULL,
    action TEXT NOT NULL,
    occurred_on TEXT NOT NULL
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()
    logger.debug("Database ready at %s", db_path)


def _record_params(key: str, record: dict) -> tuple:
    return (
        key,
        int(bool(record.get("completed"))),
        int(bool(record.get("bookmarked"))),
        int(bool(record.get("expanded"))),
        record.get("note"),
    )


def save_record(db_path: str, key: str, record: dict) -> None:
    """Insert or update one interaction record."""
    conn = get_connection(db_path)
    conn.execute(
        """INSERT INTO interaction_records (topic_key, completed, bookmarked, expanded, note)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(topic_key) DO UPDATE SET
            completed=excluded.completed, bookmarked=excluded.bookmarked,
            expanded=excluded.expanded, note=excluded.note""",
        _record_params(key, record),
    )
    conn.commit()
    conn.close()


def load_interactions(db_path: str) -> dict:
    """Return stored records in the InteractionStore serialization shape."""
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM interaction_records ORDER BY topic_key").fetchall()
    conn.close()
    return {
        row["topic_key"]: {
            "completed": bool(row["completed"]),
            "bookmarked": bool(row["bookmarked"]),
            "expanded": bool(row["expanded"]),
            "note": row["note"],
        }
        for row in rows
    }


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def reset_all_progress(db_path: str) -> None:
    """Clear interaction records, search history and activity. Settings are kept."""
    conn = get_connection(db_path)
    conn.execute("DELETE FROM interaction_records")
    conn.execute("DELETE FROM search_history")
    conn.execute("DELETE FROM activity_log")
    conn.commit()
    conn.close()
    logger.info("All progress reset in %s", db_path)
