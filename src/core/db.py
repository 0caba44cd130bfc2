"""SQLite database layer for the employer search log."""

import json
import sqlite3
from datetime import datetime
from pathlib import Path

from src.core.schemas import SearchLog

_SEARCH_LOGS_TABLE = """
CREATE TABLE IF NOT EXISTS search_logs (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    employer_username TEXT NOT NULL,
    query             TEXT NOT NULL,
    candidate_names   TEXT NOT NULL DEFAULT '[]',
    searched_at       TEXT NOT NULL,
    updated_at        TEXT
);
"""

_SEARCH_LOGS_INDEX = """
CREATE INDEX IF NOT EXISTS idx_search_logs_employer
    ON search_logs (employer_username, searched_at);
"""


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(_SEARCH_LOGS_TABLE)
    conn.execute(_SEARCH_LOGS_INDEX)
    conn.commit()
    return conn


def record_search_query(
    conn: sqlite3.Connection,
    employer_username: str,
    query: str,
    candidate_names: list[str] | None = None,
) -> SearchLog | None:
    """Insert a search log row.

    Returns None (and writes nothing) if the username or query is blank.
    """
    username = employer_username.strip()
    normalized_query = query.strip()
    if not username or not normalized_query:
        return None

    names = _clean_names(candidate_names or [])
    searched_at = datetime.now()
    cursor = conn.execute(
        """
        INSERT INTO search_logs (employer_username, query, candidate_names, searched_at)
        VALUES (?, ?, ?, ?)
        """,
        (username, normalized_query, json.dumps(names), searched_at.isoformat()),
    )
    conn.commit()
    return SearchLog(
        id=cursor.lastrowid or 0,
        employer_username=username,
        query=normalized_query,
        candidate_names=names,
        searched_at=searched_at,
    )


def update_search_log_candidates(
    conn: sqlite3.Connection,
    log_id: int,
    candidate_names: list[str],
) -> SearchLog | None:
    """Replace the candidate names of an existing log. Returns None if no such log."""
    names = _clean_names(candidate_names)
    cursor = conn.execute(
        "UPDATE search_logs SET candidate_names = ?, updated_at = ? WHERE id = ?",
        (json.dumps(names), datetime.now().isoformat(), log_id),
    )
    conn.commit()
    if cursor.rowcount == 0:
        return None
    row = conn.execute("SELECT * FROM search_logs WHERE id = ?", (log_id,)).fetchone()
    return _row_to_log(row) if row is not None else None


def get_search_logs(conn: sqlite3.Connection) -> list[SearchLog]:
    """Return every search log, newest first."""
    rows = conn.execute(
        "SELECT * FROM search_logs ORDER BY searched_at DESC, id DESC",
    ).fetchall()
    return [_row_to_log(r) for r in rows]


def get_search_logs_by_user(conn: sqlite3.Connection) -> dict[str, list[SearchLog]]:
    """Group search logs by employer username, each group newest first."""
    grouped: dict[str, list[SearchLog]] = {}
    for log in get_search_logs(conn):
        grouped.setdefault(log.employer_username, []).append(log)
    return grouped


def _clean_names(names: list[str]) -> list[str]:
    return [n.strip() for n in names if n.strip()]


def _row_to_log(row: sqlite3.Row) -> SearchLog:
    return SearchLog(
        id=row["id"],
        employer_username=row["employer_username"],
        query=row["query"],
        candidate_names=json.loads(row["candidate_names"] or "[]"),
        searched_at=datetime.fromisoformat(row["searched_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else None,
    )
