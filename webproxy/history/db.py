import os
import sqlite3
from datetime import datetime, timezone
from typing import Dict, List

from webproxy.core.config import settings

DATABASE_PATH = settings.DATABASE_PATH

def init_db():
    """Initialize SQLite database with history table"""
    directory = os.path.dirname(DATABASE_PATH)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with sqlite3.connect(DATABASE_PATH) as conn:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                url TEXT NOT NULL UNIQUE,
                timestamp TEXT NOT NULL
            )
        """)
        conn.commit()

def add_entry(url: str, timestamp: str = None, limit: int = None) -> Dict[str, str]:
    """
    Record a visited URL as the most recent entry.

    `timestamp` is the ISO 8601 time of the fetch; defaults to now (UTC).

    Append-then-trim: an existing row for the same URL is replaced (last
    writer wins), then everything beyond the newest `limit` rows is dropped.
    """
    limit = settings.HISTORY_LIMIT if limit is None else limit
    timestamp = timestamp or datetime.now(timezone.utc).isoformat(timespec="seconds")

    with sqlite3.connect(DATABASE_PATH) as conn:
        conn.execute("DELETE FROM history WHERE url = ?", (url,))
        conn.execute(
            "INSERT INTO history (url, timestamp) VALUES (?, ?)",
            (url, timestamp)
        )
        conn.execute(
            "DELETE FROM history WHERE id NOT IN "
            "(SELECT id FROM history ORDER BY id DESC LIMIT ?)",
            (limit,)
        )
        conn.commit()

    return {"url": url, "timestamp": timestamp}

def list_entries() -> List[Dict[str, str]]:
    """Get history entries, most recent first"""
    with sqlite3.connect(DATABASE_PATH) as conn:
        cursor = conn.execute("SELECT url, timestamp FROM history ORDER BY id DESC")
        return [{"url": url, "timestamp": ts} for url, ts in cursor.fetchall()]

def clear_all():
    """Clear all history entries"""
    with sqlite3.connect(DATABASE_PATH) as conn:
        conn.execute("DELETE FROM history")
        conn.commit()

def get_stats() -> dict:
    """Get history statistics"""
    with sqlite3.connect(DATABASE_PATH) as conn:
        cursor = conn.execute("SELECT COUNT(*) FROM history")
        total_entries = cursor.fetchone()[0]

        return {
            "total_entries": total_entries,
            "limit": settings.HISTORY_LIMIT,
            "database_path": DATABASE_PATH
        }
