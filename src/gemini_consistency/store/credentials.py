"""Local key-value settings store backed by SQLite.

Holds the Gemini API key between sessions so it does not have to be passed on
every invocation.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from gemini_consistency.config.defaults import API_KEY_SETTING, DEFAULT_SETTINGS_DB

logger = logging.getLogger(__name__)


class CredentialStore:
    """SQLite-backed ``settings(key, value)`` table."""

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = Path(db_path) if db_path else DEFAULT_SETTINGS_DB
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._create_table()

    def get(self, key: str) -> str | None:
        row = self._conn.execute(
            "SELECT value FROM settings WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
            (key, value),
        )
        self._conn.commit()

    def delete(self, key: str) -> bool:
        cursor = self._conn.execute("DELETE FROM settings WHERE key = ?", (key,))
        self._conn.commit()
        return cursor.rowcount > 0

    def load_api_key(self) -> str | None:
        return self.get(API_KEY_SETTING)

    def save_api_key(self, api_key: str) -> None:
        self.set(API_KEY_SETTING, api_key.strip())
        logger.info("Saved API key to %s", self._db_path)

    @property
    def path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> CredentialStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _create_table(self) -> None:
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT
            )
        """)
        self._conn.commit()
