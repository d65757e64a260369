from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path


class Storage:
    """Key-value store for serialized records, backed by a single sqlite table."""

    def __init__(self, db_path: str = "studydesk.db") -> None:
        self.db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self) -> None:
        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS records (
              key TEXT PRIMARY KEY,
              value TEXT NOT NULL,
              updated_at TEXT NOT NULL
            )
            """
        )
        self.conn.commit()

    def get(self, key: str) -> str | None:
        cur = self.conn.cursor()
        cur.execute("SELECT value FROM records WHERE key=?", (key,))
        row = cur.fetchone()
        return str(row["value"]) if row else None

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        self.conn.execute(
            """INSERT INTO records(key, value, updated_at) VALUES(?,?,?)
               ON CONFLICT(key) DO UPDATE SET
                   value=excluded.value,
                   updated_at=excluded.updated_at""",
            (key, value, now),
        )
        self.conn.commit()

    def delete(self, key: str) -> None:
        self.conn.execute("DELETE FROM records WHERE key=?", (key,))
        self.conn.commit()

    def keys(self) -> list[str]:
        cur = self.conn.cursor()
        cur.execute("SELECT key FROM records ORDER BY key")
        return [str(row["key"]) for row in cur.fetchall()]

    def close(self) -> None:
        self.conn.close()
