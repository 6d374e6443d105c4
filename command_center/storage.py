"""
Local key-value storage (SQLite).

The dashboard keeps its whole state under one key, the way a browser page
keeps a blob in localStorage. Values are opaque strings.
"""
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class StorageUnavailable(Exception):
    """Raised when the backing database cannot be opened or written."""
    pass


def _connect(db_path: str) -> sqlite3.Connection:
    """Open a connection in WAL mode."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


class LocalStorage:
    """SQLite-backed key-value store."""

    def __init__(self, db_path: str = None):
        if db_path is None:
            db_path = str(Path.home() / ".local" / "share" / "command-center" / "storage.db")
        self.db_path = db_path

    def _init_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS local_storage (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

    def _open(self) -> sqlite3.Connection:
        try:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = _connect(self.db_path)
            self._init_schema(conn)
            return conn
        except (OSError, sqlite3.Error) as e:
            raise StorageUnavailable(f"Cannot open {self.db_path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None if the key is absent."""
        conn = self._open()
        try:
            row = conn.execute(
                "SELECT value FROM local_storage WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Cannot read {key}: {e}") from e
        finally:
            conn.close()
        return row["value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        conn = self._open()
        try:
            with conn:
                conn.execute("""
                    INSERT INTO local_storage (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
                """, (key, value, now))
        except sqlite3.Error as e:
            raise StorageUnavailable(f"Cannot write {key}: {e}") from e
        finally:
            conn.close()

