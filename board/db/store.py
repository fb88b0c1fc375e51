import sqlite3
from board.logging import log_storage_operation


class KeyValueStore:
    """Text key-value store over the SQLite ``settings`` table.

    Reads never raise for missing keys. Write errors (``sqlite3.Error``)
    propagate to the caller: the store is assumed to be always writable.
    """

    def __init__(self, db_name: str, db_tables: dict[str, str]):
        """Open the database and create tables if they don't exist."""
        self.db_name = db_name
        self.db_conn = sqlite3.connect(db_name)
        self.db_cursor = self.db_conn.cursor()

        for _, create_sql in db_tables.items():
            self.db_cursor.execute(create_sql)
        self.db_conn.commit()

    def close(self):
        """Close the database connection."""
        if hasattr(self, 'db_conn'):
            self.db_conn.close()

    def get(self, key: str, default: str | None = None) -> str | None:
        """Get the text stored under key, or default when absent."""
        self.db_cursor.execute("SELECT value FROM settings WHERE key = ?", (key,))
        result = self.db_cursor.fetchone()
        return result[0] if result and result[0] is not None else default

    def set(self, key: str, value) -> None:
        """Store value under key. Non-text values are stored via str()."""
        self.db_cursor.execute("INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)", (key, str(value)))
        self.db_conn.commit()
        log_storage_operation("write", key=key)

    def remove(self, key: str) -> None:
        """Delete key. No-op when absent."""
        self.db_cursor.execute("DELETE FROM settings WHERE key = ?", (key,))
        self.db_conn.commit()
        log_storage_operation("remove", key=key)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
