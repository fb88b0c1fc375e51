"""Durable key-value storage backed by SQLite."""

from board.db.store import KeyValueStore

# Database initialization tables
# Every persisted value lives in the settings table as text
DB_TABLES = {
    'settings': '''
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT
        )
    ''',
}

__all__ = ['KeyValueStore', 'DB_TABLES']
