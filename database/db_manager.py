import logging
import os
import sqlite3
from typing import Callable

from utils.constants import COLLECTIONS, DB_FILE, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


class DatabaseManager:
    """sqlite-backed document store: one table per collection, string ids,
    every document scoped by user_id, plus change notification per collection."""

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None
        self._listeners: dict[str, list[Callable[[], None]]] = {c: [] for c in COLLECTIONS}

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._migrate_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    def _migrate_schema(self, conn: sqlite3.Connection):
        """Idempotent ALTER TABLE for columns added after initial release.

        Transactions written before month/year were denormalized keep 0 in
        both columns; readers fall back to the timestamp for those rows.
        users.salt predates self-describing hash strings and is dropped.
        """
        cols = {row[1] for row in conn.execute("PRAGMA table_info(transactions)").fetchall()}
        if "month" not in cols:
            conn.execute("ALTER TABLE transactions ADD COLUMN month INTEGER NOT NULL DEFAULT 0")
        if "year" not in cols:
            conn.execute("ALTER TABLE transactions ADD COLUMN year INTEGER NOT NULL DEFAULT 0")
        user_cols = {row[1] for row in conn.execute("PRAGMA table_info(users)").fetchall()}
        if "salt" in user_cols:
            conn.execute("ALTER TABLE users DROP COLUMN salt")

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS users (
                id            TEXT PRIMARY KEY,
                email         TEXT NOT NULL UNIQUE,
                password_hash TEXT NOT NULL,
                created_at    TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS transactions (
                id          TEXT PRIMARY KEY,
                user_id     TEXT NOT NULL,
                amount      REAL NOT NULL CHECK(amount > 0),
                type        TEXT NOT NULL CHECK(type IN ('income','expense')),
                category    TEXT NOT NULL DEFAULT '',
                description TEXT NOT NULL DEFAULT '',
                date        TEXT NOT NULL,
                month       INTEGER NOT NULL DEFAULT 0,
                year        INTEGER NOT NULL DEFAULT 0,
                created_at  TEXT NOT NULL DEFAULT (datetime('now')),
                updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS categories (
                id        TEXT PRIMARY KEY,
                user_id   TEXT NOT NULL,
                name      TEXT NOT NULL,
                type      TEXT NOT NULL CHECK(type IN ('income','expense')),
                parent_id TEXT
            );

            CREATE TABLE IF NOT EXISTS budgets (
                id               TEXT PRIMARY KEY,
                user_id          TEXT NOT NULL,
                category         TEXT NOT NULL,
                allocated_amount REAL NOT NULL DEFAULT 0.0,
                spent_amount     REAL NOT NULL DEFAULT 0.0,
                start_date       TEXT NOT NULL,
                end_date         TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_user   ON transactions(user_id);
            CREATE INDEX IF NOT EXISTS idx_transactions_date   ON transactions(date);
            CREATE INDEX IF NOT EXISTS idx_categories_user     ON categories(user_id);
            CREATE INDEX IF NOT EXISTS idx_categories_parent   ON categories(parent_id);
            CREATE INDEX IF NOT EXISTS idx_budgets_user        ON budgets(user_id);

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        for key, value in DEFAULT_SETTINGS.items():
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    # ── Change notification ─────────────────────────────────────────────────
    def add_listener(self, collection: str, callback: Callable[[], None]):
        self._listeners[collection].append(callback)

    def remove_listener(self, collection: str, callback: Callable[[], None]):
        try:
            self._listeners[collection].remove(callback)
        except ValueError:
            pass

    def listener_count(self, collection: str) -> int:
        return len(self._listeners[collection])

    def commit(self, collection: str):
        """Commit the pending write and push fresh snapshots to live queries."""
        self.get_connection().commit()
        self.notify_changed(collection)

    def notify_changed(self, collection: str):
        listeners = list(self._listeners[collection])
        logger.debug("%s changed, notifying %d listener(s)", collection, len(listeners))
        for callback in listeners:
            callback()

    @staticmethod
    def open_in_folder(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the DB file.

        db_folder: if provided, the DB file is stored in that directory instead of CWD.
        """
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, DB_FILE)
        else:
            path = DB_FILE
        db = DatabaseManager(path)
        db.initialize()
        logger.info("Opened database %s", path)
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
