"""
SQLite-based key/value store holding the routing config.
"""
import asyncio
import logging
import sqlite3
from datetime import datetime, timezone
from typing import Optional

from ..models import RoutingConfig
from .base import ConfigUnavailableError, decode_config, encode_config

logger = logging.getLogger(__name__)


class SqliteConfigStore:
    """SQLite-backed key/value namespace; the routing config lives under one key."""

    def __init__(self, db_path: str, config_key: str = "config"):
        """
        Initialize the store. The database is not touched until first use.

        Args:
            db_path: Path to SQLite database file
            config_key: Key under which the routing config is stored
        """
        self.db_path = db_path
        self.config_key = config_key
        self._schema_ready = False

    def _connect(self) -> sqlite3.Connection:
        """Open a connection, creating the schema on first successful use."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as exc:
            raise ConfigUnavailableError(f"Cannot open {self.db_path}: {exc}") from exc
        if not self._schema_ready:
            try:
                self._init_db(conn)
            except sqlite3.Error as exc:
                conn.close()
                raise ConfigUnavailableError(f"Cannot initialize {self.db_path}: {exc}") from exc
        return conn

    def _init_db(self, conn: sqlite3.Connection):
        """Initialize database schema."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        conn.commit()
        self._schema_ready = True
        logger.info(f"Initialized config store at {self.db_path}")

    def get(self, key: str) -> Optional[str]:
        """Return the raw value stored under key, or None."""
        conn = self._connect()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise ConfigUnavailableError(f"Failed to read {key!r}: {exc}") from exc
        finally:
            conn.close()
        return row[0] if row else None

    def put(self, key: str, value: str) -> None:
        """Insert or replace the value stored under key."""
        now = datetime.now(timezone.utc).isoformat()
        conn = self._connect()
        try:
            conn.execute(
                """INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
                   ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                                  updated_at = excluded.updated_at""",
                (key, value, now)
            )
            conn.commit()
        except sqlite3.Error as exc:
            raise ConfigUnavailableError(f"Failed to write {key!r}: {exc}") from exc
        finally:
            conn.close()
        logger.debug(f"Stored key {key!r}")

    def load_config(self) -> Optional[RoutingConfig]:
        return decode_config(self.get(self.config_key))

    def save_config(self, config: RoutingConfig) -> None:
        self.put(self.config_key, encode_config(config))

    async def get_config(self) -> Optional[RoutingConfig]:
        return await asyncio.to_thread(self.load_config)
