"""
SQLiteFeedStore: transactional cache store backed by a local SQLite file.

Schema: feed_cache (singleton row) + feed_images (ordered children)
"""

import sqlite3
from datetime import datetime
from pathlib import Path
from uuid import UUID

from dateutil import parser as date_parser

from .errors import StoreError
from .feed_store import (
    DeletionCompletion,
    InsertionCompletion,
    RetrievalCompletion,
    SerialExecutor,
)
from .logging_config import create_component_logger
from .models import Empty, Failure, Found, LocalFeedItem, as_utc

# The cache table only ever holds this row
CACHE_ROW_ID = 1


class SQLiteFeedStore:
    def __init__(self, store_path: str | Path, context_id: str | None = None):
        """Open (or create) the database at ``store_path``.

        Raises:
            StoreError: If the database cannot be opened or initialized
        """
        self.store_path = store_path
        self.logger = create_component_logger("sqlite_store", context_id)
        self._queue = SerialExecutor("feedloader-sqlite-store", self.logger)
        self._conn = self._init_db()

    def _init_db(self) -> sqlite3.Connection:
        try:
            # Only the store's worker thread touches the connection after init
            conn = sqlite3.connect(self.store_path, timeout=10, check_same_thread=False)
            conn.execute("PRAGMA foreign_keys = ON")

            conn.execute("""
                CREATE TABLE IF NOT EXISTS feed_cache (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    timestamp TEXT NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS feed_images (
                    cache_id INTEGER NOT NULL,
                    position INTEGER NOT NULL,
                    image_id TEXT NOT NULL,
                    description TEXT,
                    location TEXT,
                    url TEXT NOT NULL,
                    PRIMARY KEY (cache_id, position),
                    FOREIGN KEY (cache_id) REFERENCES feed_cache(id) ON DELETE CASCADE
                )
            """)

            conn.commit()
        except sqlite3.Error as e:
            self._queue.shutdown()
            self.logger.error(
                f"Could not open feed store: {e}",
                store_path=str(self.store_path),
                error=str(e),
            )
            raise StoreError(f"Could not open feed store at {self.store_path}") from e

        self.logger.info("SQLiteFeedStore initialized", store_path=str(self.store_path))
        return conn

    # ==================== FeedStore interface ====================

    def retrieve(self, completion: RetrievalCompletion) -> None:
        def action():
            completion(self._retrieve())

        self._queue.perform(action, "retrieve")

    def insert(
        self,
        feed: list[LocalFeedItem],
        timestamp: datetime,
        completion: InsertionCompletion,
    ) -> None:
        def action():
            completion(self._insert(feed, timestamp))

        self._queue.perform(action, "insert")

    def delete_cached_feed(self, completion: DeletionCompletion) -> None:
        def action():
            completion(self._delete())

        self._queue.perform(action, "delete")

    def close(self) -> None:
        """Wait for queued operations and close the connection."""
        self._queue.shutdown()
        self._conn.close()

    # ==================== Operations (worker thread only) ====================

    def _retrieve(self):
        try:
            cache = self._conn.execute(
                "SELECT timestamp FROM feed_cache WHERE id = ?", (CACHE_ROW_ID,)
            ).fetchone()
            if cache is None:
                return Empty()

            rows = self._conn.execute("""
                SELECT image_id, description, location, url
                FROM feed_images
                WHERE cache_id = ?
                ORDER BY position
            """, (CACHE_ROW_ID,)).fetchall()

            feed = [
                LocalFeedItem(
                    id=UUID(image_id),
                    description=description,
                    location=location,
                    url=url,
                )
                for image_id, description, location, url in rows
            ]
            timestamp = as_utc(date_parser.isoparse(cache[0]))
        except (sqlite3.Error, ValueError, TypeError) as e:
            return Failure(self._store_error("retrieve", e))

        return Found(feed=feed, timestamp=timestamp)

    def _insert(self, feed: list[LocalFeedItem], timestamp: datetime):
        try:
            # The connection context manager commits, or rolls back on error
            with self._conn:
                self._conn.execute("DELETE FROM feed_cache")
                self._conn.execute(
                    "INSERT INTO feed_cache (id, timestamp) VALUES (?, ?)",
                    (CACHE_ROW_ID, timestamp.isoformat()),
                )
                self._conn.executemany("""
                    INSERT INTO feed_images
                        (cache_id, position, image_id, description, location, url)
                    VALUES (?, ?, ?, ?, ?, ?)
                """, [
                    (CACHE_ROW_ID, position, str(item.id), item.description, item.location, item.url)
                    for position, item in enumerate(feed)
                ])
        except sqlite3.Error as e:
            return self._store_error("insert", e)

        self.logger.debug("Inserted cached feed", operation="insert", items_count=len(feed))
        return None

    def _delete(self):
        try:
            with self._conn:
                self._conn.execute("DELETE FROM feed_cache")
        except sqlite3.Error as e:
            return self._store_error("delete", e)

        self.logger.debug("Deleted cached feed", operation="delete")
        return None

    def _store_error(self, operation: str, cause: Exception) -> StoreError:
        self.logger.error(
            f"Feed store {operation} failed: {cause}",
            operation=operation,
            store_path=str(self.store_path),
            error=str(cause),
        )
        error = StoreError(f"Feed store {operation} failed")
        error.__cause__ = cause
        return error
