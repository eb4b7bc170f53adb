"""JSON file backed cache store."""

import json
import os
import tempfile
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


class CodableFeedStore:
    """Keeps the cached feed as one JSON document at a fixed path.

    Document shape::

        {"feed": [{"id", "description", "location", "url"}, ...],
         "timestamp": "<ISO-8601>"}

    All operations run serially on a private worker thread, so a retrieve
    never observes a half-written insert.
    """

    def __init__(self, store_path: str | Path, context_id: str | None = None):
        """Initialize the store.

        Args:
            store_path: File holding the cache; its directory must exist
            context_id: Context ID for logging
        """
        self.store_path = Path(store_path)
        self.logger = create_component_logger("codable_store", context_id)
        self._queue = SerialExecutor("feedloader-codable-store", self.logger)

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
        self._queue.shutdown()

    def _retrieve(self):
        if not self.store_path.exists():
            return Empty()

        try:
            document = json.loads(self.store_path.read_bytes())
            found = self.decode(document)
        except (
            OSError, ValueError, RecursionError, KeyError, TypeError, AttributeError
        ) as e:
            self.logger.warning(
                f"Could not read cached feed: {e}",
                operation="retrieve",
                store_path=str(self.store_path),
                error=str(e),
            )
            error = StoreError(f"Unreadable cache at {self.store_path}")
            error.__cause__ = e
            return Failure(error)

        self.logger.debug(
            "Retrieved cached feed",
            operation="retrieve",
            store_path=str(self.store_path),
            items_count=len(found.feed),
        )
        return found

    def _insert(self, feed: list[LocalFeedItem], timestamp: datetime):
        payload = json.dumps(self.encode(feed, timestamp)).encode("utf-8")
        temp_path = None
        try:
            fd, temp_path = tempfile.mkstemp(
                dir=self.store_path.parent, prefix=f".{self.store_path.name}."
            )
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
            os.replace(temp_path, self.store_path)
        except OSError as e:
            if temp_path is not None:
                self._safe_unlink(Path(temp_path))
            self.logger.error(
                f"Could not write cached feed: {e}",
                operation="insert",
                store_path=str(self.store_path),
                error=str(e),
            )
            error = StoreError(f"Could not write cache at {self.store_path}")
            error.__cause__ = e
            return error

        self.logger.debug(
            "Inserted cached feed",
            operation="insert",
            store_path=str(self.store_path),
            items_count=len(feed),
        )
        return None

    def _delete(self):
        if not self.store_path.exists():
            return None

        try:
            self.store_path.unlink()
        except OSError as e:
            self.logger.error(
                f"Could not delete cached feed: {e}",
                operation="delete",
                store_path=str(self.store_path),
                error=str(e),
            )
            error = StoreError(f"Could not delete cache at {self.store_path}")
            error.__cause__ = e
            return error

        self.logger.debug(
            "Deleted cached feed",
            operation="delete",
            store_path=str(self.store_path),
        )
        return None

    def _safe_unlink(self, path: Path) -> None:
        try:
            path.unlink()
        except OSError as e:
            self.logger.debug(
                f"Could not remove temporary file {path}: {e}", error=str(e)
            )

    @staticmethod
    def encode(feed: list[LocalFeedItem], timestamp: datetime) -> dict:
        """Build the JSON document for a cache."""
        return {
            "feed": [
                {
                    "id": str(item.id),
                    "description": item.description,
                    "location": item.location,
                    "url": item.url,
                }
                for item in feed
            ],
            "timestamp": timestamp.isoformat(),
        }

    @staticmethod
    def decode(document: dict) -> Found:
        """Rebuild a cache from its JSON document."""
        feed = [
            LocalFeedItem(
                id=UUID(raw["id"]),
                description=raw.get("description"),
                location=raw.get("location"),
                url=raw["url"],
            )
            for raw in document["feed"]
        ]
        timestamp = as_utc(date_parser.isoparse(document["timestamp"]))
        return Found(feed=feed, timestamp=timestamp)
