"""Cache store contract for the feed loader."""

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import Protocol

from .logging_config import ComponentLogger
from .models import LocalFeedItem, RetrievalResult

RetrievalCompletion = Callable[[RetrievalResult], None]
# Insertion and deletion complete with None on success or the error
InsertionCompletion = Callable[[Exception | None], None]
DeletionCompletion = Callable[[Exception | None], None]


class FeedStore(Protocol):
    """Persistence for the single cached feed slot.

    Every completion is invoked exactly once, possibly on another thread.
    Callers are responsible for dispatching to the thread they need.
    """

    def retrieve(self, completion: RetrievalCompletion) -> None:
        ...

    def insert(
        self,
        feed: list[LocalFeedItem],
        timestamp: datetime,
        completion: InsertionCompletion,
    ) -> None:
        ...

    def delete_cached_feed(self, completion: DeletionCompletion) -> None:
        ...


class SerialExecutor:
    """Runs submitted actions one at a time, in submission order."""

    def __init__(self, name: str, logger: ComponentLogger):
        self.logger = logger
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)

    def perform(self, action: Callable[[], None], operation: str) -> Future:
        """Queue ``action``; it runs after every previously queued action."""
        return self._executor.submit(self._run, action, operation)

    def _run(self, action: Callable[[], None], operation: str) -> None:
        try:
            action()
        except Exception:
            self.logger.exception(
                f"Unhandled error during store {operation}", operation=operation
            )
            raise

    def shutdown(self) -> None:
        """Wait for queued actions and stop the worker."""
        self._executor.shutdown(wait=True)
