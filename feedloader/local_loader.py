"""Local (cached) feed loading for the feed loader."""

import weakref
from collections.abc import Callable
from datetime import UTC, datetime

from .cache_policy import FeedCachePolicy
from .feed_store import FeedStore
from .logging_config import create_component_logger
from .models import (
    Failure,
    FeedItem,
    Found,
    LoadResult,
    RetrievalResult,
    Success,
    to_local,
    to_models,
)

SaveCompletion = Callable[[Exception | None], None]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class LocalFeedLoader:
    """Saves, loads and validates the cached feed held by a FeedStore.

    Store callbacks only hold a weak reference to the loader: once the
    loader is released, late store results are dropped without invoking
    the caller's completion or issuing further store operations.
    """

    def __init__(
        self,
        store: FeedStore,
        current_date: Callable[[], datetime] = _utc_now,
        cache_policy: FeedCachePolicy | None = None,
        context_id: str | None = None,
    ):
        """Initialize the loader.

        Args:
            store: Store owning the cache slot
            current_date: Clock used for save timestamps and expiry checks
            cache_policy: Validity policy (7-day window if omitted)
            context_id: Context ID for logging
        """
        self.store = store
        self.current_date = current_date
        self.cache_policy = cache_policy or FeedCachePolicy()
        self.logger = create_component_logger("local_loader", context_id)

    def save(self, feed: list[FeedItem], completion: SaveCompletion) -> None:
        """Replace the cache with ``feed``.

        The old cache is deleted first; if that fails the error is reported
        and nothing is inserted.
        """
        loader_ref = weakref.ref(self)

        def on_deletion(error: Exception | None) -> None:
            loader = loader_ref()
            if loader is None:
                return
            if error is not None:
                loader.logger.warning(
                    "Cache deletion failed, feed not saved",
                    operation="save",
                    error=str(error),
                )
                completion(error)
            else:
                loader._cache(feed, completion)

        self.store.delete_cached_feed(on_deletion)

    def _cache(self, feed: list[FeedItem], completion: SaveCompletion) -> None:
        loader_ref = weakref.ref(self)

        def on_insertion(error: Exception | None) -> None:
            loader = loader_ref()
            if loader is None:
                return
            if error is not None:
                loader.logger.warning(
                    "Cache insertion failed", operation="save", error=str(error)
                )
            else:
                loader.logger.info(
                    "Feed cached", operation="save", items_count=len(feed)
                )
            completion(error)

        self.store.insert(to_local(feed), self.current_date(), on_insertion)

    def load(self, completion: Callable[[LoadResult], None]) -> None:
        """Deliver the cached feed if it is still valid.

        An empty or expired cache is delivered as ``Success([])``; only a
        store failure is delivered as ``Failure``. Expired caches are left in
        place for ``validate_cache`` to remove.
        """
        loader_ref = weakref.ref(self)

        def on_retrieval(result: RetrievalResult) -> None:
            loader = loader_ref()
            if loader is None:
                return
            completion(loader._load_result(result))

        self.store.retrieve(on_retrieval)

    def _load_result(self, result: RetrievalResult) -> LoadResult:
        if isinstance(result, Failure):
            self.logger.warning(
                "Cache retrieval failed", operation="load", error=str(result.error)
            )
            return result

        if isinstance(result, Found) and self._is_valid(result):
            items = to_models(result.feed)
            self.logger.log_load_result("cache", len(items))
            return Success(items)

        if isinstance(result, Found):
            self.logger.info(
                "Cached feed expired", operation="load", items_count=len(result.feed)
            )
        return Success([])

    def validate_cache(self) -> None:
        """Delete the cache if it is unreadable or expired."""
        loader_ref = weakref.ref(self)

        def on_retrieval(result: RetrievalResult) -> None:
            loader = loader_ref()
            if loader is None:
                return
            if isinstance(result, Failure):
                loader.logger.warning(
                    "Deleting unreadable cache",
                    operation="validate",
                    error=str(result.error),
                )
                loader._delete_invalid_cache()
            elif isinstance(result, Found) and not loader._is_valid(result):
                loader.logger.info("Deleting expired cache", operation="validate")
                loader._delete_invalid_cache()
            else:
                loader.logger.debug("Cache needs no cleanup", operation="validate")

        self.store.retrieve(on_retrieval)

    def _delete_invalid_cache(self) -> None:
        logger = self.logger

        def on_deletion(error: Exception | None) -> None:
            if error is not None:
                logger.warning(
                    "Cache validation could not delete the cache",
                    operation="validate",
                    error=str(error),
                )

        self.store.delete_cached_feed(on_deletion)

    def _is_valid(self, found: Found) -> bool:
        return self.cache_policy.validate(found.timestamp, against=self.current_date())
