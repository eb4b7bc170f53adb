"""Builds ready-to-use loaders from configuration."""

from collections.abc import Callable
from datetime import datetime

from .cache_policy import FeedCachePolicy
from .codable_store import CodableFeedStore
from .config import Config
from .feed_store import FeedStore
from .http_client import HTTPClient, RequestsHTTPClient
from .local_loader import LocalFeedLoader
from .logging_config import create_component_logger, setup_structured_logging
from .remote_loader import RemoteFeedLoader
from .sqlite_store import SQLiteFeedStore


def configure_logging(config: Config) -> None:
    """Install structured logging at the configured level."""
    setup_structured_logging(config.log_level)


def make_http_client(config: Config, context_id: str | None = None) -> RequestsHTTPClient:
    """Create the requests-based transport."""
    http_config = config.get_http_config()
    return RequestsHTTPClient(timeout=http_config.timeout, context_id=context_id)


def make_feed_store(config: Config, context_id: str | None = None) -> FeedStore:
    """Create the configured cache store, creating its directory if needed."""
    store_config = config.get_store_config()
    store_config.store_path.parent.mkdir(parents=True, exist_ok=True)

    logger = create_component_logger("factory", context_id)
    logger.info(
        f"Using {store_config.store_type} feed store",
        store_path=str(store_config.store_path),
    )

    if store_config.store_type == "sqlite":
        return SQLiteFeedStore(store_config.store_path, context_id=context_id)
    return CodableFeedStore(store_config.store_path, context_id=context_id)


def make_remote_loader(
    config: Config,
    client: HTTPClient | None = None,
    context_id: str | None = None,
) -> RemoteFeedLoader:
    """Create a RemoteFeedLoader for the configured endpoint."""
    http_config = config.get_http_config()
    if client is None:
        client = make_http_client(config, context_id)
    return RemoteFeedLoader(http_config.feed_url, client, context_id=context_id)


def make_local_loader(
    config: Config,
    store: FeedStore | None = None,
    current_date: Callable[[], datetime] | None = None,
    context_id: str | None = None,
) -> LocalFeedLoader:
    """Create a LocalFeedLoader over the configured store and cache window."""
    if store is None:
        store = make_feed_store(config, context_id)
    policy = FeedCachePolicy(max_age=config.get_cache_config().max_age)

    if current_date is None:
        return LocalFeedLoader(store, cache_policy=policy, context_id=context_id)
    return LocalFeedLoader(
        store, current_date=current_date, cache_policy=policy, context_id=context_id
    )
