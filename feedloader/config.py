"""Configuration management for the feed loader."""

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from .cache_policy import MAX_CACHE_AGE_DAYS


@dataclass
class HTTPConfig:
    """Configuration for the remote feed endpoint."""

    feed_url: str
    timeout: float = 30.0


@dataclass
class StoreConfig:
    """Configuration for the local cache store."""

    store_type: str = "json"
    store_path: Path = Path.home() / ".cache" / "feedloader" / "feed.store"


@dataclass
class CacheConfig:
    """Configuration for cache validity."""

    max_age_days: int = MAX_CACHE_AGE_DAYS

    @property
    def max_age(self) -> timedelta:
        return timedelta(days=self.max_age_days)


class Config:
    """Main configuration manager."""

    STORE_TYPES = ("json", "sqlite")
    DEFAULT_STORE_PATH = Path.home() / ".cache" / "feedloader" / "feed.store"

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.feed_url = os.getenv("FEED_URL", "")
        self.http_timeout = os.getenv("FEED_HTTP_TIMEOUT", "30")
        self.store_type = os.getenv("FEED_STORE_TYPE", "json")
        self.store_path = os.getenv("FEED_STORE_PATH", str(self.DEFAULT_STORE_PATH))
        self.cache_max_age_days = os.getenv(
            "FEED_CACHE_MAX_AGE_DAYS", str(MAX_CACHE_AGE_DAYS)
        )
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    def get_http_config(self) -> HTTPConfig:
        """Get remote endpoint configuration."""
        if not self.feed_url:
            raise ValueError("FEED_URL is not set")

        try:
            timeout = float(self.http_timeout)
        except ValueError:
            raise ValueError(f"Invalid FEED_HTTP_TIMEOUT: {self.http_timeout!r}")
        if timeout <= 0:
            raise ValueError(f"FEED_HTTP_TIMEOUT must be positive: {timeout}")

        return HTTPConfig(feed_url=self.feed_url, timeout=timeout)

    def get_store_config(self) -> StoreConfig:
        """Get cache store configuration."""
        store_type = self.store_type.lower()
        if store_type not in self.STORE_TYPES:
            raise ValueError(
                f"Invalid FEED_STORE_TYPE: {self.store_type!r} "
                f"(expected one of {', '.join(self.STORE_TYPES)})"
            )

        return StoreConfig(
            store_type=store_type,
            store_path=Path(self.store_path).expanduser(),
        )

    def get_cache_config(self) -> CacheConfig:
        """Get cache validity configuration."""
        try:
            max_age_days = int(self.cache_max_age_days)
        except ValueError:
            raise ValueError(
                f"Invalid FEED_CACHE_MAX_AGE_DAYS: {self.cache_max_age_days!r}"
            )
        if max_age_days < 1:
            raise ValueError(
                f"FEED_CACHE_MAX_AGE_DAYS must be at least 1: {max_age_days}"
            )

        return CacheConfig(max_age_days=max_age_days)
