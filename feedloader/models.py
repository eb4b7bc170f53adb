"""Data models for the feed loader."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Generic, TypeVar
from uuid import UUID

T = TypeVar("T")


@dataclass(frozen=True)
class FeedItem:
    """A single feed entry as seen by application code."""

    id: UUID
    description: str | None
    location: str | None
    url: str


@dataclass(frozen=True)
class RemoteFeedItem:
    """Feed entry as decoded from the remote JSON payload."""

    id: UUID
    description: str | None
    location: str | None
    image: str

    def to_model(self) -> FeedItem:
        return FeedItem(
            id=self.id,
            description=self.description,
            location=self.location,
            url=self.image,
        )


@dataclass(frozen=True)
class LocalFeedItem:
    """Feed entry in the shape persisted by cache stores."""

    id: UUID
    description: str | None
    location: str | None
    url: str


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome carrying a value."""

    value: T


@dataclass(frozen=True)
class Failure:
    """Failed outcome carrying the error that caused it."""

    error: Exception


@dataclass(frozen=True)
class Empty:
    """Retrieval outcome: no cache is stored."""


@dataclass(frozen=True)
class Found:
    """Retrieval outcome: the cached feed and the instant it was saved."""

    feed: list[LocalFeedItem]
    timestamp: datetime


# An unreadable cache is a Failure, never an Empty
RetrievalResult = Empty | Found | Failure

LoadResult = Success[list[FeedItem]] | Failure


def as_utc(timestamp: datetime) -> datetime:
    """Return ``timestamp`` as an aware datetime, reading a naive one as UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp


def to_local(feed: list[FeedItem]) -> list[LocalFeedItem]:
    """Convert domain items to their persisted shape, keeping order."""
    return [
        LocalFeedItem(
            id=item.id,
            description=item.description,
            location=item.location,
            url=item.url,
        )
        for item in feed
    ]


def to_models(feed: list[LocalFeedItem]) -> list[FeedItem]:
    """Convert persisted items back to domain items, keeping order."""
    return [
        FeedItem(
            id=item.id,
            description=item.description,
            location=item.location,
            url=item.url,
        )
        for item in feed
    ]
