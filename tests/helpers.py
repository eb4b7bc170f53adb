"""Shared test doubles and factories."""

import json
import threading
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from feedloader.cache_policy import MAX_CACHE_AGE_DAYS
from feedloader.http_client import HTTPResponse
from feedloader.models import (
    Empty,
    Failure,
    FeedItem,
    Found,
    LocalFeedItem,
    Success,
    to_local,
)

RETRIEVE = "retrieve"
DELETE_CACHED_FEED = "delete_cached_feed"


def insert_message(feed, timestamp):
    return ("insert", feed, timestamp)


def any_error() -> Exception:
    return Exception("any error")


def any_url() -> str:
    return "http://any-url.com"


def unique_image() -> FeedItem:
    return FeedItem(id=uuid4(), description="any", location="any", url=any_url())


def unique_image_feed() -> tuple[list[FeedItem], list[LocalFeedItem]]:
    models = [unique_image(), unique_image()]
    return models, to_local(models)


def fixed_now() -> datetime:
    return datetime(2024, 3, 10, 12, 0, 0, tzinfo=UTC)


def minus_feed_cache_max_age(date: datetime) -> datetime:
    return date - timedelta(days=MAX_CACHE_AGE_DAYS)


def make_items_json(items: list[dict]) -> bytes:
    return json.dumps({"items": items}).encode("utf-8")


def make_item(
    description: str | None = None, location: str | None = None, url: str = "http://a-url.com"
) -> tuple[FeedItem, dict]:
    """Build a FeedItem and its wire JSON, omitting absent optional fields."""
    item = FeedItem(id=uuid4(), description=description, location=location, url=url)
    payload = {"id": str(item.id), "image": url}
    if description is not None:
        payload["description"] = description
    if location is not None:
        payload["location"] = location
    return item, payload


class CompletionRecorder:
    """Callable completion that records results and can be waited on."""

    def __init__(self):
        self.results = []
        self._event = threading.Event()

    def __call__(self, result=None):
        self.results.append(result)
        self._event.set()

    @property
    def called(self) -> bool:
        return bool(self.results)

    def wait(self, timeout: float = 2.0):
        """Block until the first result arrives and return it."""
        assert self._event.wait(timeout), "Timed out waiting for completion"
        return self.results[0]


class FeedStoreSpy:
    """In-memory FeedStore that records messages and completes on demand."""

    def __init__(self):
        self.received_messages = []
        self._deletion_completions = []
        self._insertion_completions = []
        self._retrieval_completions = []

    def delete_cached_feed(self, completion):
        self._deletion_completions.append(completion)
        self.received_messages.append(DELETE_CACHED_FEED)

    def complete_deletion(self, error: Exception, index: int = 0):
        self._deletion_completions[index](error)

    def complete_deletion_successfully(self, index: int = 0):
        self._deletion_completions[index](None)

    def insert(self, feed, timestamp, completion):
        self._insertion_completions.append(completion)
        self.received_messages.append(insert_message(feed, timestamp))

    def complete_insertion(self, error: Exception, index: int = 0):
        self._insertion_completions[index](error)

    def complete_insertion_successfully(self, index: int = 0):
        self._insertion_completions[index](None)

    def retrieve(self, completion):
        self._retrieval_completions.append(completion)
        self.received_messages.append(RETRIEVE)

    def complete_retrieval(self, error: Exception, index: int = 0):
        self._retrieval_completions[index](Failure(error))

    def complete_retrieval_with_empty_cache(self, index: int = 0):
        self._retrieval_completions[index](Empty())

    def complete_retrieval_with(self, feed, timestamp, index: int = 0):
        self._retrieval_completions[index](Found(feed=feed, timestamp=timestamp))


class HTTPClientSpy:
    """HTTPClient that records requested URLs and completes on demand."""

    def __init__(self):
        self.messages = []

    @property
    def requested_urls(self) -> list[str]:
        return [url for url, _ in self.messages]

    def get(self, url, completion):
        self.messages.append((url, completion))

    def complete_with_error(self, error: Exception, index: int = 0):
        self.messages[index][1](Failure(error))

    def complete_with_status_code(self, code: int, data: bytes, index: int = 0):
        self.messages[index][1](Success(HTTPResponse(data=data, status_code=code)))
