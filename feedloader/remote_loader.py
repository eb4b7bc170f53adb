"""Remote feed loading for the feed loader."""

import weakref
from collections.abc import Callable

from .errors import ConnectivityError, InvalidDataError
from .http_client import HTTPClient, HTTPClientResult
from .logging_config import create_component_logger
from .mapper import FeedItemsMapper
from .models import Failure, LoadResult, Success


class RemoteFeedLoader:
    """Loads the feed from a remote endpoint through an HTTPClient."""

    def __init__(self, url: str, client: HTTPClient, context_id: str | None = None):
        """Initialize the loader.

        Args:
            url: Feed endpoint
            client: Transport used to issue the GET request
            context_id: Context ID for logging
        """
        self.url = url
        self.client = client
        self.logger = create_component_logger("remote_loader", context_id)

    def load(self, completion: Callable[[LoadResult], None]) -> None:
        """Fetch and decode the feed.

        The completion receives ``Success(list[FeedItem])``, or ``Failure``
        with ConnectivityError / InvalidDataError. It is invoked on the
        transport's thread, and not at all once this loader is released.
        """
        loader_ref = weakref.ref(self)

        def on_response(result: HTTPClientResult) -> None:
            loader = loader_ref()
            if loader is None:
                return
            completion(loader._map(result))

        self.logger.debug("Loading remote feed", url=self.url)
        self.client.get(self.url, on_response)

    def _map(self, result: HTTPClientResult) -> LoadResult:
        if isinstance(result, Failure):
            self.logger.warning(
                "Remote feed request failed",
                url=self.url,
                error=str(result.error),
            )
            return Failure(ConnectivityError())

        response = result.value
        try:
            remote_items = FeedItemsMapper.map(response.data, response.status_code)
        except InvalidDataError as e:
            self.logger.warning(
                f"Remote feed response rejected: {e}",
                url=self.url,
                status_code=response.status_code,
                error=str(e),
            )
            return Failure(InvalidDataError())

        items = [item.to_model() for item in remote_items]
        self.logger.log_load_result("remote", len(items))
        return Success(items)
