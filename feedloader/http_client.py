"""HTTP transport for the feed loader."""

from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol

import requests

from .errors import UnexpectedValueRepresentation
from .logging_config import create_component_logger
from .models import Failure, Success


@dataclass(frozen=True)
class HTTPResponse:
    """Raw body and status code of a completed HTTP request."""

    data: bytes
    status_code: int


HTTPClientResult = Success[HTTPResponse] | Failure


class HTTPClient(Protocol):
    """Performs one HTTP GET per call.

    The completion is invoked exactly once, possibly on another thread.
    Callers are responsible for dispatching to the thread they need.
    """

    def get(self, url: str, completion: Callable[[HTTPClientResult], None]) -> None:
        ...


class RequestsHTTPClient:
    """HTTPClient backed by a requests.Session and a small worker pool."""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = 30,
        max_workers: int = 4,
        context_id: str | None = None,
    ):
        """Initialize the client.

        Args:
            session: Session to issue requests with (a new one if omitted)
            timeout: Request timeout in seconds
            max_workers: Number of requests that may be in flight at once
            context_id: Context ID for logging
        """
        self.timeout = timeout
        self.logger = create_component_logger("http_client", context_id)
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "feedloader/1.0"})
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="feedloader-http"
        )

    def get(self, url: str, completion: Callable[[HTTPClientResult], None]) -> None:
        """Start a GET request; completion receives the response or the error."""
        self._executor.submit(self._perform_get, url, completion)

    def _perform_get(
        self, url: str, completion: Callable[[HTTPClientResult], None]
    ) -> None:
        completion(self.fetch(url))

    def fetch(self, url: str) -> HTTPClientResult:
        """Perform the GET synchronously and wrap the outcome."""
        self.logger.debug("Requesting feed", url=url)
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.warning(
                f"Request to {url} failed: {e}", url=url, error=str(e)
            )
            return Failure(e)

        if response is None or response.status_code is None or response.content is None:
            self.logger.error("Transport returned no usable response", url=url)
            return Failure(UnexpectedValueRepresentation(url))

        self.logger.debug(
            "Received response",
            url=url,
            status_code=response.status_code,
        )
        return Success(HTTPResponse(response.content, response.status_code))

    def close(self) -> None:
        """Stop accepting requests and release the session."""
        self._executor.shutdown(wait=True)
        self.session.close()
