"""Error taxonomy for the feed loader."""


class FeedLoaderError(Exception):
    """Base exception for feed loading and caching failures."""


class ConnectivityError(FeedLoaderError):
    """The transport could not complete the request."""

    def __init__(self, message: str = "Could not reach the feed endpoint"):
        super().__init__(message)


class InvalidDataError(FeedLoaderError):
    """A response arrived but was not a valid feed payload."""

    def __init__(self, message: str = "Invalid feed data"):
        super().__init__(message)


class StoreError(FeedLoaderError):
    """Reading or writing the local feed cache failed.

    The underlying I/O, decoding or database error is kept as ``__cause__``.
    """


class UnexpectedValueRepresentation(FeedLoaderError):
    """The transport returned neither an error nor a usable response."""
