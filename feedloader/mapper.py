"""Mapping of remote feed responses into feed items."""

import json
from urllib.parse import urlparse
from uuid import UUID

from .errors import InvalidDataError
from .models import RemoteFeedItem


class FeedItemsMapper:
    """Turns a raw HTTP response into validated remote feed items."""

    OK_200 = 200

    @classmethod
    def map(cls, data: bytes, status_code: int) -> list[RemoteFeedItem]:
        """Decode a feed response.

        Args:
            data: Raw response body
            status_code: HTTP status code of the response

        Returns:
            Remote feed items in payload order

        Raises:
            InvalidDataError: If the status is not 200 or the body is not a
                well-formed ``{"items": [...]}`` document
        """
        if status_code != cls.OK_200:
            raise InvalidDataError(f"Unexpected status code {status_code}")

        try:
            root = json.loads(data)
        except (UnicodeDecodeError, ValueError, RecursionError) as e:
            raise InvalidDataError(f"Response is not valid JSON: {e}") from e

        if not isinstance(root, dict) or not isinstance(root.get("items"), list):
            raise InvalidDataError("Response has no 'items' list")

        return [cls._decode_item(raw) for raw in root["items"]]

    @classmethod
    def _decode_item(cls, raw) -> RemoteFeedItem:
        if not isinstance(raw, dict):
            raise InvalidDataError("Feed item is not an object")

        try:
            item_id = UUID(raw["id"])
            image = raw["image"]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise InvalidDataError(f"Feed item has no valid id: {e}") from e

        # Only the canonical dashed form is an id
        if str(item_id) != raw["id"].lower():
            raise InvalidDataError(f"Feed item id is not canonical: {raw['id']!r}")

        if not cls._is_valid_url(image):
            raise InvalidDataError(f"Feed item has an invalid image URL: {image!r}")

        description = raw.get("description")
        location = raw.get("location")
        for value in (description, location):
            if value is not None and not isinstance(value, str):
                raise InvalidDataError("Feed item text fields must be strings")

        return RemoteFeedItem(
            id=item_id,
            description=description,
            location=location,
            image=image,
        )

    @staticmethod
    def _is_valid_url(value) -> bool:
        if not isinstance(value, str):
            return False
        try:
            parsed = urlparse(value)
        except ValueError:
            return False
        return bool(parsed.scheme) and bool(parsed.netloc)
