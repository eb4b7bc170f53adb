"""Unit tests for structured logging."""

import json
import logging
from io import StringIO

from helpers import CompletionRecorder, HTTPClientSpy, make_items_json

from feedloader.logging_config import (
    StructuredFormatter,
    create_component_logger,
    setup_structured_logging,
)
from feedloader.remote_loader import RemoteFeedLoader


def capture_feedloader_logs():
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    logger = logging.getLogger("feedloader")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return stream, handler


def parse_entries(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


class TestLoggingUnit:
    """Unit tests for the structured formatter and component loggers."""

    def test_formatter_emits_json_with_context_fields(self):
        stream, handler = capture_feedloader_logs()
        try:
            logger = create_component_logger("local_loader", "ctx-1")
            logger.info("Feed cached", operation="save", items_count=3)
        finally:
            logging.getLogger("feedloader").removeHandler(handler)

        entry = parse_entries(stream)[-1]
        assert entry["message"] == "Feed cached"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "feedloader.local_loader"
        assert entry["context_id"] == "ctx-1"
        assert entry["component"] == "local_loader"
        assert entry["operation"] == "save"
        assert entry["items_count"] == 3

    def test_exception_logging_includes_traceback(self):
        stream, handler = capture_feedloader_logs()
        try:
            logger = create_component_logger("codable_store")
            try:
                raise OSError("disk full")
            except OSError:
                logger.exception("Write failed", operation="insert")
        finally:
            logging.getLogger("feedloader").removeHandler(handler)

        entry = parse_entries(stream)[-1]
        assert entry["level"] == "ERROR"
        assert "OSError: disk full" in entry["exception"]

    def test_generated_context_id(self):
        logger = create_component_logger("remote_loader")

        assert logger.context_id.startswith("feed_")

    def test_remote_loader_logs_rejected_response(self):
        stream, handler = capture_feedloader_logs()
        try:
            client = HTTPClientSpy()
            sut = RemoteFeedLoader("https://a.com/feed", client, context_id="ctx-2")
            completion = CompletionRecorder()
            sut.load(completion)
            client.complete_with_status_code(500, make_items_json([]))
            completion.wait()
        finally:
            logging.getLogger("feedloader").removeHandler(handler)

        warnings = [e for e in parse_entries(stream) if e["level"] == "WARNING"]
        assert warnings[-1]["status_code"] == 500
        assert warnings[-1]["url"] == "https://a.com/feed"
        assert warnings[-1]["context_id"] == "ctx-2"

    def test_setup_structured_logging_installs_formatter(self):
        root_logger = logging.getLogger()
        original_handlers = root_logger.handlers[:]
        original_level = root_logger.level
        try:
            setup_structured_logging("debug")

            assert root_logger.level == logging.DEBUG
            assert len(root_logger.handlers) == 1
            assert isinstance(root_logger.handlers[0].formatter, StructuredFormatter)
            assert logging.getLogger("feedloader").level == logging.DEBUG
        finally:
            root_logger.handlers[:] = original_handlers
            root_logger.setLevel(original_level)
