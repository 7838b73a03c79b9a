"""
Unit Tests for Error Handling and Logging
=========================================
"""

import json
import logging
from unittest.mock import Mock

from newssieve.utils.exceptions import (
    AIError,
    ClassificationError,
    ConfigurationError,
    ErrorCode,
    NewsSieveError,
    PersistenceError,
    TransportError,
    get_user_friendly_message,
    handle_exception,
)
from newssieve.utils.logging import (
    PerformanceLogger,
    StructuredFormatter,
    get_logger_for_component,
)


class TestExceptions:

    def test_error_code_in_string(self):
        error = TransportError("connection refused", url="http://x")

        assert str(error) == "[F004] connection refused"
        assert error.context == {"url": "http://x"}
        assert error.recoverable is True

    def test_to_dict(self):
        error = ConfigurationError("bad value", config_key="content.max_content_length")

        data = error.to_dict()

        assert data["error_type"] == "ConfigurationError"
        assert data["error_code"] == ErrorCode.CONFIG_INVALID.value
        assert data["context"]["config_key"] == "content.max_content_length"

    def test_classification_error_is_ai_error(self):
        error = ClassificationError("no comma", response_text="maybe")

        assert isinstance(error, AIError)
        assert error.error_code == ErrorCode.AI_INVALID_RESPONSE
        assert error.context["response_text"] == "maybe"

    def test_handle_exception_wraps_generic_errors(self):
        logger = Mock()

        wrapped = handle_exception(PermissionError("denied"), logger, "save_record")

        assert isinstance(wrapped, PersistenceError)
        assert wrapped.error_code == ErrorCode.STORAGE_PERMISSION_DENIED
        assert wrapped.context["operation"] == "save_record"
        logger.error.assert_called_once()

    def test_handle_exception_passes_through_own_errors(self):
        original = TransportError("timeout")

        assert handle_exception(original, Mock(), "fetch_feed") is original

    def test_unknown_errors_become_base_error(self):
        wrapped = handle_exception(KeyError("x"), Mock(), "parse")

        assert type(wrapped) is NewsSieveError
        assert wrapped.recoverable is True

    def test_user_friendly_message(self):
        assert get_user_friendly_message(TransportError("x")) == "Network request failed"
        assert "unexpected" in get_user_friendly_message(RuntimeError("x"))


class TestLogging:

    def test_component_logger_context(self):
        logger = get_logger_for_component("feed_reader", feed_name="China News", group="1")

        assert logger.logger.name == "newssieve.feed_reader"
        assert logger.extra == {"component": "feed_reader", "feed": "China News", "group": "1"}

    def test_bind_adds_context_and_drops_none(self):
        logger = get_logger_for_component("pipeline").bind(feed="Alpha", group=None)

        assert logger.extra == {"component": "pipeline", "feed": "Alpha"}

    def test_structured_formatter_includes_extra_fields(self):
        record = logging.LogRecord("newssieve.test", logging.INFO, __file__, 1, "hello", None, None)
        record.feed = "Alpha"

        data = json.loads(StructuredFormatter().format(record))

        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["extra"] == {"feed": "Alpha"}

    def test_performance_logger_measures_duration(self):
        logger = Mock()

        with PerformanceLogger(logger, "unit of work") as perf:
            pass

        assert perf.duration >= 0
        logger.info.assert_called_once()
