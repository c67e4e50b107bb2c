"""Tests for context-aware logging."""

import json
import logging

from kitchly.logging_config import (
    ContextualFormatter,
    LoggingContext,
    StructuredJsonFormatter,
    conversation_id_ctx,
    get_logger,
)


def make_record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("kitchly.test", logging.INFO, __file__, 10, message, None, None)


class TestLoggingContext:
    """Tests for context propagation into log output."""

    def test_context_is_scoped(self):
        """Test values are restored when the context exits."""
        with LoggingContext(conversation_id="conv-1", action="COOK_ALONG"):
            assert conversation_id_ctx.get() == "conv-1"
            with LoggingContext(conversation_id="conv-2"):
                assert conversation_id_ctx.get() == "conv-2"
            assert conversation_id_ctx.get() == "conv-1"
        assert conversation_id_ctx.get() is None

    def test_text_formatter_includes_context(self):
        """Test the development formatter shows conversation and action."""
        with LoggingContext(request_id="0123456789abcdef", conversation_id="conv-1", action="PLAN_MEALS"):
            line = ContextualFormatter().format(make_record())

        assert "[req=01234567, conv=conv-1, action=PLAN_MEALS]" in line
        assert line.endswith("| hello")

    def test_json_formatter_includes_context(self):
        """Test the production formatter emits context fields."""
        with LoggingContext(conversation_id="conv-9"):
            data = json.loads(StructuredJsonFormatter().format(make_record("order created")))

        assert data["message"] == "order created"
        assert data["conversation_id"] == "conv-9"
        assert data["level"] == "INFO"
        assert data["timestamp"].endswith("Z")

    def test_adapter_adds_context_to_extra(self):
        """Test the adapter copies context into the record extras."""
        logger = get_logger("kitchly.test")
        with LoggingContext(conversation_id="conv-4"):
            _, kwargs = logger.process("msg", {})
        assert kwargs["extra"] == {"conversation_id": "conv-4"}
