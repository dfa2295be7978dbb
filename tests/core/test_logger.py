"""Tests for the structured logger"""
from nutrition_service.core.logger import StructuredLogger
from nutrition_service.middleware.correlation_id import correlation_id_ctx


class TestStructuredLogger:

    def test_build_log_entry(self):
        logger = StructuredLogger("test-logger")
        token = correlation_id_ctx.set("corr-1")
        try:
            entry = logger._build_log_entry("INFO", user_id="user-1", metadata={"k": "v"})
        finally:
            correlation_id_ctx.reset(token)

        assert entry["level"] == "INFO"
        assert entry["service"] == "test-logger"
        assert entry["correlationId"] == "corr-1"
        assert entry["userId"] == "user-1"
        assert entry["metadata"] == {"k": "v"}

    def test_explicit_correlation_id_wins(self):
        entry = StructuredLogger("test-logger")._build_log_entry("DEBUG", correlation_id="given")

        assert entry["correlationId"] == "given"
        assert "userId" not in entry
        assert "metadata" not in entry

    def test_error_metadata(self):
        metadata = StructuredLogger._with_error({"a": 1}, ValueError("bad"))

        assert metadata == {"a": 1, "error": {"type": "ValueError", "message": "bad"}}
