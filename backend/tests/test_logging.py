"""Tests for logging configuration."""

import json
import logging

from storefront.core.logging import (
    DevelopmentFormatter,
    JSONFormatter,
    get_request_id,
    request_context,
    setup_logging,
)


def _record(message: str, **extra_fields) -> logging.LogRecord:
    record = logging.LogRecord("storefront.test", logging.INFO, __file__, 1, message, None, None)
    if extra_fields:
        record.extra_fields = extra_fields
    return record


class TestJSONFormatter:
    def test_includes_extra_fields_and_request_id(self):
        with request_context("req-123"):
            payload = json.loads(JSONFormatter().format(_record("erased", user_id=1, outcome="erased")))

        assert payload["message"] == "erased"
        assert payload["level"] == "INFO"
        assert payload["request_id"] == "req-123"
        assert payload["user_id"] == 1
        assert payload["outcome"] == "erased"

    def test_omits_empty_request_id(self):
        payload = json.loads(JSONFormatter().format(_record("hello")))
        assert "request_id" not in payload

    def test_emits_only_record_fields(self):
        payload = json.loads(JSONFormatter().format(_record("hello", user_id=3)))
        assert set(payload) == {"timestamp", "level", "logger", "message", "user_id"}


class TestDevelopmentFormatter:
    def test_appends_extra_fields(self):
        line = DevelopmentFormatter().format(_record("done", anon_tag="anon_abc"))
        assert "storefront.test: done" in line
        assert "anon_tag=anon_abc" in line

    def test_plain_text_line(self):
        with request_context("abcdef123456"):
            line = DevelopmentFormatter().format(_record("done"))
        assert "\033[" not in line
        assert "INFO     [abcdef12] storefront.test: done" in line


class TestSetupLogging:
    def test_configures_root_logger(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging(level="WARNING", json_logs=True)
            assert root.level == logging.WARNING
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)

            setup_logging(debug=True)
            assert root.level == logging.DEBUG
            assert isinstance(root.handlers[0].formatter, DevelopmentFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class TestRequestContext:
    def test_binds_and_restores(self):
        assert get_request_id() == ""
        with request_context("outer") as outer:
            assert outer == "outer"
            with request_context() as inner:
                assert inner and inner != "outer"
                assert get_request_id() == inner
            assert get_request_id() == "outer"
        assert get_request_id() == ""


class TestErasureLogs:
    def test_no_personal_data_in_erasure_logs(self, erasure_engine, seeded_user_id, caplog):
        with caplog.at_level(logging.INFO, logger="storefront.services.anonymization"):
            erasure_engine.anonymize_user(seeded_user_id)

        text = " ".join(
            f"{r.getMessage()} {getattr(r, 'extra_fields', '')}" for r in caplog.records
        )
        assert "erased" in text
        for value in ("Alice", "Carter", "alicec", "alice@example.com", "Peachtree"):
            assert value not in text
