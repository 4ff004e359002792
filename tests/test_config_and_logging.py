"""
Tests for settings validation and the logging helpers.
"""

import json
import logging

import pytest
from pydantic import ValidationError

from app.core.config import Settings
from app.core.logging import (
    HumanReadableFormatter,
    StructuredFormatter,
    clear_request_id,
    get_logger,
    get_request_id,
    set_request_id,
    setup_logging,
)


class TestSettings:
    def test_defaults(self):
        config = Settings()

        assert config.API_V1_STR == "/api/v1"
        assert config.DEFAULT_PAGE_SIZE == 10
        assert config.AUDIT_DEFAULT_PAGE_SIZE == 25

    def test_trailing_slashes_are_trimmed(self):
        config = Settings(API_BASE_URL="http://localhost:8000/", API_V1_STR="/api/v2/")

        assert config.API_BASE_URL == "http://localhost:8000"
        assert config.API_V1_STR == "/api/v2"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"API_BASE_URL": "localhost:8000"},
            {"API_V1_STR": "api"},
            {"OWNER_STORE_BACKEND": "redis"},
            {"DEFAULT_PAGE_SIZE": 0},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ValidationError):
            Settings(**overrides)


def make_record(message: str = "created %s", args=("owner-1",)) -> logging.LogRecord:
    return logging.LogRecord("backoffice.test", logging.INFO, __file__, 10, message, args, None)


class TestLogging:
    def teardown_method(self):
        clear_request_id()

    def test_structured_formatter_includes_request_id(self):
        set_request_id("req-42")

        payload = json.loads(StructuredFormatter().format(make_record()))

        assert payload["message"] == "created owner-1"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "backoffice.test"
        assert payload["request_id"] == "req-42"

    def test_structured_formatter_merges_extra_fields(self):
        record = make_record()
        record.extra_fields = {"status_code": 201}

        payload = json.loads(StructuredFormatter().format(record))

        assert payload["status_code"] == 201
        assert "request_id" not in payload

    def test_human_readable_formatter(self):
        set_request_id("abcdef123456")

        line = HumanReadableFormatter().format(make_record())

        assert "[backoffice.test]" in line
        assert "[req:abcdef12]" in line
        assert line.endswith("created owner-1")

    def test_request_id_is_generated_when_missing(self):
        request_id = set_request_id()

        assert request_id
        assert get_request_id() == request_id

    def test_setup_logging(self):
        logger = setup_logging(log_level="debug", use_json=True)

        assert logger.name == "backoffice"
        assert logger.level == logging.DEBUG
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)
        assert get_logger("services.owner").name == "backoffice.services.owner"
        setup_logging()
