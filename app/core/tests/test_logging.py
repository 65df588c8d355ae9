"""Tests for logging configuration."""

import logging

from app.core.config import Settings
from app.core.logging import add_request_id, configure_logging, get_logger, request_id_ctx


def test_get_logger_returns_bound_logger():
    """get_logger should return a structlog logger."""
    configure_logging()
    logger = get_logger("test")

    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "error")


def test_request_id_context_variable():
    """request_id_ctx should store and retrieve values."""
    assert request_id_ctx.get() is None

    token = request_id_ctx.set("test-id-123")
    assert request_id_ctx.get() == "test-id-123"

    request_id_ctx.reset(token)
    assert request_id_ctx.get() is None


def test_add_request_id_processor():
    """The processor copies the context request id into the event."""
    token = request_id_ctx.set("req-7")
    try:
        event = add_request_id(None, "info", {"event": "sales.ingest.batch_started"})
    finally:
        request_id_ctx.reset(token)

    assert event["request_id"] == "req-7"
    assert add_request_id(None, "info", {"event": "x"}) == {"event": "x"}


def test_configure_logging_quiets_google_libraries(monkeypatch):
    """Google client libraries log at WARNING unless the app runs at DEBUG."""
    monkeypatch.setattr(
        "app.core.logging.get_settings", lambda: Settings(_env_file=None, log_level="INFO")
    )
    configure_logging()
    assert logging.getLogger("google.api_core").level == logging.WARNING
    assert logging.getLogger("grpc").level == logging.WARNING

    monkeypatch.setattr(
        "app.core.logging.get_settings", lambda: Settings(_env_file=None, log_level="DEBUG")
    )
    configure_logging()
    assert logging.getLogger("google.api_core").level == logging.DEBUG
