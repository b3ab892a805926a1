"""
Unit tests for Logfire monitoring helpers.

Tests verify that:
- Initialization is skipped when Logfire is disabled or has no token
- Instrumentation is requested for the engine, HTTPX and the FastAPI app
- Instrumentation failures are logged, not raised
- Event helpers report to Logfire only when it is active
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI

from quillpress.core import monitoring

MODULE = "quillpress.core.monitoring"


@pytest.fixture
def active_logfire():
    with (
        patch(f"{MODULE}.LOGFIRE_ENABLED", True),
        patch(f"{MODULE}.LOGFIRE_TOKEN", "token"),
        patch(f"{MODULE}.logfire") as mock_logfire,
    ):
        yield mock_logfire


class TestIsLogfireActive:
    @pytest.mark.parametrize(
        "enabled, token, expected",
        [(True, "token", True), (True, "", False), (False, "token", False)],
    )
    def test_requires_flag_and_token(self, enabled, token, expected):
        with patch(f"{MODULE}.LOGFIRE_ENABLED", enabled), patch(f"{MODULE}.LOGFIRE_TOKEN", token):
            assert monitoring.is_logfire_active() is expected


class TestInitializeLogfire:
    """Test initialize_logfire."""

    def test_disabled_does_nothing(self):
        with patch(f"{MODULE}.LOGFIRE_ENABLED", False), patch(f"{MODULE}.logfire") as mock_logfire:
            monitoring.initialize_logfire(FastAPI())
        mock_logfire.configure.assert_not_called()

    def test_missing_token_does_nothing(self):
        with (
            patch(f"{MODULE}.LOGFIRE_ENABLED", True),
            patch(f"{MODULE}.LOGFIRE_TOKEN", ""),
            patch(f"{MODULE}.logfire") as mock_logfire,
        ):
            monitoring.initialize_logfire(FastAPI())
        mock_logfire.configure.assert_not_called()

    def test_configures_and_instruments(self, active_logfire):
        app = FastAPI()
        engine = MagicMock()

        monitoring.initialize_logfire(app, engine)

        active_logfire.configure.assert_called_once()
        assert active_logfire.configure.call_args[1]["token"] == "token"
        active_logfire.instrument_sqlalchemy.assert_called_once_with(engine=engine.sync_engine)
        active_logfire.instrument_httpx.assert_called_once()
        active_logfire.instrument_fastapi.assert_called_once_with(app=app)

    def test_skips_engine_and_app_when_not_given(self, active_logfire):
        monitoring.initialize_logfire()

        active_logfire.instrument_sqlalchemy.assert_not_called()
        active_logfire.instrument_fastapi.assert_not_called()
        active_logfire.instrument_httpx.assert_called_once()

    def test_instrumentation_failure_is_not_raised(self, active_logfire):
        active_logfire.instrument_httpx.side_effect = RuntimeError("missing extra")
        active_logfire.instrument_fastapi.side_effect = RuntimeError("missing extra")

        monitoring.initialize_logfire(FastAPI(), MagicMock())

        active_logfire.instrument_sqlalchemy.assert_called_once()

    def test_feature_flags_disable_instrumentation(self, active_logfire):
        with (
            patch(f"{MODULE}.LOGFIRE_TRACE_HTTPX", False),
            patch(f"{MODULE}.LOGFIRE_TRACE_SQLALCHEMY", False),
        ):
            monitoring.initialize_logfire(FastAPI(), MagicMock())

        active_logfire.instrument_httpx.assert_not_called()
        active_logfire.instrument_sqlalchemy.assert_not_called()
        active_logfire.instrument_fastapi.assert_called_once()


class TestEventHelpers:
    """Test the request, content and error log helpers."""

    def test_api_request_reported_when_active(self, active_logfire):
        monitoring.log_api_request("GET", "/api/v1/blog", 200, 12.5)
        active_logfire.info.assert_called_once_with(
            "API request completed", method="GET", path="/api/v1/blog", status_code=200, duration_ms=12.5
        )

    def test_content_event_reported_when_active(self, active_logfire):
        monitoring.log_content_event("post_published", post_id="p1")
        active_logfire.info.assert_called_once_with("post_published", post_id="p1")

    def test_error_reported_when_active(self, active_logfire):
        monitoring.log_error("ValueError", "boom", {"path": "/x"})
        active_logfire.error.assert_called_once_with("ValueError: boom", path="/x")

    def test_helpers_fall_back_to_logger_when_inactive(self):
        with patch(f"{MODULE}.LOGFIRE_ENABLED", False), patch(f"{MODULE}.logfire") as mock_logfire:
            with patch.object(monitoring.logger, "debug") as mock_debug:
                monitoring.log_api_request("GET", "/", 200, 1.0)
                monitoring.log_content_event("tag_merged", target="t1")
                monitoring.log_error("KeyError", "x")

        mock_logfire.info.assert_not_called()
        mock_logfire.error.assert_not_called()
        assert mock_debug.call_count == 3
