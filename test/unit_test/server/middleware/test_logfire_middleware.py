"""
Unit tests for Logfire middleware.

This test suite covers:
- Request/response processing
- Duration measurement and the X-Process-Time header
- Error handling and exception tracking
- Slow request detection
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI, Request
from starlette.responses import Response
from starlette.testclient import TestClient

from quillpress.server.middleware.logfire_middleware import LogfireMiddleware

MIDDLEWARE_MODULE = "quillpress.server.middleware.logfire_middleware"


def make_request(method: str = "GET", path: str = "/api/v1/blog") -> AsyncMock:
    mock_request = AsyncMock(spec=Request)
    mock_request.method = method
    mock_request.url.path = path
    mock_request.url.query = ""
    mock_request.state = MagicMock()
    return mock_request


class TestLogfireMiddlewareDispatch:
    """Test LogfireMiddleware.dispatch method."""

    @pytest.mark.asyncio
    async def test_middleware_processes_successful_request(self):
        """Test that middleware processes successful requests."""
        mock_response = Response(content="ok", status_code=200)

        async def mock_call_next(request):
            return mock_response

        middleware = LogfireMiddleware(app=AsyncMock())

        with patch(f"{MIDDLEWARE_MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(make_request(), mock_call_next)

            assert response.status_code == 200
            mock_log.assert_called_once()
            call_args = mock_log.call_args
            assert call_args[1]["method"] == "GET"
            assert call_args[1]["path"] == "/api/v1/blog"
            assert call_args[1]["status_code"] == 200
            assert call_args[1]["duration_ms"] >= 0

    @pytest.mark.asyncio
    async def test_middleware_sets_process_time_header(self):
        """Test that the response carries the request duration."""
        middleware = LogfireMiddleware(app=AsyncMock())

        async def mock_call_next(request):
            return Response(status_code=201)

        with patch(f"{MIDDLEWARE_MODULE}.log_api_request"):
            response = await middleware.dispatch(make_request("POST", "/api/v1/blog/manual"), mock_call_next)

        assert float(response.headers["X-Process-Time"]) >= 0

    @pytest.mark.asyncio
    async def test_middleware_records_start_time(self):
        request = make_request()
        middleware = LogfireMiddleware(app=AsyncMock())

        async def mock_call_next(req):
            return Response()

        with patch(f"{MIDDLEWARE_MODULE}.log_api_request"):
            await middleware.dispatch(request, mock_call_next)

        assert isinstance(request.state.start_time, float)

    @pytest.mark.asyncio
    async def test_middleware_logs_and_reraises_errors(self):
        """Test that failures are reported as 500 and re-raised."""
        middleware = LogfireMiddleware(app=AsyncMock())

        async def failing_call_next(request):
            raise ValueError("boom")

        with patch(f"{MIDDLEWARE_MODULE}.log_api_request") as mock_log:
            with pytest.raises(ValueError, match="boom"):
                await middleware.dispatch(make_request("DELETE", "/api/v1/media/x"), failing_call_next)

            assert mock_log.call_args[1]["status_code"] == 500
            assert mock_log.call_args[1]["path"] == "/api/v1/media/x"

    @pytest.mark.asyncio
    async def test_slow_requests_are_warned(self):
        middleware = LogfireMiddleware(app=AsyncMock())

        async def mock_call_next(request):
            return Response()

        # perf_counter is read at the start and after the response
        with patch(f"{MIDDLEWARE_MODULE}.time.perf_counter", side_effect=[10.0, 12.5]), patch(
            f"{MIDDLEWARE_MODULE}.log_api_request"
        ) as mock_log, patch(f"{MIDDLEWARE_MODULE}.logger") as mock_logger:
            response = await middleware.dispatch(make_request(), mock_call_next)

        assert mock_log.call_args[1]["duration_ms"] == pytest.approx(2500.0)
        assert response.headers["X-Process-Time"] == "2500.00"
        mock_logger.warning.assert_called_once()
        assert "Slow API request" in mock_logger.warning.call_args[0][0]

    @pytest.mark.asyncio
    async def test_fast_requests_are_not_warned(self):
        middleware = LogfireMiddleware(app=AsyncMock())

        async def mock_call_next(request):
            return Response()

        with patch(f"{MIDDLEWARE_MODULE}.time.perf_counter", side_effect=[10.0, 10.2]), patch(
            f"{MIDDLEWARE_MODULE}.log_api_request"
        ), patch(f"{MIDDLEWARE_MODULE}.logger") as mock_logger:
            await middleware.dispatch(make_request(), mock_call_next)

        mock_logger.warning.assert_not_called()


class TestLogfireMiddlewareIntegration:
    """Test the middleware mounted on a FastAPI application."""

    def test_header_present_on_real_app(self):
        app = FastAPI()
        app.add_middleware(LogfireMiddleware)

        @app.get("/ping")
        async def ping():
            return {"pong": True}

        with patch(f"{MIDDLEWARE_MODULE}.log_api_request") as mock_log:
            response = TestClient(app, base_url="http://localhost").get("/ping")

        assert response.status_code == 200
        assert "X-Process-Time" in response.headers
        assert mock_log.call_args[1]["path"] == "/ping"
