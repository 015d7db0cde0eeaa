"""Unit tests for request logging middleware."""

import pytest
from unittest.mock import Mock, patch
from fastapi import Request, Response

from signon.middleware.request_logging import RequestLoggingMiddleware


class MockState:
    """Plain attribute bag standing in for request.state."""


@pytest.mark.unit
class TestRequestLoggingMiddleware:
    """Test request logging middleware."""

    @pytest.fixture
    def middleware(self):
        """Create middleware instance."""
        return RequestLoggingMiddleware(Mock())

    @pytest.fixture
    def mock_request(self):
        """Create a callback request carrying a code and state."""
        request = Mock(spec=Request)
        request.method = "GET"
        request.url = Mock()
        request.url.path = "/auth/google/callback"
        request.url.query = "code=secret-code&state=secret-state"
        request.client = Mock()
        request.client.host = "10.0.0.7"
        request.state = MockState()
        return request

    @pytest.mark.asyncio
    async def test_sets_request_id_header(self, middleware, mock_request):
        """Should expose the request ID on state and response."""
        async def call_next(request):
            return Response(status_code=302)

        response = await middleware.dispatch(mock_request, call_next)

        assert response.headers["X-Request-ID"] == mock_request.state.request_id

    @pytest.mark.asyncio
    async def test_never_logs_query_string(self, middleware, mock_request):
        """Callback codes and state must not reach the log."""
        async def call_next(request):
            return Response(status_code=302)

        with patch("signon.middleware.request_logging.logger") as mock_logger:
            await middleware.dispatch(mock_request, call_next)

        messages = " ".join(call.args[0] for call in mock_logger.info.call_args_list)
        assert "/auth/google/callback" in messages
        assert "secret-code" not in messages
        assert "secret-state" not in messages
        assert "10.0.0.7" not in messages

    @pytest.mark.asyncio
    async def test_reraises_errors(self, middleware, mock_request):
        """Should log and re-raise downstream errors."""
        async def call_next(request):
            raise RuntimeError("boom")

        with patch("signon.middleware.request_logging.logger") as mock_logger:
            with pytest.raises(RuntimeError):
                await middleware.dispatch(mock_request, call_next)

        assert mock_logger.error.called
