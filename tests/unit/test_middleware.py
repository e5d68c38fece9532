"""Unit tests for middleware."""
import pytest
from unittest.mock import Mock

import structlog

from groupshare.middleware import LoggingMiddleware
from groupshare.middleware.logging import group_code_from_path


def make_request(path="/test", headers=None, method="GET"):
    mock_request = Mock()
    mock_request.state = Mock()
    mock_request.method = method
    mock_request.headers = headers or {}
    mock_request.url = Mock()
    mock_request.url.path = path
    mock_request.client = Mock()
    mock_request.client.host = "127.0.0.1"
    mock_request.query_params = {}
    return mock_request


def make_response(status_code=200):
    mock_response = Mock()
    mock_response.headers = {}
    mock_response.status_code = status_code
    return mock_response


@pytest.mark.unit
class TestLoggingMiddleware:
    """Test logging middleware."""

    @pytest.mark.asyncio
    async def test_request_id_added_to_state_and_headers(self):
        mock_request = make_request()
        mock_response = make_response()

        async def mock_call_next(request):
            assert isinstance(request.state.request_id, str)
            assert len(request.state.request_id) > 0
            return mock_response

        response = await LoggingMiddleware(Mock()).dispatch(mock_request, mock_call_next)

        assert response.headers["X-Request-ID"] == mock_request.state.request_id

    @pytest.mark.asyncio
    async def test_incoming_request_id_reused(self):
        """A client-supplied X-Request-ID is propagated instead of a new one."""
        mock_request = make_request(headers={"X-Request-ID": "trace-abc"})

        async def mock_call_next(request):
            return make_response()

        response = await LoggingMiddleware(Mock()).dispatch(mock_request, mock_call_next)

        assert mock_request.state.request_id == "trace-abc"
        assert response.headers["X-Request-ID"] == "trace-abc"

    @pytest.mark.asyncio
    async def test_group_code_bound_to_log_context(self):
        mock_request = make_request(path="/api/v1/groups/482913/members")
        bound = {}

        async def mock_call_next(request):
            bound.update(structlog.contextvars.get_contextvars())
            return make_response()

        await LoggingMiddleware(Mock()).dispatch(mock_request, mock_call_next)

        assert bound["group_code"] == "482913"
        assert bound["path"] == "/api/v1/groups/482913/members"

    @pytest.mark.asyncio
    async def test_exception_reraised(self):
        """Errors from the app propagate after being logged."""
        async def mock_call_next(request):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await LoggingMiddleware(Mock()).dispatch(make_request(), mock_call_next)


@pytest.mark.unit
class TestGroupCodeFromPath:

    @pytest.mark.parametrize("path,expected", [
        ("/api/v1/groups/482913", "482913"),
        ("/api/v1/groups/482913/checkin", "482913"),
        ("/api/v1/groups", None),
        ("/api/v1/groups/4829131/checkin", None),
        ("/health", None),
    ])
    def test_extract(self, path, expected):
        assert group_code_from_path(path) == expected
