"""
Unit tests for the aiohttp transport in stellar.federation.transport
"""

import asyncio

import pytest
from unittest.mock import AsyncMock
from aiohttp import ClientConnectionError, ClientResponse, ClientSession

from stellar.federation.transport import (
    AiohttpTransport,
    TransportError,
    TransportResponse,
)


class TestTransportResponse:
    """Test suite for TransportResponse helpers."""

    def test_ok_range(self):
        assert TransportResponse(status=200, body=b"").ok is True
        assert TransportResponse(status=204, body=b"").ok is True
        assert TransportResponse(status=301, body=b"").ok is False
        assert TransportResponse(status=404, body=b"").ok is False

    def test_text_limit(self):
        response = TransportResponse(status=500, body=b"x" * 300)
        assert response.text(200) == "x" * 200
        assert response.text() == "x" * 300

    def test_text_replaces_invalid_utf8(self):
        response = TransportResponse(status=500, body=b"\xff\xfe")
        assert response.text() == "\ufffd\ufffd"


class TestAiohttpTransport:
    """Test suite for AiohttpTransport.get."""

    @pytest.mark.asyncio
    async def test_get_success(self):
        mock_session = AsyncMock(spec=ClientSession)
        mock_response = AsyncMock(spec=ClientResponse)
        mock_response.status = 200
        mock_response.read.return_value = b"FEDERATION_SERVER=\"https://fed.example.com\""
        mock_session.get.return_value.__aenter__.return_value = mock_response

        transport = AiohttpTransport(mock_session, timeout=5, user_agent="test-agent")
        result = await transport.get(
            "https://fed.example.com", [("type", "name"), ("q", "bob*example.com")]
        )

        assert result.status == 200
        assert result.body == b"FEDERATION_SERVER=\"https://fed.example.com\""
        mock_session.get.assert_called_once()
        args, kwargs = mock_session.get.call_args
        assert args == ("https://fed.example.com",)
        assert kwargs["params"] == [("type", "name"), ("q", "bob*example.com")]
        assert kwargs["headers"] == {"User-Agent": "test-agent"}
        assert kwargs["timeout"].total == 5

    @pytest.mark.asyncio
    async def test_get_returns_error_status(self):
        """Test non-2xx responses are returned, not raised."""
        mock_session = AsyncMock(spec=ClientSession)
        mock_response = AsyncMock(spec=ClientResponse)
        mock_response.status = 404
        mock_response.read.return_value = b"not found"
        mock_session.get.return_value.__aenter__.return_value = mock_response

        result = await AiohttpTransport(mock_session).get("https://example.com/x")

        assert result.status == 404
        assert result.body == b"not found"

    @pytest.mark.asyncio
    async def test_get_connection_error(self):
        mock_session = AsyncMock(spec=ClientSession)
        mock_session.get.side_effect = ClientConnectionError("connection refused")

        with pytest.raises(TransportError) as exc_info:
            await AiohttpTransport(mock_session).get("https://example.com/x")

        assert exc_info.value.url == "https://example.com/x"
        assert exc_info.value.reason == "connection refused"
        assert isinstance(exc_info.value.__cause__, ClientConnectionError)

    @pytest.mark.asyncio
    async def test_get_timeout(self):
        mock_session = AsyncMock(spec=ClientSession)
        mock_session.get.side_effect = asyncio.TimeoutError()

        with pytest.raises(TransportError) as exc_info:
            await AiohttpTransport(mock_session).get("https://example.com/x")

        assert exc_info.value.reason == "timed out"

    @pytest.mark.asyncio
    async def test_get_error_while_reading(self):
        mock_session = AsyncMock(spec=ClientSession)
        mock_response = AsyncMock(spec=ClientResponse)
        mock_response.status = 200
        mock_response.read.side_effect = ClientConnectionError()
        mock_session.get.return_value.__aenter__.return_value = mock_response

        with pytest.raises(TransportError) as exc_info:
            await AiohttpTransport(mock_session).get("https://example.com/x")

        assert exc_info.value.reason == "ClientConnectionError"

    @pytest.mark.asyncio
    async def test_get_invalid_host(self):
        """Test a host name that cannot be IDNA encoded becomes a TransportError."""
        url = "https://" + "a" * 70 + ".com/.well-known/stellar.toml"
        mock_session = AsyncMock(spec=ClientSession)
        mock_session.get.side_effect = UnicodeError(
            "encoding with 'idna' codec failed (UnicodeError: label too long)"
        )

        with pytest.raises(TransportError) as exc_info:
            await AiohttpTransport(mock_session).get(url)

        assert exc_info.value.url == url
        assert exc_info.value.reason.startswith("invalid URL")
        assert isinstance(exc_info.value.__cause__, UnicodeError)
