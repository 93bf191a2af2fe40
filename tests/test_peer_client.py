#!/usr/bin/env python3
"""Tests for the HTTPS client delivering clipboard content to the peer."""
import json
import ssl
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from clipshare.errors import ConfigError, NetworkError
from clipshare.peer_client import PeerClient, create_pinned_ssl_context

PEER_URL = "https://peer.example:47880"


@pytest.mark.asyncio
async def test_send_posts_json_with_authorization() -> None:
    """Test send POSTs {"data": value} with the raw secret as Authorization."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200)

    client = PeerClient(PEER_URL, "s3cret", transport=httpx.MockTransport(handler))
    response = await client.send("héllo ✓")
    await client.aclose()

    assert response.status_code == 200
    request = seen[0]
    assert request.method == "POST"
    assert request.url.host == "peer.example"
    assert request.url.port == 47880
    assert request.headers["Authorization"] == "s3cret"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"data": "héllo ✓"}


@pytest.mark.asyncio
async def test_send_rejected_status_raises_network_error() -> None:
    """Test a non-2xx answer raises NetworkError."""
    transport = httpx.MockTransport(lambda request: httpx.Response(401))
    client = PeerClient(PEER_URL, "wrong", transport=transport)

    with pytest.raises(NetworkError, match="401"):
        await client.send("x")
    await client.aclose()


@pytest.mark.asyncio
async def test_send_connection_failure_raises_network_error() -> None:
    """Test a transport failure is wrapped in NetworkError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    client = PeerClient(PEER_URL, "s3cret", transport=httpx.MockTransport(handler))

    with pytest.raises(NetworkError, match="Connection refused"):
        await client.send("x")
    await client.aclose()


def test_create_pinned_ssl_context_disables_hostname_check(tmp_path: Path) -> None:
    """Test the context trusts the given file and skips hostname checks."""
    context = ssl.create_default_context()
    with patch("clipshare.peer_client.ssl.create_default_context", return_value=context) as mock_ctx:
        result = create_pinned_ssl_context(tmp_path / "remote.pem")

    mock_ctx.assert_called_once_with(cafile=str(tmp_path / "remote.pem"))
    assert result is context
    assert result.check_hostname is False
    assert result.verify_mode == ssl.CERT_REQUIRED


def test_create_pinned_ssl_context_missing_file(tmp_path: Path) -> None:
    """Test a missing certificate file is a ConfigError."""
    with pytest.raises(ConfigError, match="remote.pem"):
        create_pinned_ssl_context(tmp_path / "remote.pem")


def test_create_pinned_ssl_context_invalid_file(tmp_path: Path) -> None:
    """Test a file without a certificate is a ConfigError."""
    cert = tmp_path / "remote.pem"
    cert.write_text("not a certificate\n")

    with pytest.raises(ConfigError):
        create_pinned_ssl_context(cert)
