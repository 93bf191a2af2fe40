#!/usr/bin/env python3
"""HTTPS client delivering clipboard content to the peer.

The peer is authenticated by a pinned certificate: the TLS context trusts
only the peer's certificate file and skips hostname verification, since
peers are usually addressed by IP or an unstable hostname. The shared
secret travels verbatim in the Authorization header.
"""

from __future__ import annotations

import logging
import ssl
from pathlib import Path

import httpx

from clipshare.constants import PEER_REQUEST_TIMEOUT
from clipshare.errors import ConfigError, NetworkError

logger = logging.getLogger(__name__)


def create_pinned_ssl_context(cert_path: str | Path) -> ssl.SSLContext:
    """Build a client TLS context trusting only the given certificate.

    Args:
        cert_path: PEM file holding the peer's certificate.

    Returns:
        SSLContext with hostname checking disabled.

    Raises:
        ConfigError: If the certificate file cannot be loaded.
    """
    try:
        context = ssl.create_default_context(cafile=str(cert_path))
    except (OSError, ssl.SSLError) as e:
        raise ConfigError(f"Cannot load peer certificate {cert_path}: {e}") from e
    context.check_hostname = False
    return context


class PeerClient:
    """
    Sends clipboard content to the peer's POST / endpoint.

    Attributes:
        url: The peer's base URL.
    """

    def __init__(
        self,
        url: str,
        secret: str,
        verify: ssl.SSLContext | bool = True,
        timeout: float = PEER_REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self._secret = secret
        self._client = httpx.AsyncClient(
            verify=verify, timeout=timeout, transport=transport
        )

    async def send(self, value: str) -> httpx.Response:
        """POST value to the peer as {"data": value}.

        Args:
            value: Clipboard text to deliver.

        Returns:
            The peer's response.

        Raises:
            NetworkError: If the request fails or the peer does not answer 2xx.
        """
        logger.info("Remote: POST %s", self.url)
        try:
            response = await self._client.post(
                self.url,
                json={"data": value},
                headers={"Authorization": self._secret},
            )
        except httpx.HTTPError as e:
            raise NetworkError(f"Request failed: {e!r}") from e

        logger.info("Remote: Response status: %d", response.status_code)
        if not response.is_success:
            raise NetworkError(f"Peer rejected request with status {response.status_code}")
        return response

    async def aclose(self) -> None:
        await self._client.aclose()
