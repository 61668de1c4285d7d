# src/vaultgraph/providers/ipfs/client.py
"""httpx fetcher for off-graph atom payloads (IPFS or plain URLs)."""

import logging
from typing import Any

import httpx

from vaultgraph.providers.base import ContentFetcher

logger = logging.getLogger(__name__)

IPFS_SCHEME = "ipfs://"
DEFAULT_GATEWAY = "https://ipfs.io/ipfs/"


def is_ipfs_reference(reference: str) -> bool:
    return reference.startswith(IPFS_SCHEME)


def ipfs_to_http_url(reference: str, gateway: str = DEFAULT_GATEWAY) -> str:
    """Rewrite ``ipfs://<cid>/path`` to ``<gateway><cid>/path``."""
    path = reference[len(IPFS_SCHEME) :]
    # Some payloads carry the legacy ipfs://ipfs/<cid> form
    if path.startswith("ipfs/"):
        path = path[len("ipfs/") :]
    return gateway.rstrip("/") + "/" + path


class HttpxContentFetcher(ContentFetcher):
    """Fetch JSON payloads referenced by atoms.

    Every failure (network, HTTP status, non-JSON body) yields None.
    """

    def __init__(
        self,
        gateway: str = DEFAULT_GATEWAY,
        timeout: float | None = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.gateway = gateway
        self.timeout = timeout
        self._transport = transport

    def resolve_url(self, reference: str) -> str | None:
        """HTTP URL for a payload reference, or None if it is not fetchable."""
        if is_ipfs_reference(reference):
            return ipfs_to_http_url(reference, self.gateway)
        if reference.startswith(("http://", "https://")):
            return reference
        return None

    async def fetch_json(self, reference: str) -> dict[str, Any] | None:
        url = self.resolve_url(reference)
        if url is None:
            return None

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True, transport=self._transport
            ) as client:
                response = await client.get(url)
                if response.status_code != 200:
                    logger.warning("Payload %s returned HTTP %s", url, response.status_code)
                    return None
                payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Could not fetch payload %s: %s", url, e)
            return None

        return payload if isinstance(payload, dict) else None
