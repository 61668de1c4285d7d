# src/vaultgraph/providers/graphql/client.py
"""httpx client for the GraphQL query service."""

import logging
from typing import Any

import httpx

from vaultgraph.exceptions import QueryError
from vaultgraph.providers.base import GraphClient

logger = logging.getLogger(__name__)


class HttpxGraphClient(GraphClient):
    """GraphQL-over-HTTP client built on httpx.

    Every call opens its own AsyncClient so nothing outlives the request.

    Example:
        from vaultgraph.providers.graphql import HttpxGraphClient

        client = HttpxGraphClient("https://indexer.example/v1/graphql")
        data = await client.execute("query { atoms(limit: 1) { term_id } }")
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float | None = 30.0,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            endpoint: GraphQL endpoint URL.
            timeout: Per-request timeout in seconds. None disables it.
            headers: Extra HTTP headers sent with every request.
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests).
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if headers:
            self.headers.update(headers)
        self._transport = transport

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """POST a query and return its ``data`` object."""
        payload = {"query": query, "variables": variables or {}}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, headers=self.headers, transport=self._transport
            ) as client:
                response = await client.post(self.endpoint, json=payload)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            raise QueryError(f"Request to {self.endpoint} failed: {e}") from e
        except ValueError as e:
            raise QueryError(f"Malformed response from {self.endpoint}: {e}") from e

        if not isinstance(body, dict):
            raise QueryError(f"Malformed response from {self.endpoint}: expected an object")

        errors = body.get("errors")
        if errors:
            logger.error("GraphQL errors: %s", errors)
            raise QueryError.from_errors(errors)

        return body.get("data") or {}
