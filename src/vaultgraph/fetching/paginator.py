# src/vaultgraph/fetching/paginator.py
"""Offset pagination over the query service."""

import logging
from typing import Any

from vaultgraph.exceptions import PaginationSafetyLimit
from vaultgraph.providers.base import GraphClient

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100
# Upper bound on accumulated records (1000 pages of 100)
DEFAULT_MAX_RECORDS = 100_000


class PaginatedFetcher:
    """Fetch every record of a list query, ``batch_size`` at a time.

    Starting at offset 0, requests pages until one comes back empty or short.
    A full page always triggers another request, so N records in batches of B
    take exactly ``N // B + 1`` requests.

    Example:
        fetcher = PaginatedFetcher(client)
        deposits = await fetcher.fetch_all(queries.DEPOSITS, {"accountId": a}, "deposits")
    """

    def __init__(
        self,
        client: GraphClient,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_records: int = DEFAULT_MAX_RECORDS,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: Query service client
            batch_size: Default page size
            max_records: Safety ceiling on accumulated records per fetch_all call
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.client = client
        self.batch_size = batch_size
        self.max_records = max_records
        self.requests_made = 0
        self.limit_reached = False

    async def fetch_page(
        self,
        query: str,
        variables: dict[str, Any],
        result_path: str,
        limit: int,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Fetch a single page. Raises QueryError on service errors."""
        data = await self.client.execute(query, {**variables, "limit": limit, "offset": offset})
        self.requests_made += 1
        return list(data.get(result_path) or [])

    async def fetch_all(
        self,
        query: str,
        variables: dict[str, Any] | None,
        result_path: str,
        batch_size: int | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch all records of ``result_path`` across pages.

        Args:
            query: Query document taking ``$limit`` and ``$offset``
            variables: Other query variables
            result_path: Key of the record list in the response data
            batch_size: Page size (default: self.batch_size)

        Returns:
            All records, in service order. Partial if the safety ceiling was hit.

        Raises:
            QueryError: If any page request fails. No retries.
        """
        batch_size = batch_size or self.batch_size
        variables = variables or {}

        try:
            return await self._paginate(query, variables, result_path, batch_size)
        except PaginationSafetyLimit as e:
            self.limit_reached = True
            logger.warning("%s; returning %d partial records", e, len(e.partial_results))
            return e.partial_results

    async def _paginate(
        self,
        query: str,
        variables: dict[str, Any],
        result_path: str,
        batch_size: int,
    ) -> list[dict[str, Any]]:
        results: list[dict[str, Any]] = []
        offset = 0

        while True:
            page = await self.fetch_page(query, variables, result_path, batch_size, offset)
            logger.debug("%s: %d records at offset %d", result_path, len(page), offset)
            if not page:
                break
            results.extend(page)
            if len(page) < batch_size:
                break
            if len(results) >= self.max_records:
                raise PaginationSafetyLimit(
                    f"Pagination of '{result_path}' stopped at {self.max_records} records",
                    partial_results=results,
                    limit=self.max_records,
                )
            offset += batch_size

        return results
