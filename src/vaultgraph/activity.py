# src/vaultgraph/activity.py
"""Merged deposit and redemption history for an account."""

from __future__ import annotations

import asyncio
import logging

from vaultgraph import queries
from vaultgraph.fetching import PaginatedFetcher
from vaultgraph.models import Activity, ActivityKind
from vaultgraph.resolver import RelationResolver

logger = logging.getLogger(__name__)


def sort_activities(activities: list[Activity]) -> list[Activity]:
    """Newest first; equal timestamps ordered by record id, descending."""
    return sorted(activities, key=lambda a: (a.created_at, a.id), reverse=True)


class ActivityAggregator:
    """Fetch, tag, enrich and order an account's economic events.

    Example:
        aggregator = ActivityAggregator(PaginatedFetcher(client))
        for event in await aggregator.history(account_id):
            print(event.kind, event.shares, event.term.triple.labels)
    """

    def __init__(self, fetcher: PaginatedFetcher) -> None:
        self.fetcher = fetcher

    async def history(self, account_id: str) -> list[Activity]:
        """All deposits and redemptions sent by ``account_id``.

        Both streams are paginated and fetched concurrently; their terms are
        resolved in one shared pass.

        Raises:
            QueryError: If either root stream fails.
        """
        variables = {"accountId": account_id}
        deposit_rows, redemption_rows = await asyncio.gather(
            self.fetcher.fetch_all(queries.DEPOSITS, variables, "deposits"),
            self.fetcher.fetch_all(queries.REDEMPTIONS, variables, "redemptions"),
        )
        logger.debug(
            "Account %s: %d deposits, %d redemptions",
            account_id,
            len(deposit_rows),
            len(redemption_rows),
        )

        rows = [{**row, "kind": ActivityKind.DEPOSIT} for row in deposit_rows]
        rows += [{**row, "kind": ActivityKind.REDEMPTION} for row in redemption_rows]

        resolver = RelationResolver(self.fetcher.client)
        activities = await resolver.resolve_activities(rows)
        return sort_activities(activities)
