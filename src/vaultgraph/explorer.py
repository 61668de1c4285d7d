# src/vaultgraph/explorer.py
"""Read-side entry point over the knowledge graph."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

from vaultgraph import queries
from vaultgraph.activity import ActivityAggregator
from vaultgraph.exceptions import QueryError
from vaultgraph.fetching import PaginatedFetcher, collect_ids
from vaultgraph.models import (
    Activity,
    Atom,
    FollowGraph,
    Position,
    Stance,
    Triple,
    TriplePosition,
    TriplesWithPositions,
)
from vaultgraph.providers.base import ContentFetcher, GraphClient, ValuationBackend
from vaultgraph.resolver import RelationResolver, parse_rows
from vaultgraph.settings import Settings
from vaultgraph.valuation import UNAVAILABLE, RedeemPreview, Unavailable, ValuationEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")

# triples_for_object reads a single page of this size
OBJECT_TRIPLES_PAGE_SIZE = 1000


class GraphExplorer:
    """Denormalized views of atoms, triples, positions and activity.

    Root query failures never propagate: list operations return ``[]`` and
    single-entity operations return ``None`` (unless ``settings.strict``).
    Failed enrichment lookups degrade to stubs.

    Example:
        explorer = GraphExplorer(
            client=HttpxGraphClient("https://indexer.example/v1/graphql"),
            backend=Web3ValuationBackend(rpc_url, vault_address),
        )
        for position in await explorer.positions(account_id):
            preview = await explorer.position_valuation(position)
    """

    def __init__(
        self,
        client: GraphClient,
        backend: ValuationBackend | None = None,
        content_fetcher: ContentFetcher | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Create an explorer.

        Args:
            client: Query service client
            backend: Vault valuation backend. Without one, valuations are UNAVAILABLE.
            content_fetcher: Off-graph payload fetcher for atom descriptions
            settings: Behavioral settings (pagination, strict mode, unit symbol)
        """
        self.client = client
        self.settings = settings if settings is not None else Settings()
        self.content_fetcher = content_fetcher
        self.valuation = (
            ValuationEngine(backend, unit_symbol=self.settings.unit_symbol)
            if backend is not None
            else None
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> GraphExplorer:
        """Build an explorer with the httpx and web3 providers.

        The valuation backend is only created when ``rpc_url`` and
        ``vault_address`` are both set.

        Raises:
            ValueError: If no endpoint is configured.
            ImportError: If valuation is configured but web3 is not installed.
        """
        from vaultgraph.providers import (
            HttpxContentFetcher,
            HttpxGraphClient,
            Web3ValuationBackend,
        )

        if not settings.endpoint:
            raise ValueError("A query service endpoint is required")

        backend = None
        if settings.has_valuation:
            assert settings.rpc_url is not None
            assert settings.vault_address is not None
            backend = Web3ValuationBackend(settings.rpc_url, settings.vault_address)

        return cls(
            client=HttpxGraphClient(settings.endpoint, timeout=settings.request_timeout),
            backend=backend,
            content_fetcher=HttpxContentFetcher(
                gateway=settings.ipfs_gateway, timeout=settings.request_timeout
            ),
            settings=settings,
        )

    # --- Helpers ---

    def fetcher(self) -> PaginatedFetcher:
        """A fresh paginator configured from settings."""
        return PaginatedFetcher(
            self.client,
            batch_size=self.settings.batch_size,
            max_records=self.settings.max_records,
        )

    def resolver(self) -> RelationResolver:
        """A fresh resolver; its caches live for one top-level call."""
        return RelationResolver(self.client)

    async def _guard(self, operation: str, call: Awaitable[T], default: T) -> T:
        try:
            return await call
        except QueryError as e:
            if self.settings.strict:
                raise
            logger.warning("%s failed: %s", operation, e)
            return default

    # --- Positions and activity ---

    async def positions(self, account_id: str) -> list[Position]:
        """Active positions of an account, each with its resolved term."""
        return await self._guard("positions", self._positions(account_id), [])

    async def _positions(self, account_id: str) -> list[Position]:
        rows = await self.fetcher().fetch_all(
            queries.ACTIVE_POSITIONS, {"accountId": account_id}, "positions"
        )
        positions = await self.resolver().resolve_positions(rows)
        return [p for p in positions if p.is_active]

    async def activity_history(self, account_id: str) -> list[Activity]:
        """Deposits and redemptions of an account, newest first."""
        aggregator = ActivityAggregator(self.fetcher())
        return await self._guard("activity history", aggregator.history(account_id), [])

    # --- Atoms ---

    async def atom_details(self, atom_id: str) -> Atom | None:
        """One atom with its term market cap and off-graph description."""
        return await self._guard("atom details", self._atom_details(atom_id), None)

    async def _atom_details(self, atom_id: str) -> Atom | None:
        data = await self.client.execute(queries.ATOM_BY_ID, {"atomId": atom_id})
        rows = data.get("atoms") or []
        if not rows:
            return None

        resolver = self.resolver()
        resolver.prime_atoms(rows[:1])
        atom = resolver.atom(atom_id).model_copy()

        terms, description = await asyncio.gather(
            resolver.resolve_terms([atom_id]),
            self._description(atom.data),
        )
        term = terms.get(atom_id)
        if term is not None and resolver.is_resolved("terms", atom_id):
            atom.market_cap = term.total_market_cap
        atom.description = description
        return atom

    async def _description(self, reference: str | None) -> str | None:
        if not reference or self.content_fetcher is None:
            return None
        payload = await self.content_fetcher.fetch_json(reference)
        if not payload:
            return None
        description = payload.get("description")
        return description if isinstance(description, str) and description else None

    # --- Triples ---

    async def claims_by_subject(self, subject_id: str) -> list[Triple]:
        """Triples with the given subject, with terms and position counts."""
        call = self._claims(queries.TRIPLES_BY_SUBJECT, {"subjectId": subject_id})
        return await self._guard("claims by subject", call, [])

    async def claims_by_account(self, account_id: str) -> list[Triple]:
        """Triples created by the account, with terms and position counts."""
        call = self._claims(queries.TRIPLES_BY_CREATOR, {"creatorId": account_id})
        return await self._guard("claims by account", call, [])

    async def _claims(self, query: str, variables: dict[str, Any]) -> list[Triple]:
        rows = await self.fetcher().fetch_all(query, variables, "triples")
        return await self.resolver().resolve_triples(rows, include_counts=True)

    async def triples_for_object(
        self, object_id: str, batch_size: int = OBJECT_TRIPLES_PAGE_SIZE
    ) -> list[Triple]:
        """A single page of triples pointing at ``object_id``, with their atoms."""
        return await self._guard(
            "triples for object", self._triples_for_object(object_id, batch_size), []
        )

    async def _triples_for_object(self, object_id: str, batch_size: int) -> list[Triple]:
        rows = await self.fetcher().fetch_page(
            queries.TRIPLES_BY_OBJECT, {"objectId": object_id}, "triples", limit=batch_size
        )
        return await self.resolver().resolve_triples(rows, include_terms=False)

    async def follows_and_followers(self, predicate_id: str, user_atom_id: str) -> FollowGraph:
        """Triples ``(user, predicate, X)`` and ``(X, predicate, user)``."""
        return await self._guard(
            "follows and followers",
            self._follows_and_followers(predicate_id, user_atom_id),
            FollowGraph(),
        )

    async def _follows_and_followers(self, predicate_id: str, user_atom_id: str) -> FollowGraph:
        fetcher = self.fetcher()
        variables = {"predicateId": predicate_id, "userAtomId": user_atom_id}
        follow_rows, follower_rows = await asyncio.gather(
            fetcher.fetch_all(queries.FOLLOWS, variables, "triples"),
            fetcher.fetch_all(queries.FOLLOWERS, variables, "triples"),
        )
        # One resolution pass for both directions
        triples = await self.resolver().resolve_triples(
            follow_rows + follower_rows, include_terms=False
        )
        return FollowGraph(
            follows=triples[: len(follow_rows)],
            followers=triples[len(follow_rows) :],
        )

    async def triple_details(self, triple_id: str) -> Triple | None:
        """One triple with atoms, term, counter-term and position counts."""
        return await self._guard("triple details", self._triple_details(triple_id), None)

    async def _triple_details(self, triple_id: str) -> Triple | None:
        row = await self._triple_row(triple_id)
        if row is None:
            return None
        triples = await self.resolver().resolve_triples([row], include_counts=True)
        return triples[0]

    async def _triple_row(self, triple_id: str) -> dict[str, Any] | None:
        data = await self.client.execute(queries.TRIPLE_BY_ID, {"tripleId": triple_id})
        row = data.get("triple")
        if not row or not row.get("term_id"):
            return None
        return row

    async def triple_position(self, account_id: str, triple_id: str) -> TriplePosition:
        """Whether the account stakes for (term) or against (counter-term) a triple.

        The counts are the account's own active positions on each side.
        """
        return await self._guard(
            "triple position",
            self._triple_position(account_id, triple_id),
            TriplePosition(triple_id=triple_id),
        )

    async def _triple_position(self, account_id: str, triple_id: str) -> TriplePosition:
        row = await self._triple_row(triple_id)
        if row is None:
            return TriplePosition(triple_id=triple_id)

        term_id = row["term_id"]
        counter_term_id = row.get("counter_term_id")
        rows = await self.fetcher().fetch_all(
            queries.ACCOUNT_POSITIONS_FOR_TERMS,
            {
                "termIds": sorted(collect_ids([row], "term_id", "counter_term_id")),
                "accountId": account_id.lower(),
            },
            "positions",
        )
        term_count = sum(1 for r in rows if r.get("term_id") == term_id)
        counter_count = (
            sum(1 for r in rows if r.get("term_id") == counter_term_id) if counter_term_id else 0
        )
        has_position = term_count > 0 or counter_count > 0
        return TriplePosition(
            triple_id=triple_id,
            has_position=has_position,
            is_for=term_count > 0 if has_position else None,
            term_position_count=term_count,
            counter_term_position_count=counter_count,
        )

    async def triples_by_creator(
        self, creator_id: str, predicate_id: str, object_id: str
    ) -> list[Triple]:
        """Triples ``(S, predicate, object)`` where S is an atom created by ``creator_id``."""
        return await self._guard(
            "triples by creator",
            self._triples_by_creator(creator_id, predicate_id, object_id),
            [],
        )

    async def _triples_by_creator(
        self, creator_id: str, predicate_id: str, object_id: str
    ) -> list[Triple]:
        fetcher = self.fetcher()
        atom_rows = await fetcher.fetch_all(
            queries.ATOMS_BY_CREATOR, {"creatorId": creator_id}, "atoms"
        )
        subject_ids = collect_ids(atom_rows, "term_id")
        if not subject_ids:
            return []

        rows = await fetcher.fetch_all(
            queries.TRIPLES_BY_SUBJECTS_PREDICATE_OBJECT,
            {
                "subjectIds": sorted(subject_ids),
                "predicateId": predicate_id,
                "objectId": object_id,
            },
            "triples",
        )
        resolver = self.resolver()
        resolver.prime_atoms(atom_rows)
        return await resolver.resolve_triples(rows, include_terms=False)

    async def triples_with_positions(self, account_id: str) -> TriplesWithPositions:
        """All triples with their terms, plus the account's positions on them."""
        return await self._guard(
            "triples with positions",
            self._triples_with_positions(account_id),
            TriplesWithPositions(),
        )

    async def _triples_with_positions(self, account_id: str) -> TriplesWithPositions:
        fetcher = self.fetcher()
        rows = await fetcher.fetch_all(queries.ALL_TRIPLES, {}, "triples")
        term_ids = collect_ids(rows, "term_id", "counter_term_id")

        async def account_positions() -> list[dict[str, Any]]:
            if not term_ids:
                return []
            try:
                return await fetcher.fetch_all(
                    queries.ACCOUNT_POSITIONS_FOR_TERMS,
                    {"termIds": sorted(term_ids), "accountId": account_id.lower()},
                    "positions",
                )
            except QueryError as e:
                logger.warning("Positions for %s unavailable: %s", account_id, e)
                return []

        triples, position_rows = await asyncio.gather(
            self.resolver().resolve_triples(rows), account_positions()
        )
        positions = parse_rows(Position, position_rows)
        return TriplesWithPositions(triples=triples, positions=positions)

    # --- Valuation ---

    @staticmethod
    def position_stance(position: Position) -> Stance:
        """For/Against side of a position."""
        return position.stance

    async def position_valuation(self, position: Position) -> RedeemPreview | Unavailable:
        """Fee-adjusted redemption value of a whole position.

        Against positions are priced on the triple's counter-term.
        """
        if self.valuation is None:
            return UNAVAILABLE
        term = position.valuation_term
        term_id = term.id if term is not None else position.term_id
        return await self.valuation.preview_redeem_value(
            term_id, position.curve_id, position.shares
        )
