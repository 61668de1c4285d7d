# tests/test_explorer.py
"""Tests for GraphExplorer."""

import pytest

from conftest import (
    ACCOUNT,
    COUNTER,
    OBJECT,
    PREDICATE,
    SUBJECT,
    TRIPLE,
    FakeGraphClient,
    FakeValuationBackend,
)
from vaultgraph import queries
from vaultgraph.exceptions import QueryError
from vaultgraph.explorer import OBJECT_TRIPLES_PAGE_SIZE, GraphExplorer
from vaultgraph.models import FollowGraph, Stance, TriplePosition
from vaultgraph.providers import HttpxGraphClient
from vaultgraph.settings import Settings
from vaultgraph.valuation import UNAVAILABLE, RedeemPreview


class TestConstruction:
    """Tests for GraphExplorer construction."""

    def test_without_backend_has_no_valuation(self, graph_client: FakeGraphClient) -> None:
        assert GraphExplorer(graph_client).valuation is None

    def test_from_settings(self) -> None:
        explorer = GraphExplorer.from_settings(
            Settings(endpoint="https://indexer.example/graphql", batch_size=25)
        )
        assert isinstance(explorer.client, HttpxGraphClient)
        assert explorer.valuation is None
        assert explorer.fetcher().batch_size == 25

    def test_from_settings_requires_endpoint(self) -> None:
        with pytest.raises(ValueError, match="endpoint"):
            GraphExplorer.from_settings(Settings())


class TestPositions:
    """Tests for positions and their valuation."""

    @pytest.mark.asyncio
    async def test_active_positions_with_terms(self, explorer: GraphExplorer) -> None:
        positions = await explorer.positions(ACCOUNT)

        assert [p.term_id for p in positions] == [TRIPLE, COUNTER]
        assert all(p.is_active for p in positions)
        assert positions[0].term is not None
        assert positions[0].term.label == "Alice follows Bob"

    @pytest.mark.asyncio
    async def test_stance(self, explorer: GraphExplorer) -> None:
        positions = await explorer.positions(ACCOUNT)
        assert [GraphExplorer.position_stance(p) for p in positions] == [
            Stance.FOR,
            Stance.AGAINST,
        ]

    @pytest.mark.asyncio
    async def test_against_position_valued_on_counter_term(
        self, explorer: GraphExplorer, backend: FakeValuationBackend
    ) -> None:
        against = (await explorer.positions(ACCOUNT))[1]

        preview = await explorer.position_valuation(against)

        assert isinstance(preview, RedeemPreview)
        assert preview.shares == 50
        assert backend.converted == [COUNTER]

    @pytest.mark.asyncio
    async def test_for_position_valued_on_own_term(
        self, explorer: GraphExplorer, backend: FakeValuationBackend
    ) -> None:
        position = (await explorer.positions(ACCOUNT))[0]
        await explorer.position_valuation(position)
        assert backend.converted == [TRIPLE]

    @pytest.mark.asyncio
    async def test_valuation_without_backend(self, graph_client: FakeGraphClient) -> None:
        explorer = GraphExplorer(graph_client)
        position = (await explorer.positions(ACCOUNT))[0]
        assert await explorer.position_valuation(position) is UNAVAILABLE

    @pytest.mark.asyncio
    async def test_root_failure_returns_empty(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        graph_client.failing.add(queries.ACTIVE_POSITIONS)
        assert await explorer.positions(ACCOUNT) == []

    @pytest.mark.asyncio
    async def test_null_curve_defaults_to_first_curve(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        graph_client.tables["positions"][0]["curve_id"] = None

        positions = await explorer.positions(ACCOUNT)

        assert [p.term_id for p in positions] == [TRIPLE, COUNTER]
        assert positions[0].curve_id == 1

    @pytest.mark.asyncio
    async def test_malformed_row_skipped(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        graph_client.tables["positions"][1]["id"] = None

        positions = await explorer.positions(ACCOUNT)

        assert [p.term_id for p in positions] == [TRIPLE]

    @pytest.mark.asyncio
    async def test_strict_mode_reraises(self, graph_client: FakeGraphClient) -> None:
        graph_client.failing.add(queries.ACTIVE_POSITIONS)
        explorer = GraphExplorer(graph_client, settings=Settings(strict=True))
        with pytest.raises(QueryError):
            await explorer.positions(ACCOUNT)


class TestActivityHistory:
    """Tests for GraphExplorer.activity_history()."""

    @pytest.mark.asyncio
    async def test_newest_first(self, explorer: GraphExplorer) -> None:
        history = await explorer.activity_history(ACCOUNT)
        assert [a.id for a in history] == ["r1", "d1"]

    @pytest.mark.asyncio
    async def test_root_failure_returns_empty(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        graph_client.failing.add(queries.DEPOSITS)
        assert await explorer.activity_history(ACCOUNT) == []

    @pytest.mark.asyncio
    async def test_event_without_timestamp_skipped(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        graph_client.tables["redemptions"][0]["created_at"] = None

        history = await explorer.activity_history(ACCOUNT)

        assert [a.id for a in history] == ["d1"]


class TestAtomDetails:
    """Tests for GraphExplorer.atom_details()."""

    @pytest.mark.asyncio
    async def test_market_cap_and_description(self, explorer: GraphExplorer) -> None:
        atom = await explorer.atom_details(OBJECT)

        assert atom is not None
        assert atom.label == "Bob"
        assert atom.market_cap == 1500 * 10**18
        assert atom.description == "Bob is a builder."

    @pytest.mark.asyncio
    async def test_root_atom_not_looked_up_again(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        await explorer.atom_details(OBJECT)
        assert graph_client.calls_to(queries.ATOMS_BY_IDS) == []

    @pytest.mark.asyncio
    async def test_missing_atom(self, explorer: GraphExplorer) -> None:
        assert await explorer.atom_details("0xnone") is None

    @pytest.mark.asyncio
    async def test_no_payload_reference(self, explorer: GraphExplorer) -> None:
        atom = await explorer.atom_details(SUBJECT)
        assert atom is not None
        assert atom.description is None
        assert atom.market_cap == 2 * 10**18

    @pytest.mark.asyncio
    async def test_term_failure_leaves_market_cap_unset(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        graph_client.failing.add(queries.TERMS_BY_IDS)
        atom = await explorer.atom_details(OBJECT)
        assert atom is not None
        assert atom.market_cap is None

    @pytest.mark.asyncio
    async def test_root_failure_returns_none(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        graph_client.failing.add(queries.ATOM_BY_ID)
        assert await explorer.atom_details(OBJECT) is None


class TestClaims:
    """Tests for claims by subject and by account."""

    @pytest.mark.asyncio
    async def test_by_subject(self, explorer: GraphExplorer) -> None:
        (triple,) = await explorer.claims_by_subject(SUBJECT)

        assert triple.labels == ("Alice", "follows", "Bob")
        assert triple.term is not None
        assert triple.term.position_count == 2
        assert triple.counter_term is not None
        assert triple.counter_term.position_count == 1

    @pytest.mark.asyncio
    async def test_by_account(self, explorer: GraphExplorer) -> None:
        triples = await explorer.claims_by_account(ACCOUNT)
        assert [t.term_id for t in triples] == [TRIPLE]

    @pytest.mark.asyncio
    async def test_no_claims(self, explorer: GraphExplorer) -> None:
        assert await explorer.claims_by_subject(OBJECT) == []


class TestTriples:
    """Tests for triple queries."""

    @pytest.mark.asyncio
    async def test_triples_for_object_single_page(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        (triple,) = await explorer.triples_for_object(OBJECT)

        assert triple.subject is not None
        assert triple.subject.label == "Alice"
        (variables,) = graph_client.calls_to(queries.TRIPLES_BY_OBJECT)
        assert variables["limit"] == OBJECT_TRIPLES_PAGE_SIZE
        assert variables["offset"] == 0

    @pytest.mark.asyncio
    async def test_follows_and_followers(self, explorer: GraphExplorer) -> None:
        alice = await explorer.follows_and_followers(PREDICATE, SUBJECT)
        bob = await explorer.follows_and_followers(PREDICATE, OBJECT)

        assert [t.term_id for t in alice.follows] == [TRIPLE]
        assert alice.followers == []
        assert bob.follows == []
        assert [t.object_id for t in bob.followers] == [OBJECT]

    @pytest.mark.asyncio
    async def test_follows_failure_returns_empty_graph(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        graph_client.failing.add(queries.FOLLOWERS)
        assert await explorer.follows_and_followers(PREDICATE, SUBJECT) == FollowGraph()

    @pytest.mark.asyncio
    async def test_triple_details(self, explorer: GraphExplorer) -> None:
        triple = await explorer.triple_details(TRIPLE)

        assert triple is not None
        assert triple.labels == ("Alice", "follows", "Bob")
        assert triple.counter_term is not None
        assert triple.counter_term.id == COUNTER

    @pytest.mark.asyncio
    async def test_missing_triple(self, explorer: GraphExplorer) -> None:
        assert await explorer.triple_details("0xnone") is None

    @pytest.mark.asyncio
    async def test_triples_by_creator(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        triples = await explorer.triples_by_creator(ACCOUNT, PREDICATE, OBJECT)

        assert [t.subject_id for t in triples] == [SUBJECT]
        assert triples[0].labels == ("Alice", "follows", "Bob")
        # The creator's atoms came with the root query
        (variables,) = graph_client.calls_to(queries.ATOMS_BY_IDS)
        assert SUBJECT not in variables["ids"]

    @pytest.mark.asyncio
    async def test_triples_by_creator_without_atoms(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        assert await explorer.triples_by_creator("0xnobody", PREDICATE, OBJECT) == []
        assert graph_client.calls_to(queries.TRIPLES_BY_SUBJECTS_PREDICATE_OBJECT) == []


class TestTriplePosition:
    """Tests for GraphExplorer.triple_position()."""

    @pytest.mark.asyncio
    async def test_both_sides(self, explorer: GraphExplorer) -> None:
        result = await explorer.triple_position(ACCOUNT.upper(), TRIPLE)

        assert result == TriplePosition(
            triple_id=TRIPLE,
            has_position=True,
            is_for=True,
            term_position_count=1,
            counter_term_position_count=1,
        )

    @pytest.mark.asyncio
    async def test_against_only(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        graph_client.tables["positions"] = [
            p for p in graph_client.tables["positions"] if p["term_id"] != TRIPLE
        ]
        result = await explorer.triple_position(ACCOUNT, TRIPLE)

        assert result.has_position is True
        assert result.is_for is False

    @pytest.mark.asyncio
    async def test_no_position(self, explorer: GraphExplorer) -> None:
        result = await explorer.triple_position("0xnobody", TRIPLE)
        assert result.has_position is False
        assert result.is_for is None

    @pytest.mark.asyncio
    async def test_missing_triple(self, explorer: GraphExplorer) -> None:
        result = await explorer.triple_position(ACCOUNT, "0xnone")
        assert result == TriplePosition(triple_id="0xnone")


class TestTriplesWithPositions:
    """Tests for GraphExplorer.triples_with_positions()."""

    @pytest.mark.asyncio
    async def test_triples_and_account_positions(self, explorer: GraphExplorer) -> None:
        result = await explorer.triples_with_positions(ACCOUNT)

        assert [t.term_id for t in result.triples] == [TRIPLE]
        assert result.triples[0].term is not None
        assert sorted(p.term_id for p in result.positions) == sorted([TRIPLE, COUNTER])

    @pytest.mark.asyncio
    async def test_position_failure_keeps_triples(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        graph_client.failing.add(queries.ACCOUNT_POSITIONS_FOR_TERMS)
        result = await explorer.triples_with_positions(ACCOUNT)

        assert len(result.triples) == 1
        assert result.positions == []

    @pytest.mark.asyncio
    async def test_malformed_position_skipped(
        self, explorer: GraphExplorer, graph_client: FakeGraphClient
    ) -> None:
        graph_client.tables["positions"][1]["id"] = None

        result = await explorer.triples_with_positions(ACCOUNT)

        assert [p.term_id for p in result.positions] == [TRIPLE]
