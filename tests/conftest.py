"""Shared pytest fixtures."""

import copy
from typing import Any

import pytest

from vaultgraph import queries
from vaultgraph.exceptions import QueryError
from vaultgraph.providers.base import ContentFetcher, GraphClient, ValuationBackend

ACCOUNT = "0xacc"

# Triple (Alice, follows, Bob) on term T1 with counter-term T2
SUBJECT = "0xa1"
PREDICATE = "0xa2"
OBJECT = "0xa3"
TRIPLE = "0xt1"
COUNTER = "0xt2"


def sample_tables() -> dict[str, list[dict[str, Any]]]:
    """A small graph: three atoms, one triple, its counter-term, positions and events."""
    return {
        "atoms": [
            {"term_id": SUBJECT, "label": "Alice", "type": "Person", "creator_id": ACCOUNT},
            {"term_id": PREDICATE, "label": "follows", "type": "Thing", "creator_id": "0xother"},
            {
                "term_id": OBJECT,
                "label": "Bob",
                "type": "Person",
                "creator_id": "0xother",
                "data": "ipfs://bafybob",
            },
        ],
        "terms": [
            {"id": SUBJECT, "total_market_cap": "2000000000000000000", "atom_id": SUBJECT},
            {"id": PREDICATE, "total_market_cap": "0", "atom_id": PREDICATE},
            {"id": OBJECT, "total_market_cap": "1500000000000000000000", "atom_id": OBJECT},
            {"id": TRIPLE, "total_market_cap": "5000000000000000000", "triple_id": TRIPLE},
            # The counter-term points back at the same triple
            {"id": COUNTER, "total_market_cap": "1000000000000000000", "triple_id": TRIPLE},
        ],
        "triples": [
            {
                "term_id": TRIPLE,
                "subject_id": SUBJECT,
                "predicate_id": PREDICATE,
                "object_id": OBJECT,
                "counter_term_id": COUNTER,
                "creator_id": ACCOUNT,
            },
        ],
        "positions": [
            {
                "id": f"{TRIPLE}-{ACCOUNT}",
                "account_id": ACCOUNT,
                "term_id": TRIPLE,
                "shares": "100",
                "curve_id": "1",
                "vault": {"deposits": [{"vault_type": "Triple"}], "redemptions": []},
            },
            {
                "id": f"{COUNTER}-{ACCOUNT}",
                "account_id": ACCOUNT,
                "term_id": COUNTER,
                "shares": "50",
                "curve_id": "1",
                "vault": {"deposits": [{"vault_type": "CounterTriple"}], "redemptions": []},
            },
            {
                "id": f"{TRIPLE}-0xother",
                "account_id": "0xother",
                "term_id": TRIPLE,
                "shares": "7",
                "curve_id": "1",
            },
            {
                "id": f"{OBJECT}-{ACCOUNT}",
                "account_id": ACCOUNT,
                "term_id": OBJECT,
                "shares": "0",
                "curve_id": "1",
            },
        ],
        "deposits": [
            {
                "id": "d1",
                "sender_id": ACCOUNT,
                "shares": "100",
                "assets_after_fees": "99000000000000000000",
                "created_at": "2024-01-01T00:00:00+00:00",
                "vault_type": "Triple",
                "term_id": TRIPLE,
            },
        ],
        "redemptions": [
            {
                "id": "r1",
                "sender_id": ACCOUNT,
                "shares": "40",
                "assets": "39000000000000000000",
                "created_at": "2024-02-01T00:00:00+00:00",
                "vault_type": "Triple",
                "term_id": TRIPLE,
            },
        ],
    }


class FakeGraphClient(GraphClient):
    """In-memory query service.

    Dispatches on the query document, applies the same filters the indexer
    would and records every call.
    """

    def __init__(self, tables: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self.tables = tables if tables is not None else sample_tables()
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failing: set[str] = set()
        self.handlers = {
            queries.ATOMS_BY_IDS: lambda v: {"atoms": self._by_ids("atoms", "term_id", v)},
            queries.TERMS_BY_IDS: lambda v: {"terms": self._by_ids("terms", "id", v)},
            queries.TRIPLES_BY_IDS: lambda v: {"triples": self._by_ids("triples", "term_id", v)},
            queries.POSITIONS_COUNT: self._count,
            queries.ATOM_BY_ID: lambda v: {
                "atoms": self._where("atoms", term_id=v["atomId"])[:1]
            },
            queries.TRIPLE_BY_ID: self._triple,
            queries.ATOMS_BY_CREATOR: lambda v: {
                "atoms": self._page(self._where("atoms", creator_id=v["creatorId"]), v)
            },
            queries.TRIPLES_BY_SUBJECT: lambda v: {
                "triples": self._page(self._where("triples", subject_id=v["subjectId"]), v)
            },
            queries.TRIPLES_BY_OBJECT: lambda v: {
                "triples": self._page(self._where("triples", object_id=v["objectId"]), v)
            },
            queries.TRIPLES_BY_CREATOR: lambda v: {
                "triples": self._page(self._where("triples", creator_id=v["creatorId"]), v)
            },
            queries.TRIPLES_BY_SUBJECTS_PREDICATE_OBJECT: self._by_subjects,
            queries.FOLLOWS: lambda v: {
                "triples": self._page(
                    self._where(
                        "triples", predicate_id=v["predicateId"], subject_id=v["userAtomId"]
                    ),
                    v,
                )
            },
            queries.FOLLOWERS: lambda v: {
                "triples": self._page(
                    self._where(
                        "triples", predicate_id=v["predicateId"], object_id=v["userAtomId"]
                    ),
                    v,
                )
            },
            queries.ALL_TRIPLES: lambda v: {"triples": self._page(self.tables["triples"], v)},
            queries.ACTIVE_POSITIONS: lambda v: {
                "positions": self._page(
                    [
                        p
                        for p in self.tables["positions"]
                        if p["account_id"] == v["accountId"] and int(p["shares"]) > 0
                    ],
                    v,
                )
            },
            queries.ACCOUNT_POSITIONS_FOR_TERMS: self._account_positions,
            queries.DEPOSITS: lambda v: {
                "deposits": self._page(self._where("deposits", sender_id=v["accountId"]), v)
            },
            queries.REDEMPTIONS: lambda v: {
                "redemptions": self._page(self._where("redemptions", sender_id=v["accountId"]), v)
            },
        }

    def calls_to(self, query: str) -> list[dict[str, Any]]:
        """Variables of every call made with ``query``."""
        return [variables for q, variables in self.calls if q == query]

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        variables = variables or {}
        self.calls.append((query, variables))
        if query in self.failing:
            raise QueryError("simulated failure", errors=[{"message": "simulated failure"}])
        return copy.deepcopy(self.handlers[query](variables))

    def _where(self, table: str, **filters: Any) -> list[dict[str, Any]]:
        return [
            row
            for row in self.tables.get(table, [])
            if all(row.get(key) == value for key, value in filters.items())
        ]

    def _by_ids(self, table: str, key: str, variables: dict[str, Any]) -> list[dict[str, Any]]:
        ids = set(variables["ids"])
        return [row for row in self.tables.get(table, []) if row[key] in ids]

    @staticmethod
    def _page(rows: list[dict[str, Any]], variables: dict[str, Any]) -> list[dict[str, Any]]:
        offset = variables.get("offset", 0)
        return rows[offset : offset + variables.get("limit", len(rows))]

    def _count(self, variables: dict[str, Any]) -> dict[str, Any]:
        count = sum(
            1
            for p in self.tables["positions"]
            if p["term_id"] == variables["termId"] and int(p["shares"]) > 0
        )
        return {"positions_aggregate": {"aggregate": {"count": count}}}

    def _triple(self, variables: dict[str, Any]) -> dict[str, Any]:
        rows = self._where("triples", term_id=variables["tripleId"])
        return {"triple": rows[0] if rows else None}

    def _by_subjects(self, variables: dict[str, Any]) -> dict[str, Any]:
        subjects = set(variables["subjectIds"])
        rows = [
            t
            for t in self.tables["triples"]
            if t["subject_id"] in subjects
            and t["predicate_id"] == variables["predicateId"]
            and t["object_id"] == variables["objectId"]
        ]
        return {"triples": self._page(rows, variables)}

    def _account_positions(self, variables: dict[str, Any]) -> dict[str, Any]:
        term_ids = set(variables["termIds"])
        rows = [
            {k: v for k, v in p.items() if k != "vault"}
            for p in self.tables["positions"]
            if p["term_id"] in term_ids
            and p["account_id"].lower() == variables["accountId"].lower()
            and int(p["shares"]) > 0
        ]
        return {"positions": self._page(rows, variables)}


class FakeValuationBackend(ValuationBackend):
    """Linear bonding curve: ``assets = shares * price`` with a fixed fee schedule."""

    def __init__(
        self,
        price: int = 1,
        fees: Any = (50, 30, 10),
        fail: bool = False,
    ) -> None:
        self.price = price
        self.fees = fees
        self.fail = fail
        self.fee_reads = 0
        self.converted: list[str] = []

    async def convert_to_assets(self, term_id: str, curve_id: int, shares: int) -> int:
        self.converted.append(term_id)
        if self.fail:
            raise ConnectionError("rpc down")
        return shares * self.price

    async def convert_to_shares(self, term_id: str, curve_id: int, assets: int) -> int:
        if self.fail:
            raise ConnectionError("rpc down")
        return assets // self.price

    async def get_vault_fees(self) -> Any:
        self.fee_reads += 1
        if self.fail:
            raise ConnectionError("rpc down")
        return self.fees


class FakeContentFetcher(ContentFetcher):
    """Serves payloads from a dict keyed by reference."""

    def __init__(self, payloads: dict[str, dict[str, Any]] | None = None) -> None:
        self.payloads = payloads or {}
        self.requested: list[str] = []

    async def fetch_json(self, reference: str) -> dict[str, Any] | None:
        self.requested.append(reference)
        return self.payloads.get(reference)


@pytest.fixture
def tables():
    return sample_tables()


@pytest.fixture
def graph_client(tables):
    return FakeGraphClient(tables)


@pytest.fixture
def backend():
    return FakeValuationBackend()


@pytest.fixture
def content_fetcher():
    return FakeContentFetcher({"ipfs://bafybob": {"description": "Bob is a builder."}})


@pytest.fixture
def explorer(graph_client, backend, content_fetcher):
    from vaultgraph.explorer import GraphExplorer

    return GraphExplorer(client=graph_client, backend=backend, content_fetcher=content_fetcher)
