# src/vaultgraph/resolver.py
"""Hop-by-hop enrichment of graph records.

Root records only carry foreign keys. The resolver walks them breadth-first:
for each hop it collects the distinct ids still unknown, issues one batched
lookup per entity kind (independent kinds run concurrently), and caches the
rows by id. Nested models are assembled from the caches once all hops are
done, with placeholder stubs for anything the service did not return.

A resolver instance is scoped to one top-level call; create a new one per call.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from vaultgraph import queries
from vaultgraph.exceptions import QueryError
from vaultgraph.fetching import collect_ids
from vaultgraph.models import (
    Activity,
    ActivityKind,
    Atom,
    AtomBacking,
    Position,
    Term,
    Triple,
    TripleBacking,
)
from vaultgraph.providers.base import GraphClient

logger = logging.getLogger(__name__)

# How many term -> triple -> counter-term links are followed. The counter-term
# reached through a root term's triple is resolved (scalars and atom backing)
# but its own triple is not expanded.
COUNTER_TERM_DEPTH = 1

# kind -> (query, result path, id key)
_LOOKUPS: dict[str, tuple[str, str, str]] = {
    "atoms": (queries.ATOMS_BY_IDS, "atoms", "term_id"),
    "terms": (queries.TERMS_BY_IDS, "terms", "id"),
    "triples": (queries.TRIPLES_BY_IDS, "triples", "term_id"),
}

_TERM_FIELDS = ("id", "total_market_cap", "total_assets", "atom_id", "triple_id")


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_rows(model: type[ModelT], rows: Iterable[dict[str, Any]]) -> list[ModelT]:
    """Validate service rows into models, logging and skipping malformed ones."""
    parsed = []
    for row in rows:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning("Skipping malformed %s row %s: %s", model.__name__, row.get("id"), e)
    return parsed


class RelationResolver:
    """Resolve atoms, terms, triples and counter-terms for batches of root records.

    Example:
        resolver = RelationResolver(client)
        positions = await resolver.resolve_positions(position_rows)
        label = positions[0].term.triple.subject.label
    """

    def __init__(self, client: GraphClient) -> None:
        """Initialize the resolver.

        Args:
            client: Query service client used for lookups
        """
        self.client = client
        self.lookups_made = 0
        self._rows: dict[str, dict[str, Any]] = {kind: {} for kind in _LOOKUPS}
        # Ids already requested per kind, found or not
        self._requested: dict[str, set[str]] = {kind: set() for kind in _LOOKUPS}
        self._atoms: dict[str, Atom] = {}
        self._counts: dict[str, int] = {}

    # --- Lookups ---

    async def _lookup(self, kind: str, ids: set[str]) -> dict[str, dict[str, Any]]:
        """One batched lookup. Failures degrade to an empty map."""
        query, path, key = _LOOKUPS[kind]
        self.lookups_made += 1
        try:
            data = await self.client.execute(query, {"ids": sorted(ids)})
        except QueryError as e:
            logger.warning("Lookup of %d %s failed, using stubs: %s", len(ids), kind, e)
            return {}
        rows = data.get(path) or []
        return {str(row[key]): row for row in rows if row.get(key)}

    async def _hop(self, **wanted: Iterable[str]) -> None:
        """Run one resolution hop: at most one lookup per entity kind, concurrently.

        Only ids never requested before are sent. Each lookup fills its own map;
        the caches are updated after all of them complete.
        """
        pending: list[tuple[str, set[str]]] = []
        for kind, ids in wanted.items():
            new_ids = {i for i in ids if i and i not in self._requested[kind]}
            if new_ids:
                self._requested[kind].update(new_ids)
                pending.append((kind, new_ids))

        if not pending:
            return

        results = await asyncio.gather(*(self._lookup(kind, ids) for kind, ids in pending))
        for (kind, _), rows in zip(pending, results, strict=True):
            self._rows[kind].update(rows)
            if kind == "atoms":
                for atom_id, row in rows.items():
                    self._atoms[atom_id] = self._parse_atom(atom_id, row)

    def _cached(self, kind: str, ids: Iterable[str]) -> list[dict[str, Any]]:
        rows = self._rows[kind]
        return [rows[i] for i in ids if i in rows]

    def is_resolved(self, kind: str, entity_id: str) -> bool:
        """True if a lookup returned a row for ``entity_id`` (kind: atoms, terms, triples)."""
        return entity_id in self._rows[kind]

    def prime_atoms(self, rows: Iterable[dict[str, Any]]) -> None:
        """Seed the atom cache with rows a root query already returned."""
        for row in rows:
            atom_id = row.get("term_id")
            if atom_id:
                self._requested["atoms"].add(atom_id)
                self._rows["atoms"][atom_id] = row
                self._atoms[atom_id] = self._parse_atom(atom_id, row)

    @staticmethod
    def _parse_atom(atom_id: str, row: dict[str, Any]) -> Atom:
        try:
            return Atom.model_validate({k: v for k, v in row.items() if v is not None})
        except ValidationError as e:
            logger.warning("Malformed atom %s, using stub: %s", atom_id, e)
            return Atom.stub(atom_id)

    async def count_positions(self, term_ids: Iterable[str]) -> dict[str, int]:
        """Active position count per term, one aggregate request per distinct term.

        Failed counts are reported as 0.
        """
        term_ids = list(term_ids)
        pending = sorted({t for t in term_ids if t and t not in self._counts})

        async def count(term_id: str) -> int:
            try:
                data = await self.client.execute(queries.POSITIONS_COUNT, {"termId": term_id})
            except QueryError as e:
                logger.warning("Position count for %s failed: %s", term_id, e)
                return 0
            aggregate = (data.get("positions_aggregate") or {}).get("aggregate") or {}
            return int(aggregate.get("count") or 0)

        counts = await asyncio.gather(*(count(t) for t in pending))
        self._counts.update(zip(pending, counts, strict=True))
        return {t: self._counts.get(t, 0) for t in term_ids if t}

    # --- Assembly ---

    def atom(self, atom_id: str) -> Atom:
        """Resolved atom, or a stub carrying the id."""
        return self._atoms.get(atom_id) or Atom.stub(atom_id)

    def _build_term(self, term_id: str, depth: int) -> Term:
        row = self._rows["terms"].get(term_id)
        if row is None:
            return Term(id=term_id, position_count=self._counts.get(term_id))

        backing: AtomBacking | TripleBacking | None = None
        if row.get("atom_id"):
            backing = AtomBacking(atom=self.atom(row["atom_id"]))
        elif row.get("triple_id") and depth < COUNTER_TERM_DEPTH:
            backing = TripleBacking(triple=self._build_triple(row["triple_id"], depth))

        fields = {k: row[k] for k in _TERM_FIELDS if row.get(k) is not None}
        try:
            return Term(**fields, backing=backing, position_count=self._counts.get(term_id))
        except ValidationError as e:
            logger.warning("Malformed term %s, using stub: %s", term_id, e)
            return Term(id=term_id, position_count=self._counts.get(term_id))

    def _build_triple(self, triple_id: str, depth: int) -> Triple:
        row = self._rows["triples"].get(triple_id)
        if row is None:
            return Triple(term_id=triple_id)
        return self._assemble_triple(row, counter_term_depth=depth + 1)

    def _assemble_triple(
        self,
        row: dict[str, Any],
        counter_term_depth: int,
        include_term: bool = False,
    ) -> Triple:
        fields = {k: v for k, v in row.items() if v is not None and k in Triple.model_fields}
        triple = Triple(**fields)
        if triple.subject_id:
            triple.subject = self.atom(triple.subject_id)
        if triple.predicate_id:
            triple.predicate = self.atom(triple.predicate_id)
        if triple.object_id:
            triple.object = self.atom(triple.object_id)
        if triple.counter_term_id and counter_term_depth <= COUNTER_TERM_DEPTH:
            triple.counter_term = self._build_term(triple.counter_term_id, counter_term_depth)
        if include_term:
            # The triple's own term backs this triple; do not nest it again
            triple.term = self._build_term(triple.term_id, COUNTER_TERM_DEPTH)
        return triple

    # --- Public resolution passes ---

    async def resolve_atoms(self, atom_ids: Iterable[str]) -> dict[str, Atom]:
        """Resolve atoms by id. Every requested id maps to an atom or a stub."""
        ids = {i for i in atom_ids if i}
        await self._hop(atoms=ids)
        return {i: self.atom(i) for i in ids}

    async def resolve_terms(self, term_ids: Iterable[str]) -> dict[str, Term]:
        """Resolve terms with their backing atom or triple.

        Hops (each kind at most once per hop):
            1. terms
            2. term atoms + term triples
            3. triple subject/predicate/object atoms + counter-terms
            4. counter-term atoms
        """
        roots = {i for i in term_ids if i}
        frontier = set(roots)
        pending_atoms: set[str] = set()

        for depth in range(COUNTER_TERM_DEPTH + 1):
            await self._hop(terms=frontier, atoms=pending_atoms)
            term_rows = self._cached("terms", frontier)
            expand = depth < COUNTER_TERM_DEPTH
            triple_ids = collect_ids(term_rows, "triple_id") if expand else set()
            await self._hop(atoms=collect_ids(term_rows, "atom_id"), triples=triple_ids)

            triple_rows = self._cached("triples", triple_ids)
            pending_atoms = collect_ids(triple_rows, "subject_id", "predicate_id", "object_id")
            frontier = collect_ids(triple_rows, "counter_term_id")

        return {t: self._build_term(t, 0) for t in roots}

    async def resolve_triples(
        self,
        rows: list[dict[str, Any]],
        include_terms: bool = True,
        include_counts: bool = False,
    ) -> list[Triple]:
        """Resolve triple rows into triples with atoms, term and counter-term.

        Args:
            rows: Triple rows carrying subject/predicate/object/counter-term ids
            include_terms: Also look up the triple's term and counter-term
            include_counts: Also count active positions on term and counter-term

        Returns:
            Triples in input order
        """
        if not rows:
            return []

        atom_ids = collect_ids(rows, "subject_id", "predicate_id", "object_id")
        term_ids = collect_ids(rows, "term_id", "counter_term_id") if include_terms else set()
        await self._hop(atoms=atom_ids, terms=term_ids)
        if include_terms and include_counts:
            await self.count_positions(term_ids)

        triples = []
        for row in rows:
            triple = self._assemble_triple(
                row,
                counter_term_depth=COUNTER_TERM_DEPTH if include_terms else COUNTER_TERM_DEPTH + 1,
                include_term=include_terms,
            )
            triples.append(triple)
        return triples

    async def resolve_positions(self, rows: list[dict[str, Any]]) -> list[Position]:
        """Resolve position rows, attaching each position's fully resolved term.

        Malformed rows are logged and skipped.
        """
        positions = parse_rows(Position, rows)
        terms = await self.resolve_terms(collect_ids(positions, "term_id"))
        for position in positions:
            position.term = terms.get(position.term_id) or Term.stub(position.term_id)
        return positions

    async def resolve_activities(
        self, rows: list[dict[str, Any]], kind: ActivityKind | None = None
    ) -> list[Activity]:
        """Resolve deposit/redemption rows, attaching each event's term.

        Malformed rows are logged and skipped.

        Args:
            rows: Event rows; each carries ``kind`` unless ``kind`` is given
            kind: Kind to tag every row with
        """
        if kind is not None:
            rows = [{**row, "kind": kind} for row in rows]
        activities = parse_rows(Activity, rows)
        terms = await self.resolve_terms(collect_ids(activities, "term_id"))
        for activity in activities:
            if activity.term_id:
                activity.term = terms.get(activity.term_id) or Term.stub(activity.term_id)
        return activities
