# src/vaultgraph/models/atom.py
"""Atom data model."""

from pydantic import BaseModel


class Atom(BaseModel):
    """An atomic semantic node of the graph (subject, predicate or object of a triple)."""

    term_id: str
    label: str = ""
    image: str | None = None
    emoji: str | None = None
    type: str = ""
    creator_id: str = ""
    data: str | None = None  # Off-graph payload reference (ipfs:// or URL)

    # Filled in by detail lookups only
    description: str | None = None
    market_cap: int | None = None

    @classmethod
    def stub(cls, term_id: str) -> "Atom":
        """Placeholder for an atom that could not be resolved."""
        return cls(term_id=term_id)
