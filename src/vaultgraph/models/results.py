# src/vaultgraph/models/results.py
"""Composite result models for graph queries."""

from pydantic import BaseModel, Field

from vaultgraph.models.position import Position
from vaultgraph.models.term import Triple


class FollowGraph(BaseModel):
    """Follow edges around one atom for a given predicate."""

    follows: list[Triple] = Field(default_factory=list)  # (user, predicate, X)
    followers: list[Triple] = Field(default_factory=list)  # (X, predicate, user)


class TriplePosition(BaseModel):
    """Whether an account holds a position on a triple, and on which side."""

    triple_id: str
    has_position: bool = False
    is_for: bool | None = None  # None when there is no position
    term_position_count: int = 0
    counter_term_position_count: int = 0


class TriplesWithPositions(BaseModel):
    """Triples enriched with an account's positions on their terms."""

    triples: list[Triple] = Field(default_factory=list)
    positions: list[Position] = Field(default_factory=list)
