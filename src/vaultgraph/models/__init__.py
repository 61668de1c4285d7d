# src/vaultgraph/models/__init__.py
"""Data models for vaultgraph."""

from vaultgraph.models.activity import Activity, ActivityKind, VaultType
from vaultgraph.models.atom import Atom
from vaultgraph.models.fees import FEE_DENOMINATOR, VaultFees
from vaultgraph.models.position import Position, Stance
from vaultgraph.models.results import FollowGraph, TriplePosition, TriplesWithPositions
from vaultgraph.models.term import AtomBacking, Term, TermBacking, Triple, TripleBacking

__all__ = [
    "Activity",
    "ActivityKind",
    "Atom",
    "AtomBacking",
    "FEE_DENOMINATOR",
    "FollowGraph",
    "Position",
    "Stance",
    "Term",
    "TermBacking",
    "Triple",
    "TripleBacking",
    "TriplePosition",
    "TriplesWithPositions",
    "VaultFees",
    "VaultType",
]
