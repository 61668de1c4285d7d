# src/vaultgraph/models/term.py
"""Term, triple and term-backing models.

A term backs exactly one atom or one triple. A triple in turn references a
counter-term, so these models are mutually recursive; the resolver bounds how
deep that recursion is expanded.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field

from vaultgraph.models.atom import Atom


class AtomBacking(BaseModel):
    """Term backing variant for an atom."""

    kind: Literal["atom"] = "atom"
    atom: Atom


class TripleBacking(BaseModel):
    """Term backing variant for a triple."""

    kind: Literal["triple"] = "triple"
    triple: Triple


TermBacking = Annotated[AtomBacking | TripleBacking, Field(discriminator="kind")]


class Term(BaseModel):
    """An economic vault unit backing an atom or a triple."""

    id: str
    total_market_cap: int = 0  # Fee-inclusive asset value, in wei
    total_assets: int = 0
    atom_id: str | None = None
    triple_id: str | None = None
    backing: TermBacking | None = None
    position_count: int | None = None  # Active positions, when requested

    @classmethod
    def stub(cls, term_id: str) -> Term:
        """Placeholder for a term that could not be resolved."""
        return cls(id=term_id)

    @property
    def atom(self) -> Atom | None:
        """The backing atom, if this term backs an atom."""
        if isinstance(self.backing, AtomBacking):
            return self.backing.atom
        return None

    @property
    def triple(self) -> Triple | None:
        """The backing triple, if this term backs a triple."""
        if isinstance(self.backing, TripleBacking):
            return self.backing.triple
        return None

    @property
    def label(self) -> str:
        """Display label: the atom label, or "subject predicate object" for a triple."""
        if self.atom is not None and self.atom.label:
            return self.atom.label
        if self.triple is not None:
            text = " ".join(part for part in self.triple.labels if part)
            if text:
                return text
        return self.id


class Triple(BaseModel):
    """A directed subject -> predicate -> object relation.

    ``term_id`` is both the triple identifier and the id of its term.
    """

    term_id: str
    subject_id: str | None = None
    predicate_id: str | None = None
    object_id: str | None = None
    counter_term_id: str | None = None
    creator_id: str | None = None
    block_number: int | None = None
    created_at: datetime | None = None
    transaction_hash: str | None = None

    # Resolved references
    subject: Atom | None = None
    predicate: Atom | None = None
    object: Atom | None = None
    term: Term | None = None
    counter_term: Term | None = None

    @property
    def labels(self) -> tuple[str, str, str]:
        """(subject, predicate, object) labels, empty where unresolved."""
        return (
            self.subject.label if self.subject else "",
            self.predicate.label if self.predicate else "",
            self.object.label if self.object else "",
        )


TripleBacking.model_rebuild()
Term.model_rebuild()
Triple.model_rebuild()
