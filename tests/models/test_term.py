# tests/models/test_term.py
"""Tests for Term, Triple and Activity models."""

from datetime import datetime, timezone

from vaultgraph.models import (
    Activity,
    ActivityKind,
    Atom,
    AtomBacking,
    Term,
    Triple,
    TripleBacking,
    VaultType,
)


class TestTerm:
    """Tests for Term backings and labels."""

    def test_stub_keeps_id(self) -> None:
        term = Term.stub("0xdead")
        assert term.id == "0xdead"
        assert term.total_market_cap == 0
        assert term.backing is None
        assert term.atom is None
        assert term.triple is None

    def test_atom_backing(self) -> None:
        term = Term(id="0xa1", backing=AtomBacking(atom=Atom(term_id="0xa1", label="Alice")))
        assert term.atom is not None
        assert term.triple is None
        assert term.label == "Alice"

    def test_triple_label_joins_atom_labels(self) -> None:
        triple = Triple(
            term_id="0xt1",
            subject=Atom(term_id="0xa1", label="Alice"),
            predicate=Atom(term_id="0xa2", label="follows"),
            object=Atom(term_id="0xa3", label="Bob"),
        )
        term = Term(id="0xt1", backing=TripleBacking(triple=triple))
        assert term.label == "Alice follows Bob"

    def test_label_falls_back_to_id(self) -> None:
        assert Term.stub("0xt9").label == "0xt9"

    def test_backing_discriminator_from_dict(self) -> None:
        term = Term.model_validate(
            {"id": "0xa1", "backing": {"kind": "atom", "atom": {"term_id": "0xa1"}}}
        )
        assert isinstance(term.backing, AtomBacking)

    def test_wei_amounts_parsed_from_strings(self) -> None:
        term = Term.model_validate({"id": "0xa1", "total_market_cap": "1000000000000000000000"})
        assert term.total_market_cap == 10**21


class TestTriple:
    """Tests for the Triple model."""

    def test_labels_empty_when_unresolved(self) -> None:
        assert Triple(term_id="0xt1").labels == ("", "", "")


class TestActivity:
    """Tests for the Activity model."""

    def test_deposit_assets_after_fees_alias(self) -> None:
        activity = Activity.model_validate(
            {
                "id": "d1",
                "kind": "deposit",
                "shares": "3",
                "assets_after_fees": "99",
                "created_at": "2024-01-01T00:00:00Z",
                "vault_type": "Triple",
            }
        )
        assert activity.kind is ActivityKind.DEPOSIT
        assert activity.assets == 99
        assert activity.vault_type is VaultType.TRIPLE

    def test_naive_timestamp_assumed_utc(self) -> None:
        activity = Activity.model_validate(
            {"id": "r1", "kind": "redemption", "created_at": "2024-01-01T12:00:00"}
        )
        assert activity.created_at == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)

    def test_unknown_vault_type_is_none(self) -> None:
        activity = Activity.model_validate(
            {
                "id": "r1",
                "kind": "redemption",
                "created_at": "2024-01-01T12:00:00Z",
                "vault_type": "Other",
            }
        )
        assert activity.vault_type is None
