# src/vaultgraph/models/position.py
"""Position data model."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator, model_validator

from vaultgraph.models.activity import VaultType
from vaultgraph.models.term import Term


class Stance(str, Enum):
    """Which side of a term a position stakes on."""

    FOR = "For"
    AGAINST = "Against"
    UNKNOWN = "Unknown"


class Position(BaseModel):
    """An account's share stake in a term."""

    id: str
    account_id: str
    term_id: str
    shares: int = 0
    curve_id: int = 1
    vault_type: VaultType | None = None  # From the vault's first deposit/redemption
    term: Term | None = None

    @model_validator(mode="before")
    @classmethod
    def _flatten_vault(cls, data: Any) -> Any:
        """Lift ``vault.deposits[0].vault_type`` (or redemptions) to ``vault_type``."""
        if not isinstance(data, dict) or "vault" not in data:
            return data
        data = dict(data)
        vault = data.pop("vault") or {}
        if data.get("vault_type") is None:
            for events in (vault.get("deposits") or [], vault.get("redemptions") or []):
                if events and events[0].get("vault_type"):
                    data["vault_type"] = VaultType.parse(events[0]["vault_type"])
                    break
        return data

    @field_validator("curve_id", mode="before")
    @classmethod
    def _default_curve(cls, v: Any) -> Any:
        return v or 1

    @property
    def is_active(self) -> bool:
        """Positions with zero shares are closed."""
        return self.shares > 0

    @property
    def stance(self) -> Stance:
        """For/Against derived from the vault type of the position's events."""
        if not self.is_active or self.vault_type is None:
            return Stance.UNKNOWN
        return Stance.AGAINST if self.vault_type.is_counter else Stance.FOR

    @property
    def valuation_term(self) -> Term | None:
        """The term whose vault prices this position.

        Atom positions and "for" triple positions use the term itself; "against"
        triple positions use the triple's counter-term.
        """
        if self.term is None or self.term.triple is None:
            return self.term
        if self.stance is Stance.AGAINST:
            return self.term.triple.counter_term
        return self.term
