# src/vaultgraph/models/activity.py
"""Deposit and redemption event models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from vaultgraph.models.term import Term


class VaultType(str, Enum):
    """Kind of vault an economic event touched."""

    ATOM = "Atom"
    TRIPLE = "Triple"
    COUNTER_ATOM = "CounterAtom"
    COUNTER_TRIPLE = "CounterTriple"

    @classmethod
    def parse(cls, value: Any) -> "VaultType | None":
        """Parse a service value, returning None for unknown tags."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def is_counter(self) -> bool:
        return self in (VaultType.COUNTER_ATOM, VaultType.COUNTER_TRIPLE)


class ActivityKind(str, Enum):
    """Activity feed record type."""

    DEPOSIT = "deposit"
    REDEMPTION = "redemption"


class Activity(BaseModel):
    """An immutable deposit or redemption, tagged with its kind."""

    id: str
    kind: ActivityKind
    shares: int = 0
    # Deposits report assets after fees, redemptions report assets
    assets: int = Field(default=0, validation_alias=AliasChoices("assets", "assets_after_fees"))
    vault_type: VaultType | None = None
    created_at: datetime
    term_id: str | None = None
    term: Term | None = None

    @field_validator("vault_type", mode="before")
    @classmethod
    def _parse_vault_type(cls, v: Any) -> VaultType | None:
        return VaultType.parse(v) if v is not None else None

    @field_validator("created_at", mode="after")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        # Naive and aware timestamps must stay comparable when sorting
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
