# src/vaultgraph/models/fees.py
"""Vault fee schedule model."""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, model_validator

# Fee rates are expressed in basis points (parts per 10,000)
FEE_DENOMINATOR = 10_000

_NAMED_FIELDS = {
    "entry_fee_bps": ("entryFee", "entry_fee", "entry_fee_bps"),
    "exit_fee_bps": ("exitFee", "exit_fee", "exit_fee_bps"),
    "protocol_fee_bps": ("protocolFee", "protocol_fee", "protocol_fee_bps"),
}


class VaultFees(BaseModel):
    """Fee schedule of the bonding-curve vault."""

    entry_fee_bps: int
    exit_fee_bps: int
    protocol_fee_bps: int

    @model_validator(mode="after")
    def _check_rates(self) -> "VaultFees":
        for name in ("entry_fee_bps", "exit_fee_bps", "protocol_fee_bps"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.redemption_fee_bps >= FEE_DENOMINATOR:
            raise ValueError(
                f"exit + protocol fee ({self.redemption_fee_bps} bps) must be below "
                f"{FEE_DENOMINATOR} bps"
            )
        return self

    @property
    def redemption_fee_bps(self) -> int:
        """Combined rate deducted on redemption. Entry fees never apply here."""
        return self.exit_fee_bps + self.protocol_fee_bps

    @classmethod
    def from_raw(cls, raw: Any) -> "VaultFees":
        """Build from a backend result.

        Accepts an ordered ``(entry, exit, protocol)`` sequence or a mapping with
        named fields (``entryFee``/``exitFee``/``protocolFee`` or snake_case).

        Raises:
            ValueError: If the result has neither shape or the rates are invalid.
        """
        if isinstance(raw, Mapping):
            values: dict[str, Any] = {}
            for field, aliases in _NAMED_FIELDS.items():
                for alias in aliases:
                    if alias in raw:
                        values[field] = raw[alias]
                        break
                else:
                    raise ValueError(f"Vault fees missing '{aliases[0]}'")
            return cls(**values)

        if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes)):
            if len(raw) < 3:
                raise ValueError(f"Vault fees tuple too short: {len(raw)} values")
            return cls(
                entry_fee_bps=raw[0],
                exit_fee_bps=raw[1],
                protocol_fee_bps=raw[2],
            )

        raise ValueError(f"Unrecognized vault fees result: {type(raw).__name__}")
