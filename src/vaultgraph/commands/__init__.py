# src/vaultgraph/commands/__init__.py
"""UI-agnostic command layer for vaultgraph.

Commands return data structures, allowing UIs to render results appropriately.

Usage:
    from vaultgraph.commands import positions, redeem

    # Active positions with their net values
    result = positions.positions("0xabc...")

    # How many shares to redeem for 1.5 units after fees
    result = redeem.shares_for(term_id, "1.5", max_shares=10**18)
"""

from vaultgraph.commands import activity, atom, claims, config_cmd, positions, redeem, triple
from vaultgraph.commands.base import (
    ActivityInfo,
    ActivityResult,
    AtomResult,
    ClaimInfo,
    ClaimsResult,
    CommandResult,
    ConfigResult,
    PositionInfo,
    PositionsResult,
    RedeemPreviewResult,
    RedeemSharesResult,
    SettingInfo,
    TripleResult,
)

__all__ = [
    # Base types
    "CommandResult",
    # Result types
    "ActivityInfo",
    "ActivityResult",
    "AtomResult",
    "ClaimInfo",
    "ClaimsResult",
    "ConfigResult",
    "PositionInfo",
    "PositionsResult",
    "RedeemPreviewResult",
    "RedeemSharesResult",
    "SettingInfo",
    "TripleResult",
    # Command modules
    "activity",
    "atom",
    "claims",
    "config_cmd",
    "positions",
    "redeem",
    "triple",
]
