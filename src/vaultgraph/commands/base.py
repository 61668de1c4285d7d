# src/vaultgraph/commands/base.py
"""Base types for the commands layer.

This module defines the result types returned by every command, plus the
shared plumbing for getting an explorer and running its coroutines.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from vaultgraph.config import ConfigError, get_explorer

if TYPE_CHECKING:
    from vaultgraph.explorer import GraphExplorer

T = TypeVar("T")


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run an explorer coroutine from synchronous code."""
    return asyncio.run(coro)


def resolve_explorer(
    explorer: GraphExplorer | None,
    config_path: str | Path | None = None,
    endpoint: str | None = None,
) -> GraphExplorer | ConfigError:
    """Use the given explorer, or build one from configuration."""
    if explorer is not None:
        return explorer
    return get_explorer(config_path, endpoint=endpoint)


def config_error_message(error: ConfigError) -> str:
    if error.suggestion:
        return f"{error.message} {error.suggestion}"
    return error.message


@dataclass
class CommandResult:
    """Base result type for commands."""

    success: bool
    error: str | None = None


@dataclass
class PositionInfo:
    """One active position, ready for display."""

    position_id: str
    term_id: str
    label: str
    stance: str
    shares: int
    curve_id: int
    value: str | None = None  # Net redeemable value; None when unavailable


@dataclass
class PositionsResult(CommandResult):
    """Result of the positions command.

    Attributes:
        account_id: The account queried
        positions: Active positions with labels and values
        valuation_enabled: Whether a valuation backend was configured
    """

    account_id: str = ""
    positions: list[PositionInfo] = field(default_factory=list)
    valuation_enabled: bool = False


@dataclass
class ActivityInfo:
    """One deposit or redemption, ready for display."""

    activity_id: str
    kind: str
    created_at: str
    shares: int
    assets: str
    label: str


@dataclass
class ActivityResult(CommandResult):
    """Result of the activity command."""

    account_id: str = ""
    activities: list[ActivityInfo] = field(default_factory=list)


@dataclass
class AtomResult(CommandResult):
    """Result of the atom command.

    Attributes:
        found: False if the atom does not exist
        market_cap: Formatted term market cap, if known
    """

    atom_id: str = ""
    found: bool = False
    label: str = ""
    type: str = ""
    creator_id: str = ""
    emoji: str | None = None
    image: str | None = None
    description: str | None = None
    market_cap: str | None = None


@dataclass
class ClaimInfo:
    """A triple with its side counts."""

    triple_id: str
    subject: str
    predicate: str
    object: str
    for_count: int = 0
    against_count: int = 0
    market_cap: str | None = None


@dataclass
class ClaimsResult(CommandResult):
    """Result of the claims command."""

    subject_id: str = ""
    claims: list[ClaimInfo] = field(default_factory=list)


@dataclass
class TripleResult(CommandResult):
    """Result of the triple command.

    ``has_position``/``is_for`` are only set when an account was given.
    """

    triple_id: str = ""
    found: bool = False
    claim: ClaimInfo | None = None
    counter_term_id: str | None = None
    account_id: str | None = None
    has_position: bool | None = None
    is_for: bool | None = None


@dataclass
class RedeemPreviewResult(CommandResult):
    """Result of the redeem-preview command. Amounts are formatted."""

    term_id: str = ""
    curve_id: int = 1
    shares: int = 0
    gross_assets: str = ""
    exit_fee: str = ""
    protocol_fee: str = ""
    net_assets: str = ""
    net_assets_wei: int = 0


@dataclass
class RedeemSharesResult(CommandResult):
    """Result of the redeem-shares command."""

    term_id: str = ""
    curve_id: int = 1
    target: str = ""
    max_shares: int = 0
    shares: int = 0
    full_holding: bool = False  # The whole holding is needed (the result may be clamped)


@dataclass
class SettingInfo:
    """Information about a single setting."""

    name: str
    value: str
    source: str  # "env var", "yaml", "default"


@dataclass
class ConfigResult(CommandResult):
    """Result of the config command.

    Attributes:
        settings: Effective settings with their sources
        config_path: Path to config file (if found)
        warnings: Unknown-key warnings for the config file
    """

    settings: list[SettingInfo] = field(default_factory=list)
    config_path: str | None = None
    warnings: list[str] = field(default_factory=list)
