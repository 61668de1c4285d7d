# src/vaultgraph/commands/atom.py
"""Atom command - show one atom with its market cap and description."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from vaultgraph.commands.base import AtomResult, config_error_message, resolve_explorer, run
from vaultgraph.config import ConfigError
from vaultgraph.valuation import format_assets

if TYPE_CHECKING:
    from vaultgraph.explorer import GraphExplorer


def atom(
    atom_id: str,
    config_path: str | Path | None = None,
    endpoint: str | None = None,
    explorer: GraphExplorer | None = None,
) -> AtomResult:
    """Get atom details.

    A missing atom is a successful result with ``found=False``.
    """
    resolved = resolve_explorer(explorer, config_path, endpoint)
    if isinstance(resolved, ConfigError):
        return AtomResult(success=False, error=config_error_message(resolved))

    details = run(resolved.atom_details(atom_id))
    if details is None:
        return AtomResult(success=True, atom_id=atom_id, found=False)

    market_cap = None
    if details.market_cap is not None:
        market_cap = format_assets(details.market_cap, resolved.settings.unit_symbol)

    return AtomResult(
        success=True,
        atom_id=atom_id,
        found=True,
        label=details.label,
        type=details.type,
        creator_id=details.creator_id,
        emoji=details.emoji,
        image=details.image,
        description=details.description,
        market_cap=market_cap,
    )
