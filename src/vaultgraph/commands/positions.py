# src/vaultgraph/commands/positions.py
"""Positions command - list an account's active positions with their values."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

from vaultgraph.commands.base import (
    PositionInfo,
    PositionsResult,
    config_error_message,
    resolve_explorer,
    run,
)
from vaultgraph.config import ConfigError
from vaultgraph.valuation import Unavailable

if TYPE_CHECKING:
    from vaultgraph.explorer import GraphExplorer


async def _collect(explorer: GraphExplorer, account_id: str) -> list[PositionInfo]:
    positions = await explorer.positions(account_id)
    valuations = await asyncio.gather(*(explorer.position_valuation(p) for p in positions))

    rows = []
    for position, valuation in zip(positions, valuations, strict=True):
        term = position.valuation_term or position.term
        value = None
        if explorer.valuation is not None and not isinstance(valuation, Unavailable):
            value = explorer.valuation.format(valuation)
        rows.append(
            PositionInfo(
                position_id=position.id,
                term_id=term.id if term is not None else position.term_id,
                label=position.term.label if position.term is not None else position.term_id,
                stance=explorer.position_stance(position).value,
                shares=position.shares,
                curve_id=position.curve_id,
                value=value,
            )
        )
    return rows


def positions(
    account_id: str,
    config_path: str | Path | None = None,
    endpoint: str | None = None,
    explorer: GraphExplorer | None = None,
) -> PositionsResult:
    """List active positions of an account.

    Against positions are valued on the triple's counter-term.

    Args:
        account_id: Account address
        config_path: Override config file path
        endpoint: Override query service endpoint
        explorer: Explorer to use instead of one built from configuration

    Returns:
        PositionsResult with one row per active position
    """
    resolved = resolve_explorer(explorer, config_path, endpoint)
    if isinstance(resolved, ConfigError):
        return PositionsResult(success=False, error=config_error_message(resolved))

    rows = run(_collect(resolved, account_id))
    return PositionsResult(
        success=True,
        account_id=account_id,
        positions=rows,
        valuation_enabled=resolved.valuation is not None,
    )
