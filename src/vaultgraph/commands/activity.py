# src/vaultgraph/commands/activity.py
"""Activity command - deposit and redemption history of an account."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from vaultgraph.commands.base import (
    ActivityInfo,
    ActivityResult,
    config_error_message,
    resolve_explorer,
    run,
)
from vaultgraph.config import ConfigError
from vaultgraph.valuation import format_assets

if TYPE_CHECKING:
    from vaultgraph.explorer import GraphExplorer


def activity(
    account_id: str,
    config_path: str | Path | None = None,
    endpoint: str | None = None,
    explorer: GraphExplorer | None = None,
    limit: int | None = None,
) -> ActivityResult:
    """Get an account's activity, newest first.

    Args:
        account_id: Account address
        config_path: Override config file path
        endpoint: Override query service endpoint
        explorer: Explorer to use instead of one built from configuration
        limit: Keep only the most recent ``limit`` records

    Returns:
        ActivityResult with deposits and redemptions merged
    """
    resolved = resolve_explorer(explorer, config_path, endpoint)
    if isinstance(resolved, ConfigError):
        return ActivityResult(success=False, error=config_error_message(resolved))

    history = run(resolved.activity_history(account_id))
    if limit is not None:
        history = history[:limit]

    symbol = resolved.settings.unit_symbol
    return ActivityResult(
        success=True,
        account_id=account_id,
        activities=[
            ActivityInfo(
                activity_id=a.id,
                kind=a.kind.value,
                created_at=a.created_at.isoformat(),
                shares=a.shares,
                assets=format_assets(a.assets, symbol),
                label=a.term.label if a.term is not None else (a.term_id or ""),
            )
            for a in history
        ],
    )
