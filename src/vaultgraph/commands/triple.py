# src/vaultgraph/commands/triple.py
"""Triple command - one claim with its sides, and optionally an account's stance."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

from vaultgraph.commands.base import TripleResult, config_error_message, resolve_explorer, run
from vaultgraph.commands.claims import claim_info
from vaultgraph.config import ConfigError
from vaultgraph.models import Triple, TriplePosition

if TYPE_CHECKING:
    from vaultgraph.explorer import GraphExplorer


async def _load(
    explorer: GraphExplorer, triple_id: str, account_id: str | None
) -> tuple[Triple | None, TriplePosition | None]:
    if account_id is None:
        return await explorer.triple_details(triple_id), None
    details, position = await asyncio.gather(
        explorer.triple_details(triple_id),
        explorer.triple_position(account_id, triple_id),
    )
    return details, position


def triple(
    triple_id: str,
    account_id: str | None = None,
    config_path: str | Path | None = None,
    endpoint: str | None = None,
    explorer: GraphExplorer | None = None,
) -> TripleResult:
    """Get triple details.

    Args:
        triple_id: Triple (term) id
        account_id: Also report whether this account stakes for or against
        config_path: Override config file path
        endpoint: Override query service endpoint
        explorer: Explorer to use instead of one built from configuration
    """
    resolved = resolve_explorer(explorer, config_path, endpoint)
    if isinstance(resolved, ConfigError):
        return TripleResult(success=False, error=config_error_message(resolved))

    details, position = run(_load(resolved, triple_id, account_id))
    if details is None:
        return TripleResult(success=True, triple_id=triple_id, found=False)

    result = TripleResult(
        success=True,
        triple_id=triple_id,
        found=True,
        claim=claim_info(details, resolved.settings.unit_symbol),
        counter_term_id=details.counter_term_id,
    )
    if position is not None:
        result.account_id = account_id
        result.has_position = position.has_position
        result.is_for = position.is_for
    return result
