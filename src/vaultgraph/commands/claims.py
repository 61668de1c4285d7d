# src/vaultgraph/commands/claims.py
"""Claims command - triples about a subject, or created by an account."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from vaultgraph.commands.base import (
    ClaimInfo,
    ClaimsResult,
    config_error_message,
    resolve_explorer,
    run,
)
from vaultgraph.config import ConfigError
from vaultgraph.models import Triple
from vaultgraph.valuation import format_assets

if TYPE_CHECKING:
    from vaultgraph.explorer import GraphExplorer


def claim_info(triple: Triple, unit_symbol: str) -> ClaimInfo:
    """Flatten a resolved triple for display."""
    subject, predicate, obj = triple.labels
    term = triple.term
    counter_term = triple.counter_term
    return ClaimInfo(
        triple_id=triple.term_id,
        subject=subject or (triple.subject_id or ""),
        predicate=predicate or (triple.predicate_id or ""),
        object=obj or (triple.object_id or ""),
        for_count=(term.position_count or 0) if term is not None else 0,
        against_count=(counter_term.position_count or 0) if counter_term is not None else 0,
        market_cap=format_assets(term.total_market_cap, unit_symbol) if term is not None else None,
    )


def claims(
    subject_id: str,
    config_path: str | Path | None = None,
    endpoint: str | None = None,
    explorer: GraphExplorer | None = None,
    by_account: bool = False,
) -> ClaimsResult:
    """List claims about a subject atom.

    Args:
        subject_id: Subject atom id, or an account address with ``by_account``
        config_path: Override config file path
        endpoint: Override query service endpoint
        explorer: Explorer to use instead of one built from configuration
        by_account: List triples created by the account instead

    Returns:
        ClaimsResult with for/against position counts per claim
    """
    resolved = resolve_explorer(explorer, config_path, endpoint)
    if isinstance(resolved, ConfigError):
        return ClaimsResult(success=False, error=config_error_message(resolved))

    if by_account:
        triples = run(resolved.claims_by_account(subject_id))
    else:
        triples = run(resolved.claims_by_subject(subject_id))

    symbol = resolved.settings.unit_symbol
    return ClaimsResult(
        success=True,
        subject_id=subject_id,
        claims=[claim_info(t, symbol) for t in triples],
    )
