# src/vaultgraph/commands/redeem.py
"""Redeem commands - size a redemption without sending it.

- preview: shares -> fee-adjusted assets
- shares_for: desired net assets -> shares, clamped to a holding
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import TYPE_CHECKING

from vaultgraph.commands.base import (
    RedeemPreviewResult,
    RedeemSharesResult,
    config_error_message,
    resolve_explorer,
    run,
)
from vaultgraph.config import ConfigError
from vaultgraph.valuation import WEI_PER_UNIT, Unavailable, format_assets

if TYPE_CHECKING:
    from vaultgraph.explorer import GraphExplorer

NO_BACKEND = "No valuation backend configured. Set rpc_url and vault_address."
UNAVAILABLE_MESSAGE = "Valuation unavailable. Check the RPC endpoint and vault address."


def preview(
    term_id: str,
    shares: int,
    curve_id: int | None = None,
    config_path: str | Path | None = None,
    explorer: GraphExplorer | None = None,
) -> RedeemPreviewResult:
    """Preview the net assets received for redeeming ``shares``.

    Args:
        term_id: Term whose vault is redeemed from
        shares: Share count to redeem
        curve_id: Bonding curve (default: settings.default_curve_id)
        config_path: Override config file path
        explorer: Explorer to use instead of one built from configuration
    """
    if shares < 0:
        return RedeemPreviewResult(success=False, error="Shares must be non-negative.")

    resolved = resolve_explorer(explorer, config_path)
    if isinstance(resolved, ConfigError):
        return RedeemPreviewResult(success=False, error=config_error_message(resolved))
    if resolved.valuation is None:
        return RedeemPreviewResult(success=False, error=NO_BACKEND)

    curve = curve_id if curve_id is not None else resolved.settings.default_curve_id
    outcome = run(resolved.valuation.preview_redeem_value(term_id, curve, shares))
    if isinstance(outcome, Unavailable):
        return RedeemPreviewResult(success=False, error=UNAVAILABLE_MESSAGE)

    symbol = resolved.settings.unit_symbol
    return RedeemPreviewResult(
        success=True,
        term_id=term_id,
        curve_id=curve,
        shares=shares,
        gross_assets=format_assets(outcome.gross_assets, symbol),
        exit_fee=format_assets(outcome.exit_fee, symbol),
        protocol_fee=format_assets(outcome.protocol_fee, symbol),
        net_assets=format_assets(outcome.net_assets, symbol),
        net_assets_wei=outcome.net_assets,
    )


def shares_for(
    term_id: str,
    amount: str,
    max_shares: int,
    curve_id: int | None = None,
    config_path: str | Path | None = None,
    explorer: GraphExplorer | None = None,
) -> RedeemSharesResult:
    """Shares to redeem to receive ``amount`` units after fees.

    Args:
        term_id: Term whose vault is redeemed from
        amount: Desired net amount in units (e.g. "1.5")
        max_shares: Shares held; the result never exceeds it
        curve_id: Bonding curve (default: settings.default_curve_id)
        config_path: Override config file path
        explorer: Explorer to use instead of one built from configuration
    """
    try:
        units = Decimal(amount)
    except InvalidOperation:
        return RedeemSharesResult(success=False, error=f"Invalid amount: {amount}")
    if not units.is_finite() or units < 0:
        return RedeemSharesResult(success=False, error=f"Invalid amount: {amount}")

    resolved = resolve_explorer(explorer, config_path)
    if isinstance(resolved, ConfigError):
        return RedeemSharesResult(success=False, error=config_error_message(resolved))
    if resolved.valuation is None:
        return RedeemSharesResult(success=False, error=NO_BACKEND)

    curve = curve_id if curve_id is not None else resolved.settings.default_curve_id
    engine = resolved.valuation
    outcome = run(engine.shares_for_target_units(term_id, curve, units, max_shares))
    if isinstance(outcome, Unavailable):
        return RedeemSharesResult(success=False, error=UNAVAILABLE_MESSAGE)

    target_wei = int(units * WEI_PER_UNIT)
    return RedeemSharesResult(
        success=True,
        term_id=term_id,
        curve_id=curve,
        target=format_assets(target_wei, resolved.settings.unit_symbol),
        max_shares=max_shares,
        shares=outcome,
        full_holding=max_shares > 0 and outcome == max_shares,
    )
