# src/vaultgraph/valuation.py
"""Fee-adjusted redemption valuation.

All quantities are integer wei amounts. Conversion to decimal units happens only
in ``format_assets``, at the presentation boundary.

Forward (shares -> net assets):
    gross        = convertToAssets(term, curve, shares)
    exit_fee     = gross * exit_bps // 10000
    protocol_fee = gross * protocol_bps // 10000
    net          = gross - exit_fee - protocol_fee

Reverse (net assets -> shares):
    gross  = net * 10000 // (10000 - exit_bps - protocol_bps)
    shares = min(convertToShares(term, curve, gross), max_shares)

The entry fee only applies to deposits and is never deducted here.
"""

from __future__ import annotations

import logging
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import Final

from pydantic import BaseModel

from vaultgraph.models import FEE_DENOMINATOR, Term, VaultFees
from vaultgraph.providers.base import ValuationBackend

logger = logging.getLogger(__name__)

WEI_PER_UNIT: Final = 10**18
DEFAULT_UNIT_SYMBOL: Final = "TRUST"

_MILLION = Decimal(1_000_000)
_THOUSAND = Decimal(1_000)
_DUST = Decimal("0.0001")


class Unavailable:
    """Sentinel for a valuation that could not be computed.

    Falsy and distinct from zero, so callers can render a loading or
    unavailable state instead of a misleading amount.
    """

    _instance: Unavailable | None = None

    def __new__(cls) -> Unavailable:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNAVAILABLE"


UNAVAILABLE: Final = Unavailable()


class RedeemPreview(BaseModel):
    """Breakdown of a redemption's value, in wei."""

    shares: int
    gross_assets: int
    exit_fee: int
    protocol_fee: int
    net_assets: int
    fees: VaultFees

    @property
    def total_fee(self) -> int:
        return self.exit_fee + self.protocol_fee


def to_units(wei: int) -> Decimal:
    """Exact conversion from wei to decimal units."""
    return Decimal(wei) / Decimal(WEI_PER_UNIT)


def format_assets(wei: int, symbol: str = DEFAULT_UNIT_SYMBOL) -> str:
    """Format a wei amount for display.

    >= 1M units -> "1.23M", >= 1K units -> "1.23K", below 0.0001 -> "< 0.0001",
    otherwise 4 decimals. Decimals are rounded half up.
    """
    units = to_units(wei)
    if units >= _MILLION:
        text = f"{(units / _MILLION).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}M"
    elif units >= _THOUSAND:
        text = f"{(units / _THOUSAND).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}K"
    elif units < _DUST:
        text = "< 0.0001"
    else:
        text = f"{units.quantize(Decimal('0.0001'), rounding=ROUND_HALF_UP)}"
    return f"{text} {symbol}" if symbol else text


def apply_redemption_fees(gross_assets: int, fees: VaultFees) -> tuple[int, int, int]:
    """Deduct exit and protocol fees. Returns (exit_fee, protocol_fee, net_assets)."""
    exit_fee = gross_assets * fees.exit_fee_bps // FEE_DENOMINATOR
    protocol_fee = gross_assets * fees.protocol_fee_bps // FEE_DENOMINATOR
    return exit_fee, protocol_fee, gross_assets - exit_fee - protocol_fee


def gross_for_net(net_assets: int, fees: VaultFees) -> int:
    """Invert the fee deduction: gross assets needed to receive ``net_assets``."""
    return net_assets * FEE_DENOMINATOR // (FEE_DENOMINATOR - fees.redemption_fee_bps)


def redeem_fraction(shares: int, percent: int) -> int:
    """``percent``% of a share count, in integer arithmetic (25/50/75/100 presets)."""
    if not 0 <= percent <= 100:
        raise ValueError(f"percent must be between 0 and 100, got {percent}")
    return shares * percent // 100


class ValuationEngine:
    """Share <-> asset conversion for redemptions, net of vault fees.

    Fees are read fresh from the backend on every computation. Any backend
    failure yields UNAVAILABLE instead of raising.

    Example:
        engine = ValuationEngine(Web3ValuationBackend(rpc_url, vault_address))
        preview = await engine.preview_redeem_value(term_id, 1, shares)
        if preview:
            print(format_assets(preview.net_assets))
    """

    def __init__(self, backend: ValuationBackend, unit_symbol: str = DEFAULT_UNIT_SYMBOL) -> None:
        """Initialize the engine.

        Args:
            backend: Vault read backend
            unit_symbol: Symbol appended to formatted amounts
        """
        self.backend = backend
        self.unit_symbol = unit_symbol

    async def get_fees(self) -> VaultFees | Unavailable:
        """Current fee schedule, or UNAVAILABLE if it cannot be read or is malformed."""
        try:
            raw = await self.backend.get_vault_fees()
            return VaultFees.from_raw(raw)
        except Exception as e:
            logger.warning("Vault fees unavailable: %s", e)
            return UNAVAILABLE

    async def preview_redeem_value(
        self, term_id: str, curve_id: int, shares: int
    ) -> RedeemPreview | Unavailable:
        """Fee-adjusted asset value of redeeming ``shares``.

        Args:
            term_id: Term whose vault is redeemed from
            curve_id: Bonding curve identifier
            shares: Share count (non-negative)

        Returns:
            RedeemPreview with the gross/fee/net breakdown, or UNAVAILABLE
        """
        if shares < 0:
            raise ValueError(f"shares must be non-negative, got {shares}")

        try:
            gross_assets = _as_int(await self.backend.convert_to_assets(term_id, curve_id, shares))
        except Exception as e:
            logger.warning("convertToAssets unavailable for %s: %s", term_id, e)
            return UNAVAILABLE

        fees = await self.get_fees()
        if isinstance(fees, Unavailable):
            return UNAVAILABLE

        exit_fee, protocol_fee, net_assets = apply_redemption_fees(gross_assets, fees)
        return RedeemPreview(
            shares=shares,
            gross_assets=gross_assets,
            exit_fee=exit_fee,
            protocol_fee=protocol_fee,
            net_assets=net_assets,
            fees=fees,
        )

    async def shares_for_target_assets(
        self,
        term_id: str,
        curve_id: int,
        target_assets: int,
        max_shares: int,
    ) -> int | Unavailable:
        """Shares to redeem to receive ``target_assets`` after fees.

        The result is clamped to ``[0, max_shares]``: never more than is held.

        Args:
            term_id: Term whose vault is redeemed from
            curve_id: Bonding curve identifier
            target_assets: Desired net amount in wei
            max_shares: Shares held by the caller

        Returns:
            Clamped share count, or UNAVAILABLE
        """
        if target_assets <= 0 or max_shares <= 0:
            return 0

        fees = await self.get_fees()
        if isinstance(fees, Unavailable):
            return UNAVAILABLE

        gross_assets = gross_for_net(target_assets, fees)
        try:
            shares = _as_int(await self.backend.convert_to_shares(term_id, curve_id, gross_assets))
        except Exception as e:
            logger.warning("convertToShares unavailable for %s: %s", term_id, e)
            return UNAVAILABLE

        return max(0, min(shares, max_shares))

    async def shares_for_target_units(
        self,
        term_id: str,
        curve_id: int,
        target_units: Decimal | str,
        max_shares: int,
    ) -> int | Unavailable:
        """Like shares_for_target_assets, with the target given in decimal units."""
        target_assets = int((Decimal(target_units) * WEI_PER_UNIT).to_integral_value(ROUND_DOWN))
        return await self.shares_for_target_assets(term_id, curve_id, target_assets, max_shares)

    async def preview_fraction(
        self, term_id: str, curve_id: int, shares: int, percent: int
    ) -> RedeemPreview | Unavailable:
        """Preview redeeming ``percent``% of ``shares``."""
        return await self.preview_redeem_value(
            term_id, curve_id, redeem_fraction(shares, percent)
        )

    def term_value(self, term: Term) -> str:
        """Display value of a term's market cap. No fees are deducted."""
        return format_assets(term.total_market_cap, self.unit_symbol)

    def format(self, result: RedeemPreview | Unavailable) -> str | None:
        """Display string for a preview's net assets, or None when unavailable."""
        if isinstance(result, Unavailable):
            return None
        return format_assets(result.net_assets, self.unit_symbol)


def _as_int(value: object) -> int:
    """Backends must return integers; bools and floats are malformed."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {type(value).__name__}")
    return value
