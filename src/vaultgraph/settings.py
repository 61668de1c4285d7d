# src/vaultgraph/settings.py
"""Behavioral settings for vaultgraph.

Settings are passed programmatically - the library does not read from
environment variables. The CLI layer (``vaultgraph.config``) reads
``vaultgraph.yaml``, ``.env`` files and ``VAULTGRAPH_*`` variables and passes
the resolved values here explicitly.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from vaultgraph.fetching.paginator import DEFAULT_BATCH_SIZE, DEFAULT_MAX_RECORDS
from vaultgraph.providers.ipfs.client import DEFAULT_GATEWAY
from vaultgraph.valuation import DEFAULT_UNIT_SYMBOL


class Settings(BaseModel):
    """Behavioral settings for a GraphExplorer.

    Example:
        settings = Settings(
            endpoint="https://indexer.example/v1/graphql",
            batch_size=250,
        )
    """

    # Query service
    endpoint: str | None = None
    request_timeout: float = Field(default=30.0, gt=0)  # Seconds, per HTTP request

    # Pagination
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, ge=1)
    max_records: int = Field(default=DEFAULT_MAX_RECORDS, ge=1)  # Safety ceiling per root fetch

    # Valuation
    rpc_url: str | None = None
    vault_address: str | None = None
    default_curve_id: int = 1
    unit_symbol: str = DEFAULT_UNIT_SYMBOL

    # Off-graph content
    ipfs_gateway: str = DEFAULT_GATEWAY

    # Re-raise root query failures instead of returning empty results
    strict: bool = False

    @property
    def has_valuation(self) -> bool:
        """True when an RPC endpoint and vault address are both configured."""
        return bool(self.rpc_url and self.vault_address)
