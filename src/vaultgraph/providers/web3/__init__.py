# src/vaultgraph/providers/web3/__init__.py
"""web3 valuation backend (requires: pip install vaultgraph[web3]).

Usage:
    from vaultgraph.providers.web3 import Web3ValuationBackend
"""

from vaultgraph.providers.web3.client import (
    MULTIVAULT_ABI,
    Web3ValuationBackend,
    term_id_to_bytes32,
)

__all__ = ["MULTIVAULT_ABI", "Web3ValuationBackend", "term_id_to_bytes32"]
