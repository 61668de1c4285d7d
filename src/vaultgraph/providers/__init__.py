# src/vaultgraph/providers/__init__.py
"""Provider implementations for vaultgraph.

This module contains the remote read seams:
- GraphClient: Abstract base class for the GraphQL query service
- ValuationBackend: Abstract base class for vault share/asset conversion and fees
- ContentFetcher: Abstract base class for off-graph payloads
- httpx implementations for the query service and payloads
- web3 implementation of the valuation backend (requires: pip install vaultgraph[web3])

Usage:
    from vaultgraph.providers import HttpxGraphClient, Web3ValuationBackend
"""

from vaultgraph.providers.base import ContentFetcher, GraphClient, ValuationBackend
from vaultgraph.providers.graphql import HttpxGraphClient
from vaultgraph.providers.ipfs import HttpxContentFetcher

try:
    from vaultgraph.providers.web3 import Web3ValuationBackend
except ImportError:
    from vaultgraph._optional import _create_missing_dependency_class

    Web3ValuationBackend = _create_missing_dependency_class(  # type: ignore[misc,assignment]
        "Web3ValuationBackend", "web3"
    )

__all__ = [
    # ABCs
    "ContentFetcher",
    "GraphClient",
    "ValuationBackend",
    # Implementations
    "HttpxContentFetcher",
    "HttpxGraphClient",
    "Web3ValuationBackend",
]
