# src/vaultgraph/providers/ipfs/__init__.py
"""Off-graph payload fetching."""

from vaultgraph.providers.ipfs.client import (
    DEFAULT_GATEWAY,
    HttpxContentFetcher,
    ipfs_to_http_url,
    is_ipfs_reference,
)

__all__ = ["DEFAULT_GATEWAY", "HttpxContentFetcher", "ipfs_to_http_url", "is_ipfs_reference"]
