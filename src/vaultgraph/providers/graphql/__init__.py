# src/vaultgraph/providers/graphql/__init__.py
"""GraphQL query service client.

Usage:
    from vaultgraph.providers.graphql import HttpxGraphClient
"""

from vaultgraph.providers.graphql.client import HttpxGraphClient

__all__ = ["HttpxGraphClient"]
