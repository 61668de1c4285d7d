# src/vaultgraph/fetching/__init__.py
"""Batched fetching primitives: offset pagination and id-set collection."""

from vaultgraph.fetching.collector import FieldSelector, collect_ids
from vaultgraph.fetching.paginator import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_RECORDS,
    PaginatedFetcher,
)

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_MAX_RECORDS",
    "FieldSelector",
    "PaginatedFetcher",
    "collect_ids",
]
