"""vaultgraph - knowledge graph reader with fee-adjusted vault valuation.

Reconstructs nested views of atoms, triples, terms, positions and activity
from a paginated GraphQL indexer, and values stake redemptions against a
bonding-curve vault's fee schedule.

Quick Start:
    from vaultgraph import GraphExplorer, HttpxGraphClient, Web3ValuationBackend

    explorer = GraphExplorer(
        client=HttpxGraphClient("https://indexer.example/v1/graphql"),
        backend=Web3ValuationBackend(rpc_url, vault_address),
    )

    positions = await explorer.positions(account_id)
    preview = await explorer.position_valuation(positions[0])
    if preview:
        print(format_assets(preview.net_assets))

From configuration (vaultgraph.yaml / VAULTGRAPH_* env vars):
    from vaultgraph.config import get_explorer

    explorer = get_explorer()
"""

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("vaultgraph")
except PackageNotFoundError:
    # Development / source-tree fallback (e.g. running tests without installing the wheel).
    try:
        import tomllib
        from pathlib import Path

        def _read_version_from_pyproject() -> str | None:
            for parent in Path(__file__).resolve().parents:
                pyproject = parent / "pyproject.toml"
                if pyproject.exists():
                    data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
                    version = data.get("project", {}).get("version")
                    return str(version) if version is not None else None
            return None

        __version__ = _read_version_from_pyproject() or "unknown"
    except Exception:
        __version__ = "unknown"

# Engine
from vaultgraph.activity import ActivityAggregator

# Errors
from vaultgraph.exceptions import (
    PaginationSafetyLimit,
    QueryError,
    ValuationUnavailable,
    VaultGraphError,
)
from vaultgraph.explorer import GraphExplorer
from vaultgraph.fetching import PaginatedFetcher, collect_ids

# Models
from vaultgraph.models import (
    Activity,
    ActivityKind,
    Atom,
    AtomBacking,
    FollowGraph,
    Position,
    Stance,
    Term,
    TermBacking,
    Triple,
    TripleBacking,
    TriplePosition,
    TriplesWithPositions,
    VaultFees,
    VaultType,
)

# Providers
from vaultgraph.providers import (
    ContentFetcher,
    GraphClient,
    HttpxContentFetcher,
    HttpxGraphClient,
    ValuationBackend,
    Web3ValuationBackend,
)
from vaultgraph.resolver import COUNTER_TERM_DEPTH, RelationResolver

# Configuration
from vaultgraph.settings import Settings
from vaultgraph.valuation import (
    UNAVAILABLE,
    RedeemPreview,
    Unavailable,
    ValuationEngine,
    format_assets,
)

__all__ = [
    # Version
    "__version__",
    # Models
    "Activity",
    "ActivityKind",
    "Atom",
    "AtomBacking",
    "FollowGraph",
    "Position",
    "Stance",
    "Term",
    "TermBacking",
    "Triple",
    "TripleBacking",
    "TriplePosition",
    "TriplesWithPositions",
    "VaultFees",
    "VaultType",
    # Config
    "Settings",
    # Errors
    "PaginationSafetyLimit",
    "QueryError",
    "ValuationUnavailable",
    "VaultGraphError",
    # Provider ABCs
    "ContentFetcher",
    "GraphClient",
    "ValuationBackend",
    # Provider implementations
    "HttpxContentFetcher",
    "HttpxGraphClient",
    "Web3ValuationBackend",
    # Engine
    "ActivityAggregator",
    "COUNTER_TERM_DEPTH",
    "GraphExplorer",
    "PaginatedFetcher",
    "RelationResolver",
    "collect_ids",
    # Valuation
    "UNAVAILABLE",
    "RedeemPreview",
    "Unavailable",
    "ValuationEngine",
    "format_assets",
]
