# src/vaultgraph/providers/base.py
"""Abstract base classes for the remote read dependencies."""

from abc import ABC, abstractmethod
from typing import Any


class GraphClient(ABC):
    """Abstract base class for the graph query service.

    Implementations send one query document with its variables and return the
    response's ``data`` object. The interface is transport-agnostic.

    Example:
        class MyGraphClient(GraphClient):
            async def execute(self, query, variables=None):
                return await my_transport.post(query, variables)
    """

    @abstractmethod
    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a query.

        Args:
            query: GraphQL query document.
            variables: Query variables.

        Returns:
            The ``data`` object of the response (empty dict if absent).

        Raises:
            QueryError: If the service reports errors or cannot be reached.
        """
        ...


class ValuationBackend(ABC):
    """Abstract base class for read-only vault valuation.

    All quantities are integers in the vault's smallest unit (wei).
    Implementations raise ValuationUnavailable (or any exception) on failure;
    the ValuationEngine turns failures into an explicit unavailable result.
    """

    @abstractmethod
    async def convert_to_assets(self, term_id: str, curve_id: int, shares: int) -> int:
        """Gross asset value of ``shares`` on the given bonding curve."""
        ...

    @abstractmethod
    async def convert_to_shares(self, term_id: str, curve_id: int, assets: int) -> int:
        """Share count worth ``assets`` on the given bonding curve."""
        ...

    @abstractmethod
    async def get_vault_fees(self) -> Any:
        """Raw fee schedule: ``(entry, exit, protocol)`` in bps, or a mapping with those names."""
        ...


class ContentFetcher(ABC):
    """Abstract base class for off-graph payload retrieval."""

    @abstractmethod
    async def fetch_json(self, reference: str) -> dict[str, Any] | None:
        """Fetch and parse a JSON document. Returns None when it is unavailable."""
        ...
