# src/vaultgraph/exceptions.py
"""Exceptions raised by vaultgraph."""

from typing import Any


class VaultGraphError(Exception):
    """Base class for all vaultgraph errors."""


class QueryError(VaultGraphError):
    """Raised when the query service reports errors or cannot be reached.

    Attributes:
        errors: The raw error list returned by the service (empty for transport failures).
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_errors(cls, errors: list[dict[str, Any]]) -> "QueryError":
        """Build a QueryError from a GraphQL error list, using the first message."""
        first = errors[0] if errors else {}
        message = first.get("message") if isinstance(first, dict) else None
        return cls(message or "GraphQL error", errors=errors)


class PaginationSafetyLimit(VaultGraphError):
    """Raised internally when pagination hits the record ceiling.

    The paginator catches this, logs it and returns the partial results.

    Attributes:
        partial_results: Records accumulated before the ceiling was reached.
        limit: The ceiling that was hit.
    """

    def __init__(self, message: str, partial_results: list[dict[str, Any]], limit: int) -> None:
        super().__init__(message)
        self.partial_results = partial_results
        self.limit = limit


class ValuationUnavailable(VaultGraphError):
    """Raised by valuation backends when conversion or fee reads fail.

    The ValuationEngine converts this into the UNAVAILABLE sentinel.
    """
