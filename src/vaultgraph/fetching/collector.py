# src/vaultgraph/fetching/collector.py
"""Identifier set extraction for join hops."""

from collections.abc import Callable, Iterable
from typing import Any

FieldSelector = str | Callable[[Any], Any]


def _select(record: Any, selector: FieldSelector) -> Any:
    if callable(selector):
        return selector(record)
    if isinstance(record, dict):
        return record.get(selector)
    return getattr(record, selector, None)


def collect_ids(records: Iterable[Any], *fields: FieldSelector) -> set[str]:
    """Distinct, non-empty identifiers from one or more fields of a record batch.

    Records may be dicts or objects; a selector is a key/attribute name or a
    callable returning an id (or an iterable of ids).

    Example:
        atom_ids = collect_ids(triples, "subject_id", "predicate_id", "object_id")
    """
    if not fields:
        raise ValueError("collect_ids needs at least one field selector")

    ids: set[str] = set()
    for record in records:
        for selector in fields:
            value = _select(record, selector)
            if isinstance(value, (list, tuple, set, frozenset)):
                ids.update(str(v) for v in value if v)
            elif value:
                ids.add(str(value))
    return ids
