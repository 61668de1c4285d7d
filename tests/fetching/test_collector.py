# tests/fetching/test_collector.py
"""Tests for collect_ids."""

import pytest

from vaultgraph.fetching import collect_ids
from vaultgraph.models import Triple


class TestCollectIds:
    """Tests for collect_ids()."""

    def test_distinct_ids_across_fields(self) -> None:
        rows = [
            {"subject_id": "a", "predicate_id": "p", "object_id": "b"},
            {"subject_id": "b", "predicate_id": "p", "object_id": "a"},
        ]
        assert collect_ids(rows, "subject_id", "predicate_id", "object_id") == {"a", "b", "p"}

    def test_empty_and_missing_values_skipped(self) -> None:
        rows = [{"term_id": ""}, {"term_id": None}, {}, {"term_id": "t"}]
        assert collect_ids(rows, "term_id") == {"t"}

    def test_objects_and_callables(self) -> None:
        triples = [Triple(term_id="t1", counter_term_id="c1"), Triple(term_id="t2")]
        assert collect_ids(triples, "counter_term_id") == {"c1"}
        assert collect_ids(triples, lambda t: [t.term_id, t.counter_term_id]) == {
            "t1",
            "c1",
            "t2",
        }

    def test_empty_batch(self) -> None:
        assert collect_ids([], "term_id") == set()

    def test_requires_a_field(self) -> None:
        with pytest.raises(ValueError):
            collect_ids([{"a": 1}])
