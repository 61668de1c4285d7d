# tests/test_settings.py
"""Tests for Settings."""

import pytest
from pydantic import ValidationError

from vaultgraph.fetching import DEFAULT_BATCH_SIZE, DEFAULT_MAX_RECORDS
from vaultgraph.settings import Settings


class TestSettings:
    """Tests for the Settings model."""

    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.endpoint is None
        assert settings.batch_size == DEFAULT_BATCH_SIZE
        assert settings.max_records == DEFAULT_MAX_RECORDS
        assert settings.default_curve_id == 1
        assert settings.unit_symbol == "TRUST"
        assert settings.strict is False
        assert settings.has_valuation is False

    def test_has_valuation_needs_both(self) -> None:
        assert not Settings(rpc_url="https://rpc.example").has_valuation
        assert not Settings(vault_address="0xvault").has_valuation
        assert Settings(rpc_url="https://rpc.example", vault_address="0xvault").has_valuation

    @pytest.mark.parametrize(
        "values",
        [{"batch_size": 0}, {"max_records": 0}, {"request_timeout": 0}],
    )
    def test_invalid_values(self, values: dict) -> None:
        with pytest.raises(ValidationError):
            Settings(**values)
