"""Unit tests for per-user / per-request formatter scoping (currency_bootstrap.py)."""
from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from currency_modules import ConfigurationError, CurrencyFormatter
from currency_modules.currency_bootstrap import (
    current_formatter,
    formatter_for_user,
    use_formatter,
    user_currency_scope,
    user_currency_settings,
)
from pydantic_models.data.user_settings import UserCurrencySettings


def _settings_record(**overrides) -> SimpleNamespace:
    """Nachbildung eines Settings-Datensatzes mit weiteren, irrelevanten Spalten."""
    data = dict(
        company_name="ACME",
        timezone="Europe/Zurich",
        currency="EUR",
        currency_position="right_space",
        thousand_separator=".",
        decimal_separator=",",
        decimal_places=2,
    )
    data.update(overrides)
    return SimpleNamespace(**data)


# ---------------------------------------------------------------------------
# user_currency_settings
# ---------------------------------------------------------------------------

class TestUserCurrencySettings:
    def test_none(self):
        assert user_currency_settings(None) == {}

    def test_object_attributes(self):
        assert user_currency_settings(_settings_record(thousand_separator="")) == {
            "currency": "EUR",
            "currency_position": "right_space",
            "decimal_separator": ",",
            "decimal_places": 2,
        }

    def test_mapping_filters_empty_values(self):
        record = {"currency": "GBP", "currency_position": None, "decimal_places": 0, "decimal_separator": ""}
        assert user_currency_settings(record) == {"currency": "GBP", "decimal_places": 0}

    def test_model(self):
        settings = UserCurrencySettings(currency="CHF", decimal_places=None)
        assert user_currency_settings(settings) == {"currency": "CHF"}

    def test_object_without_currency_fields(self):
        assert user_currency_settings(SimpleNamespace(company_name="ACME")) == {}


# ---------------------------------------------------------------------------
# formatter_for_user
# ---------------------------------------------------------------------------

class TestFormatterForUser:
    def test_applies_user_settings(self):
        fmt = formatter_for_user(_settings_record())
        assert fmt.format(1234.56) == "1.234,56 €"

    def test_base_is_not_modified(self):
        base = CurrencyFormatter(currency_code="GBP", decimal_places=0)
        fmt = formatter_for_user({"currency": "EUR"}, base)
        assert fmt is not base
        assert fmt.format(1234.4) == "€1,234"
        assert base.format(1234.4) == "£1,234"

    def test_no_settings_copies_base(self):
        base = CurrencyFormatter(currency_code="JPY")
        fmt = formatter_for_user(None, base)
        assert fmt is not base
        assert fmt.config == base.config

    def test_default_base(self):
        assert formatter_for_user({}).format(1) == "$1.00"

    def test_invalid_settings_raise(self):
        with pytest.raises(ConfigurationError):
            formatter_for_user(_settings_record(decimal_places=8))


# ---------------------------------------------------------------------------
# Context binding
# ---------------------------------------------------------------------------

class TestContextBinding:
    def test_default_without_binding(self):
        assert current_formatter().format(1234.56) == "$1,234.56"

    def test_use_formatter_binds_and_restores(self):
        eur = CurrencyFormatter(currency_code="EUR")
        with use_formatter(eur) as bound:
            assert bound is eur
            assert current_formatter() is eur
        assert current_formatter().get_symbol() == "$"

    def test_nested_bindings(self):
        eur = CurrencyFormatter(currency_code="EUR")
        gbp = CurrencyFormatter(currency_code="GBP")
        with use_formatter(eur):
            with use_formatter(gbp):
                assert current_formatter() is gbp
            assert current_formatter() is eur

    def test_binding_restored_after_error(self):
        with pytest.raises(RuntimeError):
            with use_formatter(CurrencyFormatter(currency_code="EUR")):
                raise RuntimeError("request failed")
        assert current_formatter().get_symbol() == "$"

    def test_user_scope(self):
        with user_currency_scope({"currency": "INR"}) as fmt:
            assert current_formatter() is fmt
            assert current_formatter().format(10) == "₹10.00"

    def test_concurrent_requests_are_isolated(self):
        async def render(settings, delay):
            with user_currency_scope(settings):
                await asyncio.sleep(delay)
                return current_formatter().format(1234.56)

        async def run_requests():
            return await asyncio.gather(
                render({"currency": "EUR"}, 0.02),
                render({"currency": "GBP", "currency_position": "right_space"}, 0.0),
                render(None, 0.01),
            )

        assert asyncio.run(run_requests()) == ["€1,234.56", "1,234.56 £", "$1,234.56"]
