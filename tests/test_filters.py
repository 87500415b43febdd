"""Unit tests for the Jinja2 currency filters (filters.py)."""
from __future__ import annotations

import pytest
from jinja2 import Environment

from currency_modules import CurrencyFormatter
from currency_modules.currency_bootstrap import use_formatter
from currency_modules.filters import register_filters


@pytest.fixture
def env() -> Environment:
    environment = Environment()
    register_filters(environment, CurrencyFormatter())
    return environment


def render(environment: Environment, source: str, **context) -> str:
    return environment.from_string(source).render(**context)


class TestBoundFilters:
    def test_currency(self, env):
        assert render(env, "{{ amount | currency }}", amount=1234.56) == "$1,234.56"

    def test_currency_override(self, env):
        assert render(env, "{{ amount | currency('EUR', 'right_space') }}", amount=-5) == "-5.00 €"

    def test_number(self, env):
        assert render(env, "{{ amount | currency_number }}", amount=-1234.5) == "-1,234.50"

    def test_compact(self, env):
        assert render(env, "{{ amount | currency_compact }}", amount=1500000) == "$1.50M"
        assert render(env, "{{ amount | currency_compact(false, 1) }}", amount=2500) == "2.5k"

    def test_to_k(self, env):
        assert render(env, "{{ amount | currency_k }}", amount=1500) == "1.50k"

    def test_symbol_global(self, env):
        assert render(env, "{{ currency_symbol() }} / {{ currency_symbol('gbp') }}") == "$ / £"

    def test_undefined_renders_zero(self, env):
        assert render(env, "{{ missing | currency }}") == "$0.00"


class TestContextFilters:
    def test_resolves_formatter_at_render_time(self):
        environment = Environment()
        register_filters(environment)
        template = environment.from_string("{{ 1234.56 | currency }}")

        with use_formatter(CurrencyFormatter(currency_code="EUR", symbol_position="right_space")):
            assert template.render() == "1,234.56 €"
        assert template.render() == "$1,234.56"
