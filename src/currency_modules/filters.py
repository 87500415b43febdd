from typing import Any, Callable, Optional

from jinja2 import Environment, Undefined

from .currency_bootstrap import current_formatter
from .currency_formatter import CurrencyFormatter


def _resolver(formatter: Optional[CurrencyFormatter]) -> Callable[[], CurrencyFormatter]:
    if formatter is not None:
        return lambda: formatter
    return current_formatter


def _amount(value: Any) -> Any:
    # Undefined aus dem Template wie None behandeln (ergibt 0)
    return None if isinstance(value, Undefined) else value


def register_filters(env: Environment, formatter: Optional[CurrencyFormatter] = None) -> None:
    """
    Registriert die Währungsfilter im Jinja2-Environment.
    Ohne formatter wird bei jedem Aufruf der Formatierer des aktuellen Kontexts
    verwendet (siehe currency_bootstrap.use_formatter).

    Beispiel:
        {{ expense.amount | currency }}           -> "$1,234.56"
        {{ total | currency("EUR") }}             -> "€1,234.56"
        {{ total | currency_compact }}            -> "$1.50M"
        {{ total | currency_k }}                  -> "1.50k"
        {{ currency_symbol() }}                   -> "$"
    """
    resolve = _resolver(formatter)

    env.filters["currency"] = lambda v, code=None, position=None: resolve().format(_amount(v), code, position)
    env.filters["currency_number"] = lambda v: resolve().format_number(_amount(v))
    env.filters["currency_compact"] = lambda v, include_symbol=True, decimals=2: resolve().format_compact(
        _amount(v), include_symbol, decimals
    )
    env.filters["currency_k"] = lambda v, decimals=2: resolve().format_to_k(_amount(v), decimals)
    env.globals["currency_symbol"] = lambda code=None: resolve().get_symbol(code)
