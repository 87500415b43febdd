"""
Bindet einen CurrencyFormatter an den aktuellen Ausführungskontext (Request, Task).

Jeder Benutzer-Kontext erhält eine eigene Formatierer-Instanz, abgeleitet aus
der Anwendungs-Konfiguration und den Settings des Benutzers. Eine geteilte
Instanz wird nie pro Request umkonfiguriert.

Beispiel:
    base = config.formatter()
    with user_currency_scope(user.settings, base) as formatter:
        render(template, amount=formatter.format(total))
"""
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Generator, Mapping, Optional

from loguru import logger

from pydantic_models.data.user_settings import SETTINGS_FIELDS, UserCurrencySettings

from .currency_formatter import CurrencyFormatter

_current_formatter: ContextVar[Optional[CurrencyFormatter]] = ContextVar("currency_formatter", default=None)


def user_currency_settings(user_settings: Any) -> Dict[str, Any]:
    """
    Liest die Währungsfelder aus einem Settings-Datensatz.
    Akzeptiert ein Mapping, UserCurrencySettings oder ein beliebiges Objekt mit
    den entsprechenden Attributen (z.B. ein ORM-Datensatz).

    Returns:
        Dict[str, Any]: Nur Felder, die weder None noch ein leerer String sind.
    """
    if user_settings is None:
        return {}
    if isinstance(user_settings, UserCurrencySettings):
        return user_settings.as_patch()
    if isinstance(user_settings, Mapping):
        values = {field: user_settings.get(field) for field in SETTINGS_FIELDS}
    else:
        values = {field: getattr(user_settings, field, None) for field in SETTINGS_FIELDS}
    return {key: value for key, value in values.items() if value is not None and value != ""}


def formatter_for_user(user_settings: Any, base: Optional[CurrencyFormatter] = None) -> CurrencyFormatter:
    """
    Erzeugt einen neuen Formatierer für einen Benutzer. base bleibt unverändert.

    Raises:
        ConfigurationError: Wenn die Benutzer-Settings ungültig sind.
    """
    base = base or CurrencyFormatter()
    settings = user_currency_settings(user_settings)
    if not settings:
        logger.debug("Keine Währungseinstellungen für Benutzer, verwende Basis-Konfiguration.")
        return CurrencyFormatter(base.config)
    return base.with_user_settings(settings)


@contextmanager
def use_formatter(formatter: CurrencyFormatter) -> Generator[CurrencyFormatter, None, None]:
    """
    Context-Manager: bindet formatter an den aktuellen Kontext.
    Die vorherige Bindung wird beim Verlassen wiederhergestellt, auch bei Fehlern.
    """
    token = _current_formatter.set(formatter)
    try:
        yield formatter
    finally:
        _current_formatter.reset(token)


@contextmanager
def user_currency_scope(
    user_settings: Any, base: Optional[CurrencyFormatter] = None
) -> Generator[CurrencyFormatter, None, None]:
    """Kombination aus formatter_for_user und use_formatter, z.B. pro Request."""
    with use_formatter(formatter_for_user(user_settings, base)) as formatter:
        yield formatter


def current_formatter() -> CurrencyFormatter:
    """
    Gibt den im aktuellen Kontext gebundenen Formatierer zurück,
    sonst einen Formatierer mit Default-Konfiguration.
    """
    formatter = _current_formatter.get()
    return formatter if formatter is not None else CurrencyFormatter()
