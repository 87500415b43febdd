from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union

from babel.core import Locale, UnknownLocaleError
from babel.numbers import get_currency_name
from loguru import logger
from pydantic import ValidationError

from pydantic_models.config.currency_config import FormatterConfig, SymbolPosition
from pydantic_models.data.user_settings import UserCurrencySettings

from .currency_tables import (
    CURRENCY_NAMES,
    CURRENCY_SYMBOLS,
    POSITION_OPTIONS,
    lookup_symbol,
)
from .errors import ConfigurationError
from .utils import normalize_amount, number_format

ConfigInput = Union[FormatterConfig, Mapping[str, Any], None]
SettingsInput = Union[UserCurrencySettings, Mapping[str, Any], None]

# Schwellwerte für die Kurzschreibweise, erster Treffer gewinnt.
_COMPACT_STEPS = (
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "k"),
)

# Unbekannte Positionen werden wie "left" behandelt.
_SYMBOL_LAYOUTS = {
    SymbolPosition.RIGHT.value: "{number}{symbol}",
    SymbolPosition.LEFT_SPACE.value: "{symbol} {number}",
    SymbolPosition.RIGHT_SPACE.value: "{number} {symbol}",
}

_ERROR_MESSAGES = {
    ("decimal_places", "greater_than_equal"): "decimal_places muss zwischen 0 und 4 liegen",
    ("decimal_places", "less_than_equal"): "decimal_places muss zwischen 0 und 4 liegen",
    ("symbol_position", "enum"): "symbol_position muss einer der Werte sein: "
    + ", ".join(p.value for p in SymbolPosition),
}


def _describe_validation_error(error: ValidationError) -> str:
    messages = []
    for err in error.errors():
        field = str(err["loc"][0]) if err.get("loc") else ""
        field = {"currency": "currency_code", "currency_position": "symbol_position"}.get(field, field)
        messages.append(_ERROR_MESSAGES.get((field, err["type"]), f"{field}: {err['msg']}"))
    return "; ".join(messages)


def build_config(config: ConfigInput = None, **fields: Any) -> FormatterConfig:
    """
    Erzeugt eine validierte FormatterConfig aus einer bestehenden Config, einem
    Mapping (Feldnamen oder Settings-Schlüssel) und/oder Keyword-Feldern.

    Raises:
        ConfigurationError: Bei ungültigen Werten. Es wird nichts korrigiert.
    """
    if isinstance(config, FormatterConfig):
        if not fields:
            return config
        data: Dict[str, Any] = config.model_dump()
    else:
        data = dict(config or {})
    data.update(fields)
    try:
        return FormatterConfig.model_validate(data)
    except ValidationError as e:
        message = _describe_validation_error(e)
        logger.error(f"Ungültige Formatierer-Konfiguration: {message}")
        raise ConfigurationError(message) from e


class CurrencyFormatter:
    """
    Formatiert Geldbeträge nach den Einstellungen eines Benutzers.

    Die Konfiguration ist eine unveränderliche FormatterConfig. Alle
    Formatierungsmethoden lesen sie nur; apply_user_settings ersetzt sie als
    Ganzes. Pro Request/Benutzer eine eigene Instanz verwenden
    (siehe currency_bootstrap), nie eine geteilte Instanz umkonfigurieren.

    Beispiel:
        formatter = CurrencyFormatter()
        formatter.format(1234.56)           # "$1,234.56"
        formatter.format_compact(1500000)   # "$1.50M"
        formatter.format_number(1234.56)    # "1,234.56"
    """

    def __init__(self, config: ConfigInput = None, **fields: Any) -> None:
        self._config: FormatterConfig = build_config(config, **fields)

    @classmethod
    def create(cls, config: ConfigInput = None) -> "CurrencyFormatter":
        """Erzeugt einen Formatierer aus einer Config oder einem Settings-Datensatz."""
        return cls(config)

    @property
    def config(self) -> FormatterConfig:
        return self._config

    # -----------------------------------------------------------------
    # Konfiguration
    # -----------------------------------------------------------------

    def apply_user_settings(self, settings: SettingsInput) -> "CurrencyFormatter":
        """
        Übernimmt die gesetzten Felder eines Benutzer-Settings-Datensatzes.

        currency, currency_position, thousand_separator und decimal_separator
        überschreiben nur, wenn sie nicht leer sind. decimal_places überschreibt,
        sobald es gesetzt ist (0 ist ein gültiger Wert). Die zusammengeführte
        Config wird neu validiert; bei einem Fehler bleibt die bisherige Config
        unverändert.

        Args:
            settings: Mapping oder UserCurrencySettings.

        Returns:
            CurrencyFormatter: self, für Verkettung.

        Raises:
            ConfigurationError: Wenn das Ergebnis ungültig wäre.
        """
        self._config = self._merge_settings(settings)
        return self

    def with_user_settings(self, settings: SettingsInput) -> "CurrencyFormatter":
        """Wie apply_user_settings, aber auf einer Kopie; self bleibt unverändert."""
        return type(self)(self._merge_settings(settings))

    def _merge_settings(self, settings: SettingsInput) -> FormatterConfig:
        if isinstance(settings, UserCurrencySettings):
            settings = settings.model_dump()
        settings = settings or {}

        data: Dict[str, Any] = self._config.model_dump()
        if settings.get("currency"):
            data["currency_code"] = settings["currency"]
        if settings.get("currency_position"):
            data["symbol_position"] = settings["currency_position"]
        if settings.get("thousand_separator"):
            data["thousand_separator"] = settings["thousand_separator"]
        if settings.get("decimal_separator"):
            data["decimal_separator"] = settings["decimal_separator"]
        if settings.get("decimal_places") not in (None, ""):
            data["decimal_places"] = settings["decimal_places"]

        merged = build_config(data)
        logger.debug(f"Währungseinstellungen übernommen: {merged.model_dump(mode='json')}")
        return merged

    # -----------------------------------------------------------------
    # Formatierung
    # -----------------------------------------------------------------

    def format(
        self,
        amount: Any,
        currency_code: Optional[str] = None,
        position: Union[SymbolPosition, str, None] = None,
    ) -> str:
        """
        Formatiert einen Betrag mit Symbol, Gruppierung und Nachkommastellen.
        Das Vorzeichen steht immer vor dem gesamten Ausdruck ("-$500.00").

        Args:
            amount: Betrag (Zahl, String oder None).
            currency_code: Optionaler Währungscode statt des konfigurierten.
            position: Optionale Symbolposition statt der konfigurierten.
        """
        amount = normalize_amount(amount)
        symbol = self.get_symbol(currency_code)
        if position is None:
            position = self._config.symbol_position

        formatted_number = number_format(
            abs(amount),
            self._config.decimal_places,
            self._config.decimal_separator,
            self._config.thousand_separator,
        )
        formatted = _apply_symbol_position(formatted_number, symbol, position)
        return f"-{formatted}" if amount < 0 else formatted

    def format_number(self, amount: Any) -> str:
        """Formatiert einen Betrag ohne Symbol; das Minuszeichen bleibt Teil der Zahl."""
        return number_format(
            normalize_amount(amount),
            self._config.decimal_places,
            self._config.decimal_separator,
            self._config.thousand_separator,
        )

    def format_compact(self, amount: Any, include_symbol: bool = True, decimals: int = 2) -> str:
        """
        Kurzschreibweise für Dashboards: 1500000 -> "$1.50M".
        Nutzt feste Trennzeichen ("," und "."), nicht die konfigurierten.
        """
        amount = normalize_amount(amount)
        abs_amount = abs(amount)

        divisor, suffix = 1, ""
        for threshold, step_suffix in _COMPACT_STEPS:
            if abs_amount >= threshold:
                divisor, suffix = threshold, step_suffix
                break

        compact_value = number_format(abs_amount / divisor, decimals) + suffix
        sign = "-" if amount < 0 else ""

        if not include_symbol:
            return sign + compact_value

        formatted = _apply_symbol_position(compact_value, self.get_symbol(), self._config.symbol_position)
        return sign + formatted

    def format_to_k(self, amount: Any, decimals: int = 2) -> str:
        """
        Tausender-Schreibweise ohne Symbol: 1500 -> "1.50k", 500 -> "500.00".
        Dezimalpunkt, keine Gruppierung, unabhängig von der Konfiguration.
        """
        amount = normalize_amount(amount)
        if abs(amount) >= 1000:
            return number_format(amount / 1000, decimals, ".", "") + "k"
        return number_format(amount, decimals, ".", "")

    # -----------------------------------------------------------------
    # Symbole und Metadaten
    # -----------------------------------------------------------------

    def get_symbol(self, currency_code: Optional[str] = None) -> str:
        if currency_code is None:
            currency_code = self._config.currency_code
        return lookup_symbol(currency_code)

    @staticmethod
    def get_all_symbols() -> Dict[str, str]:
        return dict(CURRENCY_SYMBOLS)

    @staticmethod
    def get_currency_codes(locale: Optional[str] = None) -> Dict[str, str]:
        """
        Währungskatalog für Auswahllisten (Code -> Name), alphabetisch nach Code.

        Mit einer Babel-Locale (z.B. "de_CH") werden die Namen übersetzt.
        Codes ohne Babel-Übersetzung behalten den englischen Namen.
        """
        if locale is None:
            return dict(CURRENCY_NAMES)
        try:
            babel_locale = Locale.parse(locale)
        except (UnknownLocaleError, ValueError, TypeError) as e:
            logger.warning(f"Unbekannte Locale '{locale}', verwende englische Namen: {e}")
            return dict(CURRENCY_NAMES)

        result = {}
        for code, name in CURRENCY_NAMES.items():
            localized = get_currency_name(code, locale=babel_locale)
            result[code] = localized if localized and localized != code else name
        return result

    @staticmethod
    def get_position_options() -> Dict[str, str]:
        return dict(POSITION_OPTIONS)

    def get_config(self) -> Dict[str, Any]:
        """
        Schnappschuss der aktuellen Einstellungen inkl. aufgelöstem Symbol,
        z.B. zur Übergabe an den Client (JSON-serialisierbar).
        """
        return {
            "currency_code": self._config.currency_code,
            "symbol": self.get_symbol(),
            "symbol_position": self._config.symbol_position.value,
            "decimal_places": self._config.decimal_places,
            "thousand_separator": self._config.thousand_separator,
            "decimal_separator": self._config.decimal_separator,
        }

    def __repr__(self) -> str:
        return f"CurrencyFormatter({self._config!r})"


def _apply_symbol_position(formatted_number: str, symbol: str, position: Any) -> str:
    key = position.value if isinstance(position, Enum) else position
    layout = _SYMBOL_LAYOUTS.get(key, "{symbol}{number}") if isinstance(key, str) else "{symbol}{number}"
    return layout.format(symbol=symbol, number=formatted_number)
