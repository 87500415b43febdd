from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SymbolPosition(str, Enum):
    """Position des Währungssymbols relativ zur Zahl."""
    LEFT = "left"
    RIGHT = "right"
    LEFT_SPACE = "left_space"
    RIGHT_SPACE = "right_space"


class FormatterConfig(BaseModel):
    """
    Konfiguration des CurrencyFormatter.
    Akzeptiert sowohl die Python-Feldnamen als auch die Schlüssel des
    Benutzer-Settings-Datensatzes (currency, currency_position, ...).
    Unveränderlich: Änderungen erzeugen immer eine neue, validierte Instanz.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    currency_code: str = Field(default="USD", alias="currency")
    symbol_position: SymbolPosition = Field(default=SymbolPosition.LEFT, alias="currency_position")
    decimal_places: int = Field(default=2, ge=0, le=4)
    # Je ein Zeichen, das Tausendertrennzeichen darf leer sein.
    thousand_separator: str = Field(default=",", max_length=1)
    decimal_separator: str = Field(default=".", min_length=1, max_length=1)
