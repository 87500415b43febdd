from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, model_validator

SETTINGS_FIELDS = (
    "currency",
    "currency_position",
    "thousand_separator",
    "decimal_separator",
    "decimal_places",
)


class UserCurrencySettings(BaseModel):
    """
    Währungseinstellungen eines Benutzers, wie sie im Settings-Datensatz gespeichert sind.
    Alle Felder sind optional; nicht gesetzte Felder überschreiben nichts.
    Weitere Spalten des Datensatzes (company_name, timezone, ...) werden ignoriert.
    """
    model_config = ConfigDict(extra="ignore")

    currency: Optional[str] = None
    currency_position: Optional[str] = None
    thousand_separator: Optional[str] = None
    decimal_separator: Optional[str] = None
    decimal_places: Optional[int] = None

    @model_validator(mode="before")
    def ensure_str_fields(cls, data):
        """
        Sorgt dafür, dass die Text-Felder als str vorliegen.
        Leere Strings bei decimal_places gelten als nicht gesetzt.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for field in ["currency", "currency_position", "thousand_separator", "decimal_separator"]:
            if field in data and data[field] is not None:
                data[field] = str(data[field])
        if data.get("decimal_places") == "":
            data["decimal_places"] = None
        return data

    def as_patch(self) -> Dict[str, Any]:
        """
        Gibt nur die gesetzten Felder zurück (weder None noch leerer String).
        """
        return {
            key: value
            for key, value in self.model_dump().items()
            if value is not None and value != ""
        }
