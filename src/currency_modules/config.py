import sys
from pathlib import Path
from typing import Any, Dict, Optional, Type

import yaml
from loguru import logger
from pydantic import BaseModel, ValidationError

from pydantic_models.config.currency_config import FormatterConfig
from pydantic_models.config.logging_config import LoggingConfig

from .currency_formatter import CurrencyFormatter
from .errors import ConfigurationError

DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent.parent / ".config" / "currency_config.yaml"


class Config:
    """
    Lädt und prüft die Anwendungs-Konfiguration aus einer YAML-Datei.
    Nutzt statische Pydantic-Modelle für alle Abschnitte (logging, currency).
    Fehlende Abschnitte erhalten die Defaultwerte der Modelle.
    """

    def __init__(self, config_path: Optional[Path] = None):
        # Fallback-Logger für Fehler beim Laden der Config
        logger.remove()
        logger.add(sys.stderr, level="WARNING")
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        try:
            self.raw_config: Dict[str, Any] = self._load_config()
            self.logging = self._parse_section(self.raw_config, "logging", LoggingConfig)
            self._setup_logging()
            logger.debug(f"Lade Konfiguration von {self.config_path}")
        except Exception as e:
            logger.error(f"Fehler beim Laden der Konfiguration: {e}")
            raise

        try:
            self.currency: FormatterConfig = self._parse_section(self.raw_config, "currency", FormatterConfig)
        except ValidationError as e:
            logger.error(f"Ungültiger Abschnitt 'currency': {e}")
            raise ConfigurationError(f"Ungültiger Abschnitt 'currency' in {self.config_path}") from e
        logger.debug("Konfiguration erfolgreich geladen und validiert.")

    def _setup_logging(self) -> None:
        """
        Initialisiert loguru mit den Einstellungen aus der Config-Datei.
        """
        logger.remove()
        log_file = getattr(self.logging, "log_file", None)
        log_level = getattr(self.logging, "log_level", None) or "INFO"
        if log_file:
            logger.add(log_file, level=log_level)
        logger.add(sys.stderr, level=log_level)

    def _load_config(self) -> Dict[str, Any]:
        """
        Lädt die YAML-Konfigurationsdatei. Eine leere Datei ergibt ein leeres Dict.
        """
        with open(self.config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _parse_section(self, config: Dict[str, Any], section: str, model: Type[BaseModel]) -> Any:
        """
        Parst einen Abschnitt der Config mit dem passenden Pydantic-Modell.
        """
        data = config.get(section) or {}
        logger.debug(f"Parsiere Abschnitt '{section}': {data}")
        return model(**data)

    def formatter(self) -> CurrencyFormatter:
        """
        Gibt einen neuen Formatierer mit der Währungs-Konfiguration der Anwendung zurück.
        Jeder Aufruf liefert eine eigene Instanz.
        """
        return CurrencyFormatter(self.currency)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Allgemeiner Getter für beliebige Felder (dot-notation für verschachtelte Felder).
        """
        parts = key.split(".")
        val = self.raw_config
        for part in parts:
            if isinstance(val, dict) and part in val:
                val = val[part]
            else:
                logger.debug(f"Feld '{key}' nicht gefunden, Rückgabe Default: {default}")
                return default
        return val
