import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import Config
from .currency_formatter import CurrencyFormatter
from .utils import log_exceptions

SAMPLE_AMOUNTS = (0, 999, 1234.56, -500, 1500000, 2750000000, "$1,234.56", None)


def build_preview_table(formatter: CurrencyFormatter) -> Table:
    """
    Baut eine rich-Tabelle mit Beispielwerten aller Formatierungsarten.
    """
    cfg = formatter.get_config()
    table = Table(title=f"{cfg['currency_code']} ({cfg['symbol']}, {cfg['symbol_position']})")
    for column in ("Eingabe", "format", "format_number", "format_compact", "format_to_k"):
        table.add_column(column)

    for amount in SAMPLE_AMOUNTS:
        with log_exceptions(f"Fehler beim Formatieren von {amount!r}"):
            table.add_row(
                repr(amount),
                formatter.format(amount),
                formatter.format_number(amount),
                formatter.format_compact(amount),
                formatter.format_to_k(amount),
            )
    return table


def main(argv: Optional[List[str]] = None) -> None:
    """
    Einstiegspunkt: zeigt, wie Beträge mit der konfigurierten Währung dargestellt werden.
    Optionales Argument: Pfad zur YAML-Konfigurationsdatei.
    """
    args = sys.argv[1:] if argv is None else argv
    config_path: Optional[Path] = Path(args[0]) if args else None

    config = Config(config_path)
    formatter = config.formatter()
    logger.info(f"Vorschau für {formatter.config.currency_code}")

    Console().print(build_preview_table(formatter))


if __name__ == "__main__":
    main()
