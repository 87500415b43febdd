import math
import numbers
import re
from contextlib import contextmanager
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Callable, Dict, Generator

from loguru import logger


@contextmanager
def log_exceptions(msg: str, continue_on_error: bool = True) -> Generator[None, None, None]:
    """
    Context-Manager für das Logging von Ausnahmen.
    Loggt eine Fehlermeldung und entscheidet, ob die Exception weitergereicht wird.

    Args:
        msg (str): Nachricht für das Logging im Fehlerfall.
        continue_on_error (bool): Bei False wird die Exception erneut ausgelöst, ansonsten nur geloggt.

    Beispiel:
        with log_exceptions("Fehler beim Formatieren"):
            formatter.format(value)
    """
    try:
        yield
    except Exception as e:
        logger.error(f"{msg}: {e}")
        if not continue_on_error:
            raise


# Alles ausser ASCII-Ziffern, Punkt und Minus wird aus Betrags-Strings entfernt.
_AMOUNT_STRIP_RE = re.compile(r"[^0-9.\-]")
# Längster gültiger Float-Präfix des bereinigten Strings.
_FLOAT_PREFIX_RE = re.compile(r"-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


def _rounding_context(decimals: int) -> Context:
    # 309 Vorkommastellen reichen für jeden endlichen Float.
    return Context(prec=320 + decimals, rounding=ROUND_HALF_UP)


def _parse_amount_str(s: str) -> float:
    if s == "":
        return 0.0
    match = _FLOAT_PREFIX_RE.match(_AMOUNT_STRIP_RE.sub("", s))
    if not match:
        logger.debug(f"Betrag '{s}' nicht lesbar, verwende 0.0")
        return 0.0
    return _finite_float(match.group(0))


def _finite_float(v: Any) -> float:
    try:
        value = float(v)
    except (OverflowError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


_AMOUNT_CONVERTERS: Dict[type, Callable[[Any], float]] = {
    type(None): lambda _v: 0.0,
    bool: lambda v: float(v),
    int: _finite_float,
    float: _finite_float,
    Decimal: _finite_float,
    str: _parse_amount_str,
}


def normalize_amount(v: Any) -> float:
    """
    Typbasierte Betrags-Normalisierung (None/str/reelle Zahlen -> float).
    Wirft nie: nicht lesbare Eingaben und nicht-numerische Typen ergeben 0.0.

    Beispiel:
        normalize_amount("$1,234.56")  # 1234.56
        normalize_amount("1.2.3")      # 1.2 (längster gültiger Präfix)
    """
    conv = _AMOUNT_CONVERTERS.get(type(v))
    if conv is None:
        # Unterklassen (z.B. numpy.float64 ist eine float-Unterklasse)
        for base, candidate in _AMOUNT_CONVERTERS.items():
            if base is not type(None) and isinstance(v, base):
                conv = candidate
                break
    if conv is None and isinstance(v, numbers.Real):
        # Fraction, numpy.int64 und andere reelle Zahlentypen
        conv = _finite_float
    return conv(v) if conv else 0.0


def number_format(
    value: float,
    decimals: int,
    decimal_separator: str = ".",
    thousand_separator: str = ",",
) -> str:
    """
    Festkomma-Formatierung mit Tausendergruppierung.

    Gerundet wird kaufmännisch (half away from zero) auf Basis der kürzesten
    Dezimaldarstellung des Floats, d.h. 1.005 -> "1.01". Ein Minuszeichen wird
    nur ausgegeben, wenn der gerundete Wert ungleich 0 ist.

    Args:
        value (float): Zu formatierender Wert.
        decimals (int): Anzahl Nachkommastellen (negative Werte gelten als 0).
        decimal_separator (str): Dezimaltrennzeichen.
        thousand_separator (str): Tausendertrennzeichen, darf leer sein.
    """
    decimals = max(0, int(decimals))
    if not math.isfinite(value):
        value = 0.0
    rounded = Decimal(repr(float(value))).quantize(Decimal(1).scaleb(-decimals), context=_rounding_context(decimals))
    integer_part, _, fraction = f"{rounded.copy_abs():.{decimals}f}".partition(".")
    grouped = f"{int(integer_part):,}".replace(",", thousand_separator)
    sign = "-" if rounded < 0 else ""
    if decimals == 0:
        return f"{sign}{grouped}"
    return f"{sign}{grouped}{decimal_separator}{fraction}"
