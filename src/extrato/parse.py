from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple


# Montos tipo 1.234,56 (miles con punto, decimales con coma)
AMOUNT_PATTERN = r"-?\d{1,3}(?:\.\d{3})*,\d{2}"
AMOUNT_RE = re.compile(AMOUNT_PATTERN)
BARE_AMOUNT_RE = re.compile(rf"^{AMOUNT_PATTERN}$")
SIGNED_AMOUNT_RE = re.compile(r"^(-?)(\d{1,3}(?:\.\d{3})*,\d{2})(-?)$")

# Una transacción inicia con una línea que comienza con fecha DD/MM
DAY_MONTH_RE = re.compile(r"^(\d{2})/(\d{2})(.*)$")

_CURRENCY_RE = re.compile(r"R\$", re.IGNORECASE)
_SPACES_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class AmountToken:
    """Primer monto encontrado dentro de una línea."""

    value: Decimal           # con signo si venía con '-' adelante
    prefix: str              # texto antes del monto (parte de la descripción)
    trailing_minus: bool     # '-' inmediatamente después del monto


def collapse_spaces(text: str) -> str:
    return _SPACES_RE.sub(" ", text or "").strip()


def to_decimal(raw: str) -> Optional[Decimal]:
    """'1.234,56' -> Decimal('1234.56'); '-0,50' -> Decimal('-0.50')"""
    try:
        return Decimal(raw.replace(".", "").replace(",", "."))
    except InvalidOperation:
        return None


def parse_amount(text: str) -> Optional[Decimal]:
    """
    Interpreta una línea que contiene SOLO un monto (se toleran 'R$' y espacios).
    - '1.234,56'  -> 1234.56
    - '1.234,56-' -> -1234.56 (marca al final)
    - '-1.234,56' -> -1234.56
    Devuelve None si la línea tiene otra cosa.
    """
    compact = _SPACES_RE.sub("", _CURRENCY_RE.sub("", text or ""))
    m = SIGNED_AMOUNT_RE.match(compact)
    if not m:
        return None

    value = to_decimal(m.group(2))
    if value is None:
        return None
    if m.group(1) or m.group(3):
        value = -value
    return value


def find_amount(line: str) -> Optional[AmountToken]:
    """Busca el primer monto dentro de una línea con texto alrededor."""
    m = AMOUNT_RE.search(line)
    if not m:
        return None

    value = to_decimal(m.group(0))
    if value is None:
        return None

    tail = line[m.end():].strip()
    return AmountToken(
        value=value,
        prefix=line[: m.start()].strip(),
        trailing_minus=tail.startswith("-"),
    )


def is_bare_amount(line: str) -> bool:
    # saldos / totales sueltos: nunca inician una transacción
    return bool(BARE_AMOUNT_RE.match(line))


def split_day_month(line: str) -> Optional[Tuple[int, int, str]]:
    """'15/03 SUPERMERCADO X' -> (15, 3, 'SUPERMERCADO X')"""
    m = DAY_MONTH_RE.match(line)
    if not m:
        return None
    return int(m.group(1)), int(m.group(2)), m.group(3).strip()
