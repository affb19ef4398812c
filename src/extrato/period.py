from __future__ import annotations

import datetime
import logging
import re
import unicodedata
from dataclasses import dataclass
from re import Pattern
from typing import Optional, Sequence


logger = logging.getLogger(__name__)


MONTHS = {
    "janeiro": 1,
    "fevereiro": 2,
    "marco": 3,
    "abril": 4,
    "maio": 5,
    "junho": 6,
    "julho": 7,
    "agosto": 8,
    "setembro": 9,
    "outubro": 10,
    "novembro": 11,
    "dezembro": 12,
}

_FILE_PERIOD_RE = re.compile(r"((?:19|20)\d{2})(0[1-9]|1[0-2])")
_DUE_DATE_RE = re.compile(r"vencimento\D{0,40}?(\d{2})/(\d{2})/(\d{4})", re.IGNORECASE)
_FULL_DATE_RE = re.compile(r"(\d{2})/(\d{2})/(\d{4})")
_YEAR_RE = re.compile(r"\b(20\d{2})\b")


@dataclass(frozen=True)
class StatementPeriod:
    """Año/mes del extracto. Se resuelve una vez por documento."""

    year: int
    month: Optional[int] = None

    def date_for(self, day: int, month: int) -> Optional[datetime.date]:
        """
        Arma la fecha de un DD/MM del cuerpo.
        Si el mes de la transacción es mayor que el del extracto, es del año anterior
        (compras de diciembre en una factura que cierra en enero).
        """
        year = self.year
        if self.month and month > self.month:
            year -= 1
        try:
            return datetime.date(year, month, day)
        except ValueError:
            return None


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def month_from_name(name: str) -> Optional[int]:
    return MONTHS.get(strip_accents(name.strip().lower()))


def find_due_date(text: str, labeled_only: bool = False) -> Optional[datetime.date]:
    """
    Fecha de vencimiento: primero 'Vencimento dd/mm/aaaa'; si no hay etiqueta,
    la primera fecha completa del texto (salvo labeled_only).
    """
    candidates = [_DUE_DATE_RE.search(text)]
    if not labeled_only:
        candidates.append(_FULL_DATE_RE.search(text))

    for m in candidates:
        if not m:
            continue
        try:
            return datetime.date(int(m.group(3)), int(m.group(2)), int(m.group(1)))
        except ValueError:
            continue
    return None


def resolve_statement_period(
    text: str,
    year: Optional[int] = None,
    month: Optional[int] = None,
    file_name: Optional[str] = None,
    period_patterns: Sequence[Pattern[str]] = (),
    infer_from_due_date: bool = True,
    today: Optional[datetime.date] = None,
) -> StatementPeriod:
    """
    Prioridad (año y mes por separado, gana la primera fuente útil):
    1. contexto del llamador
    2. YYYYMM en el nombre del archivo
    3. frase de período en el cuerpo (p.ej. 'resumo - março/2024')
    4. vencimiento: mes anterior al del vencimiento
    5. primer año 20xx del texto
    6. año actual
    """
    text = text or ""

    if (year is None or month is None) and file_name:
        m = _FILE_PERIOD_RE.search(file_name)
        if m:
            year = year if year is not None else int(m.group(1))
            month = month if month is not None else int(m.group(2))
            logger.debug("Período desde nombre de archivo: %s", m.group(0))

    if year is None or month is None:
        lowered = text.lower()
        for pattern in period_patterns:
            m = pattern.search(lowered)
            if not m:
                continue
            month = month if month is not None else month_from_name(m.group(1))
            year = year if year is not None else int(m.group(2))
            logger.debug("Período desde el cuerpo: %s", m.group(0))
            break

    if (year is None or month is None) and infer_from_due_date:
        due = find_due_date(text)
        if due:
            closing_month = 12 if due.month == 1 else due.month - 1
            closing_year = due.year - 1 if due.month == 1 else due.year
            year = year if year is not None else closing_year
            month = month if month is not None else closing_month
            logger.debug("Período desde vencimiento %s", due.isoformat())

    if year is None:
        m = _YEAR_RE.search(text)
        if m:
            year = int(m.group(1))
        else:
            year = (today or datetime.date.today()).year

    return StatementPeriod(year=year, month=month)
