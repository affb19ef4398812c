from __future__ import annotations

import datetime
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..models import BankCode, Transaction
from ..normalize import make_transaction
from ..parse import AmountToken, collapse_spaces, find_amount, is_bare_amount, split_day_month
from ..period import StatementPeriod
from ..segment import find_section, split_lines
from .base import BankPdfDriver, DriverContext


logger = logging.getLogger(__name__)


SECTION_END_PREFIXES = ("Saldos por Período", "Investimentos", "Pacote de Serviços")
HEADER_LINES = ("contacorrente", "movimentação")
HEADER_PREFIXES = ("datadescrição", "salarmovimentação")
FALLBACK_DESCRIPTION = "Movimentação Conta Santander"

_BALANCE_DATE_RE = re.compile(r"^SALDOEM(\d{2})/(\d{2})", re.IGNORECASE)
_DOCUMENT_PREFIX_RE = re.compile(r"^(\d{6})(?=\d)")
_LETTER_DASH_DIGIT_RE = re.compile(r"(?<=[^\W\d_])-(?=\d)")
_GLUED_AMOUNTS_RE = re.compile(r"(,\d{2})(?=\d)")


def _compact(line: str) -> str:
    return re.sub(r"\s+", "", line)


def _is_section_start(lines: List[str], idx: int) -> bool:
    # 'Conta Corrente' / 'Movimentação' / 'Data Descrição ...'
    if lines[idx] != "Conta Corrente" or idx + 2 >= len(lines):
        return False
    return lines[idx + 1].lower() == "movimentação" and _compact(lines[idx + 2]).startswith("DataDescrição")


def _is_section_end(line: str) -> bool:
    return line.startswith(SECTION_END_PREFIXES)


def is_header_line(line: str) -> bool:
    normalized = _compact(line).lower()
    return normalized in HEADER_LINES or normalized.startswith(HEADER_PREFIXES)


def is_balance_label(segment: str) -> bool:
    return _compact(segment).upper().startswith("SALDOEM")


def is_separator(line: str) -> bool:
    return line == "-"


def untangle_amount(line: str) -> Optional[AmountToken]:
    """
    El texto del PDF suele pegar columnas:
    - '0012341.234,56'  documento de 6 dígitos pegado al monto
    - 'PIX-1.234,56'    guion entre letra y número no es signo
    - '10,0020,00'      dos montos pegados
    """
    working = line.strip()
    working = _DOCUMENT_PREFIX_RE.sub("", working)
    working = _LETTER_DASH_DIGIT_RE.sub(" ", working)
    working = _GLUED_AMOUNTS_RE.sub(r"\1 ", working)
    return find_amount(working)


@dataclass
class _OpenEntry:
    date: Optional[datetime.date]       # None = fecha inválida, se descarta al cerrar
    parts: List[str] = field(default_factory=list)


class SantanderDriver(BankPdfDriver):
    """
    Extrato Consolidado Santander, bloque 'Conta Corrente / Movimentação'.

    Particularidades:
    - 'SALDO EM dd/mm' fija la fecha en curso y cierra la entrada abierta
    - varias transacciones del mismo día vienen sin fecha (usan la última vista)
    - el débito se marca con '-' al final, o con un '-' en la línea siguiente
    - los saldos del día aparecen como montos sueltos entre transacciones
    """

    bank_code = BankCode.SANTANDER
    bank_name = "Santander"
    file_name_markers = ("santander",)
    content_markers = (
        "santander van gogh",
        "extrato consolidado",
        "plataforma de atendimento gerencial",
    )
    period_patterns = (
        re.compile(r"resumo\s*[-–]\s*([^\W\d_]+)/(\d{4})"),
        re.compile(r"extrato consolidado(?: inteligente)?\s*([^\W\d_]+)/(\d{4})"),
    )
    # extracto de cuenta corriente: no hay vencimiento del que inferir el mes
    infer_period_from_due_date = False

    def extract_transactions(
        self, text: str, context: Optional[DriverContext] = None
    ) -> List[Transaction]:
        context = context or DriverContext()
        text = text or ""

        section = find_section(split_lines(text), _is_section_start, _is_section_end, header_size=3)
        if section is None or not section.lines:
            return []

        period = self.resolve_period(text, context)

        body = section.lines
        txs: List[Transaction] = []
        last_date: Optional[datetime.date] = None
        entry: Optional[_OpenEntry] = None
        i = 0

        while i < len(body):
            line = body[i]
            next_line = body[i + 1] if i + 1 < len(body) else None

            if is_header_line(line):
                i += 1
                continue

            balance_date = self._balance_date(line, period)
            if balance_date is not None:
                last_date = balance_date
                entry = None
                i += 1
                continue

            head = split_day_month(line)
            if head is not None:
                day, month, rest = head
                date = period.date_for(day, month)
                if date is None:
                    logger.debug("Fecha inválida %02d/%02d, se descarta la entrada", day, month)
                else:
                    last_date = date
                entry = _OpenEntry(date)
                i += 1
                if rest:
                    consumed_next, closed = self._consume(rest, next_line, entry, txs)
                    if consumed_next:
                        i += 1
                    if closed:
                        entry = None
                continue

            if entry is None:
                if last_date is None or is_bare_amount(line) or is_separator(line):
                    i += 1
                    continue
                entry = _OpenEntry(last_date)

            consumed_next, closed = self._consume(line, next_line, entry, txs)
            i += 2 if consumed_next else 1
            if closed:
                entry = None

        return txs

    def _balance_date(self, line: str, period: StatementPeriod) -> Optional[datetime.date]:
        m = _BALANCE_DATE_RE.match(_compact(line))
        if not m:
            return None
        return period.date_for(int(m.group(1)), int(m.group(2)))

    def _consume(
        self,
        segment: str,
        next_line: Optional[str],
        entry: _OpenEntry,
        txs: List[Transaction],
    ) -> Tuple[bool, bool]:
        """
        Agrega un fragmento a la entrada abierta.
        Devuelve (consumió_la_línea_siguiente, cerró_la_entrada).
        """
        if is_separator(segment) or is_balance_label(segment):
            return False, False

        token = untangle_amount(segment)
        if token is None:
            part = collapse_spaces(segment)
            # números sueltos (documento) no son descripción
            if part and not part.isdigit():
                entry.parts.append(part)
            return False, False

        if token.prefix and not token.prefix.isdigit():
            entry.parts.append(token.prefix)

        amount = token.value
        following = next_line.strip() if next_line else None
        consumed_next = False
        if amount >= 0 and (token.trailing_minus or following == "-"):
            amount = -abs(amount)
            consumed_next = following == "-"

        if entry.date is not None:
            txs.append(make_transaction(entry.date, entry.parts, amount, FALLBACK_DESCRIPTION))

        return consumed_next, True
