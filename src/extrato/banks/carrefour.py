from __future__ import annotations

import datetime
import logging
import re
from typing import Any, Dict, List, Optional

from ..models import BankCode, Transaction
from ..normalize import make_transaction
from ..parse import DAY_MONTH_RE, parse_amount, split_day_month
from ..period import find_due_date
from ..segment import find_section, split_lines
from .base import BankPdfDriver, DriverContext


logger = logging.getLogger(__name__)


CARD_NUMBER_RE = re.compile(r"\d{6}\*{6}(\d{4})")
INSTALLMENT_RE = re.compile(r"\bPARC(?:ELA)?\.?\s*(\d{1,2})\s*/\s*(\d{1,2})\b", re.IGNORECASE)
_CURRENCY_RE = re.compile(r"R\$", re.IGNORECASE)

SECTION_TITLE = "LANÇAMENTOS NO BRASIL"
SECTION_END_PREFIXES = (
    "RESUMO DA FATURA",
    "PREVISÃO PARA FECHAMENTO",
    "SALDOS FUTUROS",
    "LIMITES EM R$",
    "TOTAL DA FATURA",
    "TOTAL DA FATURAR",
)
NOISE_PREFIXES = (
    "DATADESCRIÇÃO",
    "SALDO FATURA ANTERIOR",
    "TOTAL DA FATURA",
    "TOTAL DA FATURAR",
    "Valor total de juros rotativo",
)
FALLBACK_DESCRIPTION = "Transação Cartão Carrefour"


def _is_section_start(lines: List[str], idx: int) -> bool:
    return SECTION_TITLE in lines[idx]


def _is_section_end(line: str) -> bool:
    return line.startswith(SECTION_END_PREFIXES)


def card_suffix(line: str) -> Optional[str]:
    """'123456******7890' -> '7890'"""
    m = CARD_NUMBER_RE.search(line)
    return m.group(1) if m else None


def is_noise(line: str) -> bool:
    return line.startswith(NOISE_PREFIXES) or line in ("-", SECTION_TITLE)


def is_date_head(line: str) -> bool:
    return bool(DAY_MONTH_RE.match(line))


def is_amount_line(line: str) -> bool:
    # un '-' o un 'R$' solos también cortan la descripción (y luego se descartan)
    normalized = _CURRENCY_RE.sub("", line).strip()
    if normalized in ("", "-"):
        return True
    return parse_amount(normalized) is not None


def continues_description(line: str) -> bool:
    return not (
        is_date_head(line)
        or card_suffix(line) is not None
        or is_noise(line)
        or is_amount_line(line)
    )


class CarrefourDriver(BankPdfDriver):
    """
    Factura mensual del Cartão Carrefour (Banco CSF).

    Layout típico dentro de 'LANÇAMENTOS NO BRASIL':
        123456******7890          <- tarjeta (vale para lo que sigue)
        15/03 SUPERMERCADO X      <- fecha + inicio de descripción
        continuación opcional
        150,00                    <- monto: compra (débito)
        980,00-                   <- con '-' al final: pago/estorno (crédito)
    """

    bank_code = BankCode.CARREFOUR
    bank_name = "Carrefour"
    file_name_markers = ("carrefour",)
    content_markers = ("carrefour", "banco csf", "fatura mensal cartão carrefour")

    def extract_transactions(
        self, text: str, context: Optional[DriverContext] = None
    ) -> List[Transaction]:
        context = context or DriverContext()
        text = text or ""

        section = find_section(split_lines(text), _is_section_start, _is_section_end)
        if section is None or not section.lines:
            return []

        period = self.resolve_period(text, context)
        due_date = find_due_date(text, labeled_only=True)

        body = section.lines
        txs: List[Transaction] = []
        card_last_four: Optional[str] = None
        i = 0

        while i < len(body):
            line = body[i]

            suffix = card_suffix(line)
            if suffix:
                card_last_four = suffix
                i += 1
                continue

            if is_noise(line):
                i += 1
                continue

            head = split_day_month(line)
            if head is None:
                i += 1
                continue

            day, month, rest = head
            i += 1

            parts = [rest] if rest else []
            while i < len(body) and continues_description(body[i]):
                parts.append(body[i])
                i += 1

            # la entrada solo se cierra al consumir una línea de monto;
            # si no llega, la línea actual se reprocesa desde arriba
            if i >= len(body) or not is_amount_line(body[i]):
                continue

            signed = parse_amount(body[i])
            i += 1
            if signed is None:
                continue

            date = period.date_for(day, month)
            if date is None:
                logger.debug("Fecha inválida %02d/%02d, se descarta la entrada", day, month)
                continue

            # en la factura el monto sin signo es un gasto
            txs.append(
                make_transaction(
                    date,
                    parts,
                    -signed,
                    FALLBACK_DESCRIPTION,
                    self._metadata(parts, card_last_four, due_date),
                )
            )

        return txs

    def _metadata(
        self,
        parts: List[str],
        card_last_four: Optional[str],
        due_date: Optional[datetime.date],
    ) -> Dict[str, Any]:
        meta: Dict[str, Any] = {}
        if card_last_four:
            meta["card_last_four"] = card_last_four

        m = INSTALLMENT_RE.search(" ".join(parts))
        if m:
            number, total = int(m.group(1)), int(m.group(2))
            if 1 <= number <= total:
                meta["installment_number"] = number
                meta["installment_total"] = total

        if due_date:
            meta["due_date"] = due_date
        return meta
