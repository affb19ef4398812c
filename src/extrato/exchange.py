from __future__ import annotations

import datetime
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from .base import Content, StatementExtractor
from .detect import is_ofx
from .errors import ParseError
from .models import (
    AccountInfo,
    BankCode,
    ParseOptions,
    ParseResult,
    StatementFormat,
    Transaction,
    TransactionType,
)
from .normalize import transaction_type_for
from .parse import to_decimal


logger = logging.getLogger(__name__)


WARN_BASIC_EXTRACTOR = "Extractor OFX básico: solo lectura de tags, sin conciliación de saldos"
FALLBACK_DESCRIPTION = "Transação"

_STMTTRN_RE = re.compile(r"<STMTTRN>(.*?)</STMTTRN>", re.IGNORECASE | re.DOTALL)
_LEDGER_BALANCE_RE = re.compile(r"<LEDGERBAL>.*?<BALAMT>\s*([-+\d.,]+)", re.IGNORECASE | re.DOTALL)

# Tabla cerrada: solo los códigos enumerados en BankCode
_BANK_CODES = {code.value: code for code in BankCode if code is not BankCode.UNKNOWN}

# DEBIT/CREDIT (y los tipos no listados) salen del signo de TRNAMT
_TRNTYPE_MAP = {
    "XFER": TransactionType.TRANSFER,
    "PAYMENT": TransactionType.PAYMENT,
    "ATM": TransactionType.WITHDRAWAL,
    "CASH": TransactionType.WITHDRAWAL,
    "DEP": TransactionType.DEPOSIT,
    "DIRECTDEP": TransactionType.DEPOSIT,
    "FEE": TransactionType.FEE,
    "SRVCHG": TransactionType.FEE,
    "INT": TransactionType.INTEREST,
    "DIV": TransactionType.INTEREST,
    "OTHER": TransactionType.OTHER,
}


def _tag(block: str, name: str) -> Optional[str]:
    """Valor de un tag SGML/XML plano: <NAME>valor"""
    m = re.search(rf"<{name}>\s*([^<\r\n]+)", block, re.IGNORECASE)
    if not m:
        return None
    value = m.group(1).strip()
    return value or None


def map_bank_code(code: str) -> BankCode:
    return _BANK_CODES.get(code.strip(), BankCode.UNKNOWN)


def _ofx_date(raw: Optional[str]) -> Optional[datetime.date]:
    # 20231015 o 20231015120000[-3:BRT]
    if not raw or not re.match(r"^\d{8}", raw):
        return None
    try:
        return datetime.date(int(raw[:4]), int(raw[4:6]), int(raw[6:8]))
    except ValueError:
        return None


def _ofx_amount(raw: Optional[str]) -> Optional[Decimal]:
    if not raw:
        return None
    s = raw.strip()
    # algunos bancos exportan con coma decimal (1.234,56)
    if s.rfind(",") > s.rfind("."):
        return to_decimal(s)
    try:
        return Decimal(s.replace(",", ""))
    except InvalidOperation:
        return None


def _decode(content: Content) -> str:
    if isinstance(content, str):
        return content
    data = bytes(content)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        # CHARSET:1252 es lo habitual en los OFX brasileños
        return data.decode("cp1252", errors="replace")


class OfxExtractor(StatementExtractor):
    """
    Extractor OFX mínimo: lectura de tags planos.
    No maneja multi-moneda ni conciliación de saldo corriente.
    """

    format = StatementFormat.OFX

    def can_parse(self, content: Content) -> bool:
        return is_ofx(content)

    def parse(self, content: Content, options: ParseOptions) -> ParseResult:
        text = _decode(content)
        try:
            return self._parse_text(text, options)
        except Exception as exc:
            raise ParseError(f"Error al procesar el archivo OFX: {exc}") from exc

    def _parse_text(self, text: str, options: ParseOptions) -> ParseResult:
        account = AccountInfo(
            bank_code=options.bank_code or BankCode.UNKNOWN,
            product_type=options.product_type,
        )

        bank_id = _tag(text, "BANKID") or _tag(text, "FID")
        if bank_id:
            account.bank_code = map_bank_code(bank_id)
        account.branch = _tag(text, "BRANCHID")
        account.account_number = _tag(text, "ACCTID")
        account.account_type = _tag(text, "ACCTTYPE")

        transactions: List[Transaction] = []
        for m in _STMTTRN_RE.finditer(text):
            tx = self._transaction(m.group(1))
            if tx is not None:
                transactions.append(tx)

        closing_balance = None
        bal = _LEDGER_BALANCE_RE.search(text)
        if bal:
            closing_balance = _ofx_amount(bal.group(1))

        return ParseResult(
            format=StatementFormat.OFX,
            account=account,
            transactions=transactions,
            closing_balance=closing_balance,
            period_start=_ofx_date(_tag(text, "DTSTART")),
            period_end=_ofx_date(_tag(text, "DTEND")),
            warnings=[WARN_BASIC_EXTRACTOR],
        )

    def _transaction(self, block: str) -> Optional[Transaction]:
        date = _ofx_date(_tag(block, "DTPOSTED"))
        amount = _ofx_amount(_tag(block, "TRNAMT"))
        if date is None or amount is None:
            logger.debug("STMTTRN sin fecha o monto válido, se omite")
            return None

        trntype = (_tag(block, "TRNTYPE") or "").upper()
        tx_type = _TRNTYPE_MAP.get(trntype) or transaction_type_for(amount)

        return Transaction(
            date=date,
            description=_tag(block, "MEMO") or _tag(block, "NAME") or FALLBACK_DESCRIPTION,
            amount=amount,
            type=tx_type,
            transaction_id=_tag(block, "FITID"),
        )
