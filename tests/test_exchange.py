from __future__ import annotations

import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from extrato.dispatcher import StatementParser
from extrato.errors import ParseError
from extrato.exchange import WARN_BASIC_EXTRACTOR, OfxExtractor, map_bank_code
from extrato.models import AccountProduct, BankCode, ParseOptions, StatementFormat, TransactionType


FIXTURES = Path(__file__).resolve().parent / "fixtures"


def _options(**overrides):
    values = dict(bank_code=BankCode.NUBANK, product_type=AccountProduct.CHECKING)
    values.update(overrides)
    return ParseOptions(**values)


@pytest.fixture
def nubank_ofx():
    return (FIXTURES / "nubank-conta-corrente.ofx").read_bytes()


def test_account_and_period(nubank_ofx):
    result = StatementParser().parse(nubank_ofx, _options())

    assert result.format == StatementFormat.OFX
    assert result.account.bank_code == BankCode.NUBANK
    assert result.account.branch == "0001"
    assert result.account.account_number == "12345678"
    assert result.account.account_type == "CHECKING"
    assert result.account.product_type == AccountProduct.CHECKING
    assert result.period_start == datetime.date(2023, 10, 1)
    assert result.period_end == datetime.date(2023, 10, 31)
    assert result.closing_balance == Decimal("937.10")
    assert result.warnings == [WARN_BASIC_EXTRACTOR]


def test_transactions_in_document_order(nubank_ofx):
    result = StatementParser().parse(nubank_ofx, _options())

    got = [
        (t.date.isoformat(), t.description, t.amount, t.type, t.transaction_id)
        for t in result.transactions
    ]
    assert got == [
        ("2023-10-15", "Pagamento Loja XYZ", Decimal("-50.00"), TransactionType.DEBIT, "001"),
        ("2023-10-20", "Salário", Decimal("1000.00"), TransactionType.CREDIT, "002"),
        ("2023-10-25", "Tarifa mensal", Decimal("-12.90"), TransactionType.FEE, "003"),
    ]
    assert all(t.currency == "BRL" and t.metadata == {} for t in result.transactions)


def test_can_parse_only_ofx(nubank_ofx):
    extractor = OfxExtractor()

    assert extractor.can_parse(nubank_ofx)
    assert not extractor.can_parse(b"%PDF-1.4")
    assert not extractor.can_parse("texto qualquer")


def test_bank_code_mapping():
    assert map_bank_code("260") == BankCode.NUBANK
    assert map_bank_code(" 033 ") == BankCode.SANTANDER
    assert map_bank_code("999") == BankCode.UNKNOWN


def test_unmapped_bank_id_and_missing_fields():
    text = "\n".join(
        [
            "<OFX>",
            "<BANKID>999",
            "<STMTTRN>",
            "<DTPOSTED>20240105120000[-3:BRT]",
            "<TRNAMT>25.00",
            "<NAME>Deposito",
            "</STMTTRN>",
            "<STMTTRN>",
            "<TRNTYPE>XYZ",
            "<DTPOSTED>20240106",
            "<TRNAMT>-3.50",
            "</STMTTRN>",
            "</OFX>",
        ]
    )

    result = StatementParser().parse(text, _options())

    assert result.account.bank_code == BankCode.UNKNOWN
    assert result.closing_balance is None
    assert result.period_start is None
    assert [(t.description, t.type, t.transaction_id) for t in result.transactions] == [
        ("Deposito", TransactionType.CREDIT, None),
        ("Transação", TransactionType.DEBIT, None),
    ]


def test_without_bank_id_keeps_informed_bank():
    result = StatementParser().parse("<OFX><STMTTRNRS></STMTTRNRS></OFX>", _options(bank_code=BankCode.ITAU))

    assert result.account.bank_code == BankCode.ITAU
    assert result.transactions == []


def test_cp1252_content_is_decoded():
    content = "<OFX>\n<STMTTRN>\n<DTPOSTED>20240105\n<TRNAMT>-9.99\n<MEMO>Padaria São João\n</STMTTRN>\n</OFX>"

    result = StatementParser().parse(content.encode("cp1252"), _options())

    assert result.transactions[0].description == "Padaria São João"


def test_unexpected_failure_is_wrapped(monkeypatch, nubank_ofx):
    def boom(self, block):
        raise RuntimeError("falla")

    monkeypatch.setattr(OfxExtractor, "_transaction", boom)

    with pytest.raises(ParseError) as excinfo:
        StatementParser().parse(nubank_ofx, _options())

    assert isinstance(excinfo.value.__cause__, RuntimeError)


def _single_transaction(trntype, trnamt):
    return "\n".join(
        [
            "<OFX>",
            "<STMTTRN>",
            f"<TRNTYPE>{trntype}",
            "<DTPOSTED>20240110",
            f"<TRNAMT>{trnamt}",
            "<MEMO>Lançamento",
            "</STMTTRN>",
            "</OFX>",
        ]
    )


@pytest.mark.parametrize(
    "trnamt, expected",
    [
        ("1.234,56", Decimal("1234.56")),
        ("-1.234,56", Decimal("-1234.56")),
        ("1,234.56", Decimal("1234.56")),
        ("-12,90", Decimal("-12.90")),
        ("1000.00", Decimal("1000.00")),
    ],
)
def test_amount_with_thousands_separator(trnamt, expected):
    result = StatementParser().parse(_single_transaction("OTHER", trnamt), _options())

    assert result.transactions[0].amount == expected


@pytest.mark.parametrize(
    "trntype, trnamt, expected",
    [
        ("DEBIT", "50.00", TransactionType.CREDIT),
        ("CREDIT", "-50.00", TransactionType.DEBIT),
        ("DEBIT", "-50.00", TransactionType.DEBIT),
        ("XFER", "-50.00", TransactionType.TRANSFER),
        ("INT", "3.10", TransactionType.INTEREST),
    ],
)
def test_debit_credit_follow_the_sign(trntype, trnamt, expected):
    result = StatementParser().parse(_single_transaction(trntype, trnamt), _options())

    assert result.transactions[0].type == expected
