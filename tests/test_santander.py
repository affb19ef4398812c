from __future__ import annotations

import datetime
from decimal import Decimal
from pathlib import Path

from extrato.banks import DriverContext, SantanderDriver
from extrato.banks.santander import untangle_amount
from extrato.models import BankCode


FIXTURES = Path(__file__).resolve().parent / "fixtures"

HEADER = ["Conta Corrente", "Movimentação", "Data Descrição Nº Documento Movimentos (R$) Saldo (R$)"]


def _normalize(transactions):
    return [(t.date.isoformat(), t.description, str(t.amount), t.type.value) for t in transactions]


def _statement(*body):
    return "\n".join(["Extrato Consolidado Inteligente", "Resumo - março/2024"] + HEADER + list(body))


def test_detects_santander_by_file_name_and_content():
    driver = SantanderDriver()

    assert driver.can_process("", file_name="santander-extrato.pdf")
    assert driver.can_process("Plataforma de Atendimento Gerencial Santander Van Gogh", file_name="extrato.pdf")
    assert not driver.can_process("Relatório consolidado Banco XPTO", file_name="extrato-desconhecido.pdf")


def test_bank_identity():
    assert SantanderDriver().bank_identity() == (BankCode.SANTANDER, "Santander")


def test_fixture_extraction():
    text = (FIXTURES / "santander-202403.txt").read_text(encoding="utf-8")

    txs = SantanderDriver().extract_transactions(text, DriverContext(file_name="santander-202403.pdf"))

    assert _normalize(txs) == [
        ("2024-03-01", "PIX RECEBIDO JOAO SILVA", "250.00", "credit"),
        ("2024-03-01", "PAGAMENTO DE BOLETO 000123", "-120.50", "debit"),
        ("2024-03-04", "COMPRA CARTAO DEB MC SUPERMERCADO LTDA", "-89.90", "debit"),
        ("2024-03-04", "TARIFA MENSALIDADE PACOTE", "-45.00", "debit"),
        ("2024-03-05", "TED RECEBIDA EMPRESA ABC LTDA", "3200.00", "credit"),
    ]
    assert all(t.metadata == {} for t in txs)


def test_period_from_summary_phrase_without_file_name():
    text = (FIXTURES / "santander-202403.txt").read_text(encoding="utf-8")

    txs = SantanderDriver().extract_transactions(text)

    assert txs[0].date == datetime.date(2024, 3, 1)


def test_dash_on_next_line_is_consumed_as_debit_marker():
    text = _statement(
        "10/03 TRANSFERENCIA ENVIADA",
        "500,00",
        "-",
        "PIX RECEBIDO",
        "75,00",
    )

    txs = SantanderDriver().extract_transactions(text)

    assert _normalize(txs) == [
        ("2024-03-10", "TRANSFERENCIA ENVIADA", "-500.00", "debit"),
        ("2024-03-10", "PIX RECEBIDO", "75.00", "credit"),
    ]


def test_balance_lines_set_date_and_are_not_transactions():
    text = _statement(
        "SALDO EM 05/03 1.000,00",
        "2.000,00",
        "DEPOSITO EM DINHEIRO 300,00",
        "SALDO EM 06/03",
        "1.300,00",
        "-",
        "ESTORNO -35,00",
    )

    txs = SantanderDriver().extract_transactions(text)

    assert _normalize(txs) == [
        ("2024-03-05", "DEPOSITO EM DINHEIRO", "300.00", "credit"),
        ("2024-03-06", "ESTORNO", "-35.00", "debit"),
    ]


def test_lines_before_any_date_are_ignored():
    text = _statement("JUROS 10,00", "01/03 TARIFA 5,00-")

    txs = SantanderDriver().extract_transactions(text)

    assert _normalize(txs) == [("2024-03-01", "TARIFA", "-5.00", "debit")]


def test_numeric_fragments_and_fallback_description():
    text = _statement("02/03", "123456", "40,00-")

    txs = SantanderDriver().extract_transactions(text)

    assert _normalize(txs) == [("2024-03-02", "Movimentação Conta Santander", "-40.00", "debit")]


def test_invalid_date_drops_only_that_entry():
    text = _statement(
        "01/03 PIX VALIDO 5,00",
        "30/02 PAGAMENTO INVALIDO",
        "CONTINUACAO",
        "10,00-",
        "TARIFA SEPARADA 20,00-",
    )

    txs = SantanderDriver().extract_transactions(text)

    # la entrada siguiente sin fecha queda bajo la última fecha válida
    assert _normalize(txs) == [
        ("2024-03-01", "PIX VALIDO", "5.00", "credit"),
        ("2024-03-01", "TARIFA SEPARADA", "-20.00", "debit"),
    ]


def test_invalid_date_before_any_valid_date():
    text = _statement("30/02 PAGAMENTO INVALIDO 10,00-", "SEM DATA 20,00", "01/03 VALIDO 1,00")

    txs = SantanderDriver().extract_transactions(text)

    assert _normalize(txs) == [("2024-03-01", "VALIDO", "1.00", "credit")]


def test_section_stops_at_next_block():
    text = _statement("01/03 PIX 10,00", "Investimentos", "02/03 APLICACAO 999,00-")

    txs = SantanderDriver().extract_transactions(text)

    assert [t.description for t in txs] == ["PIX"]


def test_without_movement_block_returns_empty():
    text = "Extrato Consolidado\nConta Corrente\nResumo\n01/03 PIX 10,00"
    assert SantanderDriver().extract_transactions(text) == []


def test_untangle_glued_columns():
    token = untangle_amount("0012341.234,56")
    assert token.value == Decimal("1234.56")

    token = untangle_amount("PIX-1.234,56")
    assert token.value == Decimal("1234.56")
    assert token.prefix == "PIX"

    token = untangle_amount("10,0020,00")
    assert token.value == Decimal("10.00")
    assert token.prefix == ""
