from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from extrato.pipeline import main


FIXTURES = Path(__file__).resolve().parent / "fixtures"


def test_cli_writes_json_for_extracted_pdf_text(tmp_path):
    src = tmp_path / "carrefour-202407.txt"
    shutil.copy(FIXTURES / "carrefour-202407.txt", src)
    out = tmp_path / "salida" / "carrefour.json"

    code = main([str(src), "--bank", "368", "--product", "credit_card", "--out", str(out)])

    assert code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["format"] == "pdf"
    assert payload["account"]["bank_code"] == "368"
    assert len(payload["transactions"]) == 5

    first = payload["transactions"][0]
    assert first["date"] == "2024-07-10"
    assert first["type"] == "credit"
    assert first["currency"] == "BRL"
    assert first["metadata"] == {"card_last_four": "7890", "due_date": "2024-08-10"}


def test_cli_txt_without_known_bank_degrades(tmp_path, capsys):
    src = tmp_path / "extrato.txt"
    src.write_text("Relatório mensal do banco XPTO\n01/03 ALGO 10,00", encoding="utf-8")

    code = main([str(src), "--bank", "033", "--product", "checking"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["format"] == "pdf"
    assert payload["transactions"] == []
    assert payload["account"]["bank_code"] == "000"


def test_cli_prints_ofx_result(capsys):
    code = main([str(FIXTURES / "nubank-conta-corrente.ofx"), "--bank", "260", "--product", "checking"])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["format"] == "ofx"
    assert [t["transaction_id"] for t in payload["transactions"]] == ["001", "002", "003"]


def test_cli_reports_unsupported_content(tmp_path):
    src = tmp_path / "extrato.bin"
    src.write_bytes(b"\x00\x01 nada que ver")

    assert main([str(src), "--bank", "033", "--product", "checking"]) == 1


def test_cli_missing_file(tmp_path):
    assert main([str(tmp_path / "no-existe.pdf"), "--bank", "033", "--product", "checking"]) == 1


def test_cli_rejects_unknown_bank_code():
    with pytest.raises(SystemExit):
        main([str(FIXTURES / "nubank-conta-corrente.ofx"), "--bank", "000", "--product", "checking"])
