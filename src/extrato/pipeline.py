from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from rich.console import Console
from rich.logging import RichHandler

from .base import Content
from .config import get_settings
from .dispatcher import StatementParser
from .errors import StatementParserError
from .models import AccountProduct, BankCode, ParseOptions, StatementFormat


def _read_content(path: Path) -> Tuple[Content, Optional[StatementFormat]]:
    # .txt = texto ya extraído del PDF (sin magic que detectar); el resto se pasa como bytes
    if path.suffix.lower() == ".txt":
        return path.read_text(encoding="utf-8"), StatementFormat.PDF
    return path.read_bytes(), None


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Normalizador de extractos bancarios (OFX / PDF)")
    parser.add_argument("file", help="Ruta al extracto (.ofx, .pdf o .txt con el texto del PDF)")
    parser.add_argument("--bank", required=True, choices=[b.value for b in BankCode if b is not BankCode.UNKNOWN],
                        help="Código COMPE del banco (p.ej. 368 = Carrefour)")
    parser.add_argument("--product", required=True,
                        choices=[p.value for p in AccountProduct if p is not AccountProduct.UNKNOWN])
    parser.add_argument("--format", default=None, choices=["ofx", "pdf"], help="Forzar formato (opcional)")
    parser.add_argument("--out", default="", help="Ruta de salida JSON (opcional)")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )

    console = Console(stderr=True)

    path = Path(args.file)
    if not path.exists():
        console.print(f"No existe el archivo: {path}", style="bold red")
        return 1
    if path.stat().st_size > settings.max_content_bytes:
        console.print(f"Archivo demasiado grande ({path.stat().st_size} bytes)", style="bold red")
        return 1

    console.print(f"Procesando: {path}", style="bold")

    content, implied_format = _read_content(path)
    options = ParseOptions(
        format=StatementFormat(args.format) if args.format else implied_format,
        bank_code=BankCode(args.bank),
        product_type=AccountProduct(args.product),
        file_name=path.name,
        debug=args.debug,
    )

    try:
        result = StatementParser().parse(content, options)
    except StatementParserError as exc:
        console.print(f"Error: {exc.message}", style="bold red")
        return 1

    payload = result.model_dump(mode="json")
    rendered = json.dumps(payload, ensure_ascii=False, indent=2)

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(rendered, encoding="utf-8")
        console.print(f"OK -> {out_path}", style="bold green")
    else:
        print(rendered)

    for warning in result.warnings:
        console.print(f"Aviso: {warning}", style="yellow")
    console.print(f"Transacciones detectadas: {len(result.transactions)}", style="bold cyan")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
