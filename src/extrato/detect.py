from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from .banks import BankPdfDriver, default_drivers, first_matching_driver
from .config import get_settings
from .models import BankCode, StatementFormat


PDF_MAGIC = b"%PDF"

_OFX_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (r"<OFX>", r"OFXHEADER:", r"<BANKMSGSRSV1>", r"<STMTTRNRS>")
]

_BYTES_TYPES = (bytes, bytearray, memoryview)


def _sample(content: Any, size: int) -> str:
    """Solo el comienzo del documento: no hace falta leer todo para decidir."""
    if isinstance(content, str):
        return content[:size]
    return bytes(content[:size]).decode("utf-8", errors="ignore")


def is_ofx(content: Any, sample_size: Optional[int] = None) -> bool:
    if not isinstance(content, (str,) + _BYTES_TYPES):
        return False
    size = sample_size or get_settings().detection_sample_size
    text = _sample(content, size)
    return any(p.search(text) for p in _OFX_PATTERNS)


def is_pdf(content: Any) -> bool:
    if isinstance(content, str):
        return content.startswith("%PDF")
    if isinstance(content, _BYTES_TYPES):
        # comparación directa de los 4 primeros bytes, sin tolerar BOM ni espacios
        return bytes(content[:4]) == PDF_MAGIC
    return False


def detect_format(content: Any, sample_size: Optional[int] = None) -> StatementFormat:
    """
    Clasifica el contenido (texto o bytes). Nunca lanza.
    OFX se revisa antes que PDF.
    """
    if is_ofx(content, sample_size):
        return StatementFormat.OFX
    if is_pdf(content):
        return StatementFormat.PDF
    return StatementFormat.UNKNOWN


def detect_bank(
    text: str,
    file_name: Optional[str] = None,
    drivers: Optional[Iterable[BankPdfDriver]] = None,
) -> BankCode:
    """Banco del primer driver (en orden de registro) que acepta el texto."""
    driver = first_matching_driver(drivers if drivers is not None else default_drivers(), text, file_name)
    return driver.bank_code if driver else BankCode.UNKNOWN
