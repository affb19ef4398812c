"""
Punto de entrada del motor: valida opciones, resuelve el formato y delega
en el extractor registrado para ese formato.

Ejemplo:
    >>> parser = StatementParser()
    >>> result = parser.parse(text, ParseOptions(
    ...     format=StatementFormat.PDF,
    ...     bank_code=BankCode.CARREFOUR,
    ...     product_type=AccountProduct.CREDIT_CARD,
    ... ))
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .banks import BankPdfDriver
from .base import Content, StatementExtractor
from .detect import detect_format
from .errors import UnsupportedFormatError, ValidationError
from .exchange import OfxExtractor
from .models import AccountProduct, BankCode, ParseOptions, ParseResult, StatementFormat
from .pdf import PdfExtractor


logger = logging.getLogger(__name__)


class StatementParser:
    def __init__(self, extractors: Optional[Dict[StatementFormat, StatementExtractor]] = None):
        # Registro {formato: extractor}; se puede extender en tiempo de ejecución
        self._extractors: Dict[StatementFormat, StatementExtractor] = {}
        if extractors is None:
            self.register_extractor(StatementFormat.OFX, OfxExtractor())
            self.register_extractor(StatementFormat.PDF, PdfExtractor())
        else:
            for fmt, extractor in extractors.items():
                self.register_extractor(fmt, extractor)

    def register_extractor(self, fmt: StatementFormat, extractor: StatementExtractor) -> None:
        if fmt is StatementFormat.UNKNOWN:
            raise ValueError("No se puede registrar un extractor para el formato 'unknown'")
        if not isinstance(extractor, StatementExtractor):
            raise TypeError(f"El extractor debe heredar de StatementExtractor, se recibió {extractor!r}")
        self._extractors[fmt] = extractor

    def register_driver(self, driver: BankPdfDriver, index: Optional[int] = None) -> None:
        """Agrega un driver de banco al extractor PDF registrado."""
        extractor = self._extractors.get(StatementFormat.PDF)
        if not isinstance(extractor, PdfExtractor):
            raise UnsupportedFormatError("No hay un extractor PDF que acepte drivers por banco")
        extractor.register_driver(driver, index)

    def get_registered_formats(self) -> List[StatementFormat]:
        return list(self._extractors.keys())

    def parse(self, content: Content, options: Optional[ParseOptions] = None) -> ParseResult:
        options = options or ParseOptions()
        # antes de cualquier extracción
        self._ensure_required_options(options)

        fmt = options.format or detect_format(content)
        log = logger.info if options.debug else logger.debug
        log("Formato resuelto: %s (declarado: %s)", fmt.value, options.format)

        extractor = self._extractors.get(fmt)
        if fmt is StatementFormat.UNKNOWN or extractor is None:
            raise UnsupportedFormatError(
                f"No hay extractor para el formato: {fmt.value}",
                details={"format": fmt.value, "file_name": options.file_name},
            )

        if not extractor.can_parse(content):
            raise UnsupportedFormatError(
                f"El extractor {fmt.value} no puede procesar el contenido recibido",
                details={"format": fmt.value, "file_name": options.file_name},
            )

        return extractor.parse(content, options)

    def _ensure_required_options(self, options: ParseOptions) -> None:
        if options.format is StatementFormat.UNKNOWN:
            raise ValidationError("ParseOptions.format no puede ser 'unknown'; omítalo para detectarlo")

        if options.bank_code is None or options.bank_code is BankCode.UNKNOWN:
            raise ValidationError("Informe ParseOptions.bank_code con el banco correspondiente")

        if options.product_type is None or options.product_type is AccountProduct.UNKNOWN:
            raise ValidationError("Informe ParseOptions.product_type con el producto correspondiente")
