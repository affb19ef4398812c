from __future__ import annotations

import io
import logging
from typing import Iterable, List, Optional, Tuple

import pdfplumber

from .banks import BankPdfDriver, DriverContext, default_drivers, first_matching_driver
from .base import Content, StatementExtractor
from .detect import is_pdf
from .errors import ParseError
from .models import AccountInfo, BankCode, ParseOptions, ParseResult, StatementFormat


logger = logging.getLogger(__name__)


WARN_TEXT_UNAVAILABLE = "No se pudo extraer el texto del PDF"
WARN_NO_DRIVER_RAN = "Ningún driver PDF procesó el archivo"
WARN_NO_DRIVER_MATCHED = "Ningún driver PDF reconoció el contenido del archivo"


class PdfExtractor(StatementExtractor):
    """
    Despacho en dos niveles:
    1. el dispatcher elige este extractor para el formato PDF
    2. acá se prueban los drivers por banco en orden; gana el primero que acepta
    """

    format = StatementFormat.PDF

    def __init__(self, drivers: Optional[Iterable[BankPdfDriver]] = None):
        self._drivers: List[BankPdfDriver] = list(drivers) if drivers is not None else default_drivers()

    @property
    def drivers(self) -> Tuple[BankPdfDriver, ...]:
        return tuple(self._drivers)

    def register_driver(self, driver: BankPdfDriver, index: Optional[int] = None) -> None:
        """Agrega un driver; sin index va al final (menor prioridad)."""
        if not isinstance(driver, BankPdfDriver):
            raise TypeError(f"El driver debe heredar de BankPdfDriver, se recibió {driver!r}")
        if index is None:
            self._drivers.append(driver)
        else:
            self._drivers.insert(index, driver)

    def can_parse(self, content: Content) -> bool:
        # un str sin '%PDF' es texto ya extraído del PDF por quien llama
        if isinstance(content, str):
            return is_pdf(content) or bool(content.strip())
        return is_pdf(content)

    def select_driver(self, text: str, file_name: Optional[str] = None) -> Optional[BankPdfDriver]:
        return first_matching_driver(self._drivers, text, file_name)

    def extract_text(self, content: Content) -> Optional[str]:
        if isinstance(content, str) and not is_pdf(content):
            return content

        data = content.encode("latin-1", errors="replace") if isinstance(content, str) else bytes(content)
        try:
            with pdfplumber.open(io.BytesIO(data)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            logger.warning("pdfplumber no pudo leer el PDF: %s", exc)
            return None

        text = "\n".join(pages)
        return text if text.strip() else None

    def parse(self, content: Content, options: ParseOptions) -> ParseResult:
        log = logger.info if options.debug else logger.debug

        text = self.extract_text(content)
        if text is None:
            return self._fallback([WARN_TEXT_UNAVAILABLE, WARN_NO_DRIVER_RAN])

        driver = self.select_driver(text, options.file_name)
        if driver is None:
            log("Sin driver para %s", options.file_name or "<sin nombre>")
            return self._fallback([WARN_NO_DRIVER_MATCHED])

        bank_code, bank_name = driver.bank_identity()
        log("Driver elegido: %s", driver)

        context = DriverContext(file_name=options.file_name, product_type=options.product_type)
        try:
            transactions = driver.extract_transactions(text, context)
        except Exception as exc:
            logger.debug("Falla inesperada en %s", driver, exc_info=True)
            raise ParseError(
                f"Error al procesar el PDF con el driver {bank_name}: {exc}",
                details={"bank_code": bank_code.value, "file_name": options.file_name},
            ) from exc

        warnings: List[str] = []
        if not transactions:
            warnings.append(f"El driver {bank_name} no encontró transacciones en el documento")
        if options.bank_code and options.bank_code != bank_code:
            warnings.append(
                f"El banco informado ({options.bank_code.value}) no coincide con el detectado ({bank_code.value})"
            )
        for w in warnings:
            logger.warning(w)

        log("Transacciones detectadas: %d", len(transactions))
        return ParseResult(
            format=StatementFormat.PDF,
            account=AccountInfo(
                bank_code=bank_code,
                bank_name=bank_name,
                product_type=options.product_type,
            ),
            transactions=transactions,
            warnings=warnings,
        )

    def _fallback(self, warnings: List[str]) -> ParseResult:
        for w in warnings:
            logger.warning(w)
        return ParseResult(
            format=StatementFormat.PDF,
            account=AccountInfo(bank_code=BankCode.UNKNOWN),
            transactions=[],
            warnings=list(warnings),
        )
