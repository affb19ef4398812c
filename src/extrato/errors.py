"""
Jerarquía de excepciones del parser de extractos.

- ValidationError: opciones obligatorias ausentes o con valor centinela.
- UnsupportedFormatError: formato no detectado, no registrado o rechazado.
- ParseError: falla inesperada a mitad de la extracción.

"Ningún driver reconoció el archivo" NO es un error: se informa en warnings.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class StatementParserError(Exception):
    """Base de todos los errores del paquete."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(StatementParserError):
    """Faltan opciones obligatorias (bank_code, product_type, format)."""


class UnsupportedFormatError(StatementParserError):
    def __init__(
        self,
        message: str = "Formato de extracto no soportado o no detectado",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)


class ParseError(StatementParserError):
    """Error inesperado durante la extracción (la causa queda en __cause__)."""
