from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Union

from .models import ParseOptions, ParseResult, StatementFormat


Content = Union[str, bytes, bytearray]


class StatementExtractor(ABC):
    """Extractor a nivel de formato (OFX, PDF, ...)."""

    format: StatementFormat = StatementFormat.UNKNOWN

    @abstractmethod
    def can_parse(self, content: Content) -> bool:
        """Chequeo sobre el contenido literal, aunque el formato venga declarado."""

    @abstractmethod
    def parse(self, content: Content, options: ParseOptions) -> ParseResult:
        ...
