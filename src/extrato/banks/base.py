from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from re import Pattern
from typing import List, Optional, Tuple

from ..models import AccountProduct, BankCode, Transaction
from ..period import StatementPeriod, resolve_statement_period


@dataclass
class DriverContext:
    file_name: Optional[str] = None
    statement_year: Optional[int] = None
    statement_month: Optional[int] = None
    product_type: Optional[AccountProduct] = None


class BankPdfDriver(ABC):
    """
    Driver de un banco/producto sobre el texto ya extraído del PDF.

    Cada subclase declara:
    - bank_code / bank_name: identidad fija
    - file_name_markers / content_markers: heurística de can_process (en minúsculas)
    - period_patterns: frases del cuerpo con (nombre_mes, año)
    """

    bank_code: BankCode = BankCode.UNKNOWN
    bank_name: str = ""
    file_name_markers: Tuple[str, ...] = ()
    content_markers: Tuple[str, ...] = ()
    period_patterns: Tuple[Pattern[str], ...] = ()
    infer_period_from_due_date: bool = True

    def can_process(self, text: str, file_name: Optional[str] = None) -> bool:
        name = (file_name or "").lower()
        if any(marker in name for marker in self.file_name_markers):
            return True

        lowered = (text or "").lower()
        return any(marker in lowered for marker in self.content_markers)

    def bank_identity(self) -> Tuple[BankCode, str]:
        return self.bank_code, self.bank_name

    def resolve_period(self, text: str, context: DriverContext) -> StatementPeriod:
        return resolve_statement_period(
            text,
            year=context.statement_year,
            month=context.statement_month,
            file_name=context.file_name,
            period_patterns=self.period_patterns,
            infer_from_due_date=self.infer_period_from_due_date,
        )

    @abstractmethod
    def extract_transactions(
        self, text: str, context: Optional[DriverContext] = None
    ) -> List[Transaction]:
        """Nunca lanza por texto mal formado: lo que no se entiende se salta."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bank_code={self.bank_code.value!r})"
