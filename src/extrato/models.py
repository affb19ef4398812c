from __future__ import annotations

import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .config import get_settings


CENTS = Decimal("0.01")


class StatementFormat(str, Enum):
    OFX = "ofx"
    PDF = "pdf"
    UNKNOWN = "unknown"


class TransactionType(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"
    TRANSFER = "transfer"
    PAYMENT = "payment"
    WITHDRAWAL = "withdrawal"
    DEPOSIT = "deposit"
    FEE = "fee"
    INTEREST = "interest"
    PIX = "pix"
    OTHER = "other"


class AccountProduct(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CREDIT_CARD = "credit_card"
    LOAN = "loan"
    UNKNOWN = "unknown"


class BankCode(str, Enum):
    """Código COMPE de la institución."""

    NUBANK = "260"
    ITAU = "341"
    BRADESCO = "237"
    BANCO_DO_BRASIL = "001"
    SANTANDER = "033"
    CAIXA = "104"
    INTER = "077"
    C6 = "336"
    BTG = "208"
    SICREDI = "748"
    SICOOB = "756"
    CARREFOUR = "368"
    UNKNOWN = "000"


def _quantize(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


class Transaction(BaseModel):
    """
    Transacción normalizada. Inmutable una vez emitida.

    Claves de metadata por driver:
    - Carrefour: card_last_four, installment_number, installment_total, due_date
    - Santander / OFX: ninguna
    """

    model_config = ConfigDict(frozen=True)

    date: datetime.date = Field(..., description="Fecha de la transacción (sin hora)")
    description: str
    amount: Decimal = Field(..., description="Signed amount. Negative=outflow, Positive=inflow")
    type: TransactionType
    currency: str = Field(default_factory=lambda: get_settings().currency)
    metadata: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    transaction_id: Optional[str] = None
    balance: Optional[Decimal] = None

    @field_validator("description")
    @classmethod
    def description_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("La descripción no puede estar vacía")
        return v.strip()

    @field_validator("amount")
    @classmethod
    def amount_two_digits(cls, v: Decimal) -> Decimal:
        return _quantize(v)

    @field_validator("balance")
    @classmethod
    def balance_two_digits(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _quantize(v) if v is not None else None

    @field_validator("metadata")
    @classmethod
    def metadata_read_only(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        # el registro es inmutable, su metadata también
        return MappingProxyType(dict(v))

    @field_serializer("metadata")
    def serialize_metadata(self, v: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(v)


class AccountInfo(BaseModel):
    bank_code: BankCode = BankCode.UNKNOWN
    bank_name: Optional[str] = None
    product_type: Optional[AccountProduct] = None
    # Solo el formato OFX llena estos campos
    branch: Optional[str] = None
    account_number: Optional[str] = None
    account_type: Optional[str] = None
    holder: Optional[str] = None
    document: Optional[str] = None


class ParseResult(BaseModel):
    format: StatementFormat
    account: AccountInfo
    # Orden del documento, nunca se reordena
    transactions: List[Transaction] = Field(default_factory=list)
    opening_balance: Optional[Decimal] = None
    closing_balance: Optional[Decimal] = None
    period_start: Optional[datetime.date] = None
    period_end: Optional[datetime.date] = None
    warnings: List[str] = Field(default_factory=list)


class ParseOptions(BaseModel):
    format: Optional[StatementFormat] = None
    bank_code: Optional[BankCode] = None
    product_type: Optional[AccountProduct] = None
    file_name: Optional[str] = Field(None, description="Se usa en heurísticas, no solo como metadata")
    timezone: str = Field(default_factory=lambda: get_settings().default_timezone)
    debug: bool = False
