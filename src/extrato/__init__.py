from .banks import BankPdfDriver, CarrefourDriver, DriverContext, SantanderDriver
from .detect import detect_bank, detect_format
from .dispatcher import StatementParser
from .errors import ParseError, StatementParserError, UnsupportedFormatError, ValidationError
from .models import (
    AccountInfo,
    AccountProduct,
    BankCode,
    ParseOptions,
    ParseResult,
    StatementFormat,
    Transaction,
    TransactionType,
)

__all__ = [
    "AccountInfo",
    "AccountProduct",
    "BankCode",
    "BankPdfDriver",
    "CarrefourDriver",
    "DriverContext",
    "ParseError",
    "ParseOptions",
    "ParseResult",
    "SantanderDriver",
    "StatementFormat",
    "StatementParser",
    "StatementParserError",
    "Transaction",
    "TransactionType",
    "UnsupportedFormatError",
    "ValidationError",
    "detect_bank",
    "detect_format",
]
