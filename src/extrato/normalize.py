from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from .models import Transaction, TransactionType
from .parse import collapse_spaces


def transaction_type_for(amount: Decimal) -> TransactionType:
    """En los drivers PDF el tipo sale solo del signo."""
    return TransactionType.CREDIT if amount >= 0 else TransactionType.DEBIT


def normalize_description(parts: Iterable[str], fallback: str) -> str:
    text = collapse_spaces(" ".join(p for p in parts if p))
    return text or fallback


def make_transaction(
    date: datetime.date,
    parts: Iterable[str],
    amount: Decimal,
    fallback: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> Transaction:
    return Transaction(
        date=date,
        description=normalize_description(parts, fallback),
        amount=amount,
        type=transaction_type_for(amount),
        metadata=dict(metadata or {}),
    )
