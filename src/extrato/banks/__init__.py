from __future__ import annotations

from typing import Iterable, List, Optional

from .base import BankPdfDriver, DriverContext
from .carrefour import CarrefourDriver
from .santander import SantanderDriver


def default_drivers() -> List[BankPdfDriver]:
    """Orden = prioridad: gana el primer driver que acepta el documento."""
    return [CarrefourDriver(), SantanderDriver()]


def first_matching_driver(
    drivers: Iterable[BankPdfDriver],
    text: str,
    file_name: Optional[str] = None,
) -> Optional[BankPdfDriver]:
    for driver in drivers:
        if driver.can_process(text, file_name):
            return driver
    return None


__all__ = [
    "BankPdfDriver",
    "CarrefourDriver",
    "DriverContext",
    "SantanderDriver",
    "default_drivers",
    "first_matching_driver",
]
