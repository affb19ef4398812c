from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional


@dataclass
class Section:
    start: int              # índice de la primera línea del cuerpo
    end: int                # índice exclusivo (marcador de fin o fin del documento)
    lines: List[str]        # líneas dentro de la sección (sin encabezado)


def split_lines(text: str) -> List[str]:
    """Líneas recortadas y no vacías, en orden del documento."""
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def find_section(
    lines: List[str],
    is_start: Callable[[List[str], int], bool],
    is_end: Callable[[str], bool],
    header_size: int = 1,
) -> Optional[Section]:
    """
    Encuentra el bloque de movimientos:
    - inicio: después de las `header_size` líneas del encabezado
    - fin: antes del primer marcador de fin, o el final del documento
    """
    header_idx = None
    for i in range(len(lines)):
        if is_start(lines, i):
            header_idx = i
            break

    if header_idx is None:
        return None

    start = min(header_idx + header_size, len(lines))
    end = len(lines)
    for i in range(start, len(lines)):
        if is_end(lines[i]):
            end = i
            break

    return Section(start=start, end=end, lines=lines[start:end])
