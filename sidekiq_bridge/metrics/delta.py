"""Delta de un contador acumulado entre dos ticks consecutivos."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def compute_delta(current: Optional[int], previous: Optional[int]) -> Optional[int]:
    """Diferencia entre dos observaciones del contador.

    Returns:
        ``current - previous``, o None si falta alguna de las dos o si el
        contador retrocedió (reset de Redis, clave borrada).
    """
    if current is None or previous is None:
        return None

    if current < previous:
        logger.warning(
            "[DELTA] Counter went backwards (previous=%d current=%d), treating as reset",
            previous, current,
        )
        return None

    return current - previous


def advance(
    previous: Optional[int],
    current: Optional[int],
) -> Tuple[Optional[int], Optional[int]]:
    """Calcula el delta y devuelve el nuevo baseline.

    The new baseline is always ``current``, even when no delta is produced,
    so a gap in reads (``current is None``) restarts delta tracking.

    Returns:
        (delta, new_previous)
    """
    return compute_delta(current, previous), current
