"""Construcción del lote de series de un tick."""

from __future__ import annotations

import time
from typing import Callable, List, Optional, Sequence

from .models import Metric, Series

ENQUEUED_METRIC = "sidekiq.enqueued"
PROCESSED_METRIC = "sidekiq.processed"


def build_series(
    enqueued: Optional[int],
    processed_delta: Optional[int],
    tags: Sequence[str],
    clock: Callable[[], float] = time.time,
) -> Series:
    """Arma el Series con 0, 1 o 2 gauges.

    Args:
        enqueued: Backlog total, None si no hubo lectura
        processed_delta: Jobs procesados desde el tick anterior, None si no aplica
        tags: Tags fijos del proceso, copiados en cada métrica
        clock: Fuente de tiempo (epoch segundos)
    """
    series = Series()
    tag_list: List[str] = list(tags)

    if enqueued is not None:
        series.push(Metric.gauge(ENQUEUED_METRIC, enqueued, tag_list, clock=clock))

    if processed_delta is not None:
        series.push(Metric.gauge(PROCESSED_METRIC, processed_delta, tag_list, clock=clock))

    return series
