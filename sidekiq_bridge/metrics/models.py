"""Modelos de métricas - contrato del endpoint de series de Datadog.

Formato de wire:
    {"series": [{"metric": "sidekiq.enqueued",
                 "points": [[1706688000, 12]],
                 "type": "gauge",
                 "tags": ["env:prod"]}]}
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

Point = Tuple[int, int]


class MetricKind(str, Enum):
    """Tipos de métrica soportados."""
    GAUGE = "gauge"


@dataclass
class Metric:
    """Una métrica con un único punto (timestamp de captura, valor)."""

    name: str
    points: List[Point]
    kind: MetricKind = MetricKind.GAUGE
    tags: List[str] = field(default_factory=list)

    @classmethod
    def gauge(
        cls,
        name: str,
        value: int,
        tags: Optional[List[str]] = None,
        clock: Callable[[], float] = time.time,
    ) -> "Metric":
        """Crea un gauge estampado con la hora actual."""
        if value < 0:
            raise ValueError(f"gauge value must be non-negative, got {value}")
        return cls(
            name=name,
            points=[(int(clock()), int(value))],
            kind=MetricKind.GAUGE,
            tags=list(tags or []),
        )

    @property
    def value(self) -> int:
        return self.points[0][1]

    @property
    def timestamp(self) -> int:
        return self.points[0][0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.name,
            "points": [[ts, value] for ts, value in self.points],
            "type": self.kind.value,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Metric":
        return cls(
            name=data["metric"],
            points=[(int(ts), int(value)) for ts, value in data["points"]],
            kind=MetricKind(data.get("type", MetricKind.GAUGE.value)),
            tags=list(data.get("tags", [])),
        )


@dataclass
class Series:
    """Lote de métricas enviado completo en cada entrega."""

    metrics: List[Metric] = field(default_factory=list)

    def push(self, metric: Metric) -> None:
        self.metrics.append(metric)

    def __len__(self) -> int:
        return len(self.metrics)

    def __iter__(self):
        return iter(self.metrics)

    @property
    def names(self) -> List[str]:
        return [m.name for m in self.metrics]

    def to_dict(self) -> Dict[str, Any]:
        return {"series": [m.to_dict() for m in self.metrics]}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, payload: str) -> "Series":
        data = json.loads(payload)
        return cls(metrics=[Metric.from_dict(m) for m in data.get("series", [])])
