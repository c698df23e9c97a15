"""Metric data models"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Any
from enum import Enum


class MetricType(Enum):
    """Metric types understood by the gauge registry"""
    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass
class MetricValue:
    """Single metric sample as returned by a registry snapshot"""
    name: str
    value: float
    labels: Dict[str, str]
    help_text: str
    metric_type: MetricType = MetricType.GAUGE
    unit: str = "1"
    timestamp: Optional[float] = None

    def __post_init__(self):
        # Ensure labels is never None
        if self.labels is None:
            self.labels = {}


@dataclass(frozen=True)
class Observation:
    """One gauge update emitted during a collection cycle"""
    metric: Any
    timestamp: float
    value: float
    label_values: Tuple[str, ...]
