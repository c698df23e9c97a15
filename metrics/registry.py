"""Gauge registry backing the collectors' metric families"""
from typing import Dict, List, Sequence, Tuple
from .models import MetricValue, MetricType, Observation
from logging_config import get_logger


logger = get_logger(__name__)


class GaugeFamily:
    """A named gauge with a fixed set of label keys"""

    def __init__(self, namespace: str, subsystem: str, name: str, help_text: str, label_keys: Sequence[str]):
        self.namespace = namespace
        self.subsystem = subsystem
        self.name = name
        self.help_text = help_text
        self.label_keys: Tuple[str, ...] = tuple(label_keys)
        self.metric_type = MetricType.GAUGE
        # label tuple -> (timestamp, value)
        self._series: Dict[Tuple[str, ...], Tuple[float, float]] = {}

    @property
    def full_name(self) -> str:
        return "_".join(part for part in (self.namespace, self.subsystem, self.name) if part)

    @property
    def arity(self) -> int:
        return len(self.label_keys)

    def set(self, timestamp: float, value: float, label_values: Sequence[str]):
        """Set the series identified by label_values, replacing any prior value"""
        label_values = tuple(label_values)
        if len(label_values) != self.arity:
            raise ValueError(
                f"{self.full_name} expects {self.arity} label values, got {len(label_values)}"
            )
        self._series[label_values] = (timestamp, float(value))

    def get(self, label_values: Sequence[str]) -> float:
        """Get the current value of a series (KeyError if never set)"""
        return self._series[tuple(label_values)][1]

    def series(self) -> Dict[Tuple[str, ...], Tuple[float, float]]:
        return dict(self._series)

    def clear(self):
        self._series.clear()

    def __repr__(self) -> str:
        return f"GaugeFamily({self.full_name!r}, labels={list(self.label_keys)})"


class GaugeRegistry:
    """Central registry for all gauge families"""

    def __init__(self):
        self.families: Dict[str, GaugeFamily] = {}

    def create_gauge_family(self, namespace: str, subsystem: str, name: str,
                            help_text: str, label_keys: Sequence[str]) -> GaugeFamily:
        """Create and register a new gauge family"""
        family = GaugeFamily(namespace, subsystem, name, help_text, label_keys)
        if family.full_name in self.families:
            raise ValueError(f"Gauge family already registered: {family.full_name}")

        self.families[family.full_name] = family
        logger.debug("Registered gauge family", metric=family.full_name, labels=list(family.label_keys))
        return family

    def set_gauge(self, handle: GaugeFamily, timestamp: float, value: float, label_values: Sequence[str]) -> Observation:
        """Set a gauge series on a family created by this registry and return the update"""
        if self.families.get(handle.full_name) is not handle:
            raise ValueError(f"Gauge family not registered: {handle.full_name}")
        handle.set(timestamp, value, label_values)
        return Observation(handle, timestamp, float(value), tuple(label_values))

    def get_family(self, full_name: str) -> GaugeFamily:
        """Get family by full name"""
        return self.families.get(full_name)

    def list_families(self) -> List[str]:
        """List all registered family names"""
        return list(self.families.keys())

    def collect(self) -> List[MetricValue]:
        """Snapshot every series of every family"""
        samples = []

        for full_name, family in self.families.items():
            for label_values, (timestamp, value) in family.series().items():
                samples.append(MetricValue(
                    name=full_name,
                    value=value,
                    labels=dict(zip(family.label_keys, label_values)),
                    help_text=family.help_text,
                    metric_type=family.metric_type,
                    timestamp=timestamp
                ))

        return samples


class StagedWrites:
    """Buffers gauge updates for one cycle so they can be published all at once"""

    def __init__(self):
        self.observations: List[Observation] = []

    def set_gauge(self, handle: GaugeFamily, timestamp: float, value: float, label_values: Sequence[str]) -> Observation:
        label_values = tuple(label_values)
        if len(label_values) != handle.arity:
            raise ValueError(
                f"{handle.full_name} expects {handle.arity} label values, got {len(label_values)}"
            )
        obs = Observation(handle, timestamp, float(value), label_values)
        self.observations.append(obs)
        return obs

    def commit(self, registry: GaugeRegistry) -> int:
        """Apply all staged updates to the registry, in emission order"""
        count = len(self.observations)
        for obs in self.observations:
            registry.set_gauge(obs.metric, obs.timestamp, obs.value, obs.label_values)
        self.observations = []
        return count

    def discard(self):
        self.observations = []

    def __len__(self) -> int:
        return len(self.observations)
