"""Windows service collector

Publishes one info series per service plus one-hot state, start mode and
status series, read from the Win32_Service WMI class.
"""
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional
from .base import BaseCollector
from .decoder import decode_row
from .encoder import encode_onehot, SERVICE_STATES, SERVICE_START_MODES, SERVICE_STATUSES
from .errors import (
    CollectorInitError,
    NotOperationalError,
    QueryError,
    SessionError,
    TransportError,
)
from .query import QuerySpec, build_query_spec, build_scope_clause, identity
from metrics.models import MetricType
from metrics.registry import GaugeFamily, GaugeRegistry, StagedWrites
from logging_config import get_logger


logger = get_logger(__name__)

NAMESPACE = "windows"
SUBSYSTEM = "service"
SERVICE_CLASS = "Win32_Service"

# Properties forming the info label tuple, in label order
INFO_PROPERTIES = ("Name", "DisplayName", "ProcessID", "StartName")
INFO_LABELS = ("name", "display_name", "process_id", "run_as")


@dataclass
class ServiceGauges:
    """Gauge family handles owned by the collector"""
    information: GaugeFamily
    state: GaugeFamily
    start_mode: GaugeFamily
    status: GaugeFamily


@dataclass
class CycleStats:
    """Outcome of the last successful cycle"""
    timestamp: float = 0.0
    rows: int = 0
    observations: int = 0
    duration: float = 0.0


@dataclass
class CollectorState:
    """Per-collector state created by init and released by exit"""
    registry: Optional[GaugeRegistry] = None
    gauges: Optional[ServiceGauges] = None
    specs: List[QuerySpec] = field(default_factory=list)
    operational: bool = False
    last_cycle: CycleStats = field(default_factory=CycleStats)
    failed_cycles: int = 0
    consecutive_failures: int = 0
    last_error: Optional[str] = None


class WindowsServiceCollector(BaseCollector):
    """Collect Windows service information, state, start mode and status"""

    def __init__(self, transport, config=None, clock: Callable[[], float] = time.time):
        super().__init__(config, "service", "Windows service state metrics")
        self.transport = transport
        self.clock = clock

    def _scope_filter(self) -> Optional[str]:
        include = getattr(self.config, "service_include", None)
        exclude = getattr(self.config, "service_exclude", None)
        return build_scope_clause(include, exclude)

    def init(self, registry: GaugeRegistry) -> CollectorState:
        state = CollectorState(registry=registry)

        try:
            information = registry.create_gauge_family(
                NAMESPACE, SUBSYSTEM, "info",
                "A metric for Windows Service information",
                INFO_LABELS
            )
            state_gauge = registry.create_gauge_family(
                NAMESPACE, SUBSYSTEM, "state",
                "A state of the service",
                ("name", "state")
            )
            start_mode = registry.create_gauge_family(
                NAMESPACE, SUBSYSTEM, "start_mode",
                "A start mode of the service",
                ("name", "start_mode")
            )
            status = registry.create_gauge_family(
                NAMESPACE, SUBSYSTEM, "status",
                "A status of the service",
                ("name", "status")
            )
        except ValueError as e:
            raise CollectorInitError(f"Failed to create gauge families: {e}") from e

        state.gauges = ServiceGauges(information, state_gauge, start_mode, status)

        spec = build_query_spec(
            information,
            MetricType.GAUGE,
            SERVICE_CLASS,
            getattr(self.config, "service_where", None),
            INFO_PROPERTIES,
            identity,
            scope_filter=self._scope_filter()
        )
        spec.validate()
        state.specs.append(spec)

        state.operational = True
        logger.info("Collector initialized", collector=self.name, query=spec.to_wql(),
                    transport=self.transport.name, event_type="collector_init")
        return state

    def exit(self, state: CollectorState):
        state.operational = False
        state.specs = []
        state.gauges = None
        state.registry = None
        logger.info("Collector stopped", collector=self.name, event_type="collector_exit")

    def update(self, state: CollectorState):
        if not state.operational:
            raise NotOperationalError("windows_service collector not yet in operational state")

        started = time.monotonic()
        staged = StagedWrites()
        rows = 0

        try:
            session = self.transport.acquire_session()
        except TransportError:
            raise
        except Exception as e:
            raise SessionError(f"Failed to acquire session on {self.transport.name}: {e}") from e

        with session:
            timestamp = self.clock()
            for spec in state.specs:
                rows += self._collect_spec(session, spec, state.gauges, timestamp, staged)

        observations = staged.commit(state.registry)
        state.last_cycle = CycleStats(
            timestamp=timestamp,
            rows=rows,
            observations=observations,
            duration=time.monotonic() - started
        )
        logger.debug("Collected service metrics", collector=self.name, rows=rows,
                     observations=observations, event_type="collection_complete")

    def _collect_spec(self, session, spec: QuerySpec, gauges: ServiceGauges,
                      timestamp: float, sink) -> int:
        """Execute one spec and stage its observations, returning the row count"""
        try:
            result = session.execute_query(spec)
        except TransportError:
            raise
        except Exception as e:
            raise QueryError(f"Failed to execute '{spec.to_wql()}': {e}") from e

        rows = 0
        try:
            with result:
                for row in result:
                    with row:
                        self._emit_row(row, spec, gauges, timestamp, sink)
                    rows += 1
        except TransportError:
            raise
        except Exception as e:
            raise QueryError(f"Failed to read results of '{spec.to_wql()}' after {rows} rows: {e}") from e
        return rows

    def _emit_row(self, row, spec: QuerySpec, gauges: ServiceGauges, timestamp: float, sink):
        values = decode_row(row, spec.label_keys + ("State", "StartMode", "Status"))
        service_name = values["Name"]

        sink.set_gauge(spec.target_metric, timestamp, spec.value_transform(1.0),
                       tuple(values[key] for key in spec.label_keys))

        encode_onehot(service_name, values["State"], SERVICE_STATES,
                      timestamp, gauges.state, sink)
        encode_onehot(service_name, values["StartMode"], SERVICE_START_MODES,
                      timestamp, gauges.start_mode, sink)
        encode_onehot(service_name, values["Status"], SERVICE_STATUSES,
                      timestamp, gauges.status, sink)
