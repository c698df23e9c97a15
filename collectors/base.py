"""Base collector lifecycle"""
from abc import ABC, abstractmethod
from logging_config import get_logger
from .errors import CollectorError, CycleStatus


logger = get_logger(__name__)


class BaseCollector(ABC):
    """Base class for all metric collectors

    Subclasses build their state in init(), publish in update() and
    release in exit(). The state object is owned by the caller and passed
    back into every call; run_cycle() keeps its failed_cycles,
    consecutive_failures and last_error fields current.
    """

    def __init__(self, config=None, name: str = "", help_text: str = ""):
        self.config = config or {}
        self._name = name
        self._help_text = help_text

    @abstractmethod
    def init(self, registry):
        """Create gauge families on the registry and return a collector state"""
        pass

    @abstractmethod
    def update(self, state):
        """Run one collection cycle, raising CollectorError on failure"""
        pass

    @abstractmethod
    def exit(self, state):
        """Release everything owned by the state"""
        pass

    def run_cycle(self, state) -> CycleStatus:
        """Run one collection cycle and map failures to a status code"""
        try:
            self.update(state)
        except CollectorError as e:
            state.failed_cycles += 1
            state.consecutive_failures += 1
            state.last_error = str(e)
            logger.error("Collection cycle failed", collector=self.name, error=str(e),
                         error_type=type(e).__name__, failed_cycles=state.failed_cycles,
                         consecutive_failures=state.consecutive_failures, event_type="collection_error")
            return e.status
        state.consecutive_failures = 0
        return CycleStatus.OK

    @property
    def name(self) -> str:
        return self._name

    @property
    def help_text(self) -> str:
        return self._help_text or f"{self.name} metrics collector"

    def is_enabled(self) -> bool:
        """Check if this collector is enabled"""
        if hasattr(self.config, 'enabled_collectors'):
            return self.name in self.config.enabled_collectors
        return True
