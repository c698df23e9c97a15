"""Data-source transport interface used by the collection cycle"""
from abc import ABC, abstractmethod
from typing import Any, Iterator


class Row(ABC):
    """One record returned by a query"""

    @abstractmethod
    def get_property(self, name: str) -> Any:
        """Return the raw property value, or None when the property is absent"""
        pass

    def release(self):
        """Release resources held by the row"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


class ResultSet(ABC):
    """Forward-only iterator over the rows of one query"""

    @abstractmethod
    def __iter__(self) -> Iterator[Row]:
        pass

    def close(self):
        """Release the underlying enumerator"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class Session(ABC):
    """A cycle-scoped connection to the data source"""

    @abstractmethod
    def execute_query(self, spec) -> ResultSet:
        """Execute a query spec, raising QueryError on failure"""
        pass

    @abstractmethod
    def close(self):
        """Release the session"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class Transport(ABC):
    """Factory for data-source sessions"""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def acquire_session(self) -> Session:
        """Open a session, raising SessionError on failure"""
        pass
