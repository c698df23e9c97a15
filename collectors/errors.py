"""Collector error taxonomy and cycle status codes"""
from enum import IntEnum


class CycleStatus(IntEnum):
    """Status returned to the scheduler after a collection cycle"""
    OK = 0
    NOT_OPERATIONAL = 1
    TRANSPORT_ERROR = 2


class CollectorError(Exception):
    """Base class for collector failures"""
    status = CycleStatus.TRANSPORT_ERROR


class NotOperationalError(CollectorError):
    """Cycle invoked before a successful init (or after exit)"""
    status = CycleStatus.NOT_OPERATIONAL


class TransportError(CollectorError):
    """The data source could not be reached or queried"""
    status = CycleStatus.TRANSPORT_ERROR


class SessionError(TransportError):
    """Session acquisition failed"""


class QueryError(TransportError):
    """Query execution or result iteration failed"""


class CollectorInitError(CollectorError):
    """Gauge family or query spec construction failed during init"""
    status = CycleStatus.NOT_OPERATIONAL


class QuerySpecError(CollectorInitError):
    """Query spec does not match its target metric"""
