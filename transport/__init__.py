"""Data-source transports"""
from .base import Transport, Session, ResultSet, Row
from .wmi import WmiTransport

__all__ = [
    'Transport',
    'Session',
    'ResultSet',
    'Row',
    'WmiTransport'
]
