"""Shared fixtures: an in-memory transport standing in for WMI"""
import pytest

from collectors.errors import QueryError, SessionError
from transport.base import Transport, Session, ResultSet, Row


class FakeRow(Row):
    def __init__(self, properties, log):
        self.properties = properties
        self.log = log

    def get_property(self, name):
        return self.properties.get(name)

    def release(self):
        self.log.append(("release_row", self.properties.get("Name")))


class FakeResultSet(ResultSet):
    def __init__(self, rows, log, fail_after=None, failure=None):
        self.rows = rows
        self.log = log
        self.fail_after = fail_after
        self.failure = failure or QueryError("enumeration failed")

    def __iter__(self):
        for index, properties in enumerate(self.rows):
            if self.fail_after is not None and index >= self.fail_after:
                raise self.failure
            yield FakeRow(properties, self.log)

    def close(self):
        self.log.append(("close_result",))


class FakeSession(Session):
    def __init__(self, transport):
        self.transport = transport

    def execute_query(self, spec):
        self.transport.log.append(("execute", spec.to_wql()))
        if self.transport.fail_query:
            raise QueryError("query rejected")
        return FakeResultSet(self.transport.rows, self.transport.log,
                             self.transport.fail_after, self.transport.failure)

    def close(self):
        self.transport.log.append(("close_session",))


class FakeTransport(Transport):
    """Serves a fixed list of rows (dicts of property name to value)"""

    def __init__(self, rows=None):
        self.rows = rows or []
        self.log = []
        self.fail_session = False
        self.fail_query = False
        self.fail_after = None
        self.failure = None

    @property
    def name(self):
        return "fake"

    def acquire_session(self):
        self.log.append(("acquire_session",))
        if self.fail_session:
            raise SessionError("cannot connect")
        return FakeSession(self)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def service_row():
    return {
        "Name": "MyService",
        "DisplayName": "My Service",
        "ProcessID": 1234,
        "StartName": "LocalSystem",
        "State": "Running",
        "StartMode": "Auto",
        "Status": "OK",
    }
