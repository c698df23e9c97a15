"""WMI transport over COM using pywin32"""
from typing import Iterator
from .base import Transport, Session, ResultSet, Row
from collectors.errors import SessionError, QueryError
from logging_config import get_logger


logger = get_logger(__name__)

WBEM_FLAG_RETURN_IMMEDIATELY = 0x10
WBEM_FLAG_FORWARD_ONLY = 0x20


class WmiRow(Row):
    """Wraps an SWbemObject"""

    def __init__(self, obj, com_error):
        self._obj = obj
        self._com_error = com_error

    def get_property(self, name: str):
        if self._obj is None:
            return None
        try:
            return self._obj.Properties_(name).Value
        except self._com_error:
            # Property not defined on this class
            return None

    def release(self):
        self._obj = None


class WmiResultSet(ResultSet):
    """Wraps an SWbemObjectSet returned by ExecQuery"""

    def __init__(self, object_set, wql: str, com_error):
        self._object_set = object_set
        self._wql = wql
        self._com_error = com_error

    def __iter__(self) -> Iterator[Row]:
        if self._object_set is None:
            return
        try:
            for obj in self._object_set:
                yield WmiRow(obj, self._com_error)
        except QueryError:
            raise
        except Exception as e:
            raise QueryError(f"Failed to enumerate results of '{self._wql}': {e}") from e

    def close(self):
        self._object_set = None


class WmiSession(Session):
    """COM apartment plus a connection to a WMI namespace"""

    def __init__(self, host: str, namespace: str):
        try:
            import pythoncom
            import win32com.client
        except ImportError as e:
            raise SessionError("WMI transport requires pywin32") from e

        self._pythoncom = pythoncom
        self._com_error = pythoncom.com_error
        self._services = None

        try:
            pythoncom.CoInitialize()
        except pythoncom.com_error as e:
            raise SessionError(f"COM initialization failed: {e}") from e

        try:
            locator = win32com.client.Dispatch("WbemScripting.SWbemLocator")
            self._services = locator.ConnectServer(host, namespace)
        except pythoncom.com_error as e:
            pythoncom.CoUninitialize()
            raise SessionError(f"Failed to connect to WMI namespace {namespace} on {host}: {e}") from e

        logger.debug("WMI session opened", host=host, namespace=namespace)

    def execute_query(self, spec) -> ResultSet:
        if self._services is None:
            raise QueryError("WMI session is closed")

        wql = spec.to_wql()
        try:
            object_set = self._services.ExecQuery(
                wql, "WQL", WBEM_FLAG_RETURN_IMMEDIATELY | WBEM_FLAG_FORWARD_ONLY
            )
        except self._com_error as e:
            raise QueryError(f"Failed to execute '{wql}': {e}") from e

        logger.debug("WMI query executed", query=wql)
        return WmiResultSet(object_set, wql, self._com_error)

    def close(self):
        if self._services is None:
            return
        self._services = None
        self._pythoncom.CoUninitialize()


class WmiTransport(Transport):
    """Opens a fresh WMI session for every collection cycle"""

    def __init__(self, host: str = ".", namespace: str = "root\\cimv2"):
        self.host = host
        self.namespace = namespace

    @property
    def name(self) -> str:
        return f"wmi://{self.host}/{self.namespace}"

    def acquire_session(self) -> WmiSession:
        return WmiSession(self.host, self.namespace)
