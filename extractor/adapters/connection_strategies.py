"""
Connection strategies for each data source kind.

A strategy is a pair of functions: one builds the connection string for a
source path, the other opens a driver connection from that string.
``STRATEGIES`` maps every SourceKind to its strategy, so adding a kind means
adding one entry here.

Drivers:
    - Access (.mdb, .accdb): OLE DB providers through adodbapi (Windows)
    - Excel (.xls): Microsoft Excel ODBC driver through pyodbc
    - Workbook (.xlsx, .xlsm): python-calamine, see calamine_adapter
    - SQL Server: not implemented

Driver packages are imported when a connection is opened, so building
connection strings works on machines without the drivers installed.

Example:
    strategy = STRATEGIES[SourceKind.ACCESS_OLD]
    connection_string = strategy.build_connection_string("D:\\data\\db.mdb")
    connection = strategy.open(connection_string)
"""

from collections.abc import Callable
from typing import Any, NamedTuple

from extractor.adapters.calamine_adapter import CalamineConnection
from extractor.models.extract_models import SourceKind

JET_PROVIDER = "Microsoft.Jet.OLEDB.4.0"
ACE_PROVIDER = "Microsoft.ACE.OLEDB.12.0"
EXCEL_DRIVER = "Microsoft Excel Driver (*.xls)"
CALAMINE_PROVIDER = "calamine"


class DriverNotInstalledError(RuntimeError):
    """Raised when the package providing a driver cannot be imported."""


class ConnectionStrategy(NamedTuple):
    """Builds and opens connections for one SourceKind."""

    build_connection_string: Callable[[str], str]
    open: Callable[[str], Any]


def _oledb_connection_string(provider: str) -> Callable[[str], str]:
    def build(path: str) -> str:
        return f"Provider={provider};Data Source={path}"

    return build


def build_excel_connection_string(path: str) -> str:
    return f"Driver={EXCEL_DRIVER};DBQ={path};"


def build_workbook_connection_string(path: str) -> str:
    return f"Provider={CALAMINE_PROVIDER};Data Source={path}"


def open_oledb(connection_string: str) -> Any:
    """
    Open an OLE DB connection through adodbapi.

    Raises:
        DriverNotInstalledError: If adodbapi (and pywin32) are not installed.
    """
    try:
        import adodbapi
    except ImportError as e:
        raise DriverNotInstalledError(
            "adodbapi is not installed; install the 'access' extra on Windows"
        ) from e
    return adodbapi.connect(connection_string)


def open_odbc(connection_string: str) -> Any:
    """
    Open an ODBC connection through pyodbc.

    Raises:
        DriverNotInstalledError: If pyodbc cannot be imported.
    """
    try:
        import pyodbc
    except ImportError as e:
        raise DriverNotInstalledError(f"pyodbc is unavailable: {e}") from e
    # The Excel driver does not support transactions.
    return pyodbc.connect(connection_string, autocommit=True)


def open_workbook(connection_string: str) -> CalamineConnection:
    return CalamineConnection.from_connection_string(connection_string)


def _sql_server_unsupported(_: str) -> Any:
    raise NotImplementedError("SQL Server sources are not supported")


STRATEGIES: dict[SourceKind, ConnectionStrategy] = {
    SourceKind.ACCESS_OLD: ConnectionStrategy(_oledb_connection_string(JET_PROVIDER), open_oledb),
    SourceKind.ACCESS_NEW: ConnectionStrategy(_oledb_connection_string(ACE_PROVIDER), open_oledb),
    SourceKind.EXCEL: ConnectionStrategy(build_excel_connection_string, open_odbc),
    SourceKind.WORKBOOK: ConnectionStrategy(build_workbook_connection_string, open_workbook),
    SourceKind.SQL_SERVER: ConnectionStrategy(_sql_server_unsupported, _sql_server_unsupported),
}
