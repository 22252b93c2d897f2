"""
Calamine adapter exposing a workbook as a query-able connection.

This module lets ``.xlsx``/``.xlsm`` files be read through the same
connection/cursor interface as the ODBC and OLE DB drivers, so the
Retriever does not care which driver produced its rows. Reading is done by
python-calamine, a Rust-based reader with a small memory footprint.

Only whole-sheet queries are understood, in the form the Excel ODBC driver
uses: ``SELECT * FROM [Sheet1$]``. The first row of the sheet provides the
column names.

Example:
    connection = CalamineConnection.from_connection_string(
        "Provider=calamine;Data Source=/path/to/file.xlsx"
    )
    cursor = connection.cursor()
    cursor.execute("SELECT * FROM [Sheet1$]")
    headers = [column[0] for column in cursor.description]
    rows = cursor.fetchall()
"""

import re
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from python_calamine import CalamineWorkbook

_SHEET_QUERY = re.compile(
    r"^\s*SELECT\s+\*\s+FROM\s+(?:\[(?P<bracketed>[^\]]+)\]|(?P<bare>\w+))\s*;?\s*$",
    re.IGNORECASE,
)


def parse_connection_string(connection_string: str) -> dict[str, str]:
    """
    Split a ``key=value;`` connection string into a dictionary.

    Keys are lowercased; values keep their case.

    Args:
        connection_string: The connection string.

    Returns:
        Mapping of lowercased keys to values.
    """
    options: dict[str, str] = {}
    for part in connection_string.split(";"):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        options[key.strip().lower()] = value.strip()
    return options


def _normalize_cell_value(value: Any) -> Any:
    """
    Normalize a cell value from calamine to Python types.

    Whole floats become ints (Excel stores every number as a float) and
    empty cells become None, matching what the ODBC driver reports.
    """
    if value is None or value == "":
        return None

    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        return value

    return value


def _column_name(value: Any) -> str:
    value = _normalize_cell_value(value)
    if value is None:
        return ""
    return str(value)


class CalamineCursor:
    """
    Cursor over one worksheet of a CalamineConnection.

    Follows the subset of the DB-API cursor protocol the Retriever uses:
    ``execute``, ``description``, iteration, ``fetchone``, ``fetchall`` and
    ``close``.

    Attributes:
        description: One 7-item tuple per column after a query, else None.
    """

    def __init__(self, connection: "CalamineConnection") -> None:
        self._connection = connection
        self._rows: list[list[Any]] = []
        self._position = 0
        self.description: list[tuple] | None = None
        self.closed = False

    def execute(self, query: str) -> "CalamineCursor":
        """
        Load the sheet named by a ``SELECT * FROM [Sheet$]`` query.

        Args:
            query: The query text.

        Returns:
            The cursor itself.

        Raises:
            ValueError: If the query is not a whole-sheet select, the sheet
                does not exist, or the cursor or connection is closed.
        """
        if self.closed:
            raise ValueError("Cursor is closed")

        match = _SHEET_QUERY.match(query or "")
        if not match:
            raise ValueError(f"Unsupported query, expected SELECT * FROM [Sheet$]: {query!r}")

        sheet_name = match.group("bracketed") or match.group("bare")
        if sheet_name.endswith("$"):
            sheet_name = sheet_name[:-1]

        raw_data = self._connection.read_sheet(sheet_name)

        self._position = 0
        if not raw_data:
            self.description = None
            self._rows = []
            return self

        width = max(len(row) for row in raw_data)
        header_row = list(raw_data[0]) + [None] * (width - len(raw_data[0]))
        self.description = [
            (_column_name(name), None, None, None, None, None, True)
            for name in header_row
        ]
        self._rows = [
            [_normalize_cell_value(cell) for cell in row] + [None] * (width - len(row))
            for row in raw_data[1:]
        ]
        return self

    def fetchone(self) -> list[Any] | None:
        if self._position >= len(self._rows):
            return None
        row = self._rows[self._position]
        self._position += 1
        return row

    def fetchall(self) -> list[list[Any]]:
        rows = self._rows[self._position :]
        self._position = len(self._rows)
        return rows

    def __iter__(self) -> Iterator[list[Any]]:
        while True:
            row = self.fetchone()
            if row is None:
                return
            yield row

    def close(self) -> None:
        self.closed = True
        self._rows = []


class CalamineConnection:
    """
    Read-only connection to a workbook file.

    Attributes:
        file_path: Path to the workbook.
        closed: Whether close() has been called.
    """

    def __init__(self, file_path: str) -> None:
        """
        Open the workbook.

        Args:
            file_path: Path to the workbook.

        Raises:
            FileNotFoundError: If the file does not exist.
            Exception: Whatever calamine raises for unreadable files.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Workbook not found: {file_path}")

        self.file_path = str(path)
        self._workbook = CalamineWorkbook.from_path(self.file_path)
        self.closed = False

    @classmethod
    def from_connection_string(cls, connection_string: str) -> "CalamineConnection":
        """
        Open the workbook named by the ``Data Source`` key.

        Raises:
            ValueError: If the connection string has no data source.
        """
        options = parse_connection_string(connection_string)
        file_path = options.get("data source") or options.get("dbq")
        if not file_path:
            raise ValueError(f"No Data Source in connection string: {connection_string!r}")
        return cls(file_path)

    @property
    def sheet_names(self) -> list[str]:
        return list(self._workbook.sheet_names)

    def read_sheet(self, sheet_name: str) -> list[list[Any]]:
        """
        Return the raw rows of a sheet.

        Raises:
            ValueError: If the connection is closed or the sheet is missing.
        """
        if self.closed:
            raise ValueError("Connection is closed")

        available_sheets = self.sheet_names
        if sheet_name not in available_sheets:
            raise ValueError(
                f"Sheet not found: {sheet_name}. "
                f"Available sheets: {', '.join(available_sheets)}"
            )
        return self._workbook.get_sheet_by_name(sheet_name).to_python()

    def cursor(self) -> CalamineCursor:
        if self.closed:
            raise ValueError("Connection is closed")
        return CalamineCursor(self)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._workbook.close()
