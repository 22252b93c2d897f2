"""
Fake DB-API driver objects used in place of ODBC/OLE DB connections.
"""


class FakeCursor:
    """Minimal DB-API cursor returning canned rows."""

    def __init__(
        self,
        description: list[tuple] | None,
        rows: list[tuple],
        error: Exception | None = None,
    ) -> None:
        self.description = None
        self._description = description
        self._rows = rows
        self._error = error
        self.executed: list[str] = []
        self.closed = False

    def execute(self, query: str) -> "FakeCursor":
        if self._error is not None:
            raise self._error
        self.executed.append(query)
        self.description = self._description
        return self

    def __iter__(self):
        return iter(self._rows)

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    """Minimal DB-API connection handing out FakeCursors."""

    def __init__(
        self,
        headers: list[str] | None = None,
        rows: list[tuple] | None = None,
        error: Exception | None = None,
        close_error: Exception | None = None,
    ) -> None:
        self.description = (
            [(name, str, None, None, None, None, True) for name in headers]
            if headers
            else None
        )
        self.rows = rows or []
        self.error = error
        self.close_error = close_error
        self.cursors: list[FakeCursor] = []
        self.closed = False

    def cursor(self) -> FakeCursor:
        cursor = FakeCursor(self.description, self.rows, self.error)
        self.cursors.append(cursor)
        return cursor

    def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error
