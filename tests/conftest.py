"""
Test fixtures and utilities for the extract pipeline tests.

This module provides shared fixtures including temporary files, a fake
DB-API driver, sample tables and service instances.
"""

import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from extractor.adapters.connection_strategies import STRATEGIES
from extractor.adapters.xlsxwriter_adapter import XlsxWriterAdapter
from extractor.models.extract_models import SourceKind, Table
from extractor.services.connector import Connector
from extractor.services.extract_service import ExtractService
from extractor.services.formatter import Formatter
from extractor.services.retriever import Retriever
from tests.fakes import FakeConnection


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to the temporary directory.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def connector() -> Connector:
    """Create a Connector with the real strategies."""
    return Connector()


@pytest.fixture
def retriever() -> Retriever:
    return Retriever()


@pytest.fixture
def formatter() -> Formatter:
    return Formatter()


@pytest.fixture
def xlsxwriter_adapter() -> XlsxWriterAdapter:
    """
    Create an XlsxWriterAdapter instance for testing.

    Returns:
        XlsxWriterAdapter instance.
    """
    return XlsxWriterAdapter()


@pytest.fixture
def extract_service() -> ExtractService:
    return ExtractService()


@pytest.fixture
def sample_headers() -> list[str]:
    """
    Return sample headers.

    Returns:
        List of column headers.
    """
    return ["Name", "Greeting", "Age"]


@pytest.fixture
def sample_rows() -> list[tuple]:
    """
    Return sample rows matching sample_headers.

    Returns:
        List of row tuples.
    """
    return [
        ("Alice", "Hello World", 30),
        ("Bob", "Good  Morning", 25),
    ]


@pytest.fixture
def sample_table(sample_headers: list[str], sample_rows: list[tuple]) -> Table:
    """Return the sample rows as a Table."""
    cells = [value for row in sample_rows for value in row]
    return Table(headers=sample_headers, column_count=len(sample_headers), cells=cells)


@pytest.fixture
def sample_workbook(
    temp_dir: Path,
    xlsxwriter_adapter: XlsxWriterAdapter,
    sample_table: Table,
) -> Path:
    """
    Create a sample workbook with the sample table on Sheet1.

    Returns:
        Path to the workbook.
    """
    file_path = temp_dir / "Input.xlsx"
    xlsxwriter_adapter.write(
        str(file_path),
        headers=sample_table.headers,
        cells=sample_table.cells,
        column_count=sample_table.column_count,
    )
    return file_path


@pytest.fixture
def fake_connector() -> Callable[..., tuple[Connector, FakeConnection]]:
    """
    Build Connectors whose Access and Excel drivers are fakes.

    The returned factory takes FakeConnection arguments and returns the
    Connector together with the FakeConnection it will hand out. Passing
    ``open_error`` makes the driver fail to open instead, and ``close_error``
    makes closing the connection fail.
    """

    def factory(
        headers: list[str] | None = None,
        rows: list[tuple] | None = None,
        error: Exception | None = None,
        open_error: Exception | None = None,
        close_error: Exception | None = None,
    ) -> tuple[Connector, FakeConnection]:
        connection = FakeConnection(headers, rows, error, close_error)

        def open_fake(connection_string: str) -> Any:
            if open_error is not None:
                raise open_error
            return connection

        strategies = dict(STRATEGIES)
        for kind in (SourceKind.ACCESS_OLD, SourceKind.ACCESS_NEW, SourceKind.EXCEL):
            strategies[kind] = strategies[kind]._replace(open=open_fake)
        return Connector(strategies), connection

    return factory


@pytest.fixture
def access_file(temp_dir: Path) -> Path:
    """Create an empty file with an .mdb extension."""
    file_path = temp_dir / "legacy.mdb"
    file_path.write_bytes(b"")
    return file_path
