"""
Tests for the Connector, connection strategies and ConnectionHandle.
"""

from pathlib import Path

import pytest

from extractor.adapters.connection_strategies import STRATEGIES
from extractor.exceptions.extract_exceptions import (
    InvalidPathError,
    QueryError,
    UnsupportedExtensionError,
)
from extractor.exceptions.extract_exceptions import ConnectionError as SourceConnectionError
from extractor.models.extract_models import SourceKind
from extractor.services.connector import Connector


class TestConnectionStrings:
    """Tests for connection string templates."""

    def test_access_old(self, connector: Connector) -> None:
        assert (
            connector.build_connection_string(r"D:\data\db.mdb")
            == r"Provider=Microsoft.Jet.OLEDB.4.0;Data Source=D:\data\db.mdb"
        )

    def test_access_new(self, connector: Connector) -> None:
        assert (
            connector.build_connection_string(r"D:\data\db.accdb")
            == r"Provider=Microsoft.ACE.OLEDB.12.0;Data Source=D:\data\db.accdb"
        )

    def test_excel(self, connector: Connector) -> None:
        assert (
            connector.build_connection_string(r"C:\repos\Input.xls")
            == r"Driver=Microsoft Excel Driver (*.xls);DBQ=C:\repos\Input.xls;"
        )

    def test_workbook(self, connector: Connector) -> None:
        assert (
            connector.build_connection_string("/tmp/Input.xlsx")
            == "Provider=calamine;Data Source=/tmp/Input.xlsx"
        )

    def test_kind_override(self, connector: Connector) -> None:
        """An explicit kind wins over the extension."""
        connection_string = connector.build_connection_string(
            r"D:\data\db.mdb",
            kind=SourceKind.ACCESS_NEW,
        )

        assert connection_string.startswith("Provider=Microsoft.ACE.OLEDB.12.0;")

    def test_sql_server_strategy_not_implemented(self) -> None:
        strategy = STRATEGIES[SourceKind.SQL_SERVER]

        with pytest.raises(NotImplementedError):
            strategy.build_connection_string("server.db")
        with pytest.raises(NotImplementedError):
            strategy.open("Server=localhost")

    def test_sql_server_routing_unsupported(self, connector: Connector) -> None:
        with pytest.raises(UnsupportedExtensionError) as exc_info:
            connector.build_connection_string("orders.mdb", kind=SourceKind.SQL_SERVER)

        assert "not supported" in exc_info.value.message

    def test_invalid_path(self, connector: Connector) -> None:
        with pytest.raises(InvalidPathError):
            connector.build_connection_string("no_extension")


class TestConnect:
    """Tests for Connector.connect."""

    def test_connect_returns_open_handle(self, fake_connector, access_file: Path) -> None:
        connector, fake = fake_connector(headers=["Id"])

        handle = connector.connect(str(access_file))

        assert handle.is_open
        assert handle.kind == SourceKind.ACCESS_OLD
        assert handle.descriptor.connection_string.endswith(f"Data Source={access_file}")
        handle.close()
        assert fake.closed

    def test_missing_file_raises_connection_error(self, fake_connector, temp_dir: Path) -> None:
        connector, _ = fake_connector()

        with pytest.raises(SourceConnectionError) as exc_info:
            connector.connect(str(temp_dir / "missing.accdb"))

        assert exc_info.value.error_code == "CONNECTION_ERROR"
        assert "does not exist" in exc_info.value.message

    def test_driver_error_is_wrapped(self, fake_connector, access_file: Path) -> None:
        connector, _ = fake_connector(open_error=OSError("Unrecognized database format"))

        with pytest.raises(SourceConnectionError) as exc_info:
            connector.connect(str(access_file))

        assert "Unrecognized database format" in exc_info.value.message
        assert exc_info.value.connection_string.startswith("Provider=Microsoft.Jet.OLEDB.4.0")
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_unavailable_driver_raises_connection_error(
        self,
        connector: Connector,
        access_file: Path,
    ) -> None:
        """Without an OLE DB provider the real strategy fails as a ConnectionError."""
        with pytest.raises(SourceConnectionError):
            connector.connect(str(access_file))

    def test_unsupported_extension(self, connector: Connector, temp_dir: Path) -> None:
        source = temp_dir / "data.csv"
        source.write_text("a,b\n1,2\n")

        with pytest.raises(UnsupportedExtensionError):
            connector.connect(str(source))

    def test_connect_workbook(self, connector: Connector, sample_workbook: Path) -> None:
        handle = connector.connect(str(sample_workbook))

        try:
            assert handle.kind == SourceKind.WORKBOOK
            assert handle.is_open
        finally:
            handle.close()

        assert not handle.is_open

    def test_corrupt_workbook(self, connector: Connector, temp_dir: Path) -> None:
        source = temp_dir / "broken.xlsx"
        source.write_text("not a workbook")

        with pytest.raises(SourceConnectionError):
            connector.connect(str(source))


class TestConnectionLifecycle:
    """Tests for scoped acquisition and release."""

    def test_session_closes_on_success(self, fake_connector, access_file: Path) -> None:
        connector, fake = fake_connector(headers=["Id"])

        with connector.session(str(access_file)) as handle:
            assert handle.descriptor.is_open

        assert not handle.is_open
        assert not handle.descriptor.is_open
        assert fake.closed

    def test_session_closes_on_error(self, fake_connector, access_file: Path) -> None:
        connector, fake = fake_connector(headers=["Id"])

        with pytest.raises(RuntimeError):
            with connector.session(str(access_file)) as handle:
                raise RuntimeError("retrieval failed")

        assert not handle.is_open
        assert fake.closed

    def test_handle_context_manager(self, fake_connector, access_file: Path) -> None:
        connector, fake = fake_connector(headers=["Id"])

        with connector.connect(str(access_file)) as handle:
            assert handle.is_open

        assert fake.closed

    def test_close_is_idempotent(self, fake_connector, access_file: Path) -> None:
        connector, _ = fake_connector(headers=["Id"])
        handle = connector.connect(str(access_file))

        handle.close()
        handle.close()

        assert not handle.is_open

    def test_cursor_after_close_raises(self, fake_connector, access_file: Path) -> None:
        connector, _ = fake_connector(headers=["Id"])
        handle = connector.connect(str(access_file))
        handle.close()

        with pytest.raises(RuntimeError):
            handle.cursor()

    def test_session_error_survives_failed_close(
        self,
        fake_connector,
        access_file: Path,
    ) -> None:
        """A failing close does not replace the error raised in the block."""
        connector, fake = fake_connector(
            headers=["Id"],
            close_error=OSError("driver lost the file handle"),
        )

        with pytest.raises(QueryError):
            with connector.session(str(access_file)) as handle:
                raise QueryError("SELECT * FROM Orders", reason="no such table")

        assert fake.closed
        assert not handle.is_open

    def test_session_close_error_raised_after_success(
        self,
        fake_connector,
        access_file: Path,
    ) -> None:
        connector, _ = fake_connector(
            headers=["Id"],
            close_error=OSError("driver lost the file handle"),
        )

        with pytest.raises(OSError):
            with connector.session(str(access_file)):
                pass

    def test_handle_context_manager_keeps_block_error(
        self,
        fake_connector,
        access_file: Path,
    ) -> None:
        connector, _ = fake_connector(
            headers=["Id"],
            close_error=OSError("driver lost the file handle"),
        )

        with pytest.raises(ValueError):
            with connector.connect(str(access_file)):
                raise ValueError("bad row")
