"""
Data source connector.

The Connector turns a source path into an open connection: it classifies
the path, picks the connection strategy for its kind, builds the connection
string and opens it. Driver failures are translated into the pipeline's own
ConnectionError so callers see one error type whatever the driver.

The returned ConnectionHandle must be released on every exit path. Use it as
a context manager, or use Connector.session():

    connector = Connector()
    with connector.session("C:\\data\\customers.accdb") as connection:
        table = Retriever().fetch(connection, "SELECT * FROM Customers")
    assert not connection.is_open
"""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from extractor.adapters.connection_strategies import STRATEGIES, ConnectionStrategy
from extractor.adapters.format_detector import EXTENSION_KINDS, detect
from extractor.exceptions.extract_exceptions import (
    ConnectionError,
    UnsupportedExtensionError,
)
from extractor.models.extract_models import ConnectionDescriptor, SourceKind

logger = logging.getLogger(__name__)


class ConnectionHandle:
    """
    An open driver connection and the descriptor it was built from.

    Attributes:
        kind: The source kind of the connection.
        connection_string: The connection string handed to the driver.
    """

    def __init__(
        self,
        kind: SourceKind,
        connection_string: str,
        connection: Any,
    ) -> None:
        self.kind = kind
        self.connection_string = connection_string
        self._connection = connection
        self._is_open = True

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def descriptor(self) -> ConnectionDescriptor:
        """Snapshot of the connection's current state."""
        return ConnectionDescriptor(
            kind=self.kind,
            connection_string=self.connection_string,
            is_open=self._is_open,
        )

    def cursor(self) -> Any:
        """
        Create a driver cursor.

        Raises:
            RuntimeError: If the connection has been closed.
        """
        if not self._is_open:
            raise RuntimeError("Connection is closed")
        return self._connection.cursor()

    def close(self) -> None:
        """Close the driver connection. Calling close() again does nothing."""
        if not self._is_open:
            return
        try:
            self._connection.close()
        finally:
            self._is_open = False
            logger.debug("Closed %s connection", self.kind.value)

    def release(self, error: BaseException | None = None) -> None:
        """
        Close the connection at the end of a scoped block.

        Args:
            error: The exception the block is failing with, if any. When
                given, a failure to close is logged and not raised, so
                the caller still sees ``error``.
        """
        if error is None:
            self.close()
            return
        try:
            self.close()
        except Exception as e:
            logger.warning(
                "Failed to close %s connection after %s: %s",
                self.kind.value,
                type(error).__name__,
                e,
            )

    def __enter__(self) -> "ConnectionHandle":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.release(exc_value)


class Connector:
    """
    Opens connections to Access databases and Excel workbooks.

    Attributes:
        strategies: Mapping of SourceKind to the strategy used to connect.

    Example:
        connector = Connector()
        connector.build_connection_string("D:\\data\\db.mdb")
        # 'Provider=Microsoft.Jet.OLEDB.4.0;Data Source=D:\\data\\db.mdb'
    """

    def __init__(
        self,
        strategies: Mapping[SourceKind, ConnectionStrategy] | None = None,
    ) -> None:
        """
        Initialize the Connector.

        Args:
            strategies: Optional strategy table. If None, uses STRATEGIES.
        """
        self.strategies = dict(strategies or STRATEGIES)

    def _strategy(self, kind: SourceKind) -> ConnectionStrategy:
        strategy = self.strategies.get(kind)
        if strategy is None:
            raise UnsupportedExtensionError(
                extension=kind.value,
                supported=list(EXTENSION_KINDS),
                reason="No connection strategy registered",
            )
        return strategy

    def kind_of(self, path: str, kind: SourceKind | None = None) -> SourceKind:
        """Return the override kind, or the kind detected from the path."""
        return kind or detect(str(path))

    def build_connection_string(
        self,
        path: str,
        kind: SourceKind | None = None,
    ) -> str:
        """
        Build the connection string for a source path.

        Args:
            path: Path to the source file.
            kind: Optional kind overriding the one detected from the extension.

        Returns:
            The connection string.

        Raises:
            InvalidPathError: If the path has no extension.
            UnsupportedExtensionError: If the extension or kind is unsupported.
        """
        kind = self.kind_of(path, kind)
        try:
            return self._strategy(kind).build_connection_string(str(path))
        except NotImplementedError as e:
            raise UnsupportedExtensionError(
                extension=kind.value,
                supported=list(EXTENSION_KINDS),
                reason=str(e),
            ) from e

    def connect(
        self,
        path: str,
        kind: SourceKind | None = None,
    ) -> ConnectionHandle:
        """
        Open a connection to a source file.

        The caller owns the returned handle and must close it.

        Args:
            path: Path to the source file.
            kind: Optional kind overriding the one detected from the extension.

        Returns:
            An open ConnectionHandle.

        Raises:
            InvalidPathError: If the path has no extension.
            UnsupportedExtensionError: If the extension or kind is unsupported.
            ConnectionError: If the file is missing or the driver fails.
        """
        path = str(path)
        kind = self.kind_of(path, kind)
        connection_string = self.build_connection_string(path, kind)

        if not Path(path).is_file():
            raise ConnectionError(
                source_path=path,
                reason="File does not exist",
                connection_string=connection_string,
            )

        logger.debug("Opening %s connection: %s", kind.value, connection_string)
        try:
            connection = self._strategy(kind).open(connection_string)
        except NotImplementedError as e:
            raise UnsupportedExtensionError(
                extension=kind.value,
                supported=list(EXTENSION_KINDS),
                reason=str(e),
            ) from e
        except Exception as e:
            raise ConnectionError(
                source_path=path,
                reason=str(e),
                connection_string=connection_string,
            ) from e

        logger.info("Connected to %s source %s", kind.value, path)
        return ConnectionHandle(kind, connection_string, connection)

    @contextmanager
    def session(
        self,
        path: str,
        kind: SourceKind | None = None,
    ) -> Iterator[ConnectionHandle]:
        """
        Open a connection for the duration of a with block.

        The connection is closed when the block exits, whether it raised or
        not. If the block raised, that exception propagates even when
        closing also fails.

        Yields:
            An open ConnectionHandle.
        """
        handle = self.connect(path, kind)
        try:
            yield handle
        except BaseException as e:
            handle.release(e)
            raise
        handle.release()
