"""
Custom exceptions for extract pipeline operations.

This module defines a hierarchy of exceptions for the error conditions
raised while detecting a source format, connecting to it, querying it,
formatting the retrieved table and writing the output spreadsheet. All
exceptions inherit from ExtractorError for consistent error handling.

Example:
    try:
        service.run("input.mdb", "SELECT * FROM Customers", "output.xlsx")
    except UnsupportedExtensionError as e:
        logger.error(f"Unsupported source: {e.extension}")
    except ExtractorError as e:
        logger.error(f"Extract failed: {e}")
"""


class ExtractorError(Exception):
    """
    Base exception for all extract pipeline errors.

    All custom exceptions in this module inherit from this class,
    allowing consumers to catch every pipeline failure with a single
    except clause.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Optional additional context about the error.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "EXTRACT_ERROR",
        details: dict | None = None,
    ) -> None:
        """
        Initialize the ExtractorError.

        Args:
            message: Human-readable error description.
            error_code: Machine-readable error code.
            details: Optional additional context about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict:
        """
        Convert exception to a dictionary for reporting.

        Returns:
            Dictionary containing error_code, message, and details.
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class InvalidPathError(ExtractorError):
    """
    Raised when a source path carries no file extension.

    Attributes:
        path: The path that could not be classified.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            message=f"No file extension found in path: {path}",
            error_code="INVALID_PATH",
            details={"path": path},
        )


class UnsupportedExtensionError(ExtractorError):
    """
    Raised when an extension has no connection strategy.

    Also raised when a source kind is routed to a strategy that is
    not implemented (SQL Server).

    Attributes:
        extension: The extension or kind that was rejected.
        supported: Extensions that are accepted.
    """

    def __init__(
        self,
        extension: str,
        supported: list[str] | None = None,
        reason: str | None = None,
    ) -> None:
        """
        Initialize the UnsupportedExtensionError.

        Args:
            extension: The extension or kind that was rejected.
            supported: Extensions that are accepted.
            reason: Specific reason for the rejection.
        """
        self.extension = extension
        self.supported = supported or []
        self.reason = reason

        message = f"Unhandled file extension: {extension}"
        if reason:
            message += f" - {reason}"

        super().__init__(
            message=message,
            error_code="UNSUPPORTED_EXTENSION",
            details={
                "extension": extension,
                "supported": self.supported,
                "reason": reason,
            },
        )


class ConnectionError(ExtractorError):
    """
    Raised when a data source connection cannot be established.

    Wraps the driver's own error (missing file, corrupt file, driver not
    installed, permission denied) so the message survives for diagnosis.

    Attributes:
        source_path: Path of the data source.
        connection_string: Connection string that was used, if built.
        reason: The underlying driver message.
    """

    def __init__(
        self,
        source_path: str,
        reason: str | None = None,
        connection_string: str | None = None,
    ) -> None:
        """
        Initialize the ConnectionError.

        Args:
            source_path: Path of the data source.
            reason: The underlying driver message.
            connection_string: Connection string that was used, if built.
        """
        self.source_path = source_path
        self.connection_string = connection_string
        self.reason = reason

        message = f"Failed to connect to data source: {source_path}"
        if reason:
            message += f" - {reason}"

        super().__init__(
            message=message,
            error_code="CONNECTION_ERROR",
            details={
                "source_path": source_path,
                "connection_string": connection_string,
                "reason": reason,
            },
        )


class QueryError(ExtractorError):
    """
    Raised when a query cannot be executed or its results read.

    Attributes:
        query: The query text.
        reason: Specific reason for the failure.
    """

    def __init__(
        self,
        query: str,
        reason: str | None = None,
    ) -> None:
        """
        Initialize the QueryError.

        Args:
            query: The query text.
            reason: Specific reason for the failure.
        """
        self.query = query
        self.reason = reason

        message = f"Failed to execute query: {query!r}"
        if reason:
            message += f" - {reason}"

        super().__init__(
            message=message,
            error_code="QUERY_ERROR",
            details={
                "query": query,
                "reason": reason,
            },
        )


class FormatError(ExtractorError):
    """
    Raised when a cell cannot be transformed.

    Attributes:
        index: Flattened index of the offending cell, if any.
        reason: Specific reason for the failure.
    """

    def __init__(
        self,
        reason: str,
        index: int | None = None,
    ) -> None:
        self.index = index
        self.reason = reason

        message = "Formatting error"
        if index is not None:
            message += f" at cell {index}"
        message += f" - {reason}"

        super().__init__(
            message=message,
            error_code="FORMAT_ERROR",
            details={
                "index": index,
                "reason": reason,
            },
        )


class WriteError(ExtractorError):
    """
    Raised when an error occurs during output spreadsheet writing.

    This covers removal of the previous file, directory creation,
    permission issues and XlsxWriter-specific errors.

    Attributes:
        file_path: Path to the file being written.
        operation: The specific write operation that failed.
    """

    def __init__(
        self,
        file_path: str,
        operation: str = "write",
        reason: str | None = None,
    ) -> None:
        """
        Initialize the WriteError.

        Args:
            file_path: Path to the file being written.
            operation: The specific write operation that failed.
            reason: Specific reason for the write failure.
        """
        self.file_path = file_path
        self.operation = operation
        self.reason = reason

        message = f"Failed to {operation} output file: {file_path}"
        if reason:
            message += f" - {reason}"

        super().__init__(
            message=message,
            error_code="WRITE_ERROR",
            details={
                "file_path": file_path,
                "operation": operation,
                "reason": reason,
            },
        )
