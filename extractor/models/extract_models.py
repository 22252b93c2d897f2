"""
Pydantic models for extract pipeline operations.

This module contains the data models passed between pipeline stages
(source kind, connection descriptor, retrieved and formatted tables, write
result) as well as the request/response models used to configure and report
a pipeline run.

All models use Pydantic v2 for validation. Stage values are frozen: each
stage returns a new value and never mutates what an earlier stage produced.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

DEFAULT_QUERY = "SELECT * FROM [Sheet1$]"


class SourceKind(str, Enum):
    """
    Enumeration of data source kinds.

    Determined once from the source file extension and used to select the
    connection strategy.
    """

    ACCESS_OLD = "access_old"
    ACCESS_NEW = "access_new"
    EXCEL = "excel"
    WORKBOOK = "workbook"
    SQL_SERVER = "sql_server"


class ConnectionDescriptor(BaseModel):
    """
    Snapshot of a data source connection.

    Attributes:
        kind: The source kind the connection was built for.
        connection_string: The connection string handed to the driver.
        is_open: Whether the connection was open when the snapshot was taken.
    """

    kind: SourceKind = Field(
        description="The source kind the connection was built for",
    )
    connection_string: str = Field(
        description="The connection string handed to the driver",
    )
    is_open: bool = Field(
        default=False,
        description="Whether the connection is open",
    )

    model_config = {"frozen": True}


class Table(BaseModel):
    """
    In-memory result of a query.

    Cells are stored flattened in row-major order, so the cell at row ``r``
    and column ``c`` lives at index ``r * column_count + c``. Cell values keep
    the native type reported by the driver.

    Attributes:
        headers: Column names in query order.
        column_count: Number of columns in the result.
        cells: Flattened cell values.
    """

    headers: tuple[str, ...] = Field(
        default=(),
        description="Column names in query order",
    )
    column_count: int = Field(
        default=0,
        ge=0,
        description="Number of columns in the result",
    )
    cells: tuple[Any, ...] = Field(
        default=(),
        description="Cell values, flattened in row-major order",
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_shape(self) -> "Table":
        """Ensure headers and cells agree with column_count."""
        if self.column_count == 0:
            if self.headers or self.cells:
                raise ValueError("headers and cells must be empty when column_count is 0")
            return self
        if len(self.headers) != self.column_count:
            raise ValueError(
                f"expected {self.column_count} headers, got {len(self.headers)}"
            )
        if len(self.cells) % self.column_count != 0:
            raise ValueError(
                f"{len(self.cells)} cells do not fill whole rows of {self.column_count} columns"
            )
        return self

    @classmethod
    def empty(cls) -> "Table":
        """Create a table with no columns."""
        return cls(headers=(), column_count=0, cells=())

    @property
    def row_count(self) -> int:
        if self.column_count == 0:
            return 0
        return len(self.cells) // self.column_count

    def rows(self) -> list[list[Any]]:
        """Return the cells regrouped into rows."""
        width = self.column_count
        if width == 0:
            return []
        return [list(self.cells[i : i + width]) for i in range(0, len(self.cells), width)]


class FormattedTable(Table):
    """A Table whose designated column has been transformed."""


class WriteResult(BaseModel):
    """
    Outcome of writing the output spreadsheet.

    Attributes:
        success: True once the workbook is flushed and closed.
        file_path: Absolute path to the written file.
        rows_written: Number of data rows written below the header.
        file_size_bytes: Size of the written file in bytes.
    """

    success: bool = Field(
        default=False,
        description="True once the workbook is flushed and closed",
    )
    file_path: str = Field(
        description="Absolute path to the written file",
    )
    rows_written: int = Field(
        default=0,
        ge=0,
        description="Number of data rows written below the header",
    )
    file_size_bytes: int | None = Field(
        default=None,
        ge=0,
        description="Size of the written file in bytes",
    )


class ExtractRequest(BaseModel):
    """
    Parameters of a single pipeline run.

    Attributes:
        source_path: Path to the Access database or Excel workbook.
        output_path: Path of the spreadsheet to create (overwritten).
        query: Query executed against the source.
        source_kind: Optional override of the kind detected from the extension.
        format_column: Zero-based column whose text cells are transformed.
        strict_types: Whether a non-text value in that column is an error.
        sheet_name: Name of the output worksheet.
    """

    source_path: str = Field(
        min_length=1,
        description="Path to the Access database or Excel workbook",
    )
    output_path: str = Field(
        min_length=1,
        description="Path of the spreadsheet to create",
    )
    query: str = Field(
        default=DEFAULT_QUERY,
        min_length=1,
        description="Query executed against the source",
    )
    source_kind: SourceKind | None = Field(
        default=None,
        description="Override of the kind detected from the extension",
    )
    format_column: int = Field(
        default=1,
        ge=0,
        description="Zero-based column whose text cells are transformed",
    )
    strict_types: bool = Field(
        default=True,
        description="Whether a non-text value in the formatted column is an error",
    )
    sheet_name: str = Field(
        default="Sheet1",
        min_length=1,
        max_length=31,
        description="Name of the output worksheet",
    )


class ExtractResponse(BaseModel):
    """
    Report of a pipeline run.

    Attributes:
        success: Whether the output file was written.
        source_kind: The kind used to read the source.
        output_path: Absolute path to the written file.
        column_count: Number of columns extracted.
        rows_written: Number of data rows written.
        processing_time_ms: Wall time of the run in milliseconds.
        message: Optional informational message.
    """

    success: bool = Field(
        default=True,
        description="Whether the output file was written",
    )
    source_kind: SourceKind = Field(
        description="The kind used to read the source",
    )
    output_path: str = Field(
        description="Absolute path to the written file",
    )
    column_count: int = Field(
        ge=0,
        description="Number of columns extracted",
    )
    rows_written: int = Field(
        ge=0,
        description="Number of data rows written",
    )
    processing_time_ms: float | None = Field(
        default=None,
        ge=0,
        description="Wall time of the run in milliseconds",
    )
    message: str | None = Field(
        default=None,
        description="Optional informational message",
    )
