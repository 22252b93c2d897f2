"""
XlsxWriter adapter for writing the pipeline output.

This module provides the XlsxWriterAdapter class that wraps XlsxWriter to
write a flattened table into a new single-sheet ``.xlsx`` file. Any file
already at the output path is removed first, so the result never holds rows
from a previous run.

Layout:
    - Headers fill row 1, wrapping to the next row every column_count values
    - Cells fill the rows from row 2 on, in row-major order, with the same wrap

Example:
    adapter = XlsxWriterAdapter()
    result = adapter.write(
        "/path/to/output.xlsx",
        headers=["Name", "Age"],
        cells=["Alice", 30, "Bob", 25],
        column_count=2,
    )
    print(f"Wrote {result.rows_written} rows")
"""

import logging
from collections.abc import Sequence
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any

import xlsxwriter
from xlsxwriter.format import Format
from xlsxwriter.workbook import Workbook
from xlsxwriter.worksheet import Worksheet

from extractor.exceptions.extract_exceptions import WriteError
from extractor.models.extract_models import WriteResult

logger = logging.getLogger(__name__)


class XlsxWriterAdapter:
    """
    Adapter for XlsxWriter output writing.

    Attributes:
        DEFAULT_COLUMN_WIDTH: Default column width in characters.
        MAX_COLUMN_WIDTH: Maximum column width in characters.
        auto_format: Whether to bold the header and size columns to content.
    """

    DEFAULT_COLUMN_WIDTH = 10
    MAX_COLUMN_WIDTH = 50

    # Non-zero return codes of the XlsxWriter write_* methods.
    WRITE_ERRORS = {
        -1: "outside the worksheet limits",
        -2: "string longer than 32767 characters",
    }

    def __init__(self, auto_format: bool = True) -> None:
        """
        Initialize the XlsxWriterAdapter.

        Args:
            auto_format: Whether to bold the header and size columns.
        """
        self.auto_format = auto_format

    def _prepare_output_path(self, file_path: str) -> Path:
        """
        Create missing parent directories and remove any existing file.

        Args:
            file_path: Path where the file will be written.

        Returns:
            Path object for the output file.

        Raises:
            WriteError: If the directory cannot be created or the old file
                cannot be removed.
        """
        path = Path(file_path)
        if path.suffix.lower() != ".xlsx":
            path = Path(file_path + ".xlsx")

        parent = path.parent
        if not parent.exists():
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise WriteError(
                    file_path=file_path,
                    operation="create directory",
                    reason=str(e),
                ) from e

        if path.exists():
            try:
                path.unlink()
            except OSError as e:
                raise WriteError(
                    file_path=file_path,
                    operation="remove existing",
                    reason=str(e),
                ) from e
            logger.debug("Removed existing output file %s", path)

        return path

    def _calculate_column_widths(
        self,
        headers: Sequence[str],
        cells: Sequence[Any],
        column_count: int,
    ) -> list[int]:
        """
        Calculate column widths based on content.

        Returns:
            List of column widths, one per column.
        """
        widths = [self.DEFAULT_COLUMN_WIDTH] * column_count
        for values in (headers, cells):
            for index, value in enumerate(values):
                if value is not None:
                    col = index % column_count
                    cell_width = min(len(str(value)) + 2, self.MAX_COLUMN_WIDTH)
                    widths[col] = max(widths[col], cell_width)
        return widths

    def _write_cell(
        self,
        worksheet: Worksheet,
        row: int,
        col: int,
        value: Any,
        cell_format: Format | None = None,
        date_format: Format | None = None,
    ) -> int:
        """
        Write a value to a cell with appropriate type handling.

        Text is always written as a string, never as a formula or URL.

        Args:
            worksheet: The worksheet to write to.
            row: Row index (0-based).
            col: Column index (0-based).
            value: Value to write.
            cell_format: Optional format to apply.
            date_format: Format applied to date and time values.

        Returns:
            The XlsxWriter status code: 0 on success, -1 when the cell is
            outside the worksheet, -2 when a string was truncated.
        """
        if value is None:
            return worksheet.write_blank(row, col, None, cell_format)
        if isinstance(value, bool):
            return worksheet.write_boolean(row, col, value, cell_format)
        if isinstance(value, (int, float)):
            return worksheet.write_number(row, col, value, cell_format)
        if isinstance(value, Decimal):
            return worksheet.write_number(row, col, float(value), cell_format)
        if isinstance(value, (datetime, date, time, timedelta)):
            return worksheet.write_datetime(row, col, value, date_format)
        if isinstance(value, str):
            return worksheet.write_string(row, col, value, cell_format)
        return worksheet.write_string(row, col, str(value), cell_format)

    def _check_written(self, file_path: str, row: int, col: int, status: int) -> None:
        """
        Raise WriteError when XlsxWriter dropped or truncated a cell.

        Raises:
            WriteError: If status is non-zero.
        """
        if status == 0:
            return
        problem = self.WRITE_ERRORS.get(status, f"XlsxWriter status {status}")
        raise WriteError(
            file_path=file_path,
            operation="write",
            reason=f"Cell at row {row + 1}, column {col + 1}: {problem}",
        )

    def _remove_partial(self, path: Path) -> None:
        try:
            if path.exists():
                path.unlink()
                logger.debug("Removed partial output file %s", path)
        except OSError as e:
            logger.debug("Could not remove partial output file %s: %s", path, e)

    def write(
        self,
        file_path: str,
        headers: Sequence[str],
        cells: Sequence[Any],
        column_count: int,
        sheet_name: str = "Sheet1",
    ) -> WriteResult:
        """
        Write headers and flattened cells to a new spreadsheet.

        Args:
            file_path: Path where the file will be written. ".xlsx" is
                appended when the path has another suffix.
            headers: Column names.
            cells: Cell values in row-major order.
            column_count: Number of columns per row. When 0, an empty sheet
                is written.
            sheet_name: Name of the sheet. Defaults to "Sheet1".

        Returns:
            WriteResult with success=True once the workbook is closed.

        Raises:
            WriteError: If the arguments are inconsistent or writing fails.
        """
        if column_count < 0:
            raise WriteError(
                file_path=file_path,
                operation="write",
                reason=f"Column count must not be negative: {column_count}",
            )
        if column_count == 0 and (headers or cells):
            raise WriteError(
                file_path=file_path,
                operation="write",
                reason="Headers and cells require a positive column count",
            )

        path = self._prepare_output_path(file_path)

        try:
            workbook: Workbook = xlsxwriter.Workbook(
                str(path),
                {"remove_timezone": True, "nan_inf_to_errors": True},
            )
            worksheet = workbook.add_worksheet(sheet_name)

            header_format = None
            if self.auto_format:
                header_format = workbook.add_format({"bold": True, "border": 1})
            date_format = workbook.add_format({
                "num_format": "yyyy-mm-dd hh:mm:ss",
            })

            rows_written = 0
            if column_count > 0:
                for index, header in enumerate(headers):
                    row, col = divmod(index, column_count)
                    status = self._write_cell(worksheet, row, col, header, header_format)
                    self._check_written(file_path, row, col, status)

                for index, value in enumerate(cells):
                    row, col = divmod(index, column_count)
                    status = self._write_cell(
                        worksheet,
                        row + 1,
                        col,
                        value,
                        date_format=date_format,
                    )
                    self._check_written(file_path, row + 1, col, status)
                rows_written = -(-len(cells) // column_count)

                if self.auto_format:
                    column_widths = self._calculate_column_widths(headers, cells, column_count)
                    for col, width in enumerate(column_widths):
                        worksheet.set_column(col, col, width)

            workbook.close()

        except WriteError:
            self._remove_partial(path)
            raise
        except xlsxwriter.exceptions.FileCreateError as e:
            self._remove_partial(path)
            raise WriteError(
                file_path=file_path,
                operation="create",
                reason=str(e),
            ) from e
        except Exception as e:
            self._remove_partial(path)
            raise WriteError(
                file_path=file_path,
                operation="write",
                reason=str(e),
            ) from e

        file_size = path.stat().st_size
        logger.info("Wrote %d rows to %s", rows_written, path)

        return WriteResult(
            success=True,
            file_path=str(path.absolute()),
            rows_written=rows_written,
            file_size_bytes=file_size,
        )
