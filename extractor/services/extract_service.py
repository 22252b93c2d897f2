"""
Extract pipeline service.

This module provides the ExtractService class which runs the whole
extract-transform-load sequence: connect to the source, retrieve the query
result, release the connection, transform the designated column and write
the output spreadsheet.

Every stage fails fast. Errors from the pipeline's own hierarchy propagate
unchanged; anything else is wrapped in ExtractorError. The source
connection is released as soon as retrieval finishes, whether it succeeded
or not.

Example:
    service = ExtractService()
    response = service.extract(ExtractRequest(
        source_path="C:\\data\\Input.xls",
        output_path="C:\\data\\Output.xlsx",
    ))
    print(f"Wrote {response.rows_written} rows")
"""

import logging
import time

from extractor.adapters.xlsxwriter_adapter import XlsxWriterAdapter
from extractor.exceptions.extract_exceptions import ExtractorError
from extractor.models.extract_models import (
    DEFAULT_QUERY,
    ExtractRequest,
    ExtractResponse,
    Table,
)
from extractor.services.connector import Connector
from extractor.services.formatter import Formatter
from extractor.services.retriever import Retriever

logger = logging.getLogger(__name__)


class ExtractService:
    """
    Runs the connect, retrieve, format and write stages in order.

    Attributes:
        connector: Connector used to open the source.
        retriever: Retriever used to run the query.
        writer: XlsxWriterAdapter used to write the output.
        formatter: Formatter to use instead of one built from each request.

    Example:
        service = ExtractService()
        response = service.run("input.mdb", "SELECT * FROM Customers", "out.xlsx")
    """

    def __init__(
        self,
        connector: Connector | None = None,
        retriever: Retriever | None = None,
        formatter: Formatter | None = None,
        writer: XlsxWriterAdapter | None = None,
    ) -> None:
        """
        Initialize the ExtractService.

        Args:
            connector: Optional Connector. If None, creates a new instance.
            retriever: Optional Retriever. If None, creates a new instance.
            formatter: Optional Formatter. If None, one is built per request
                from its format_column and strict_types.
            writer: Optional XlsxWriterAdapter. If None, creates a new instance.
        """
        self.connector = connector or Connector()
        self.retriever = retriever or Retriever()
        self.formatter = formatter
        self.writer = writer or XlsxWriterAdapter()

    def retrieve(self, request: ExtractRequest) -> Table:
        """
        Connect to the source and read the query result.

        The connection is closed before this method returns or raises.

        Raises:
            InvalidPathError: If the source path has no extension.
            UnsupportedExtensionError: If the source kind is unsupported.
            ConnectionError: If the source cannot be opened.
            QueryError: If the query fails.
        """
        with self.connector.session(request.source_path, request.source_kind) as connection:
            return self.retriever.fetch(connection, request.query)

    def extract(self, request: ExtractRequest) -> ExtractResponse:
        """
        Run the pipeline for one request.

        Args:
            request: ExtractRequest describing source, query and output.

        Returns:
            ExtractResponse describing the written file.

        Raises:
            ExtractorError: Or one of its subclasses, on any failure.
        """
        start_time = time.time()
        logger.info(
            "Extracting %s into %s",
            request.source_path,
            request.output_path,
        )

        try:
            source_kind = self.connector.kind_of(request.source_path, request.source_kind)
            table = self.retrieve(request)

            formatter = self.formatter or Formatter(
                column=request.format_column,
                strict=request.strict_types,
            )
            formatted = formatter.format(table)

            result = self.writer.write(
                request.output_path,
                headers=formatted.headers,
                cells=formatted.cells,
                column_count=formatted.column_count,
                sheet_name=request.sheet_name,
            )

        except ExtractorError as e:
            logger.warning("Extract failed: %s", e.message)
            raise
        except Exception as e:
            logger.warning("Extract failed: %s", e)
            raise ExtractorError(
                message=f"Extract failed: {e}",
                details={
                    "source_path": request.source_path,
                    "output_path": request.output_path,
                },
            ) from e

        processing_time = (time.time() - start_time) * 1000
        message = None
        if table.column_count == 0:
            message = "Query returned no columns"

        logger.info(
            "Extract succeeded: %d rows written in %.2f ms",
            result.rows_written,
            processing_time,
        )

        return ExtractResponse(
            success=result.success,
            source_kind=source_kind,
            output_path=result.file_path,
            column_count=formatted.column_count,
            rows_written=result.rows_written,
            processing_time_ms=round(processing_time, 2),
            message=message,
        )

    def run(
        self,
        source_path: str,
        query: str = DEFAULT_QUERY,
        output_path: str = "Output.xlsx",
    ) -> ExtractResponse:
        """
        Run the pipeline with default options.

        Args:
            source_path: Path to the source file.
            query: Query executed against the source.
            output_path: Path of the spreadsheet to create.

        Returns:
            ExtractResponse describing the written file.
        """
        return self.extract(ExtractRequest(
            source_path=source_path,
            query=query,
            output_path=output_path,
        ))
