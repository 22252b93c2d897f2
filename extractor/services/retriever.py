"""
Query execution and result materialization.

The Retriever runs one query against an open connection and reads the
whole result into a Table: column names from the cursor description, cells
appended row by row, left to right. Values keep the type the driver
reports. Rows come back in the order the driver returns them.
"""

import logging
from typing import Any

from extractor.exceptions.extract_exceptions import ExtractorError, QueryError
from extractor.models.extract_models import Table
from extractor.services.connector import ConnectionHandle

logger = logging.getLogger(__name__)


class Retriever:
    """
    Materializes query results into Tables.

    Example:
        with Connector().session("input.xls") as connection:
            table = Retriever().fetch(connection, "SELECT * FROM [Sheet1$]")
        print(table.headers, table.row_count)
    """

    def fetch(self, connection: ConnectionHandle, query: str) -> Table:
        """
        Execute a query and read every row.

        Args:
            connection: An open connection.
            query: The query text.

        Returns:
            Table holding the headers and flattened cells. A result with no
            columns gives an empty Table.

        Raises:
            QueryError: If the query is blank, the connection is closed, the
                driver rejects the query, or a row has the wrong width.
        """
        if not query or not query.strip():
            raise QueryError(query or "", reason="Query is empty")
        if not connection.is_open:
            raise QueryError(query, reason="Connection is not open")

        try:
            cursor = connection.cursor()
        except Exception as e:
            raise QueryError(query, reason=str(e)) from e

        try:
            return self._read(cursor, query)
        finally:
            cursor.close()

    def _read(self, cursor: Any, query: str) -> Table:
        try:
            cursor.execute(query)
        except Exception as e:
            raise QueryError(query, reason=str(e)) from e

        description = cursor.description or []
        column_count = len(description)
        if column_count == 0:
            logger.info("Query returned no columns: %s", query)
            return Table.empty()

        headers = [str(column[0]) for column in description]
        cells: list[Any] = []

        try:
            for row_number, row in enumerate(cursor):
                values = list(row)
                if len(values) != column_count:
                    raise QueryError(
                        query,
                        reason=f"Row {row_number} has {len(values)} values, expected {column_count}",
                    )
                cells.extend(values)
        except ExtractorError:
            raise
        except Exception as e:
            raise QueryError(query, reason=str(e)) from e

        table = Table(headers=headers, column_count=column_count, cells=cells)
        logger.info(
            "Retrieved %d rows of %d columns",
            table.row_count,
            table.column_count,
        )
        return table
