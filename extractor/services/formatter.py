"""
Per-column text transformation of retrieved tables.

Each word of a text cell in the designated column is lowercased, reversed
and given a capital first letter: "Hello World" becomes "Olleh Dlrow".
Every other cell is copied unchanged.
"""

import logging
from typing import Any

from extractor.exceptions.extract_exceptions import FormatError
from extractor.models.extract_models import FormattedTable, Table

logger = logging.getLogger(__name__)


def reverse_words(text: str) -> str:
    """
    Lowercase, reverse and capitalize every word of a string.

    Words are separated by any run of whitespace and rejoined with single
    spaces.

    Args:
        text: The text to transform.

    Returns:
        The transformed text.
    """
    words = []
    for word in text.split():
        reversed_word = word.lower()[::-1]
        words.append(reversed_word[:1].upper() + reversed_word[1:])
    return " ".join(words)


class Formatter:
    """
    Applies reverse_words to one column of a Table.

    Attributes:
        column: Zero-based column whose cells are transformed.
        strict: Whether a non-text value in that column raises FormatError.
            Empty cells (None) are always passed through.
    """

    def __init__(self, column: int = 1, strict: bool = True) -> None:
        if column < 0:
            raise FormatError(reason=f"Column index must not be negative: {column}")
        self.column = column
        self.strict = strict

    def _format_cell(self, index: int, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            return reverse_words(value)
        if self.strict:
            raise FormatError(
                reason=f"Expected text, got {type(value).__name__}: {value!r}",
                index=index,
            )
        return value

    def format(self, table: Table) -> FormattedTable:
        """
        Transform the designated column of a table.

        Args:
            table: The retrieved table.

        Returns:
            A new FormattedTable with the same headers and column count.

        Raises:
            FormatError: If a strict formatter meets a non-text value in
                the designated column.
        """
        column_count = table.column_count
        if column_count == 0:
            return FormattedTable.empty()

        if self.column >= column_count:
            logger.debug("Column %d is outside a table of %d columns", self.column, column_count)

        cells = [
            self._format_cell(index, value) if index % column_count == self.column else value
            for index, value in enumerate(table.cells)
        ]

        logger.debug("Formatted column %d of %d rows", self.column, table.row_count)
        return FormattedTable(
            headers=table.headers,
            column_count=column_count,
            cells=cells,
        )
