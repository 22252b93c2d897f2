"""
legacy-extractor: extract-transform-load for legacy tabular sources.

This package reads a query result from an Access database or an Excel
workbook, transforms one text column, and writes the result to a new
spreadsheet.

Architecture:
    - Connection strategies selected by file extension (OLE DB, ODBC, calamine)
    - Service layer composing connect, retrieve, format and write stages
    - XlsxWriter for writing the output workbook
"""

__version__ = "0.1.0"
