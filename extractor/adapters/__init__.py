"""
Adapters for data sources and output files.

- format_detector: Maps source file extensions to source kinds
- connection_strategies: Connection string templates and driver openers
- CalamineConnection: Query-able connection over a workbook (python-calamine)
- XlsxWriterAdapter: Output spreadsheet writing using XlsxWriter
"""

from extractor.adapters.calamine_adapter import CalamineConnection
from extractor.adapters.connection_strategies import STRATEGIES, ConnectionStrategy
from extractor.adapters.format_detector import classify, detect, find_extension
from extractor.adapters.xlsxwriter_adapter import XlsxWriterAdapter

__all__ = [
    "CalamineConnection",
    "ConnectionStrategy",
    "STRATEGIES",
    "XlsxWriterAdapter",
    "classify",
    "detect",
    "find_extension",
]
