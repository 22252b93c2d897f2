"""
Custom exceptions for the extract pipeline.

Provides type-safe, descriptive exceptions for error handling throughout
the application.
"""

from extractor.exceptions.extract_exceptions import (
    ExtractorError,
    FormatError,
    InvalidPathError,
    QueryError,
    UnsupportedExtensionError,
    WriteError,
)
from extractor.exceptions.extract_exceptions import (
    ConnectionError as SourceConnectionError,
)

__all__ = [
    "ExtractorError",
    "InvalidPathError",
    "UnsupportedExtensionError",
    "SourceConnectionError",
    "QueryError",
    "FormatError",
    "WriteError",
]
