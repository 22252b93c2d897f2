"""
Data models for the extract pipeline.

Contains Pydantic models for stage values and run configuration.
"""

from extractor.models.extract_models import (
    DEFAULT_QUERY,
    ConnectionDescriptor,
    ExtractRequest,
    ExtractResponse,
    FormattedTable,
    SourceKind,
    Table,
    WriteResult,
)

__all__ = [
    "DEFAULT_QUERY",
    "SourceKind",
    "ConnectionDescriptor",
    "Table",
    "FormattedTable",
    "WriteResult",
    "ExtractRequest",
    "ExtractResponse",
]
