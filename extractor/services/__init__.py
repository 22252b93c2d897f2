"""
Service layer for the extract pipeline.

Contains the connect, retrieve and format stages and the service that runs
them in sequence.
"""

from extractor.services.connector import ConnectionHandle, Connector
from extractor.services.extract_service import ExtractService
from extractor.services.formatter import Formatter, reverse_words
from extractor.services.retriever import Retriever

__all__ = [
    "ConnectionHandle",
    "Connector",
    "ExtractService",
    "Formatter",
    "Retriever",
    "reverse_words",
]
