"""
Source format detection from file paths.

Maps the extension of a source path to the SourceKind that selects a
connection strategy. No I/O is performed.

Mapping:
    - .mdb   -> SourceKind.ACCESS_OLD (Jet OLE DB)
    - .accdb -> SourceKind.ACCESS_NEW (ACE OLE DB)
    - .xls   -> SourceKind.EXCEL (Excel ODBC driver)
    - .xlsx, .xlsm -> SourceKind.WORKBOOK (python-calamine)

Example:
    kind = detect("C:\\data\\customers.accdb")  # SourceKind.ACCESS_NEW
"""

import re

from extractor.exceptions.extract_exceptions import (
    InvalidPathError,
    UnsupportedExtensionError,
)
from extractor.models.extract_models import SourceKind

EXTENSION_KINDS: dict[str, SourceKind] = {
    ".mdb": SourceKind.ACCESS_OLD,
    ".accdb": SourceKind.ACCESS_NEW,
    ".xls": SourceKind.EXCEL,
    ".xlsx": SourceKind.WORKBOOK,
    ".xlsm": SourceKind.WORKBOOK,
}

# Either separator ends a segment.
_SEPARATORS = re.compile(r"[\\/]")


def find_extension(path: str) -> str:
    """
    Return the extension of the last path segment.

    The extension starts at the first "." of the segment, so
    "report.backup.mdb" yields ".backup.mdb".

    Args:
        path: Path to a source file.

    Returns:
        The extension including its leading dot.

    Raises:
        InvalidPathError: If the last segment contains no ".".
    """
    name = _SEPARATORS.split(str(path))[-1]
    index = name.find(".")
    if index == -1:
        raise InvalidPathError(str(path))
    return name[index:]


def classify(extension: str) -> SourceKind:
    """
    Look up the SourceKind for an extension.

    Args:
        extension: Extension including its leading dot. Case is ignored.

    Returns:
        The matching SourceKind.

    Raises:
        UnsupportedExtensionError: If the extension is not mapped.
    """
    kind = EXTENSION_KINDS.get(extension.lower())
    if kind is None:
        raise UnsupportedExtensionError(
            extension=extension,
            supported=list(EXTENSION_KINDS),
        )
    return kind


def detect(path: str) -> SourceKind:
    """Classify a path by its extension."""
    return classify(find_extension(path))
