"""
Command-line entry point for the extract pipeline.

Usage:
    python -m extractor.main Input.xls Output.xlsx
    python -m extractor.main db.accdb out.xlsx --query "SELECT * FROM Customers"

Or programmatically:
    from extractor.main import run_extract
    run_extract("Input.xls", "Output.xlsx")
"""

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from extractor import __version__
from extractor.exceptions.extract_exceptions import ExtractorError
from extractor.models.extract_models import (
    DEFAULT_QUERY,
    ExtractRequest,
    ExtractResponse,
    SourceKind,
)
from extractor.services.extract_service import ExtractService


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="legacy-extractor",
        description="Copy a query result from an Access database or Excel "
        "workbook into a new spreadsheet, transforming one text column.",
    )
    parser.add_argument("source", help="Path to the .mdb, .accdb, .xls or .xlsx source")
    parser.add_argument("output", help="Path of the .xlsx file to create (overwritten)")
    parser.add_argument(
        "--query",
        default=DEFAULT_QUERY,
        help=f"Query to run against the source (default: {DEFAULT_QUERY!r})",
    )
    parser.add_argument(
        "--kind",
        choices=[kind.value for kind in SourceKind],
        help="Source kind, overriding detection from the file extension",
    )
    parser.add_argument(
        "--column",
        type=int,
        default=1,
        help="Zero-based column to transform (default: 1)",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Pass non-text values in the transformed column through unchanged",
    )
    parser.add_argument("--sheet", default="Sheet1", help="Output sheet name")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug details")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run_extract(
    source_path: str,
    output_path: str,
    query: str = DEFAULT_QUERY,
    source_kind: SourceKind | None = None,
    format_column: int = 1,
    strict_types: bool = True,
    sheet_name: str = "Sheet1",
) -> ExtractResponse:
    """
    Run the pipeline once.

    Args:
        source_path: Path to the source file.
        output_path: Path of the spreadsheet to create.
        query: Query executed against the source.
        source_kind: Optional override of the detected kind.
        format_column: Zero-based column to transform.
        strict_types: Whether non-text values in that column are errors.
        sheet_name: Output sheet name.

    Returns:
        ExtractResponse describing the written file.

    Raises:
        ExtractorError: On any pipeline failure.
    """
    request = ExtractRequest(
        source_path=source_path,
        output_path=output_path,
        query=query,
        source_kind=source_kind,
        format_column=format_column,
        strict_types=strict_types,
        sheet_name=sheet_name,
    )
    return ExtractService().extract(request)


def main(argv: list[str] | None = None) -> int:
    """
    Parse arguments, run the pipeline and report the outcome.

    Returns:
        0 on success, 1 when the pipeline fails, 2 for invalid parameters.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        response = run_extract(
            source_path=args.source,
            output_path=args.output,
            query=args.query,
            source_kind=SourceKind(args.kind) if args.kind else None,
            format_column=args.column,
            strict_types=not args.lenient,
            sheet_name=args.sheet,
        )
    except ValidationError as e:
        print(e, file=sys.stderr)
        return 2
    except ExtractorError as e:
        print(json.dumps(e.to_dict(), default=str), file=sys.stderr)
        return 1

    print(response.model_dump_json())
    return 0


if __name__ == "__main__":
    sys.exit(main())
