"""Command line interface.

    statement-ocr extract statement.pdf
    statement-ocr parse statement.txt
    statement-ocr process scan.png --mime-type image/png
    statement-ocr diagnose statement.txt
"""

import argparse
import json
import logging
import mimetypes
import sys
from pathlib import Path

from statement_ocr.config import settings
from statement_ocr.core.exceptions import DocumentOpenError
from statement_ocr.core.logging import setup_logging
from statement_ocr.parsers.diagnostics import diagnose
from statement_ocr.services.statement import get_statement_service

logger = logging.getLogger(__name__)


def _mime_type(path: Path, explicit: str | None) -> str:
    if explicit:
        return explicit
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "application/octet-stream"


def _emit(payload: dict) -> None:
    print(json.dumps(payload, indent=2))


def cmd_extract(args) -> int:
    path = Path(args.file)
    result = get_statement_service().extract_text(path.read_bytes(), _mime_type(path, args.mime_type))
    _emit(result.to_json_dict())
    return 0 if result.ok else 1


def cmd_parse(args) -> int:
    text = Path(args.file).read_text(encoding="utf-8")
    _emit(get_statement_service().parse_statement(text).to_json_dict())
    return 0


def cmd_process(args) -> int:
    path = Path(args.file)
    result = get_statement_service().process_document(path.read_bytes(), _mime_type(path, args.mime_type))
    _emit(result.to_json_dict())
    return 0 if result.error is None else 1


def cmd_diagnose(args) -> int:
    report = diagnose(Path(args.file).read_text(encoding="utf-8"))
    payload = report.model_dump()
    payload["discrepancy"] = report.discrepancy
    _emit(payload)
    if report.discrepancy:
        logger.warning(
            "Discrepancy: %d lines matched a pattern but %d transactions were extracted",
            report.matched_lines,
            report.transactions_extracted,
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="statement-ocr",
        description="Extract and parse bank statements",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", help="Document to plain text")
    extract.add_argument("file")
    extract.add_argument("--mime-type", help="Override the MIME type guessed from the file name")
    extract.set_defaults(handler=cmd_extract)

    parse = subparsers.add_parser("parse", help="Plain text file to statement JSON")
    parse.add_argument("file")
    parse.set_defaults(handler=cmd_parse)

    process = subparsers.add_parser("process", help="Document to statement JSON")
    process.add_argument("file")
    process.add_argument("--mime-type", help="Override the MIME type guessed from the file name")
    process.set_defaults(handler=cmd_process)

    diag = subparsers.add_parser("diagnose", help="Line-by-line pattern report for a text file")
    diag.add_argument("file")
    diag.set_defaults(handler=cmd_diagnose)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    try:
        return args.handler(args)
    except DocumentOpenError as e:
        logger.error("Could not open document: %s", e.details.get("reason"))
        return 2
    except FileNotFoundError as e:
        logger.error("File not found: %s", e.filename)
        return 2


if __name__ == "__main__":
    sys.exit(main())
