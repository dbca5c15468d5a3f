"""Heuristic parsing of bank statement text.

StatementParser handles the generic line grammar; BankDetector names the
institution; diagnose() explains a parse for product review.
"""

from statement_ocr.parsers.detector import BankDetector
from statement_ocr.parsers.diagnostics import ParseDiagnostics, diagnose
from statement_ocr.parsers.patterns import TRANSACTION_PATTERNS, parse_amount
from statement_ocr.parsers.statement import StatementParser, classify_direction

__all__ = [
    "BankDetector",
    "ParseDiagnostics",
    "StatementParser",
    "TRANSACTION_PATTERNS",
    "classify_direction",
    "diagnose",
    "parse_amount",
]
