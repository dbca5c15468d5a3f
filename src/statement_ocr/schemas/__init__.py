"""Data structures produced by extraction and parsing."""

from statement_ocr.schemas.extraction import ExtractionProvider, ExtractionResult
from statement_ocr.schemas.statement import (
    BankStatementData,
    ExtractedTransaction,
    StatementProcessingResult,
    TransactionDirection,
)

__all__ = [
    "BankStatementData",
    "ExtractedTransaction",
    "ExtractionProvider",
    "ExtractionResult",
    "StatementProcessingResult",
    "TransactionDirection",
]
