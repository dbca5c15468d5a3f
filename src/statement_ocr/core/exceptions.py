"""Custom exception classes for document extraction.

Each exception maps to an error code defined in errors.py. Only
DocumentOpenError is allowed to escape the extraction pipeline; the rest
are caught and encoded in ExtractionResult.error.
"""

from typing import Any


class StatementProcessingError(Exception):
    """Base exception for all statement processing errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "OCR_001")
        details: Additional context about the error (for logging)
    """

    def __init__(self, error_code: str, details: dict[str, Any] | None = None):
        self.error_code = error_code
        self.details = details or {}
        super().__init__(error_code)


class DocumentOpenError(StatementProcessingError):
    """Raised when the document container cannot be opened at all.

    Maps to PARSE_002. This is the one fatal condition of extraction.
    """

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__("PARSE_002", details)


class RecognitionEngineUnavailable(StatementProcessingError):
    """Raised when the OCR engine cannot be initialised (OCR_002)."""

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__("OCR_002", details)


class PageRenderError(StatementProcessingError):
    """Raised when a single page cannot be rasterised.

    Page-level only: the extractor logs it and moves on to the next page.
    """

    def __init__(self, page_index: int, details: dict[str, Any] | None = None):
        self.page_index = page_index
        super().__init__("OCR_001", {"page_index": page_index, **(details or {})})
