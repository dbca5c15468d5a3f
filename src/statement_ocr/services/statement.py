"""Statement processing entry points.

The upload pipeline calls into this module: ``extract_text`` for bytes to
text, ``parse_statement`` for text to structured data, and
``process_document`` for both. No retries happen here; those belong to
the caller.
"""

import logging

from statement_ocr.ocr.extractor import DocumentTextExtractor
from statement_ocr.parsers.statement import StatementParser
from statement_ocr.schemas.extraction import ExtractionResult
from statement_ocr.schemas.statement import BankStatementData, StatementProcessingResult

logger = logging.getLogger(__name__)


class StatementOCRService:
    """Facade over DocumentTextExtractor and StatementParser.

    Holds no per-call state. The only long-lived resource is the
    extractor's recognition engine handle.

    Example:
        >>> service = StatementOCRService()
        >>> result = service.process_document(pdf_bytes, "application/pdf")
        >>> result.parsed.total_debits
        Decimal('2349.23')
    """

    def __init__(
        self,
        extractor: DocumentTextExtractor | None = None,
        parser: StatementParser | None = None,
    ):
        self.extractor = extractor or DocumentTextExtractor()
        self.parser = parser or StatementParser()

    def extract_text(self, data: bytes, mime_type: str) -> ExtractionResult:
        """Document bytes to plain text (see DocumentTextExtractor.extract)."""
        return self.extractor.extract(data, mime_type)

    def parse_statement(self, raw_text: str) -> BankStatementData:
        """Plain text to structured statement data."""
        return self.parser.parse(raw_text)

    def process_document(self, data: bytes, mime_type: str) -> StatementProcessingResult:
        """Extract and parse one uploaded document.

        Args:
            data: Raw document bytes
            mime_type: Declared MIME type

        Returns:
            StatementProcessingResult; ``parsed`` is None when extraction failed
        """
        extraction = self.extract_text(data, mime_type)
        if not extraction.ok:
            logger.warning("Extraction failed: %s (%s)", extraction.error, extraction.error_code)
            return StatementProcessingResult(
                raw_text="",
                provider=extraction.provider,
                error=extraction.error,
                error_code=extraction.error_code,
                suggestion=extraction.suggestion,
                retryable=extraction.retryable,
            )

        parsed = self.parse_statement(extraction.text)
        logger.info(
            "Processed document via %s: %d transactions",
            extraction.provider.value,
            len(parsed.transactions),
        )
        return StatementProcessingResult(
            raw_text=extraction.text,
            provider=extraction.provider,
            confidence=extraction.confidence,
            parsed=parsed,
        )


# Process-wide service; owns the single recognition engine handle.
_service_instance: StatementOCRService | None = None


def get_statement_service() -> StatementOCRService:
    """Get or create the global StatementOCRService instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = StatementOCRService()
    return _service_instance


def extract_text(data: bytes, mime_type: str) -> ExtractionResult:
    """Convenience function using the global service."""
    return get_statement_service().extract_text(data, mime_type)


def parse_statement(raw_text: str) -> BankStatementData:
    """Convenience function using the global service."""
    return get_statement_service().parse_statement(raw_text)


def process_document(data: bytes, mime_type: str) -> StatementProcessingResult:
    """Convenience function using the global service."""
    return get_statement_service().process_document(data, mime_type)
