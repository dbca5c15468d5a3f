"""Unit tests for StatementOCRService."""

from decimal import Decimal
from unittest.mock import Mock

import pytest

from statement_ocr.core.errors import get_suggestion
from statement_ocr.ocr.extractor import DocumentTextExtractor
from statement_ocr.parsers.statement import StatementParser
from statement_ocr.schemas.extraction import ExtractionProvider, ExtractionResult
from statement_ocr.services import statement as statement_module
from statement_ocr.services.statement import StatementOCRService, get_statement_service


@pytest.fixture
def mock_extractor():
    return Mock(spec=DocumentTextExtractor)


@pytest.fixture
def service(mock_extractor):
    return StatementOCRService(extractor=mock_extractor, parser=StatementParser())


class TestProcessDocument:
    """Extraction followed by parsing."""

    def test_success(self, service, mock_extractor, sample_statement_text):
        mock_extractor.extract.return_value = ExtractionResult(
            text=sample_statement_text,
            confidence=91.0,
            provider=ExtractionProvider.RECOGNIZED,
        )

        result = service.process_document(b"%PDF-", "application/pdf")

        mock_extractor.extract.assert_called_once_with(b"%PDF-", "application/pdf")
        assert result.error is None
        assert result.raw_text == sample_statement_text
        assert result.confidence == 91.0
        assert result.parsed.bank_name == "CHASE"
        assert len(result.parsed.transactions) == 31
        assert result.parsed.total_debits == Decimal("2349.23")

    def test_extraction_failure_skips_parsing(self, mock_extractor):
        parser = Mock(spec=StatementParser)
        service = StatementOCRService(extractor=mock_extractor, parser=parser)
        mock_extractor.extract.return_value = ExtractionResult.failure("OCR_001")

        result = service.process_document(b"\x89PNG", "image/png")

        parser.parse.assert_not_called()
        assert result.parsed is None
        assert result.raw_text == ""
        assert result.error_code == "OCR_001"
        assert result.provider == ExtractionProvider.NONE
        assert result.retryable is False
        assert result.suggestion == get_suggestion("OCR_001")

    def test_json_payload(self, service, mock_extractor):
        mock_extractor.extract.return_value = ExtractionResult(
            text="CHASE\n01/02/2024 DEPOSIT 100.00 +",
            provider=ExtractionProvider.EMBEDDED,
        )

        payload = service.process_document(b"%PDF-", "application/pdf").to_json_dict()

        assert payload["provider"] == "embedded"
        assert payload["parsedData"]["bankName"] == "CHASE"
        assert payload["parsedData"]["totalCredits"] == 100.0
        assert "error" not in payload


def test_parse_statement_delegates(service):
    data = service.parse_statement("")

    assert data.transactions == []
    assert data.total_debits == Decimal("0")


class TestGlobalService:
    """Process-wide singleton and convenience functions."""

    def test_singleton(self, monkeypatch):
        monkeypatch.setattr(statement_module, "_service_instance", None)

        first = get_statement_service()
        second = get_statement_service()

        assert first is second
        assert not first.extractor.recognizer.initialized

    def test_module_functions_use_global_service(self, monkeypatch, mock_extractor):
        mock_extractor.extract.return_value = ExtractionResult.failure("API_001", "text/plain")
        monkeypatch.setattr(
            statement_module,
            "_service_instance",
            StatementOCRService(extractor=mock_extractor, parser=StatementParser()),
        )

        assert statement_module.extract_text(b"x", "text/plain").error_code == "API_001"
        assert statement_module.process_document(b"x", "text/plain").parsed is None
        assert statement_module.parse_statement("Wells Fargo").bank_name == "Wells Fargo"
