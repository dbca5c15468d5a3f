"""Document text extraction.

Chooses a strategy per document: embedded PDF text when there is enough
of it, otherwise rasterise-and-recognise page by page. Expected failures
are returned as ``ExtractionResult.error``; only a document that cannot be
opened at all raises.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from time import monotonic

import pytesseract

from statement_ocr.config import settings
from statement_ocr.core.exceptions import PageRenderError, RecognitionEngineUnavailable
from statement_ocr.core.logging import preview
from statement_ocr.ocr.rasterizer import PDF_MIME_TYPE, PageRasterizer, open_pdf
from statement_ocr.ocr.recognition import RecognitionAdapter, RecognitionOutput
from statement_ocr.schemas.extraction import ExtractionProvider, ExtractionResult

logger = logging.getLogger(__name__)

# Embedded text at least this long skips OCR entirely.
EMBEDDED_TEXT_MIN_LENGTH = 100
# Pages beyond the cap are skipped to bound cost.
MAX_OCR_PAGES = 10
PAGE_SEPARATOR = "\n\n"

SUPPORTED_IMAGE_TYPES = frozenset(
    {
        "image/png",
        "image/jpeg",
        "image/tiff",
        "image/bmp",
        "image/gif",
        "image/webp",
    }
)
MIME_ALIASES = {"image/jpg": "image/jpeg", "image/pjpeg": "image/jpeg", "image/x-png": "image/png"}


def normalize_mime_type(mime_type: str | None) -> str:
    """Lower-case, strip parameters and resolve common aliases."""
    base = (mime_type or "").split(";", 1)[0].strip().lower()
    return MIME_ALIASES.get(base, base)


def is_supported(mime_type: str) -> bool:
    return mime_type == PDF_MIME_TYPE or mime_type in SUPPORTED_IMAGE_TYPES


class DocumentTextExtractor:
    """Turns document bytes into plain text.

    Pages are processed sequentially by default. With ``max_workers > 1``
    pages run on a bounded thread pool and their text is merged back in
    page order, so first-match header heuristics downstream see the same
    text either way.

    Example:
        >>> extractor = DocumentTextExtractor()
        >>> result = extractor.extract(pdf_bytes, "application/pdf")
        >>> result.provider
        <ExtractionProvider.EMBEDDED: 'embedded'>
    """

    def __init__(
        self,
        rasterizer: PageRasterizer | None = None,
        recognizer: RecognitionAdapter | None = None,
        max_workers: int | None = None,
        page_timeout: int | None = None,
        document_timeout: int | None = None,
    ):
        self.rasterizer = rasterizer or PageRasterizer(poppler_path=settings.poppler_path)
        self.recognizer = recognizer or RecognitionAdapter(
            tesseract_cmd=settings.tesseract_cmd,
            language=settings.ocr_language,
        )
        self.max_workers = max(1, max_workers or settings.ocr_max_workers)
        self.page_timeout = page_timeout if page_timeout is not None else settings.ocr_page_timeout_seconds
        self.document_timeout = (
            document_timeout if document_timeout is not None else settings.ocr_document_timeout_seconds
        )

    def extract(self, data: bytes, mime_type: str) -> ExtractionResult:
        """Extract text from a PDF or image.

        Args:
            data: Raw document bytes
            mime_type: Declared MIME type

        Returns:
            ExtractionResult; ``error`` is set when no text could be obtained

        Raises:
            DocumentOpenError: If the document container cannot be opened
        """
        mime = normalize_mime_type(mime_type)
        if not is_supported(mime):
            logger.warning("Unsupported document type: %r", mime_type)
            return ExtractionResult.failure("API_001", mime or "unknown")

        if mime == PDF_MIME_TYPE:
            embedded = self.extract_embedded_text(data)
            if len(embedded.strip()) >= EMBEDDED_TEXT_MIN_LENGTH:
                logger.info("Using embedded PDF text (%d chars)", len(embedded))
                return ExtractionResult(
                    text=embedded,
                    provider=ExtractionProvider.EMBEDDED,
                )
            logger.info("Embedded text too short (%d chars), falling back to OCR", len(embedded.strip()))

        return self._recognize_document(data, mime)

    def extract_embedded_text(self, data: bytes) -> str:
        """Text already present in the PDF content streams.

        Raises:
            DocumentOpenError: If the bytes are not a readable PDF
        """
        reader = open_pdf(data)
        texts = []
        for number, page in enumerate(reader.pages, start=1):
            try:
                texts.append(page.extract_text() or "")
            except (ValueError, KeyError, TypeError) as e:
                logger.warning("Embedded text extraction failed on page %d: %s", number, e)
        return "\n".join(t for t in texts if t.strip())

    def _recognize_document(self, data: bytes, mime: str) -> ExtractionResult:
        total_pages = self.rasterizer.page_count(data, mime)
        pages = min(total_pages, MAX_OCR_PAGES)
        if total_pages > MAX_OCR_PAGES:
            logger.info("Document has %d pages, recognising the first %d", total_pages, pages)

        try:
            self.recognizer.initialize()
        except RecognitionEngineUnavailable as e:
            return ExtractionResult.failure(e.error_code)

        deadline = monotonic() + self.document_timeout if self.document_timeout else None
        if self.max_workers > 1 and pages > 1:
            outputs, timed_out = self._recognize_parallel(data, mime, pages, deadline)
        else:
            outputs, timed_out = self._recognize_sequential(data, mime, pages, deadline)

        texts = []
        confidences = []
        for page_index in sorted(outputs):
            output = outputs[page_index]
            if output.text and output.text.strip():
                texts.append(output.text + PAGE_SEPARATOR)
                confidences.append(output.confidence)

        full_text = "".join(texts)
        if not full_text.strip():
            if timed_out:
                return ExtractionResult.failure("OCR_003")
            return ExtractionResult.failure("OCR_001")

        confidence = sum(confidences) / len(confidences)
        logger.info(
            "Recognised %d/%d pages (confidence %.1f): %s",
            len(texts),
            pages,
            confidence,
            preview(full_text),
        )
        return ExtractionResult(
            text=full_text,
            confidence=confidence,
            provider=ExtractionProvider.RECOGNIZED,
            pages_processed=len(texts),
        )

    def _recognize_sequential(
        self, data: bytes, mime: str, pages: int, deadline: float | None
    ) -> tuple[dict[int, RecognitionOutput], bool]:
        outputs: dict[int, RecognitionOutput] = {}
        for page_index in range(pages):
            if deadline is not None and monotonic() >= deadline:
                logger.warning("Document deadline reached, skipping pages %d-%d", page_index + 1, pages)
                return outputs, True
            output = self._recognize_page(page_index, data, mime)
            if output is not None:
                outputs[page_index] = output
        return outputs, False

    def _recognize_parallel(
        self, data: bytes, mime: str, pages: int, deadline: float | None
    ) -> tuple[dict[int, RecognitionOutput], bool]:
        outputs: dict[int, RecognitionOutput] = {}
        timeout = max(0.0, deadline - monotonic()) if deadline is not None else None

        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="ocr-page")
        try:
            futures = {
                executor.submit(self._recognize_page, page_index, data, mime): page_index
                for page_index in range(pages)
            }
            done, not_done = wait(futures, timeout=timeout)
            for future in not_done:
                future.cancel()
            for future in done:
                output = future.result()
                if output is not None:
                    outputs[futures[future]] = output
        finally:
            # Pages already running finish under their own per-page timeout.
            executor.shutdown(wait=False, cancel_futures=True)

        if not_done:
            logger.warning("Document deadline reached, %d page(s) not recognised", len(not_done))
        return outputs, bool(not_done)

    def _recognize_page(self, page_index: int, data: bytes, mime: str) -> RecognitionOutput | None:
        """Render and recognise one page; page failures are logged, not raised.

        ``page_timeout`` is one budget for the whole page: recognition gets
        whatever rendering left of it.
        """
        started = monotonic()
        try:
            with self.rasterizer.render(page_index, data, mime, timeout=self.page_timeout or None) as image:
                remaining = self._page_time_left(started)
                if remaining is not None and remaining <= 0:
                    logger.error("Page %d used its time budget while rendering", page_index + 1)
                    return None
                output = self.recognizer.recognize(image, timeout=remaining)
        except PageRenderError as e:
            logger.error("Could not render page %d: %s", page_index + 1, e.details.get("reason"))
            return None
        except (pytesseract.TesseractError, RuntimeError, OSError) as e:
            logger.error("Recognition failed on page %d: %s", page_index + 1, e)
            return None

        logger.debug("Page %d recognised (confidence %.1f)", page_index + 1, output.confidence)
        return output

    def _page_time_left(self, started: float) -> float | None:
        if not self.page_timeout:
            return None
        return self.page_timeout - (monotonic() - started)
