"""Document text extraction: embedded PDF text, or rasterise and recognise."""

from statement_ocr.ocr.extractor import DocumentTextExtractor, normalize_mime_type
from statement_ocr.ocr.rasterizer import PageRasterizer
from statement_ocr.ocr.recognition import RecognitionAdapter, RecognitionOutput

__all__ = [
    "DocumentTextExtractor",
    "PageRasterizer",
    "RecognitionAdapter",
    "RecognitionOutput",
    "normalize_mime_type",
]
