"""Page rasterisation for OCR.

Each page is rendered inside its own temporary directory; the directory
and every file in it are removed when the ``render`` context exits, whether
recognition succeeded, failed or was interrupted.
"""

import io
import logging
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from PIL import Image, UnidentifiedImageError
from pdf2image import convert_from_path
from pdf2image.exceptions import (
    PDFInfoNotInstalledError,
    PDFPageCountError,
    PDFPopplerTimeoutError,
    PDFSyntaxError,
)
from pypdf import PdfReader
from pypdf.errors import PyPdfError

from statement_ocr.core.exceptions import DocumentOpenError, PageRenderError

logger = logging.getLogger(__name__)

# Rendering density is a fixed accuracy/cost tradeoff, not a per-call option.
RENDER_DPI = 200
RENDER_SIZE = (2480, 3508)

PDF_MIME_TYPE = "application/pdf"
# Modes tesseract input can be written in without conversion.
OCR_IMAGE_MODES = ("RGB", "L")


class PageRasterizer:
    """Converts document pages into PIL images.

    PDFs are rendered with poppler (via pdf2image); image uploads are
    their own raster, one page per frame.
    """

    def __init__(self, poppler_path: str | None = None):
        self.poppler_path = poppler_path

    def page_count(self, data: bytes, mime_type: str) -> int:
        """Number of pages in the document.

        Raises:
            DocumentOpenError: If the container cannot be opened at all
        """
        if mime_type == PDF_MIME_TYPE:
            return len(open_pdf(data).pages)

        with _open_image(io.BytesIO(data)) as image:
            return getattr(image, "n_frames", 1)

    @contextmanager
    def render(
        self,
        page_index: int,
        data: bytes,
        mime_type: str,
        timeout: int | None = None,
    ) -> Iterator[Image.Image]:
        """Render one page (0-based) as a scoped image.

        Args:
            page_index: Page to render
            data: Full document bytes
            mime_type: Normalised MIME type
            timeout: Seconds poppler may spend on the page

        Yields:
            Loaded PIL image, valid only inside the ``with`` block

        Raises:
            PageRenderError: If this page cannot be rendered
        """
        with tempfile.TemporaryDirectory(prefix="statement-ocr-") as work_dir:
            if mime_type == PDF_MIME_TYPE:
                image = self._render_pdf_page(page_index, data, Path(work_dir), timeout)
            else:
                image = self._load_image_frame(page_index, data, mime_type, Path(work_dir))
            try:
                yield image
            finally:
                image.close()

    def _render_pdf_page(
        self, page_index: int, data: bytes, work_dir: Path, timeout: int | None
    ) -> Image.Image:
        source = work_dir / "input.pdf"
        source.write_bytes(data)
        try:
            paths = convert_from_path(
                str(source),
                dpi=RENDER_DPI,
                size=RENDER_SIZE,
                first_page=page_index + 1,
                last_page=page_index + 1,
                fmt="png",
                output_folder=str(work_dir),
                paths_only=True,
                poppler_path=self.poppler_path,
                timeout=timeout,
            )
        except (
            PDFInfoNotInstalledError,
            PDFPageCountError,
            PDFPopplerTimeoutError,
            PDFSyntaxError,
            OSError,
        ) as e:
            raise PageRenderError(page_index, {"reason": str(e)}) from e

        if not paths:
            raise PageRenderError(page_index, {"reason": "renderer produced no image"})

        with Image.open(paths[0]) as rendered:
            return ocr_ready(rendered)

    def _load_image_frame(
        self, page_index: int, data: bytes, mime_type: str, work_dir: Path
    ) -> Image.Image:
        extension = mime_type.split("/")[-1] or "png"
        source = work_dir / f"image.{extension}"
        source.write_bytes(data)
        try:
            with Image.open(source) as image:
                if page_index:
                    image.seek(page_index)
                frame = ocr_ready(image)
        except (UnidentifiedImageError, EOFError, OSError, ValueError) as e:
            raise PageRenderError(page_index, {"reason": str(e)}) from e
        return frame


def ocr_ready(image: Image.Image) -> Image.Image:
    """Detached copy of ``image`` in a mode tesseract accepts (CMYK scans become RGB)."""
    if image.mode in OCR_IMAGE_MODES:
        return image.copy()
    return image.convert("RGB")

def open_pdf(data: bytes) -> PdfReader:
    """Open PDF bytes with pypdf.

    Raises:
        DocumentOpenError: If the bytes are not a readable PDF
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        # Some statements are encrypted with an empty user password.
        if reader.is_encrypted and not reader.decrypt(""):
            raise DocumentOpenError({"reason": "PDF password required"})
        # Touch the page tree so structural corruption surfaces here.
        len(reader.pages)
    except (PyPdfError, ValueError, KeyError, OSError) as e:
        raise DocumentOpenError({"reason": str(e)}) from e
    return reader


def _open_image(stream: io.BytesIO) -> Image.Image:
    try:
        return Image.open(stream)
    except (UnidentifiedImageError, OSError) as e:
        raise DocumentOpenError({"reason": str(e)}) from e
