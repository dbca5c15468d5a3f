"""Shared logging utilities with PII filtering.

OCR output is statement text: account numbers and e-mail addresses must be
masked before any preview of it reaches a log handler.
"""

import logging
import re
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PII_PATTERNS = [
    # Account / card numbers: 8+ digits, optionally grouped by spaces or dashes
    (re.compile(r"\b\d{4}(?:[\s-]?\d{2,4}){1,4}\b(?![./]\d)"), "[ACCOUNT]"),
    # Masked numbers keep only the visible tail
    (re.compile(r"[*xX]{4,}\s?\d{4}\b"), "[MASKED]"),
    (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"), "[EMAIL]"),
]


def filter_pii(text: str) -> str:
    """Remove PII from text using regex patterns.

    Args:
        text: Input text that may contain PII

    Returns:
        Text with PII replaced by placeholders
    """
    if not text:
        return text

    filtered = text
    for pattern, replacement in PII_PATTERNS:
        filtered = pattern.sub(replacement, filtered)
    return filtered


def preview(text: str, limit: int = 200) -> str:
    """Short, PII-filtered, single-line preview of document text for logs."""
    flattened = " ".join(text.split())
    return filter_pii(flattened[:limit])


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """
    Configure root logger.

    Args:
        level: Log level ('DEBUG', 'INFO', 'WARNING', 'ERROR')
        log_file: Optional log file path
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
