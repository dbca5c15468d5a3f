"""Error codes and user-friendly messages.

This module defines the error catalog for document extraction.
Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation (surfaced as ExtractionResult.error)
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the caller may retry
"""

ERROR_CATALOG: dict[str, dict] = {
    "OCR_001": {
        "code": "OCR_001",
        "message": "No text could be extracted from the document",
        "user_message": "No text could be extracted from this document.",
        "suggestion": "Upload a clearer scan or a PDF downloaded directly from your bank.",
        "retry_allowed": False,
    },
    "OCR_002": {
        "code": "OCR_002",
        "message": "Recognition engine unavailable",
        "user_message": "Text recognition is temporarily unavailable.",
        "suggestion": "Please try again later. Contact support if the problem persists.",
        "retry_allowed": True,
    },
    "OCR_003": {
        "code": "OCR_003",
        "message": "Document deadline exceeded before any page was recognised",
        "user_message": "This document took too long to process.",
        "suggestion": "Try uploading fewer pages or a smaller scan.",
        "retry_allowed": True,
    },
    "PARSE_002": {
        "code": "PARSE_002",
        "message": "Document could not be opened: corrupted or invalid file",
        "user_message": "This file appears to be corrupted or damaged.",
        "suggestion": "Try downloading the statement again from your bank's website.",
        "retry_allowed": False,
    },
    "API_001": {
        "code": "API_001",
        "message": "Unsupported document type",
        "user_message": "Only PDF and image files are supported.",
        "suggestion": "Please upload a PDF, PNG, JPEG or TIFF statement.",
        "retry_allowed": False,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details (a generic entry for unknown codes)
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def get_user_message(error_code: str) -> str:
    """Get user-friendly message for an error code."""
    return get_error(error_code)["user_message"]


def get_suggestion(error_code: str) -> str:
    """Get actionable suggestion for an error code."""
    return get_error(error_code)["suggestion"]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable."""
    return get_error(error_code)["retry_allowed"]
