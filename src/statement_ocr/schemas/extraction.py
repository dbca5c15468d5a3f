"""Result of turning document bytes into plain text."""

from enum import Enum

from pydantic import BaseModel, Field

from statement_ocr.core.errors import get_suggestion, get_user_message, is_retryable


class ExtractionProvider(str, Enum):
    """Which strategy produced the text."""

    EMBEDDED = "embedded"
    RECOGNIZED = "recognized"
    NONE = "none"


class ExtractionResult(BaseModel):
    """Outcome of a single extraction call.

    Failure is a value, not an exception: ``error`` is set, ``text`` is empty
    and ``provider`` is ``none``.
    """

    text: str = Field(default="", description="Extracted plain text")
    confidence: float | None = Field(
        None, ge=0, le=100, description="Mean OCR confidence over recognised pages"
    )
    provider: ExtractionProvider = Field(..., description="Strategy that produced the text")
    error: str | None = Field(None, description="User-facing failure message")
    error_code: str | None = Field(None, description="Error catalog code")
    suggestion: str | None = Field(None, description="What the user can do about the error")
    retryable: bool = Field(default=False, description="Whether the caller may retry")
    pages_processed: int = Field(default=0, description="Pages that yielded text")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error_code: str, detail: str | None = None) -> "ExtractionResult":
        """Build a failed result from a catalog code."""
        message = get_user_message(error_code)
        if detail:
            message = f"{message} ({detail})"
        return cls(
            text="",
            provider=ExtractionProvider.NONE,
            error=message,
            error_code=error_code,
            suggestion=get_suggestion(error_code),
            retryable=is_retryable(error_code),
        )

    def to_json_dict(self) -> dict:
        data = {"text": self.text, "provider": self.provider.value}
        if self.confidence is not None:
            data["confidence"] = self.confidence
        if self.error is not None:
            data["error"] = self.error
            data["errorCode"] = self.error_code
            data["suggestion"] = self.suggestion
            data["retryable"] = self.retryable
        return data
