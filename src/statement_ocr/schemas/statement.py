"""Structured statement data produced by the heuristic parser.

These models are created once per call and handed to the caller; the
persistence layer owns everything after that.
"""

import re
import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from statement_ocr.schemas.extraction import ExtractionProvider

MAX_DESCRIPTION_LENGTH = 200

_DATE_PARTS = re.compile(r"[/-]")


class TransactionDirection(str, Enum):
    """Money flow of a transaction."""

    DEBIT = "debit"
    CREDIT = "credit"


def _json_number(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


class ExtractedTransaction(BaseModel):
    """A single transaction line, in document order.

    ``date`` is kept exactly as found in the text; use ``calendar_date()``
    when a real date is needed.
    """

    date: str = Field(..., description="Date as it appears in the statement")
    description: str = Field(..., description="Transaction description")
    amount: Decimal = Field(..., gt=0, description="Positive amount")
    direction: TransactionDirection = Field(..., description="'debit' or 'credit'")
    balance: Decimal | None = Field(None, description="Running balance, when printed")

    @field_validator("date")
    @classmethod
    def date_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Date cannot be empty")
        return v.strip()

    @field_validator("description")
    @classmethod
    def description_trimmed(cls, v: str) -> str:
        """Trim and cap the description."""
        if not v or not v.strip():
            raise ValueError("Description cannot be empty")
        return v.strip()[:MAX_DESCRIPTION_LENGTH]

    def calendar_date(self, default_year: int | None = None) -> datetime.date | None:
        """Convert ``MM/DD``, ``MM/DD/YY`` or ``MM/DD/YYYY`` to a date.

        Two-digit years are taken as 20YY. ``MM/DD`` uses ``default_year``
        (current year when omitted). Returns None when the parts do not form
        a valid calendar date.
        """
        parts = _DATE_PARTS.split(self.date)
        try:
            if len(parts) == 2:
                month, day = int(parts[0]), int(parts[1])
                year = default_year or datetime.date.today().year
            elif len(parts) == 3:
                month, day = int(parts[0]), int(parts[1])
                year = int(parts[2])
                if len(parts[2]) == 2:
                    year += 2000
            else:
                return None
            return datetime.date(year, month, day)
        except ValueError:
            return None

    def signature(self, default_year: int | None = None) -> str | None:
        """Dedupe key ``YYYY-MM-DD_description_amount_direction``.

        The amount is written without trailing zeros (``12.5``, ``100``) so
        keys match those already stored by the upload pipeline.
        """
        txn_date = self.calendar_date(default_year)
        if txn_date is None:
            return None
        amount = format(self.amount.normalize(), "f")
        return f"{txn_date.isoformat()}_{self.description}_{amount}_{self.direction.value}"

    def to_json_dict(self) -> dict:
        data = {
            "date": self.date,
            "description": self.description,
            "amount": float(self.amount),
            "type": self.direction.value,
        }
        if self.balance is not None:
            data["balance"] = float(self.balance)
        return data


class BankStatementData(BaseModel):
    """Header fields plus ordered transactions of one statement.

    Totals are derived from ``transactions``; build instances through
    ``from_transactions`` so they can never disagree.
    """

    account_number: str | None = Field(None, description="Account number or masked tail")
    bank_name: str | None = Field(None, description="Institution name as found")
    period: str | None = Field(None, description="Statement period as found")
    transactions: list[ExtractedTransaction] = Field(default_factory=list)
    total_debits: Decimal = Field(default=Decimal("0"))
    total_credits: Decimal = Field(default=Decimal("0"))
    opening_balance: Decimal | None = Field(None)
    closing_balance: Decimal | None = Field(None)

    @classmethod
    def from_transactions(
        cls,
        transactions: list[ExtractedTransaction],
        **header,
    ) -> "BankStatementData":
        """Create with totals recomputed from the accepted transactions."""
        total_debits = sum(
            (t.amount for t in transactions if t.direction == TransactionDirection.DEBIT),
            Decimal("0"),
        )
        total_credits = sum(
            (t.amount for t in transactions if t.direction == TransactionDirection.CREDIT),
            Decimal("0"),
        )
        return cls(
            transactions=list(transactions),
            total_debits=total_debits,
            total_credits=total_credits,
            **header,
        )

    def to_json_dict(self) -> dict:
        """JSON shape handed to the persistence layer."""
        data: dict = {
            "transactions": [t.to_json_dict() for t in self.transactions],
            "totalDebits": float(self.total_debits),
            "totalCredits": float(self.total_credits),
        }
        optional = {
            "accountNumber": self.account_number,
            "bankName": self.bank_name,
            "period": self.period,
            "openingBalance": _json_number(self.opening_balance),
            "closingBalance": _json_number(self.closing_balance),
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data


class StatementProcessingResult(BaseModel):
    """Raw text plus parsed data for one uploaded document."""

    raw_text: str = Field(default="")
    provider: ExtractionProvider
    confidence: float | None = None
    error: str | None = None
    error_code: str | None = None
    suggestion: str | None = None
    retryable: bool = False
    parsed: BankStatementData | None = Field(
        None, description="None when extraction failed"
    )

    def to_json_dict(self) -> dict:
        data: dict = {
            "rawText": self.raw_text,
            "provider": self.provider.value,
            "parsedData": self.parsed.to_json_dict() if self.parsed else None,
        }
        if self.confidence is not None:
            data["confidence"] = self.confidence
        if self.error is not None:
            data["error"] = self.error
            data["errorCode"] = self.error_code
            data["suggestion"] = self.suggestion
            data["retryable"] = self.retryable
        return data
