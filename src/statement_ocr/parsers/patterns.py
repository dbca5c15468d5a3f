"""Line grammar for bank statement text.

Every list here is ordered: earlier entries win and later ones are
fallbacks, so reordering changes parse results.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Callable, NamedTuple

DATE_TOKEN = r"\d{1,2}[\/\-]\d{1,2}(?:[\/\-]\d{2,4})?"
AMOUNT_TOKEN = r"[\d,]+\.?\d{2}"


class TransactionFields(NamedTuple):
    """Raw strings pulled out of a matched line."""

    date: str
    description: str
    amount: str
    sign: str = ""
    balance: str | None = None


@dataclass(frozen=True)
class TransactionPattern:
    """A named regex plus the function that maps its groups to fields."""

    name: str
    regex: re.Pattern
    extract: Callable[[re.Match], TransactionFields]

    def match(self, line: str) -> TransactionFields | None:
        found = self.regex.search(line)
        if found is None:
            return None
        return self.extract(found)


def _date_first_signed(m: re.Match) -> TransactionFields:
    return TransactionFields(date=m.group(1), description=m.group(2), amount=m.group(3), sign=m.group(4))


def _date_first_balance(m: re.Match) -> TransactionFields:
    return TransactionFields(date=m.group(1), description=m.group(2), amount=m.group(3), balance=m.group(4))


def _date_last(m: re.Match) -> TransactionFields:
    return TransactionFields(date=m.group(4), description=m.group(1), amount=m.group(2), sign=m.group(3))


def _date_first_dollar(m: re.Match) -> TransactionFields:
    return TransactionFields(date=m.group(1), description=m.group(2), amount=m.group(3))


# Only description_first_date_last is unanchored; its date trails the amount.
TRANSACTION_PATTERNS: tuple[TransactionPattern, ...] = (
    TransactionPattern(
        "date_first_signed",
        re.compile(rf"^({DATE_TOKEN})\s+(.+?)\s+({AMOUNT_TOKEN})\s*([+-]?)"),
        _date_first_signed,
    ),
    TransactionPattern(
        "date_first_balance",
        re.compile(rf"^({DATE_TOKEN})\s+(.+?)\s+({AMOUNT_TOKEN})\s+({AMOUNT_TOKEN})"),
        _date_first_balance,
    ),
    TransactionPattern(
        "description_first_date_last",
        re.compile(rf"(.+?)\s+({AMOUNT_TOKEN})\s*([+-]?)\s*({DATE_TOKEN})"),
        _date_last,
    ),
    TransactionPattern(
        "date_first_dollar",
        re.compile(rf"^({DATE_TOKEN})\s+(.+?)\s+\$({AMOUNT_TOKEN})"),
        _date_first_dollar,
    ),
)

ACCOUNT_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"account\s*(?:number|#|no\.?)[\s:]*(\*+\d{4}|\d{4,})", re.IGNORECASE),
    re.compile(r"acct\s*(?:number|#|no\.?)[\s:]*(\*+\d{4}|\d{4,})", re.IGNORECASE),
    re.compile(r"account[\s:]+ending\s+in\s+(\d{4})", re.IGNORECASE),
    re.compile(r"\*{4,}(\d{4})"),
)

PERIOD_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"statement\s*period[\s:]+(.+)", re.IGNORECASE),
    re.compile(r"period\s*ending[\s:]+(.+)", re.IGNORECASE),
    re.compile(r"for\s*(?:the\s*)?(?:month|period)\s*(?:of\s*)?(.+)", re.IGNORECASE),
    re.compile(r"(\w+\s+\d{1,2},?\s*\d{4}\s*-\s*\w+\s+\d{1,2},?\s*\d{4})"),
)

OPENING_BALANCE_PATTERN = re.compile(
    r"opening\s*balance|beginning\s*balance|previous\s*balance|balance\s*forward",
    re.IGNORECASE,
)
CLOSING_BALANCE_PATTERN = re.compile(
    r"closing\s*balance|ending\s*balance|new\s*balance|current\s*balance",
    re.IGNORECASE,
)
# First number on a balance line.
BALANCE_AMOUNT_PATTERN = re.compile(r"\$?(\d[\d,]*\.?\d*)")

# Footers, page headers and summary rows can look like transactions under OCR noise.
EXCLUSION_PATTERN = re.compile(r"total|balance|summary|page", re.IGNORECASE)

CREDIT_KEYWORDS = re.compile(
    r"deposit|credit|payment\s+received|refund|transfer\s+in|interest",
    re.IGNORECASE,
)
DEBIT_KEYWORDS = re.compile(
    r"withdrawal|debit|payment|purchase|fee|charge|transfer\s+out",
    re.IGNORECASE,
)

_AMOUNT_NOISE = re.compile(r"[$,\s]")


def parse_amount(text: str | None) -> Decimal | None:
    """Parse an amount string such as ``"$3,500.00"``.

    Returns:
        Decimal value, or None when the text is not a number
    """
    if not text:
        return None
    cleaned = _AMOUNT_NOISE.sub("", text)
    if not cleaned:
        return None
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value
