"""Heuristic bank statement parser.

Walks plain text line by line. Header fields (bank, account, period,
balances) are first-match-wins; each line yields at most one transaction,
taken from the first pattern in TRANSACTION_PATTERNS that matches.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from pydantic import ValidationError

from statement_ocr.parsers.detector import BankDetector
from statement_ocr.parsers.patterns import (
    ACCOUNT_PATTERNS,
    BALANCE_AMOUNT_PATTERN,
    CLOSING_BALANCE_PATTERN,
    CREDIT_KEYWORDS,
    DEBIT_KEYWORDS,
    EXCLUSION_PATTERN,
    OPENING_BALANCE_PATTERN,
    PERIOD_PATTERNS,
    TRANSACTION_PATTERNS,
    TransactionFields,
    TransactionPattern,
    parse_amount,
)
from statement_ocr.schemas.statement import (
    BankStatementData,
    ExtractedTransaction,
    TransactionDirection,
)

logger = logging.getLogger(__name__)


def split_lines(raw_text: str) -> list[str]:
    """Non-empty, trimmed lines in document order."""
    return [line.strip() for line in raw_text.splitlines() if line.strip()]


def classify_direction(sign: str, description: str) -> TransactionDirection:
    """Resolve debit/credit for a transaction.

    An explicit sign wins, then credit keywords, then debit keywords;
    anything else is a debit.
    """
    if sign == "+":
        return TransactionDirection.CREDIT
    if sign == "-":
        return TransactionDirection.DEBIT
    if CREDIT_KEYWORDS.search(description):
        return TransactionDirection.CREDIT
    if DEBIT_KEYWORDS.search(description):
        return TransactionDirection.DEBIT
    return TransactionDirection.DEBIT


def is_excluded(description: str) -> bool:
    """True for totals, balance rows, summaries and page furniture."""
    return EXCLUSION_PATTERN.search(description) is not None


@dataclass
class _Header:
    bank_name: str | None = None
    account_number: str | None = None
    period: str | None = None
    opening_balance: Decimal | None = None
    closing_balance: Decimal | None = None
    transactions: list[ExtractedTransaction] = field(default_factory=list)


class StatementParser:
    """Turns statement text into ``BankStatementData``.

    Deterministic and free of I/O: the same text always produces the same
    structure. Lines that cannot be understood are skipped, never raised.

    Example:
        >>> parser = StatementParser()
        >>> data = parser.parse(text)
        >>> print(data.total_credits)
    """

    def __init__(
        self,
        detector: BankDetector | None = None,
        patterns: tuple[TransactionPattern, ...] = TRANSACTION_PATTERNS,
    ):
        self.detector = detector or BankDetector()
        self.patterns = patterns

    def parse(self, raw_text: str) -> BankStatementData:
        """Parse statement text.

        Args:
            raw_text: Plain text from the extractor (may be empty)

        Returns:
            BankStatementData, possibly with no transactions
        """
        state = _Header()

        for line in split_lines(raw_text or ""):
            self._scan_header(line, state)
            transaction = self.parse_transaction(line)
            if transaction is not None:
                state.transactions.append(transaction)

        data = BankStatementData.from_transactions(
            state.transactions,
            account_number=state.account_number,
            bank_name=state.bank_name,
            period=state.period,
            opening_balance=state.opening_balance,
            closing_balance=state.closing_balance,
        )
        logger.debug(
            "Parsed statement: bank=%s transactions=%d debits=%s credits=%s",
            data.bank_name,
            len(data.transactions),
            data.total_debits,
            data.total_credits,
        )
        return data

    def match_line(self, line: str) -> tuple[TransactionPattern, TransactionFields] | None:
        """Return the first pattern matching ``line`` and its fields."""
        for pattern in self.patterns:
            fields = pattern.match(line)
            if fields is not None:
                return pattern, fields
        return None

    def parse_transaction(self, line: str) -> ExtractedTransaction | None:
        """Build a transaction from one line, or None.

        Only the first matching pattern is consulted; if its amount is
        unusable or its description is boilerplate the line is dropped
        rather than retried against later patterns.
        """
        matched = self.match_line(line)
        if matched is None:
            return None
        pattern, fields = matched

        date = fields.date.strip()
        description = fields.description.strip()
        amount = parse_amount(fields.amount)
        if not date or not description or amount is None or amount <= 0:
            return None
        if is_excluded(description):
            return None

        balance = parse_amount(fields.balance) if fields.balance else None
        try:
            return ExtractedTransaction(
                date=date,
                description=description,
                amount=amount,
                direction=classify_direction(fields.sign, description),
                balance=balance,
            )
        except ValidationError:
            logger.debug("Dropped line matched by %s", pattern.name)
            return None

    def _scan_header(self, line: str, state: _Header) -> None:
        if state.bank_name is None:
            state.bank_name = self.detector.detect(line)

        if state.account_number is None:
            state.account_number = _first_group(ACCOUNT_PATTERNS, line)

        if state.period is None:
            period = _first_group(PERIOD_PATTERNS, line)
            state.period = period.strip() if period else None

        if state.opening_balance is None and OPENING_BALANCE_PATTERN.search(line):
            state.opening_balance = _balance_on(line)

        if state.closing_balance is None and CLOSING_BALANCE_PATTERN.search(line):
            state.closing_balance = _balance_on(line)


def _first_group(patterns, line: str) -> str | None:
    for pattern in patterns:
        match = pattern.search(line)
        if match:
            return match.group(1)
    return None


def _balance_on(line: str) -> Decimal | None:
    match = BALANCE_AMOUNT_PATTERN.search(line)
    if match is None:
        return None
    return parse_amount(match.group(1))
