"""Tests for the heuristic statement parser."""

import random
from decimal import Decimal

import pytest

from statement_ocr.parsers.statement import StatementParser, classify_direction, is_excluded
from statement_ocr.schemas.statement import TransactionDirection

CREDIT_AMOUNTS = ["3500.00", "1000.00", "15.50", "89.99", "500.00", "25.00", "12.50"]


class TestSampleStatement:
    """Pinned regression: the 31-line January sample."""

    def test_extracts_all_31_transactions(self, sample_statement_text):
        data = StatementParser().parse(sample_statement_text)

        assert len(data.transactions) == 31
        assert [t.date for t in data.transactions] == [f"01/{day:02d}/2024" for day in range(1, 32)]

    def test_totals(self, sample_statement_text):
        data = StatementParser().parse(sample_statement_text)

        credits = [t for t in data.transactions if t.direction == TransactionDirection.CREDIT]
        debits = [t for t in data.transactions if t.direction == TransactionDirection.DEBIT]
        assert len(credits) == 7
        assert len(debits) == 24
        assert data.total_credits == sum(Decimal(a) for a in CREDIT_AMOUNTS)
        assert data.total_credits == Decimal("5142.99")
        assert data.total_debits == Decimal("2349.23")

    def test_header_fields(self, sample_statement_text):
        data = StatementParser().parse(sample_statement_text)

        assert data.bank_name == "CHASE"
        assert data.account_number == "****1234"
        assert data.period == "01/01/2024 - 01/31/2024"
        assert data.opening_balance == Decimal("5000.00")
        assert data.closing_balance == Decimal("7823.50")

    def test_amount_with_thousands_separator(self, sample_statement_text):
        data = StatementParser().parse(sample_statement_text)

        payroll = data.transactions[1]
        assert payroll.description == "DIRECT DEPOSIT PAYROLL"
        assert payroll.amount == Decimal("3500.00")
        assert payroll.direction == TransactionDirection.CREDIT

    def test_explicit_sign_beats_keywords(self, sample_statement_text):
        """DIVIDEND PAYMENT carries '+', so the 'payment' debit keyword is ignored."""
        data = StatementParser().parse(sample_statement_text)

        dividend = data.transactions[28]
        assert dividend.description == "DIVIDEND PAYMENT"
        assert dividend.direction == TransactionDirection.CREDIT

    def test_parse_is_deterministic(self, sample_statement_text):
        parser = StatementParser()

        first = parser.parse(sample_statement_text)
        second = parser.parse(sample_statement_text)

        assert first.model_dump_json() == second.model_dump_json()
        assert StatementParser().parse(sample_statement_text) == first


class TestHeaderExtraction:
    """First match wins for every header field."""

    def test_bank_name_first_match_wins(self):
        text = "Wells Fargo Bank\nPayments to Chase card\n"
        assert StatementParser().parse(text).bank_name == "Wells Fargo"

    def test_bank_name_not_taken_from_purchase(self):
        text = "01/05/2024 GROCERY STORE PURCHASE 12.00 -\n"
        assert StatementParser().parse(text).bank_name is None

    def test_account_number_variants(self):
        parser = StatementParser()

        assert parser.parse("Acct #: 987654321").account_number == "987654321"
        assert parser.parse("Account ending in 4321").account_number == "4321"
        assert parser.parse("Card on file ********9876").account_number == "9876"

    def test_account_number_not_overwritten(self):
        text = "Account Number: 11112222\nAcct No. 33334444\n"
        assert StatementParser().parse(text).account_number == "11112222"

    def test_period_variants(self):
        parser = StatementParser()

        assert parser.parse("Period Ending: March 31, 2024").period == "March 31, 2024"
        assert parser.parse("For the month of February 2024").period == "February 2024"
        assert parser.parse("January 1, 2024 - January 31, 2024").period == (
            "January 1, 2024 - January 31, 2024"
        )

    def test_balance_keywords(self):
        text = (
            "Beginning Balance $1,200.00\n"
            "Balance Forward 999.00\n"
            "New Balance: $1,450.10\n"
            "Current Balance 2.00\n"
        )
        data = StatementParser().parse(text)

        assert data.opening_balance == Decimal("1200.00")
        assert data.closing_balance == Decimal("1450.10")

    def test_balance_line_without_number(self):
        text = "Opening balance\nOpening Balance 10.00\n"
        assert StatementParser().parse(text).opening_balance == Decimal("10.00")


class TestTransactionExtraction:
    """Line-level transaction rules."""

    def test_line_contributes_at_most_one_transaction(self):
        text = "01/05/2024 COFFEE 4.50 - 01/06/2024\n"
        assert len(StatementParser().parse(text).transactions) == 1

    def test_description_first_line(self):
        data = StatementParser().parse("ONLINE TRANSFER IN 250.00 + 02/14\n")

        txn = data.transactions[0]
        assert txn.date == "02/14"
        assert txn.description == "ONLINE TRANSFER IN"
        assert txn.amount == Decimal("250.00")
        assert txn.direction == TransactionDirection.CREDIT

    def test_dollar_sign_amount(self):
        data = StatementParser().parse("03/02 Monthly service fee $12.00\n")

        txn = data.transactions[0]
        assert txn.date == "03/02"
        assert txn.description == "Monthly service fee"
        assert txn.amount == Decimal("12.00")
        assert txn.direction == TransactionDirection.DEBIT

    @pytest.mark.parametrize(
        "line",
        [
            "01/31/2024 TOTAL DEBITS 2,349.23 -",
            "01/31/2024 Daily Balance 7,823.50",
            "01/31/2024 Account summary 12.00",
            "01/31/2024 Page 1 of 3 10.00",
        ],
    )
    def test_exclusion_keywords_never_emitted(self, line):
        assert StatementParser().parse(line).transactions == []

    def test_exclusion_checks_description_only(self):
        data = StatementParser().parse("01/05/2024 REFUND 25.00 + balance 300.00\n")

        assert len(data.transactions) == 1
        txn = data.transactions[0]
        assert txn.description == "REFUND"
        assert txn.amount == Decimal("25.00")
        assert txn.direction == TransactionDirection.CREDIT

    def test_zero_amount_dropped(self):
        assert StatementParser().parse("01/05/2024 ADJUSTMENT 0.00 +\n").transactions == []

    def test_unmatched_lines_ignored(self):
        text = "Thank you for banking with us\nCustomer service 1-800-555-0100\n"
        data = StatementParser().parse(text)

        assert data.transactions == []
        assert data.total_debits == Decimal("0")
        assert data.total_credits == Decimal("0")

    def test_long_description_truncated(self):
        line = f"01/05/2024 {'X' * 250} 10.00 -"
        txn = StatementParser().parse(line).transactions[0]
        assert len(txn.description) == 200

    def test_empty_text(self):
        data = StatementParser().parse("")

        assert data.transactions == []
        assert data.bank_name is None
        assert data.account_number is None

    def test_scanned_totals_are_ignored(self):
        text = (
            "01/02/2024 DEPOSIT 100.00 +\n"
            "01/03/2024 CARD PURCHASE 40.00 -\n"
            "Total Credits 999.99\n"
            "Total Debits 888.88\n"
        )
        data = StatementParser().parse(text)

        assert data.total_credits == Decimal("100.00")
        assert data.total_debits == Decimal("40.00")

    @pytest.mark.parametrize("seed", range(5))
    def test_totals_match_transactions(self, seed):
        rng = random.Random(seed)
        lines = []
        for day in range(1, rng.randint(5, 28)):
            amount = f"{rng.randint(1, 500000) / 100:,.2f}"
            sign = rng.choice(["+", "-", ""])
            word = rng.choice(["DEPOSIT", "PURCHASE", "CAFE", "REFUND", "ATM WITHDRAWAL"])
            lines.append(f"02/{day:02d}/2024 {word} {amount} {sign}")
        data = StatementParser().parse("\n".join(lines))

        assert len(data.transactions) == len(lines)
        assert data.total_debits == sum(
            (t.amount for t in data.transactions if t.direction == TransactionDirection.DEBIT),
            Decimal("0"),
        )
        assert data.total_credits == sum(
            (t.amount for t in data.transactions if t.direction == TransactionDirection.CREDIT),
            Decimal("0"),
        )


class TestClassifyDirection:
    """Direction priority: sign, credit keywords, debit keywords, default."""

    def test_sign(self):
        assert classify_direction("+", "ATM WITHDRAWAL") == TransactionDirection.CREDIT
        assert classify_direction("-", "REFUND") == TransactionDirection.DEBIT

    @pytest.mark.parametrize(
        "description",
        ["Mobile deposit", "Credit adjustment", "Payment received, thank you", "Refund", "Transfer in", "Interest paid"],
    )
    def test_credit_keywords(self, description):
        assert classify_direction("", description) == TransactionDirection.CREDIT

    @pytest.mark.parametrize(
        "description",
        ["ATM withdrawal", "Debit card", "Online payment", "Purchase", "Late fee", "Service charge", "Transfer out"],
    )
    def test_debit_keywords(self, description):
        assert classify_direction("", description) == TransactionDirection.DEBIT

    def test_credit_keywords_checked_first(self):
        assert classify_direction("", "Payment received") == TransactionDirection.CREDIT

    def test_default_is_debit(self):
        assert classify_direction("", "CORNER BAKERY") == TransactionDirection.DEBIT


def test_is_excluded():
    assert is_excluded("Subtotal")
    assert is_excluded("PAGE 2")
    assert not is_excluded("GROCERY STORE")
