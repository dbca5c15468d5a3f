"""Tests for the parse diagnostics report."""

from statement_ocr.parsers.diagnostics import diagnose


class TestDiagnose:
    """Line-by-line review report."""

    def test_sample_statement_has_no_discrepancy(self, sample_statement_text):
        report = diagnose(sample_statement_text)

        assert report.candidate_lines == 31
        assert report.matched_lines == 31
        assert report.transactions_extracted == 31
        assert report.discrepancy is False
        assert all(line.extracted for line in report.lines)

    def test_excluded_line_is_flagged(self):
        text = "01/02/2024 DEPOSIT 100.00 +\n01/31/2024 TOTAL CREDITS 100.00 +\n"
        report = diagnose(text)

        assert report.matched_lines == 2
        assert report.transactions_extracted == 1
        assert report.discrepancy is True
        assert report.lines[1].extracted is False
        assert report.lines[1].matched_patterns[0] == "date_first_signed"

    def test_lists_every_matching_pattern(self):
        report = diagnose("01/02 CHECK 45.00 1,955.00")

        assert report.lines[0].matched_patterns == ["date_first_signed", "date_first_balance"]

    def test_unmatched_date_line(self):
        report = diagnose("01/02 see reverse side for details")

        assert report.candidate_lines == 1
        assert report.matched_lines == 0
        assert report.lines[0].matched_patterns == []
