"""Line-by-line review of how statement text was parsed.

Product review tool: it reports which transaction patterns fire on every
date-led line and flags a discrepancy when pattern hits and extracted
transactions disagree. It never changes what the parser returns.
"""

import re

from pydantic import BaseModel, Field

from statement_ocr.parsers.statement import StatementParser, split_lines

DATE_LED_LINE = re.compile(r"^\d{1,2}[\/\-]\d{1,2}")


class LineDiagnostic(BaseModel):
    """Pattern hits for one date-led line."""

    line_number: int = Field(..., description="1-based index among non-empty lines")
    text: str
    matched_patterns: list[str] = Field(default_factory=list)
    extracted: bool = False


class ParseDiagnostics(BaseModel):
    """Summary of a diagnostic run."""

    total_lines: int
    candidate_lines: int = Field(..., description="Lines that start with a date")
    matched_lines: int = Field(..., description="Candidate lines hit by any pattern")
    transactions_extracted: int
    lines: list[LineDiagnostic] = Field(default_factory=list)

    @property
    def discrepancy(self) -> bool:
        return self.matched_lines != self.transactions_extracted


def diagnose(raw_text: str, parser: StatementParser | None = None) -> ParseDiagnostics:
    """Analyse ``raw_text`` the way the parser sees it.

    Args:
        raw_text: Statement text
        parser: Parser to inspect (default: new StatementParser)

    Returns:
        ParseDiagnostics report
    """
    parser = parser or StatementParser()
    lines = split_lines(raw_text or "")
    data = parser.parse(raw_text or "")

    report: list[LineDiagnostic] = []
    matched = 0
    for number, line in enumerate(lines, start=1):
        if not DATE_LED_LINE.match(line):
            continue
        hits = [p.name for p in parser.patterns if p.regex.search(line)]
        if hits:
            matched += 1
        report.append(
            LineDiagnostic(
                line_number=number,
                text=line,
                matched_patterns=hits,
                extracted=parser.parse_transaction(line) is not None,
            )
        )

    return ParseDiagnostics(
        total_lines=len(lines),
        candidate_lines=len(report),
        matched_lines=matched,
        transactions_extracted=len(data.transactions),
        lines=report,
    )
