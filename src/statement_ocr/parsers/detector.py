"""Bank detection from statement text.

This module identifies the issuing institution from a line of OCR or
embedded text. Patterns are tried in order; the first hit names the bank.
"""

import re


class BankDetector:
    """Detects the issuing bank from statement text.

    Returns the matched text exactly as it appears in the input (e.g.
    "CHASE" or "Wells Fargo"), which is what ends up in
    ``BankStatementData.bank_name``.

    Example:
        >>> detector = BankDetector()
        >>> detector.detect("WELLS FARGO BANK, N.A.")
        'WELLS FARGO'
    """

    BANK_PATTERNS = [
        r"chase",
        r"bank\s+of\s+america",
        r"wells\s+fargo",
        r"citibank",
        r"capital\s+one",
        r"pnc",
        r"td\s+bank",
        r"us\s+bank",
        r"jpmorgan",
        r"truist",
        r"fifth\s+third",
        r"huntington",
        r"regions\s+bank",
        r"keybank",
        r"citizens\s+bank",
        r"m&t\s+bank",
        r"ally\s+bank",
        r"discover\s+bank",
        r"synchrony",
        r"american\s+express",
    ]

    def __init__(self):
        # Word boundaries keep "chase" from firing on "PURCHASE".
        self._compiled_patterns: list[re.Pattern] = [
            re.compile(rf"(?<![A-Za-z]){pattern}(?![A-Za-z])", re.IGNORECASE)
            for pattern in self.BANK_PATTERNS
        ]

    def detect(self, text: str) -> str | None:
        """Detect the bank from a line (or block) of statement text.

        Args:
            text: Text to search

        Returns:
            Matched institution name as written, or None
        """
        if not text:
            return None

        for pattern in self._compiled_patterns:
            match = pattern.search(text)
            if match:
                return match.group(0)
        return None

    def get_supported_banks(self) -> list[str]:
        """Get the institution patterns in priority order."""
        return list(self.BANK_PATTERNS)

    def add_pattern(self, pattern: str) -> None:
        """Append a detection pattern with the lowest priority.

        Args:
            pattern: Regex pattern to match (case-insensitive)
        """
        self._compiled_patterns.append(
            re.compile(rf"(?<![A-Za-z]){pattern}(?![A-Za-z])", re.IGNORECASE)
        )
