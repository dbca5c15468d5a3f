"""Bank statement text extraction and heuristic parsing.

Turns an uploaded statement (PDF or image) into plain text, then into a
structured ``BankStatementData`` record.
"""

__version__ = "0.1.0"
