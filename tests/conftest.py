import io

import pytest
from PIL import Image
from pypdf import PdfWriter

SAMPLE_STATEMENT = """
CHASE BANK
Statement Period: 01/01/2024 - 01/31/2024
Account Number: ****1234

Previous Balance: $5,000.00

Transactions:
01/01/2024 GROCERY STORE PURCHASE 125.50 -
01/02/2024 DIRECT DEPOSIT PAYROLL 3,500.00 +
01/03/2024 UTILITY PAYMENT 285.75 -
01/04/2024 ATM WITHDRAWAL 200.00 -
01/05/2024 RESTAURANT PURCHASE 65.25 -
01/06/2024 GAS STATION 45.00 -
01/07/2024 ONLINE SHOPPING 89.99 -
01/08/2024 PHONE BILL 95.00 -
01/09/2024 COFFEE SHOP 12.50 -
01/10/2024 PARKING FEE 15.00 -
01/11/2024 MOVIE TICKETS 25.00 -
01/12/2024 BOOKSTORE 45.75 -
01/13/2024 DRY CLEANING 35.00 -
01/14/2024 PHARMACY 28.50 -
01/15/2024 HAIR SALON 75.00 -
01/16/2024 GYM MEMBERSHIP 50.00 -
01/17/2024 SUBSCRIPTION SERVICE 19.99 -
01/18/2024 PET SUPPLIES 45.25 -
01/19/2024 HARDWARE STORE 125.00 -
01/20/2024 BAKERY 18.75 -
01/21/2024 FLORIST 65.00 -
01/22/2024 CLEANING SERVICE 120.00 -
01/23/2024 INSURANCE PAYMENT 250.00 -
01/24/2024 TAX PAYMENT 500.00 -
01/25/2024 INVESTMENT CONTRIBUTION 1000.00 +
01/26/2024 INTEREST EARNED 15.50 +
01/27/2024 REFUND PROCESSED 89.99 +
01/28/2024 TRANSFER IN 500.00 +
01/29/2024 DIVIDEND PAYMENT 25.00 +
01/30/2024 CASHBACK REWARD 12.50 +
01/31/2024 MONTHLY FEE 12.00 -

Ending Balance: $7,823.50
"""


@pytest.fixture
def sample_statement_text() -> str:
    """31-transaction January statement with explicit +/- markers."""
    return SAMPLE_STATEMENT


def make_blank_pdf(pages: int) -> bytes:
    """PDF with ``pages`` empty pages (no embedded text)."""
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=200, height=200)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


def make_text_pdf(lines: list[str]) -> bytes:
    """Single-page PDF whose content stream carries ``lines`` as text."""
    from reportlab.lib.pagesizes import letter
    from reportlab.pdfgen import canvas

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    y = 750
    for line in lines:
        c.drawString(40, y, line)
        y -= 14
    c.save()
    return buf.getvalue()


def make_png(size=(60, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, "white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def blank_pdf():
    return make_blank_pdf


@pytest.fixture
def text_pdf():
    return make_text_pdf


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()
