import io

import openpyxl
import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06"
    b"\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\xff\xff?\x00\x05\xfe"
    b"\x02\xfe\xa7\x35\x81\x84\x00\x00\x00\x00IEND\xaeB`\x82"
)

MARKETPLACE_ROWS = [
    ["Order ID", "Item Tax Amt.", "Shipping Tax Amt.", "Total"],
    ["402-1", "2571.16", "187.94", "14000.00"],
    ["402-2", "2571.16", "187.94", "14000.00"],
    ["TOTAL", "", "5142.32", "375.88", "5518.20"],
]


def _pdf(*pages: list[str]) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    for lines in pages:
        y = 780
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    return _pdf(["Hello PDF World"])


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    return _pdf(["Page one content"], ["Page two content"])


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    return _pdf([])


@pytest.fixture()
def invoice_pdf_bytes() -> bytes:
    """Single-page sales invoice with a 23% VAT line."""
    return _pdf(
        [
            "Murphy Joinery Ltd",
            "VAT No: IE1234567T",
            "Invoice 2024-118",
            "Subtotal: 100.00",
            "VAT 23%: 23.00",
            "Total: 123.00",
        ]
    )


@pytest.fixture()
def marketplace_csv_bytes() -> bytes:
    """Marketplace tax report whose totals row is one cell wider than the header."""
    lines = [",".join(row) for row in MARKETPLACE_ROWS]
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture()
def purchases_xlsx_bytes() -> bytes:
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.append(["Supplier purchases Q1"])
    sheet.append(["Supplier", "Net Amount", "VAT", "Total"])
    sheet.append(["Office Supplies", 200.00, 46.00, 246.00])
    sheet.append(["Fuel", 100.00, 23.00, 123.00])
    sheet.append(["Total", 300.00, 69.00, 369.00])
    buf = io.BytesIO()
    workbook.save(buf)
    return buf.getvalue()


@pytest.fixture()
def png_bytes() -> bytes:
    return PNG_BYTES
