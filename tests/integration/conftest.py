import pytest

from vatdoc.config.settings import Settings
from vatdoc.intake.models import RawDocument

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.fixture
def offline_settings() -> Settings:
    """Settings that never reach a real AI provider."""
    return Settings(
        ai_enabled=False,
        ai_provider="example",
        pdf_timeout_seconds=10,
        document_timeout_seconds=30,
    )


@pytest.fixture
def example_ai_settings() -> Settings:
    return Settings(
        ai_enabled=True,
        ai_provider="example",
        pdf_timeout_seconds=10,
        ai_timeout_seconds=5,
        document_timeout_seconds=30,
    )


@pytest.fixture
def invoice_document(invoice_pdf_bytes: bytes) -> RawDocument:
    return RawDocument(
        content=invoice_pdf_bytes,
        file_name="invoice-2024-118.pdf",
        declared_mime_type="application/pdf",
        category="SALES",
    )


@pytest.fixture
def marketplace_document(marketplace_csv_bytes: bytes) -> RawDocument:
    return RawDocument(
        content=marketplace_csv_bytes,
        file_name="marketplace-tax-report.csv",
        declared_mime_type="text/csv",
        category="SALES",
    )


@pytest.fixture
def purchases_document(purchases_xlsx_bytes: bytes) -> RawDocument:
    return RawDocument(
        content=purchases_xlsx_bytes,
        file_name="purchases-q1.xlsx",
        declared_mime_type=XLSX_MIME,
        category="PURCHASES",
    )


@pytest.fixture
def receipt_document(png_bytes: bytes) -> RawDocument:
    return RawDocument(
        content=png_bytes,
        file_name="receipt.png",
        declared_mime_type="image/png",
        category="PURCHASES",
    )
