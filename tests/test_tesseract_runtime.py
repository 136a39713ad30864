from __future__ import annotations

import shutil
from io import BytesIO

import pytest

Image = pytest.importorskip("PIL.Image")
ImageDraw = pytest.importorskip("PIL.ImageDraw")
pytest.importorskip("pytesseract")

from finscan.field_extractors import DateOrder, DecimalConvention  # noqa: E402
from finscan.scanner import scan_receipt  # noqa: E402
from finscan.settings import Settings  # noqa: E402

pytestmark = pytest.mark.skipif(
    shutil.which("tesseract") is None,
    reason="tesseract binary not available",
)


def _receipt_png() -> bytes:
    image = Image.new("L", (320, 120), color=255)
    draw = ImageDraw.Draw(image)
    draw.text((10, 15), "Warung Sederhana", fill=0)
    draw.text((10, 55), "TOTAL 50.000", fill=0)
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def test_scan_receipt_runs_local_tesseract() -> None:
    """Ensure the local engine path reaches the native binary when available."""

    settings = Settings(
        ocr_engine="local",
        ocr_language="eng",
        decimal_convention=DecimalConvention.NONE,
        date_order=DateOrder.DMY,
        timezone=None,
    )

    result = scan_receipt(_receipt_png(), settings=settings)

    assert result.ocr_error is None
    receipt = result.report.receipt
    assert receipt.merchant
    assert receipt.date
    assert receipt.amount.isdigit()
