from __future__ import annotations

import pytest

from finscan import extractor
from finscan.extractor import PARSE_ERROR_MERCHANT, extract, extract_report
from finscan.field_extractors import DateOrder, ExtractionConfig, FieldStatus

TODAY = "2030-01-02"


@pytest.fixture(autouse=True)
def frozen_today(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(extractor, "today_iso", lambda *_: TODAY)


@pytest.fixture
def warung_receipt() -> str:
    return "\n".join(
        [
            "TOTAL: Rp50.000",
            "Warung Padang Sederhana",
            "15-03-2024",
        ]
    )


def test_extract_reads_all_fields(warung_receipt: str) -> None:
    receipt = extract(warung_receipt)

    assert receipt.merchant == "Warung Padang Sederhana"
    assert receipt.date == "2024-03-15"
    assert receipt.amount == "50000"


def test_extract_report_marks_found_fields(warung_receipt: str) -> None:
    report = extract_report(warung_receipt)

    assert report.degraded is False
    assert report.merchant.status is FieldStatus.FOUND
    assert report.merchant.line_index == 1
    assert report.date.status is FieldStatus.FOUND
    assert report.date.raw_text == "15-03-2024"
    assert report.amount.status is FieldStatus.FOUND
    assert report.amount.best is not None
    assert report.amount.best.raw_text == "50.000"


@pytest.mark.parametrize("raw_text", ["", None, "   \n\n  "])
def test_empty_input_uses_fallbacks(raw_text) -> None:
    report = extract_report(raw_text)

    assert report.receipt.as_dict() == {"merchant": "Unknown Merchant", "date": TODAY, "amount": "0"}
    assert report.merchant.status is FieldStatus.DEFAULTED
    assert report.date.status is FieldStatus.DEFAULTED
    assert report.amount.status is FieldStatus.DEFAULTED
    assert report.error is None


def test_text_without_digits_has_zero_amount() -> None:
    receipt = extract("Toko Maju Jaya\nTerima kasih atas kunjungan anda")

    assert receipt.merchant == "Toko Maju Jaya"
    assert receipt.amount == "0"
    assert receipt.date == TODAY


def test_amount_bounds_are_exclusive() -> None:
    receipt = extract("Kopi Kenangan\nqty 100\nsubtotal 100.000.000")

    assert receipt.amount == "0"

    receipt = extract("Kopi Kenangan\nqty 101\nsubtotal 100.000.000")

    assert receipt.amount == "101"


def test_largest_currency_number_wins() -> None:
    receipt = extract("Bakso Pak Kumis\nBakso 15.000\nTOTAL 150.000")

    assert receipt.amount == "150000"


def test_year_first_date_is_kept_verbatim() -> None:
    receipt = extract("Alfamart Cabang Kemang\nTanggal 2024-03-15 19:22")

    assert receipt.date == "2024-03-15"


def test_slash_date_follows_configured_order() -> None:
    text = "Indomaret Point\n15/03/2024\nTotal 27.500"

    assert extract(text).date == "2024-03-15"

    report = extract_report(text, ExtractionConfig(date_order=DateOrder.MDY))

    assert report.date.status is FieldStatus.ANOMALY
    assert report.receipt.date == TODAY


def test_extract_is_deterministic(warung_receipt: str) -> None:
    assert extract(warung_receipt) == extract(warung_receipt)


def test_non_text_input_degrades_to_parse_error() -> None:
    report = extract_report(b"not text")  # type: ignore[arg-type]

    assert report.degraded is True
    assert report.receipt.as_dict() == {"merchant": PARSE_ERROR_MERCHANT, "date": TODAY, "amount": "0"}
    assert report.merchant.status is FieldStatus.ANOMALY
    assert report.error == "extraction_failed:TypeError"


def test_internal_failure_never_propagates(monkeypatch: pytest.MonkeyPatch, warung_receipt: str) -> None:
    def boom(*_, **__):
        raise RuntimeError("boom")

    monkeypatch.setattr(extractor, "extract_amount", boom)

    receipt = extract(warung_receipt)

    assert receipt.merchant == PARSE_ERROR_MERCHANT
    assert receipt.amount == "0"
    assert receipt.date == TODAY


def test_fields_expose_status_and_raw_text(warung_receipt: str) -> None:
    fields = extract_report(warung_receipt).fields()

    assert fields["merchant"] == {
        "value": "Warung Padang Sederhana",
        "status": "found",
        "raw_text": "Warung Padang Sederhana",
    }
    assert fields["amount"]["raw_text"] == "50.000"
    assert fields["date"]["status"] == "found"


def test_long_digit_noise_keeps_the_other_fields() -> None:
    text = "Warung Padang Sederhana\n15-03-2024\nTOTAL 50.000\n" + "7" * 5000

    report = extract_report(text)

    assert not report.degraded
    assert report.receipt.as_dict() == {
        "merchant": "Warung Padang Sederhana",
        "date": "2024-03-15",
        "amount": "50000",
    }
