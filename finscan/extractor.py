"""Receipt field extraction over raw OCR text.

``extract`` composes the three independent passes from
``finscan.field_extractors`` (merchant line, first date, largest amount) and
always returns a fully populated ``ExtractedReceipt``. Nothing here raises:
an unexpected failure degrades to the ``Parse Error`` receipt so that the
review form downstream can still be pre-filled and edited.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .field_extractors import ExtractionConfig, FieldStatus
from .field_extractors.amount import AMOUNT_FALLBACK, AmountExtraction, extract_amount
from .field_extractors.date import DateExtraction, extract_date, today_iso
from .field_extractors.merchant import MerchantExtraction, extract_merchant, split_lines

LOGGER = logging.getLogger(__name__)

PARSE_ERROR_MERCHANT = "Parse Error"


@dataclass(frozen=True)
class ExtractedReceipt:
    merchant: str
    date: str
    amount: str

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class ExtractionReport:
    receipt: ExtractedReceipt
    merchant: MerchantExtraction
    date: DateExtraction
    amount: AmountExtraction
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None

    def fields(self) -> Dict[str, Dict[str, Any]]:
        """Per-field value, status and matched text for diagnostics."""

        return {
            "merchant": {
                "value": self.merchant.value,
                "status": self.merchant.status.value,
                "raw_text": self.merchant.raw_text,
            },
            "date": {
                "value": self.date.value,
                "status": self.date.status.value,
                "raw_text": self.date.raw_text,
            },
            "amount": {
                "value": self.amount.value,
                "status": self.amount.status.value,
                "raw_text": self.amount.best.raw_text if self.amount.best else None,
            },
        }


def parse_error_report(error: str, config: Optional[ExtractionConfig] = None) -> ExtractionReport:
    """Build the fallback report used when extraction (or OCR) fails outright."""

    config = config or ExtractionConfig()
    today = today_iso(config.timezone)
    return ExtractionReport(
        receipt=ExtractedReceipt(merchant=PARSE_ERROR_MERCHANT, date=today, amount=AMOUNT_FALLBACK),
        merchant=MerchantExtraction(value=PARSE_ERROR_MERCHANT, status=FieldStatus.ANOMALY),
        date=DateExtraction(value=today, status=FieldStatus.ANOMALY, detail=error),
        amount=AmountExtraction(value=AMOUNT_FALLBACK, status=FieldStatus.ANOMALY),
        error=error,
    )


def extract_report(raw_text: Optional[str], config: Optional[ExtractionConfig] = None) -> ExtractionReport:
    """Run all passes over ``raw_text`` and report which path each one took."""

    config = config or ExtractionConfig()
    try:
        text = raw_text or ""
        if not isinstance(text, str):
            raise TypeError(f"raw text must be str, got {type(text).__name__}")
        today = today_iso(config.timezone)
        merchant = extract_merchant(split_lines(text), config)
        date = extract_date(text, config, today=today)
        amount = extract_amount(text, config)
    except Exception as exc:
        LOGGER.warning(
            "receipt_extraction_failed: %s",
            exc,
            exc_info=LOGGER.isEnabledFor(logging.DEBUG),
        )
        return parse_error_report(f"extraction_failed:{type(exc).__name__}", config)

    receipt = ExtractedReceipt(merchant=merchant.value, date=date.value, amount=amount.value)
    LOGGER.debug(
        "receipt_extracted: merchant=%s date=%s amount=%s",
        merchant.status.value,
        date.status.value,
        amount.status.value,
    )
    return ExtractionReport(receipt=receipt, merchant=merchant, date=date, amount=amount)


def extract(raw_text: Optional[str], config: Optional[ExtractionConfig] = None) -> ExtractedReceipt:
    """Extract ``{merchant, date, amount}`` from OCR text; never raises."""

    return extract_report(raw_text, config).receipt


__all__ = [
    "PARSE_ERROR_MERCHANT",
    "ExtractedReceipt",
    "ExtractionReport",
    "extract",
    "extract_report",
    "parse_error_report",
]
