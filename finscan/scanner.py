"""Receipt capture flow: OCR the image, then extract the review fields."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from . import ocr_extract
from .extractor import ExtractionReport, extract_report, parse_error_report
from .field_extractors import ExtractionConfig
from .settings import Settings, get_settings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    report: ExtractionReport
    raw_text: str = ""
    ocr_error: Optional[str] = None


def scan_receipt(
    image_input: Union[str, bytes],
    *,
    settings: Optional[Settings] = None,
    config: Optional[ExtractionConfig] = None,
) -> ScanResult:
    """OCR ``image_input`` and extract merchant, date and amount.

    OCR failures do not propagate: the caller gets the ``Parse Error``
    receipt with ``ocr_error`` set to the failure code.
    """

    settings = settings or get_settings()
    config = config or settings.extraction_config()
    try:
        raw_text = ocr_extract.recognize(image_input, settings=settings)
    except (ocr_extract.ImageFetchError, ocr_extract.OCRDecodeError, ocr_extract.OCRServiceError) as exc:
        LOGGER.warning("receipt_ocr_failed: %s", exc)
        error = str(exc) or type(exc).__name__
        return ScanResult(report=parse_error_report(error, config), ocr_error=error)
    except Exception as exc:
        LOGGER.exception("receipt_ocr_unexpected_error: %s", exc)
        error = f"ocr_unexpected_error:{type(exc).__name__}"
        return ScanResult(report=parse_error_report(error, config), ocr_error=error)

    return ScanResult(report=extract_report(raw_text, config), raw_text=raw_text)


__all__ = ["ScanResult", "scan_receipt"]
