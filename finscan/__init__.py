"""Receipt scanning for a personal-finance tracker."""
from .extractor import ExtractedReceipt, ExtractionReport, extract, extract_report

__all__ = ["ExtractedReceipt", "ExtractionReport", "extract", "extract_report"]
