"""Field extraction helpers for structured receipt data."""
from .amount import extract_amount
from .config import DateOrder, DecimalConvention, ExtractionConfig
from .date import extract_date
from .merchant import extract_merchant, split_lines
from .status import FieldStatus

__all__ = [
    "DateOrder",
    "DecimalConvention",
    "ExtractionConfig",
    "FieldStatus",
    "extract_amount",
    "extract_date",
    "extract_merchant",
    "split_lines",
]
