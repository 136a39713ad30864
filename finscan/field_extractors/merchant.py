"""Merchant extraction: the first line that reads like a business name."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .config import DEFAULT_SKIP_KEYWORDS, ExtractionConfig
from .status import FieldStatus

LOGGER = logging.getLogger(__name__)

MERCHANT_FALLBACK = "Unknown Merchant"
MIN_MERCHANT_LENGTH = 4

_DIGITS_ONLY = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class MerchantExtraction:
    value: str
    status: FieldStatus
    raw_text: Optional[str] = None
    line_index: Optional[int] = None


def split_lines(text: Optional[str]) -> List[str]:
    """Return the non-empty, trimmed lines of ``text`` in document order."""

    return [line.strip() for line in (text or "").split("\n") if line.strip()]


def _keyword_pattern(keywords: Iterable[str]) -> Optional[re.Pattern[str]]:
    words = [re.escape(word) for word in keywords if word]
    if not words:
        return None
    return re.compile("|".join(words), re.IGNORECASE)


def is_merchant_line(line: str, keywords: Sequence[str] = DEFAULT_SKIP_KEYWORDS) -> bool:
    candidate = line.strip()
    if len(candidate) < MIN_MERCHANT_LENGTH:
        return False
    if _DIGITS_ONLY.fullmatch(candidate):
        return False
    pattern = _keyword_pattern(keywords)
    return not (pattern and pattern.search(candidate))


def extract_merchant(lines: Sequence[str], config: Optional[ExtractionConfig] = None) -> MerchantExtraction:
    """Pick the merchant from pre-split receipt lines.

    Receipts print the business name above the itemised and total lines, so
    the first line that is long enough, not a bare number and free of
    total/currency keywords wins. Layout is not considered.
    """

    config = config or ExtractionConfig()
    for index, line in enumerate(lines):
        if not is_merchant_line(line, config.merchant_skip_keywords):
            continue
        LOGGER.debug("merchant_line_selected: index=%d", index)
        return MerchantExtraction(
            value=line.strip(),
            status=FieldStatus.FOUND,
            raw_text=line,
            line_index=index,
        )
    return MerchantExtraction(value=MERCHANT_FALLBACK, status=FieldStatus.DEFAULTED)


__all__ = [
    "MERCHANT_FALLBACK",
    "MerchantExtraction",
    "extract_merchant",
    "is_merchant_line",
    "split_lines",
]
