"""Rule-based amount extraction utilities."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from .config import DecimalConvention, ExtractionConfig
from .status import FieldStatus

LOGGER = logging.getLogger(__name__)

AMOUNT_CANDIDATE_PATTERN = re.compile(r"[0-9.,]+")
AMOUNT_FALLBACK = "0"

_NON_DIGITS = re.compile(r"[^0-9]")
_DECIMAL_SEPARATOR = {
    DecimalConvention.COMMA: ",",
    DecimalConvention.DOT: ".",
}


@dataclass(frozen=True)
class AmountCandidate:
    raw_text: str
    value: Optional[int]
    in_range: bool


@dataclass(frozen=True)
class AmountExtraction:
    value: str
    status: FieldStatus
    best: Optional[AmountCandidate] = None
    candidates: List[AmountCandidate] = field(default_factory=list)


def normalise_amount(
    raw: str,
    convention: DecimalConvention = DecimalConvention.NONE,
    max_digits: Optional[int] = None,
) -> Optional[int]:
    """Turn a run of digits and separators into a whole-unit integer.

    With ``DecimalConvention.NONE`` every ``.`` and ``,`` is a thousands
    separator, which holds for whole-unit currencies such as IDR. The other
    conventions cut the fractional part at the last decimal separator.
    Runs longer than ``max_digits`` are noise and come back as ``None``.
    """

    cleaned = raw[:-1] if raw.endswith((".", ",")) else raw
    separator = _DECIMAL_SEPARATOR.get(convention)
    if separator and separator in cleaned:
        cleaned = cleaned.rsplit(separator, 1)[0]
    digits = _NON_DIGITS.sub("", cleaned)
    if not digits or (max_digits is not None and len(digits) > max_digits):
        return None
    try:
        return int(digits)
    except ValueError:
        return None


def extract_amount(text: Optional[str], config: Optional[ExtractionConfig] = None) -> AmountExtraction:
    """Return the largest in-range number in ``text`` as the receipt total.

    Bounds are exclusive: item counts, times and similar small numbers fall
    below ``min_amount`` and OCR garbage above ``max_amount``.
    """

    config = config or ExtractionConfig()
    candidates: List[AmountCandidate] = []
    best: Optional[AmountCandidate] = None
    max_digits = len(str(config.max_amount))
    for match in AMOUNT_CANDIDATE_PATTERN.finditer(text or ""):
        raw = match.group(0)
        value = normalise_amount(raw, config.decimal_convention, max_digits)
        in_range = value is not None and config.min_amount < value < config.max_amount
        candidate = AmountCandidate(raw_text=raw, value=value, in_range=in_range)
        candidates.append(candidate)
        if in_range and (best is None or value > best.value):
            best = candidate

    if best is None:
        LOGGER.debug("amount_not_found: candidates=%d", len(candidates))
        return AmountExtraction(value=AMOUNT_FALLBACK, status=FieldStatus.DEFAULTED, candidates=candidates)
    return AmountExtraction(
        value=str(best.value),
        status=FieldStatus.FOUND,
        best=best,
        candidates=candidates,
    )


__all__ = [
    "AMOUNT_FALLBACK",
    "AmountCandidate",
    "AmountExtraction",
    "extract_amount",
    "normalise_amount",
]
