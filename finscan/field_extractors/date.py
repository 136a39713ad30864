"""Date extraction helpers."""
from __future__ import annotations

import datetime as dt
import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from .config import DateOrder, ExtractionConfig
from .status import FieldStatus

LOGGER = logging.getLogger(__name__)

# Day-first (or month-first) shape before the year-first one; the first match
# in document order wins.
DATE_PATTERN = re.compile(
    r"(\d{1,2}[./-]\d{1,2}[./-]\d{2,4})|(\d{4}[./-]\d{1,2}[./-]\d{1,2})",
    re.ASCII,
)

_SEPARATORS = re.compile(r"[./]")


@dataclass(frozen=True)
class DateExtraction:
    value: str
    status: FieldStatus
    raw_text: Optional[str] = None
    detail: Optional[str] = None


def today_iso(timezone: Optional[str] = None) -> str:
    """Return the current calendar date as ``YYYY-MM-DD``; UTC unless ``timezone`` is set."""

    zone = ZoneInfo(timezone) if timezone else dt.timezone.utc
    return dt.datetime.now(zone).date().isoformat()


def normalise_separators(token: str) -> str:
    return _SEPARATORS.sub("-", token)


def _expand_year(raw: str) -> int:
    year = int(raw)
    if len(raw) == 2:
        year += 2000 if year < 50 else 1900
    return year


def _order_parts(parts: Tuple[str, str, str], order: DateOrder) -> Tuple[str, str, str]:
    first, second, third = parts
    if order is DateOrder.MDY:
        return third, first, second
    if order is DateOrder.YMD:
        return first, second, third
    return third, second, first


def parse_date_token(token: str, date_order: DateOrder = DateOrder.DMY) -> dt.date:
    """Interpret a matched date token as a calendar date.

    A four-digit leading component is always a year. Otherwise the
    components are read in ``date_order``; the ambiguity between ``DD/MM``
    and ``MM/DD`` is not guessed at. Raises ``ValueError`` when the numbers
    do not form a real date.
    """

    parts = normalise_separators(token).split("-")
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        raise ValueError(f"malformed date token: {token!r}")
    if len(parts[0]) == 4:
        year_raw, month_raw, day_raw = parts
    else:
        year_raw, month_raw, day_raw = _order_parts((parts[0], parts[1], parts[2]), date_order)
    return dt.date(_expand_year(year_raw), int(month_raw), int(day_raw))


def extract_date(
    text: Optional[str],
    config: Optional[ExtractionConfig] = None,
    today: Optional[str] = None,
) -> DateExtraction:
    """Find the first date-like token in ``text`` and normalise it to ISO 8601.

    ``today`` is the fallback value; it is computed from the configured
    timezone when not supplied.
    """

    config = config or ExtractionConfig()
    match = DATE_PATTERN.search(text or "")
    if not match:
        return DateExtraction(
            value=today or today_iso(config.timezone),
            status=FieldStatus.DEFAULTED,
        )

    raw = match.group(0)
    try:
        parsed = parse_date_token(raw, config.date_order)
    except ValueError as exc:
        LOGGER.debug("date_parse_failed: raw=%s error=%s", raw, exc)
        return DateExtraction(
            value=today or today_iso(config.timezone),
            status=FieldStatus.ANOMALY,
            raw_text=raw,
            detail=str(exc),
        )
    return DateExtraction(value=parsed.isoformat(), status=FieldStatus.FOUND, raw_text=raw)


__all__ = [
    "DATE_PATTERN",
    "DateExtraction",
    "extract_date",
    "normalise_separators",
    "parse_date_token",
    "today_iso",
]
