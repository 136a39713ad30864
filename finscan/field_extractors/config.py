"""Locale and bound settings shared by the field extraction passes."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class DecimalConvention(str, Enum):
    """How ``.`` and ``,`` inside a number are read."""

    NONE = "none"
    COMMA = "comma"
    DOT = "dot"


class DateOrder(str, Enum):
    """Component order for dates whose leading part has one or two digits."""

    DMY = "DMY"
    MDY = "MDY"
    YMD = "YMD"


DEFAULT_SKIP_KEYWORDS: Tuple[str, ...] = ("Total", "Amount", "Rp", "IDR")


@dataclass(frozen=True)
class ExtractionConfig:
    decimal_convention: DecimalConvention = DecimalConvention.NONE
    date_order: DateOrder = DateOrder.DMY
    min_amount: int = 100
    max_amount: int = 100_000_000
    merchant_skip_keywords: Tuple[str, ...] = DEFAULT_SKIP_KEYWORDS
    timezone: Optional[str] = None

    def __post_init__(self) -> None:
        # Accept plain strings from env vars and request bodies.
        convention = self.decimal_convention
        try:
            object.__setattr__(
                self,
                "decimal_convention",
                DecimalConvention(convention.lower() if isinstance(convention, str) else convention),
            )
        except ValueError as exc:
            raise ValueError(f"unknown decimal convention: {convention!r}") from exc
        order = self.date_order
        try:
            object.__setattr__(self, "date_order", DateOrder(order.upper() if isinstance(order, str) else order))
        except ValueError as exc:
            raise ValueError(f"unknown date order: {order!r}") from exc
        if self.min_amount < 0 or self.max_amount <= self.min_amount:
            raise ValueError("amount bounds must satisfy 0 <= min_amount < max_amount")
        object.__setattr__(self, "merchant_skip_keywords", tuple(self.merchant_skip_keywords))
        if self.timezone:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise ValueError(f"unknown timezone: {self.timezone!r}") from exc


__all__ = ["DEFAULT_SKIP_KEYWORDS", "DateOrder", "DecimalConvention", "ExtractionConfig"]
