"""Transaction drafts built from extracted receipts."""
from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator

from .extractor import ExtractedReceipt

TRANSACTION_CATEGORIES = (
    "Food",
    "Transport",
    "Shopping",
    "Housing",
    "Utilities",
    "Health",
    "Entertainment",
    "Salary",
    "Business",
    "Other",
)

DEFAULT_SCAN_CATEGORY = "Food"


class TransactionDraft(BaseModel):
    """Unsaved expense pre-filled from a scanned receipt."""

    amount: float
    category: str = DEFAULT_SCAN_CATEGORY
    description: str = ""
    date: str
    is_expense: bool = True
    receipt_url: Optional[str] = None

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str) -> str:
        if value not in TRANSACTION_CATEGORIES:
            raise ValueError(f"unknown category: {value}")
        return value


def _parse_amount(value: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _midnight_utc(value: str) -> str:
    try:
        day = dt.date.fromisoformat(value)
    except (TypeError, ValueError):
        day = dt.datetime.now(dt.timezone.utc).date()
    return dt.datetime(day.year, day.month, day.day, tzinfo=dt.timezone.utc).isoformat()


def draft_from_receipt(
    receipt: ExtractedReceipt,
    category: str = DEFAULT_SCAN_CATEGORY,
    receipt_url: Optional[str] = None,
) -> TransactionDraft:
    """Map the review fields onto an expense draft.

    Raises ``pydantic.ValidationError`` (a ``ValueError``) for categories
    outside ``TRANSACTION_CATEGORIES``.
    """

    return TransactionDraft(
        amount=_parse_amount(receipt.amount),
        category=category,
        description=receipt.merchant,
        date=_midnight_utc(receipt.date),
        is_expense=True,
        receipt_url=receipt_url,
    )


__all__ = [
    "DEFAULT_SCAN_CATEGORY",
    "TRANSACTION_CATEGORIES",
    "TransactionDraft",
    "draft_from_receipt",
]
