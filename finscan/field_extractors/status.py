"""Outcome markers reported by each extraction pass."""
from __future__ import annotations

from enum import Enum


class FieldStatus(str, Enum):
    FOUND = "found"
    DEFAULTED = "defaulted"
    ANOMALY = "anomaly"


__all__ = ["FieldStatus"]
