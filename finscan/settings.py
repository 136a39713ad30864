"""Application settings management for the receipt scanning service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .field_extractors.config import DateOrder, DecimalConvention, ExtractionConfig

OCR_ENGINES = ("rapidocr", "local")


@dataclass(frozen=True)
class Settings:
    ocr_engine: str
    ocr_language: str
    decimal_convention: DecimalConvention
    date_order: DateOrder
    timezone: Optional[str]

    @staticmethod
    def _env(name: str, default: str) -> str:
        value = os.getenv(name)
        if value is None or not value.strip():
            return default
        return value.strip()

    @classmethod
    def load(cls) -> "Settings":
        _ensure_env_file_loaded()
        ocr_engine = cls._env("OCR_ENGINE", "rapidocr").lower()
        if ocr_engine not in OCR_ENGINES:
            raise RuntimeError(f"OCR_ENGINE must be one of {', '.join(OCR_ENGINES)}")
        ocr_language = cls._env("OCR_LANGUAGE", "eng")

        # The extraction config owns the accepted spellings; surface its
        # complaints as configuration errors.
        timezone = os.getenv("TZ")
        try:
            config = ExtractionConfig(
                decimal_convention=cls._env("RECEIPT_DECIMAL_CONVENTION", DecimalConvention.NONE.value),
                date_order=cls._env("RECEIPT_DATE_ORDER", DateOrder.DMY.value),
                timezone=timezone.strip() if timezone and timezone.strip() else None,
            )
        except ValueError as exc:
            raise RuntimeError(f"Invalid receipt extraction settings: {exc}") from exc

        return cls(
            ocr_engine=ocr_engine,
            ocr_language=ocr_language,
            decimal_convention=config.decimal_convention,
            date_order=config.date_order,
            timezone=config.timezone,
        )

    def extraction_config(self) -> ExtractionConfig:
        return ExtractionConfig(
            decimal_convention=self.decimal_convention,
            date_order=self.date_order,
            timezone=self.timezone,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings.load()


def reset_settings_state() -> None:
    """Reset cached settings and environment file state (for tests)."""
    global _ENV_FILE_LOADED
    _ENV_FILE_LOADED = False
    get_settings.cache_clear()


_ENV_FILE_LOADED = False


def _ensure_env_file_loaded() -> None:
    global _ENV_FILE_LOADED
    if _ENV_FILE_LOADED:
        return
    candidates = [Path.cwd() / ".env", Path(__file__).resolve().parent.parent / ".env"]
    loaded = False
    for env_path in candidates:
        if env_path.exists():
            load_dotenv(dotenv_path=env_path, override=False)
            loaded = True
    if not loaded:
        load_dotenv(override=False)
    _ENV_FILE_LOADED = True


__all__ = ["OCR_ENGINES", "Settings", "get_settings", "reset_settings_state"]
