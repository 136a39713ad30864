from __future__ import annotations

import pytest

from finscan import settings as settings_module
from finscan.field_extractors import DateOrder, DecimalConvention
from finscan.settings import Settings, get_settings


def test_defaults_without_environment() -> None:
    settings = Settings.load()

    assert settings.ocr_engine == "rapidocr"
    assert settings.ocr_language == "eng"
    assert settings.decimal_convention is DecimalConvention.NONE
    assert settings.date_order is DateOrder.DMY
    assert settings.timezone is None


@pytest.mark.parametrize(
    "env_value,expected",
    [
        ("local", "local"),
        ("LOCAL", "local"),
        (" rapidocr ", "rapidocr"),
        ("", "rapidocr"),
    ],
)
def test_ocr_engine_normalised(monkeypatch, env_value, expected):
    monkeypatch.setenv("OCR_ENGINE", env_value)
    settings = Settings.load()
    assert settings.ocr_engine == expected


def test_rejects_unknown_ocr_engine(monkeypatch) -> None:
    monkeypatch.setenv("OCR_ENGINE", "cloud-vision")

    with pytest.raises(RuntimeError):
        Settings.load()


@pytest.mark.parametrize(
    "name,value",
    [
        ("RECEIPT_DATE_ORDER", "DYM"),
        ("RECEIPT_DECIMAL_CONVENTION", "space"),
        ("TZ", "Mars/Olympus"),
    ],
)
def test_rejects_invalid_extraction_settings(monkeypatch, name, value) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(RuntimeError):
        Settings.load()


def test_loads_from_env_file(tmp_path, monkeypatch):
    env_content = (
        "OCR_ENGINE=local\n"
        "OCR_LANGUAGE=ind+eng\n"
        "RECEIPT_DECIMAL_CONVENTION=comma\n"
        "RECEIPT_DATE_ORDER=mdy\n"
        "TZ=Asia/Jakarta\n"
    )
    env_file = tmp_path / ".env"
    env_file.write_text(env_content)

    monkeypatch.chdir(tmp_path)
    settings_module.reset_settings_state()

    settings = Settings.load()

    assert settings.ocr_engine == "local"
    assert settings.ocr_language == "ind+eng"
    assert settings.decimal_convention is DecimalConvention.COMMA
    assert settings.date_order is DateOrder.MDY
    assert settings.timezone == "Asia/Jakarta"


def test_extraction_config_mirrors_settings(monkeypatch) -> None:
    monkeypatch.setenv("RECEIPT_DATE_ORDER", "YMD")

    config = get_settings().extraction_config()

    assert config.date_order is DateOrder.YMD
    assert config.decimal_convention is DecimalConvention.NONE
    assert config.min_amount == 100
    assert config.max_amount == 100_000_000
