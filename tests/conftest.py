from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from finscan import settings as settings_module  # noqa: E402


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for name in ["OCR_ENGINE", "OCR_LANGUAGE", "RECEIPT_DECIMAL_CONVENTION", "RECEIPT_DATE_ORDER", "TZ"]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    settings_module.reset_settings_state()
    yield
    settings_module.reset_settings_state()
