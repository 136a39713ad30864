"""FastAPI router definitions for the receipt scanning service."""
from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from .extractor import extract_report
from .field_extractors import DateOrder, DecimalConvention, ExtractionConfig
from .scanner import scan_receipt
from .settings import Settings, get_settings
from .transactions import DEFAULT_SCAN_CATEGORY, TRANSACTION_CATEGORIES, draft_from_receipt

LOGGER = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Receipt Scanner Service")

MAX_UPLOAD_SIZE = 15 * 1024 * 1024
ALLOWED_MIME_TYPES = {
    "application/pdf",
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/tiff",
    "image/webp",
}


class ExtractRequest(BaseModel):
    text: str = ""
    decimal_convention: Optional[DecimalConvention] = None
    date_order: Optional[DateOrder] = None


class ExtractResponse(BaseModel):
    extracted: Dict[str, str]
    fields: Dict[str, Dict[str, Any]]


class ScanResponse(BaseModel):
    extracted: Dict[str, str]
    fields: Dict[str, Dict[str, Any]]
    draft: Dict[str, Any]
    ocr_error: Optional[str] = None
    raw_text: str = ""


def _config_for(payload: ExtractRequest, settings: Settings) -> ExtractionConfig:
    config = settings.extraction_config()
    overrides: Dict[str, Any] = {}
    if payload.decimal_convention is not None:
        overrides["decimal_convention"] = payload.decimal_convention
    if payload.date_order is not None:
        overrides["date_order"] = payload.date_order
    return dataclasses.replace(config, **overrides) if overrides else config


async def _read_upload(file: UploadFile) -> bytes:
    data = await file.read()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="empty_file")
    if len(data) > MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="file_too_large")
    if file.content_type not in ALLOWED_MIME_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="unsupported_mime")
    return data


@app.post("/extract", response_model=ExtractResponse)
async def extract_text(payload: ExtractRequest, settings: Settings = Depends(get_settings)) -> ExtractResponse:
    report = extract_report(payload.text, _config_for(payload, settings))
    return ExtractResponse(extracted=report.receipt.as_dict(), fields=report.fields())


@app.post("/scan", response_model=ScanResponse)
async def scan(
    settings: Settings = Depends(get_settings),
    file: Optional[UploadFile] = File(None),
    image: Optional[str] = Form(None),
    image_url: Optional[str] = Form(None),
    category: str = Form(DEFAULT_SCAN_CATEGORY),
) -> ScanResponse:
    if category not in TRANSACTION_CATEGORIES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="unknown_category")
    if file is not None:
        image_input: Any = await _read_upload(file)
    elif image and image.strip():
        image_input = image
    else:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="missing_image")

    result = await run_in_threadpool(scan_receipt, image_input, settings=settings)
    if result.ocr_error:
        LOGGER.info("Scan degraded to fallback receipt: %s", result.ocr_error)

    receipt = result.report.receipt
    if image_url is None and isinstance(image_input, str) and image_input.strip().startswith(("http://", "https://")):
        image_url = image_input.strip()
    draft = draft_from_receipt(receipt, category=category, receipt_url=image_url)

    return ScanResponse(
        extracted=receipt.as_dict(),
        fields=result.report.fields(),
        draft=draft.model_dump(),
        ocr_error=result.ocr_error,
        raw_text=result.raw_text,
    )


__all__ = ["app"]
