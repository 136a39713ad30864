"""Receipt OCR helpers.

``recognize`` loads the requested image/PDF (raw bytes, URL, base64 string or
a browser ``data:`` URL), runs it through an OCR engine and returns the
recognised text for ``finscan.extractor``.

RapidOCR is the default engine with local Tesseract as its fallback;
``OCR_ENGINE=local`` goes straight to Tesseract. PDFs with a text layer are
read with pdfminer instead of being rasterised.
"""
from __future__ import annotations

import base64
import binascii
import logging
import re
import unicodedata
from io import BytesIO
from typing import List, Optional, Tuple, Union

import jaconv
import numpy as np
import pytesseract
import requests
from pdfminer.high_level import extract_text
from PIL import Image, UnidentifiedImageError
from rapidocr_onnxruntime import RapidOCR  # type: ignore

from .settings import Settings, get_settings

LOGGER = logging.getLogger(__name__)

OCR_TIMEOUT = 30

_RAPIDOCR_ENGINE: Optional[RapidOCR] = None

_DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[^,]*)?;base64,(?P<payload>.*)$", re.DOTALL)


class ImageFetchError(RuntimeError):
    """Raised when the input image/PDF cannot be retrieved."""


class OCRServiceError(RuntimeError):
    """Raised when the upstream OCR engine fails."""


class OCRDecodeError(RuntimeError):
    """Raised when the input or the OCR output cannot be interpreted."""


def recognize(
    image_input: Union[str, bytes],
    *,
    settings: Optional[Settings] = None,
) -> str:
    """Return the text recognised in ``image_input``.

    Parameters
    ----------
    image_input:
        Raw image/PDF bytes, an ``http(s)`` URL, a ``data:`` URL or a bare
        base64 string.
    settings:
        Engine and language selection; defaults to the cached environment
        settings.

    Empty recognition results come back as ``""``; deciding what an empty
    receipt means is left to the extractor.
    """

    settings = settings or get_settings()
    binary, source = _load_bytes(image_input)
    LOGGER.info("ocr_started: source=%s size=%d", source, len(binary))
    if _is_pdf(binary):
        raw_text = _extract_text_from_pdf(binary)
    else:
        raw_text = _perform_ocr(binary, engine=settings.ocr_engine, language=settings.ocr_language)
    return "\n".join(_normalise_lines(raw_text or ""))


def _normalise_text(text: str) -> str:
    cleaned = unicodedata.normalize("NFKC", text or "")
    cleaned = jaconv.z2h(cleaned, kana=False, digit=True, ascii=True)
    cleaned = cleaned.replace("\u3000", " ")
    cleaned = re.sub(r"[\t\f\r]+", " ", cleaned)
    cleaned = re.sub(r"\s{2,}", " ", cleaned)
    return cleaned.strip()


def _normalise_lines(raw_text: str) -> List[str]:
    return [line for line in (_normalise_text(line) for line in raw_text.splitlines()) if line]


def _load_bytes(image_input: Union[str, bytes]) -> Tuple[bytes, str]:
    if isinstance(image_input, (bytes, bytearray)):
        return bytes(image_input), "bytes"

    if isinstance(image_input, str):
        trimmed = image_input.strip()
        if trimmed.startswith("http://") or trimmed.startswith("https://"):
            try:
                response = requests.get(trimmed, timeout=OCR_TIMEOUT)
                response.raise_for_status()
            except requests.RequestException as exc:  # pragma: no cover - network
                raise ImageFetchError("fetch_failed") from exc
            return response.content, trimmed

        data_url = _DATA_URL_PATTERN.match(trimmed)
        if data_url:
            trimmed = data_url.group("payload")
            source = f"data_url:{data_url.group('mime') or 'unknown'}"
        elif trimmed.startswith("data:"):
            raise OCRDecodeError("unsupported_data_url")
        else:
            source = "base64"

        try:
            return base64.b64decode(trimmed, validate=True), source
        except (binascii.Error, ValueError) as exc:
            raise OCRDecodeError("invalid_base64") from exc

    raise OCRDecodeError("unsupported_input_type")


def _is_pdf(binary: bytes) -> bool:
    return binary.startswith(b"%PDF")


def _extract_text_from_pdf(binary: bytes) -> str:
    try:
        return extract_text(BytesIO(binary))
    except Exception as exc:  # pragma: no cover - pdfminer internal failures
        raise OCRDecodeError("pdf_text_extraction_failed") from exc


def _perform_ocr(binary: bytes, *, engine: str = "rapidocr", language: str = "eng") -> str:
    engine = (engine or "rapidocr").strip().lower()
    if engine == "rapidocr":
        try:
            return _ocr_rapidocr(binary)
        except (OCRServiceError, OCRDecodeError) as exc:
            LOGGER.warning(
                "rapidocr_failed_falling_back: %s",
                exc,
                exc_info=LOGGER.isEnabledFor(logging.DEBUG),
            )
            return _ocr_local(binary, language=language)
    if engine == "local":
        return _ocr_local(binary, language=language)
    raise OCRServiceError(f"unknown_ocr_engine:{engine}")


def _ocr_local(binary: bytes, *, language: str = "eng") -> str:
    image = _image_from_bytes(binary)
    try:
        return pytesseract.image_to_string(image, lang=language or "eng")
    except pytesseract.TesseractNotFoundError as exc:
        raise OCRServiceError("tesseract_not_found") from exc
    except pytesseract.TesseractError as exc:
        raise OCRServiceError(f"tesseract_error:{exc}") from exc
    except Exception as exc:  # pragma: no cover - unexpected pytesseract failure
        raise OCRServiceError("tesseract_unknown_error") from exc


def _ocr_rapidocr(binary: bytes) -> str:
    image = _image_from_bytes(binary)
    np_image = np.array(image)
    engine = _get_rapidocr()
    try:
        result, _ = engine(np_image)
    except Exception as exc:  # pragma: no cover - rapidocr runtime failure
        raise OCRServiceError("rapidocr_execution_failed") from exc
    if not result:
        LOGGER.info("rapidocr_empty_result")
        return ""
    texts: List[str] = []
    for entry in result:
        if not entry:
            continue
        if isinstance(entry, (list, tuple)) and len(entry) >= 2:
            candidate = entry[1]
        else:
            candidate = entry
        if isinstance(candidate, (list, tuple)) and candidate:
            candidate = candidate[0]
        if not isinstance(candidate, str):
            continue
        normalised = _normalise_text(candidate)
        if normalised:
            texts.append(normalised)
    return "\n".join(texts)


def _get_rapidocr() -> RapidOCR:
    global _RAPIDOCR_ENGINE
    if _RAPIDOCR_ENGINE is None:
        _RAPIDOCR_ENGINE = RapidOCR(det_use_cuda=False, rec_use_cuda=False, cls_use_cuda=False)
    return _RAPIDOCR_ENGINE


def _image_from_bytes(binary: bytes) -> Image.Image:
    try:
        image = Image.open(BytesIO(binary))
        image.load()
    except UnidentifiedImageError as exc:
        raise OCRDecodeError("unsupported_image_format") from exc
    except Exception as exc:  # pragma: no cover - pillow internal failures
        raise OCRServiceError("image_open_failed") from exc
    return image.convert("RGB")


__all__ = [
    "ImageFetchError",
    "OCRDecodeError",
    "OCRServiceError",
    "recognize",
]
