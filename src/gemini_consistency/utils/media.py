"""Turn user-supplied files into inline prompt parts.

PDFs are rendered to one JPEG per page; images larger than 100 KB are
re-encoded as JPEG with decreasing quality until they fit.
"""

from __future__ import annotations

import base64
import io
import logging
import mimetypes
from collections.abc import Sequence
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from gemini_consistency.errors.exceptions import MediaError
from gemini_consistency.types import InlineBinaryPart

logger = logging.getLogger(__name__)

MAX_FILES = 16
MAX_PART_BYTES = 100 * 1024
_PDF_ZOOM = 1.5
_START_QUALITY = 80
_QUALITY_STEP = 10
_MIN_QUALITY = 10
_MAX_FILE_SIZE_BYTES = 50 * 1024 * 1024  # 50 MB

_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp", ".tif", ".tiff"}
_SUPPORTED_EXTENSIONS = _IMAGE_EXTENSIONS | {".pdf"}


def prepare_media(paths: Sequence[str | Path]) -> list[InlineBinaryPart]:
    """Read, convert, and base64-encode every file, in order."""
    if len(paths) > MAX_FILES:
        raise MediaError(f"You can only attach a maximum of {MAX_FILES} files (got {len(paths)}).")

    parts: list[InlineBinaryPart] = []
    for raw_path in paths:
        path = Path(raw_path)
        _validate_path(path)
        if is_pdf(path):
            pages = pdf_to_jpegs(path)
            logger.info("Rendered %d page(s) from %s", len(pages), path.name)
            parts.extend(_to_part(page, "image/jpeg") for page in pages)
        else:
            data, mime_type = shrink_image(path.read_bytes(), _guess_mime(path))
            parts.append(_to_part(data, mime_type))
    return parts


def encode_base64(data: bytes) -> str:
    """Encode raw bytes to a base64 string."""
    return base64.b64encode(data).decode("ascii")


def is_pdf(path: str | Path) -> bool:
    return Path(path).suffix.lower() == ".pdf"


def pdf_to_jpegs(path: str | Path, zoom: float = _PDF_ZOOM) -> list[bytes]:
    """Render each PDF page to JPEG bytes."""
    import pymupdf

    path = Path(path)
    try:
        doc = pymupdf.open(str(path))
    except Exception as e:
        raise MediaError(f"Failed to process PDF: {path.name} ({e})", path=str(path)) from e

    pages: list[bytes] = []
    matrix = pymupdf.Matrix(zoom, zoom)
    try:
        for page in doc:
            pix = page.get_pixmap(matrix=matrix)
            img = Image.open(io.BytesIO(pix.tobytes("png")))
            pages.append(_encode_jpeg(img, _START_QUALITY))
    except Exception as e:
        raise MediaError(f"Failed to render PDF: {path.name} ({e})", path=str(path)) from e
    finally:
        doc.close()
    return pages


def shrink_image(data: bytes, mime_type: str, max_bytes: int = MAX_PART_BYTES) -> tuple[bytes, str]:
    """Re-encode an oversized image as JPEG, keeping whichever is smaller.

    Quality steps down from 80 by 10 until the output fits ``max_bytes`` or
    the quality floor is reached. Images that cannot be decoded are sent
    unchanged; images over Pillow's pixel limit raise ``MediaError``.
    """
    if len(data) <= max_bytes:
        return data, mime_type

    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except Image.DecompressionBombError as e:
        raise MediaError(f"Image is too large to decode ({e})") from e
    except (UnidentifiedImageError, OSError) as e:
        logger.warning("Compression failed, sending original (%s)", e)
        return data, mime_type

    quality = _START_QUALITY
    try:
        compressed = _encode_jpeg(img, quality)
        while len(compressed) > max_bytes and quality - _QUALITY_STEP >= _MIN_QUALITY:
            quality -= _QUALITY_STEP
            compressed = _encode_jpeg(img, quality)
    except OSError as e:
        raise MediaError(f"Failed to re-encode image as JPEG ({e})") from e

    if len(compressed) < len(data):
        logger.info(
            "Compressed image %d -> %d bytes (quality %d)", len(data), len(compressed), quality
        )
        return compressed, "image/jpeg"
    return data, mime_type


def _encode_jpeg(img: Image.Image, quality: int) -> bytes:
    buf = io.BytesIO()
    img.convert("RGB").save(buf, format="JPEG", quality=quality)
    return buf.getvalue()


def _to_part(data: bytes, mime_type: str) -> InlineBinaryPart:
    return InlineBinaryPart(mime_type=mime_type, data=encode_base64(data))


def _guess_mime(path: Path) -> str:
    mime_type, _ = mimetypes.guess_type(path.name)
    return mime_type or "application/octet-stream"


def _validate_path(path: Path) -> None:
    if not path.exists():
        raise MediaError(f"File not found: {path}", path=str(path))
    if path.suffix.lower() not in _SUPPORTED_EXTENSIONS:
        raise MediaError(f"Unsupported file type: {path.suffix}", path=str(path))
    size = path.stat().st_size
    if size > _MAX_FILE_SIZE_BYTES:
        raise MediaError(
            f"File too large ({size} bytes, max {_MAX_FILE_SIZE_BYTES})", path=str(path)
        )
