"""File validation utilities for content security.

Maps declared names and MIME types onto the accepted CV formats, validates
file signatures (magic numbers) to prevent MIME type spoofing, and checks
ZIP safety for DOCX files.
"""

from __future__ import annotations

import logging
import zipfile
from io import BytesIO
from pathlib import PurePath
from typing import Literal, Optional, cast

logger = logging.getLogger(__name__)

FileType = Literal["pdf", "docx", "png", "jpeg", "webp"]

# Formats the model reads natively; everything else is converted to text
BINARY_FILE_TYPES: frozenset[FileType] = frozenset({"pdf", "png", "jpeg", "webp"})
IMAGE_FILE_TYPES: frozenset[FileType] = frozenset({"png", "jpeg", "webp"})

LEGACY_DOC_EXTENSION = ".doc"
LEGACY_DOC_MIME = "application/msword"

CANONICAL_MIME: dict[FileType, str] = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "png": "image/png",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
}

_EXTENSION_MAP: dict[str, FileType] = {
    ".pdf": "pdf",
    ".docx": "docx",
    ".png": "png",
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
    ".webp": "webp",
}

_MIME_MAP: dict[str, FileType] = {
    **{mime: file_type for file_type, mime in CANONICAL_MIME.items()},
    "image/jpg": "jpeg",
    "image/pjpeg": "jpeg",
}


def file_extension(file_name: str | None) -> str | None:
    """Return the lower-cased extension of ``file_name`` (with dot), if any."""
    if not file_name:
        return None
    suffix = PurePath(file_name).suffix.lower()
    return suffix or None


def is_legacy_doc(file_name: str | None, mime_type: str | None) -> bool:
    """True for the legacy binary Word format, by extension or MIME type."""
    return (
        file_extension(file_name) == LEGACY_DOC_EXTENSION
        or (mime_type or "").lower() == LEGACY_DOC_MIME
    )


def get_file_type_from_mime(mime_type: str | None) -> Optional[FileType]:
    """Map MIME type to internal file type.

    Args:
        mime_type: MIME type string (e.g., 'application/pdf').

    Returns:
        FileType or None if unsupported.
    """
    if not mime_type:
        return None
    return cast(Optional[FileType], _MIME_MAP.get(mime_type.split(";")[0].strip().lower()))


def detect_file_type(file_name: str | None, mime_type: str | None) -> Optional[FileType]:
    """Resolve the file type by extension first, then by declared MIME type.

    Browsers report DOCX MIME types inconsistently, so the extension wins
    when both are present.
    """
    ext = file_extension(file_name)
    if ext in _EXTENSION_MAP:
        return _EXTENSION_MAP[ext]
    return get_file_type_from_mime(mime_type)


def validate_file_signature(data: bytes, expected_type: FileType) -> bool:
    """Validate file magic numbers to prevent MIME type spoofing.

    Args:
        data: File content as bytes.
        expected_type: Expected file type.

    Returns:
        True if signature matches the expected type, False otherwise.
    """
    if expected_type == "webp":
        # RIFF container: "RIFF" <size> "WEBP"
        matched = data[:4] == b"RIFF" and data[8:12] == b"WEBP"
    else:
        signatures = {
            "pdf": (b"%PDF-",),
            "docx": (b"PK\x03\x04",),  # DOCX is ZIP-based
            "png": (b"\x89PNG\r\n\x1a\n",),
            "jpeg": (b"\xff\xd8\xff",),
        }
        matched = data.startswith(signatures.get(expected_type, ()))

    if not matched:
        logger.warning(
            "file_signature.invalid",
            extra={
                "expected_type": expected_type,
                "actual_prefix": data[:10] if data else "EMPTY",
            },
        )
    return matched


def validate_zip_safety(
    data: bytes,
    max_ratio: float = 100.0,
    max_uncompressed_mb: int = 50,
) -> None:
    """Validate ZIP-based files against zip bomb attacks.

    DOCX files are ZIP archives. This function checks:
    1. Compression ratio (uncompressed/compressed) isn't suspiciously high
    2. Total uncompressed size isn't excessive

    Args:
        data: File content as bytes.
        max_ratio: Maximum allowed compression ratio (default: 100x).
        max_uncompressed_mb: Max uncompressed size in MB (default: 50MB).

    Raises:
        ValueError: If file appears to be a zip bomb or is not a valid ZIP.
    """
    try:
        with zipfile.ZipFile(BytesIO(data)) as zf:
            compressed_size = sum(info.compress_size for info in zf.filelist)
            uncompressed_size = sum(info.file_size for info in zf.filelist)
    except zipfile.BadZipFile as exc:
        logger.warning("zip_safety.bad_zip", extra={"error": str(exc)})
        raise ValueError("Invalid ZIP file structure") from exc

    if compressed_size == 0:
        logger.warning("zip_safety.invalid_zip", extra={"reason": "zero_compressed_size"})
        raise ValueError("Invalid ZIP file: compressed size is zero")

    ratio = uncompressed_size / compressed_size
    if ratio > max_ratio:
        logger.warning(
            "zip_safety.suspicious_ratio",
            extra={"ratio": ratio, "max_ratio": max_ratio},
        )
        raise ValueError(
            f"Suspicious compression ratio: {ratio:.1f}x. Maximum allowed: {max_ratio}x"
        )

    if uncompressed_size > max_uncompressed_mb * 1024 * 1024:
        logger.warning(
            "zip_safety.excessive_size",
            extra={
                "uncompressed_mb": uncompressed_size / (1024 * 1024),
                "max_mb": max_uncompressed_mb,
            },
        )
        raise ValueError(
            f"Uncompressed size ({uncompressed_size / (1024 * 1024):.1f}MB) "
            f"exceeds limit ({max_uncompressed_mb}MB)"
        )

    logger.debug("zip_safety.validated", extra={"ratio": ratio})
