"""Turns an uploaded CV file or pasted text into an analysis payload.

Formats the model ingests natively (PDF, PNG, JPEG, WEBP) travel as inline
base64 data; DOCX is converted to text first. Every rejection here happens
before the model is contacted.
"""

from __future__ import annotations

import asyncio
import base64
import hashlib
import logging
from typing import Any, Callable

from cv_architect.core.config import settings
from cv_architect.core.errors import UnsupportedFormatError, ValidationAppError
from cv_architect.core.file_validation import file_too_large, max_upload_bytes
from cv_architect.schemas.request import BinaryPayload, CVPayload, TextPayload
from cv_architect.utils.docx_extractor import extract_text_from_docx_bytes
from cv_architect.utils.file_validators import (
    BINARY_FILE_TYPES,
    CANONICAL_MIME,
    IMAGE_FILE_TYPES,
    FileType,
    detect_file_type,
    file_extension,
    is_legacy_doc,
    validate_file_signature,
    validate_zip_safety,
)
from cv_architect.utils.pdf_inspector import inspect_pdf_bytes

logger = logging.getLogger(__name__)

LEGACY_DOC_MESSAGE = "Legacy .doc format is not supported. Please save as .docx or PDF."
UNSUPPORTED_TYPE_MESSAGE = "Please upload a PDF, Word Doc (DOCX), or Image file."
UNSUPPORTED_IMAGE_MESSAGE = "Please upload a JPEG, PNG, or WEBP image."
DOCX_FAILURE_MESSAGE = "Failed to read Word document. Please try saving as PDF."
DOCX_TIMEOUT_MESSAGE = "Document parser timed out. Please try saving as PDF."
PDF_FAILURE_MESSAGE = (
    "The PDF could not be opened. It may be corrupted or password protected."
)


def check_file_type(file_name: str | None, mime_type: str | None) -> FileType:
    """Apply the type policy to a declared file name and MIME type.

    Legacy ``.doc`` is refused first so that its guidance message wins over
    any other check, size included.

    Raises:
        UnsupportedFormatError: For legacy Word files and types outside the
            allow-list.
    """
    ext = file_extension(file_name)

    if is_legacy_doc(file_name, mime_type):
        logger.info("normalize.legacy_doc_rejected", extra={"file_name_ext": ext})
        raise UnsupportedFormatError(
            code="legacy_doc_unsupported",
            message=LEGACY_DOC_MESSAGE,
            details={"file_name_ext": ext or "", "mime_type": mime_type or ""},
        )

    file_type = detect_file_type(file_name, mime_type)
    if file_type is None:
        logger.info(
            "normalize.unsupported_type",
            extra={"file_name_ext": ext, "mime_type": mime_type},
        )
        raise UnsupportedFormatError(
            code="unsupported_file_type",
            message=UNSUPPORTED_TYPE_MESSAGE,
            details={"file_name_ext": ext or "", "mime_type": mime_type or ""},
        )
    return file_type


def check_image_type(file_name: str | None, mime_type: str | None) -> FileType:
    """Type policy for headshots: JPEG, PNG or WEBP only."""
    file_type = detect_file_type(file_name, mime_type)
    if file_type not in IMAGE_FILE_TYPES:
        raise UnsupportedFormatError(
            code="unsupported_image_type",
            message=UNSUPPORTED_IMAGE_MESSAGE,
            details={"mime_type": mime_type or ""},
        )
    return file_type


def _check_content(data: bytes, file_type: FileType) -> None:
    if not data:
        raise ValidationAppError(code="empty_file", message="Empty file.")

    if len(data) > max_upload_bytes():
        raise file_too_large(len(data))

    if not validate_file_signature(data, file_type):
        raise ValidationAppError(
            code="invalid_file_signature",
            message=(
                f"File content doesn't match its declared type. "
                f"Expected {file_type.upper()}."
            ),
            details={"file_type": file_type},
        )


async def _run_with_timeout(func: Callable[[bytes], Any], data: bytes) -> Any:
    """Run a blocking parser in the default executor under the configured timeout."""
    loop = asyncio.get_running_loop()
    return await asyncio.wait_for(
        loop.run_in_executor(None, func, data),
        timeout=settings.app.file_extraction_timeout_seconds,
    )


async def _docx_to_text(data: bytes) -> TextPayload:
    try:
        validate_zip_safety(data)
    except ValueError as exc:
        logger.warning("normalize.zip_validation_failed", extra={"error": str(exc)})
        raise ValidationAppError(
            code="docx_extraction_failed",
            message=DOCX_FAILURE_MESSAGE,
            details={"hint": str(exc), "file_type": "docx"},
        ) from exc

    try:
        text, meta = await _run_with_timeout(extract_text_from_docx_bytes, data)
    except asyncio.TimeoutError:
        timeout_seconds = settings.app.file_extraction_timeout_seconds
        logger.warning(
            "normalize.extraction_timeout",
            extra={"file_type": "docx", "timeout_seconds": timeout_seconds},
        )
        raise ValidationAppError(
            code="extraction_timeout",
            message=DOCX_TIMEOUT_MESSAGE,
            details={"timeout_seconds": timeout_seconds, "file_type": "docx"},
        ) from None
    except Exception as exc:
        logger.warning(
            "normalize.docx_failed",
            extra={"error": str(exc), "error_type": type(exc).__name__},
        )
        raise ValidationAppError(
            code="docx_extraction_failed",
            message=DOCX_FAILURE_MESSAGE,
            details={"file_type": "docx"},
        ) from exc

    logger.info(
        "normalize.docx_extracted",
        extra={
            "char_count": len(text),
            "cv_text_hash": hashlib.sha256(text.encode()).hexdigest()[:16],
            "meta": meta,
        },
    )
    return TextPayload(extracted_text=text)


async def _inspect_pdf(data: bytes) -> None:
    try:
        meta = await _run_with_timeout(inspect_pdf_bytes, data)
    except asyncio.TimeoutError:
        raise ValidationAppError(
            code="extraction_timeout",
            message="PDF inspection timed out. The file may be corrupted or too complex.",
            details={
                "timeout_seconds": settings.app.file_extraction_timeout_seconds,
                "file_type": "pdf",
            },
        ) from None
    except Exception as exc:
        logger.warning("normalize.pdf_rejected", extra={"error": str(exc)})
        raise ValidationAppError(
            code="pdf_unreadable",
            message=PDF_FAILURE_MESSAGE,
            details={"hint": str(exc), "file_type": "pdf"},
        ) from exc
    logger.debug("normalize.pdf_inspected", extra={"meta": meta})


async def normalize_upload(
    file_name: str | None,
    mime_type: str | None,
    data: bytes,
) -> CVPayload:
    """Turn an uploaded CV file into a payload for the request builder.

    Args:
        file_name: Client-supplied file name (used for the extension).
        mime_type: Declared MIME type.
        data: Complete file content.

    Returns:
        BinaryPayload for PDF and images, TextPayload for DOCX.

    Raises:
        UnsupportedFormatError: Legacy ``.doc`` or a type outside the allow-list.
        FileTooLargeError: Content above the upload ceiling.
        ValidationAppError: Empty, spoofed, corrupt or unparseable content.
    """
    file_type = check_file_type(file_name, mime_type)
    _check_content(data, file_type)

    logger.info(
        "normalize.start",
        extra={
            "file_name_ext": file_extension(file_name),
            "file_type": file_type,
            "size_bytes": len(data),
        },
    )

    if file_type not in BINARY_FILE_TYPES:
        return await _docx_to_text(data)

    if file_type == "pdf":
        await _inspect_pdf(data)

    return BinaryPayload(
        mime_type=CANONICAL_MIME[file_type],
        data_base64=base64.b64encode(data).decode("ascii"),
        file_name=file_name,
    )


async def normalize_image(
    file_name: str | None,
    mime_type: str | None,
    data: bytes,
) -> BinaryPayload:
    """Validate a headshot upload and encode it as an inline payload."""
    file_type = check_image_type(file_name, mime_type)
    _check_content(data, file_type)
    return BinaryPayload(
        mime_type=CANONICAL_MIME[file_type],
        data_base64=base64.b64encode(data).decode("ascii"),
        file_name=file_name,
    )


def normalize_pasted_text(text: str) -> TextPayload:
    """Pasted CV text passes through unchanged."""
    return TextPayload(extracted_text=text)
