"""File validation utilities for upload security."""
from __future__ import annotations

import logging

from fastapi import UploadFile

from cv_architect.core.config import settings
from cv_architect.core.errors import FileTooLargeError

logger = logging.getLogger(__name__)

FILE_TOO_LARGE_MESSAGE = (
    "File size exceeds 20MB limit. Please upload a compressed or smaller file."
)


def max_upload_bytes() -> int:
    return settings.app.max_upload_size_mb * 1024 * 1024


def file_too_large(actual_bytes: int | None = None) -> FileTooLargeError:
    details = {"max_bytes": max_upload_bytes()}
    if actual_bytes is not None:
        details["actual_bytes"] = actual_bytes
    return FileTooLargeError(
        code="file_too_large",
        message=FILE_TOO_LARGE_MESSAGE,
        details=details,  # type: ignore[arg-type]
    )


async def read_upload_file_limited(file: UploadFile) -> bytes:
    """Read an uploaded file in chunks enforcing the max size limit.

    Uses file.size if available (multipart headers), falls back to chunked
    reading that stops as soon as the limit is crossed.

    Args:
        file: FastAPI upload file instance.

    Returns:
        File content as bytes if within the allowed size limit.

    Raises:
        FileTooLargeError: If the file exceeds the configured size limit.
    """
    max_bytes = max_upload_bytes()

    file_size = getattr(file, "size", None)
    if file_size is not None and file_size > max_bytes:
        logger.warning(
            "file_validation.rejected_by_header",
            extra={"file_size": file_size, "max_bytes": max_bytes},
        )
        raise file_too_large(file_size)

    size = 0
    chunks: list[bytes] = []

    while True:
        chunk = await file.read(64 * 1024)
        if not chunk:
            break

        size += len(chunk)
        if size > max_bytes:
            logger.warning(
                "file_validation.rejected_by_chunked_read",
                extra={"size": size, "max_bytes": max_bytes},
            )
            raise file_too_large()
        chunks.append(chunk)

    return b"".join(chunks)
