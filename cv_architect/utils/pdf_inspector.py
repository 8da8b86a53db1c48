from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from cv_architect.core.config import settings


def inspect_pdf_bytes(data: bytes) -> dict:
    """Open a PDF to confirm it is readable and within the page limit.

    The PDF itself is sent to the model, so no text is extracted here.

    Args:
        data: Raw bytes of the PDF file.

    Returns:
        dict: Metadata with page count and encryption flag.

    Raises:
        ValueError: If the PDF is unreadable, encrypted, or has too many pages.
    """
    try:
        reader = PdfReader(BytesIO(data))
        if reader.is_encrypted:
            raise ValueError("PDF is password protected")
        page_count = len(reader.pages)
    except PdfReadError as exc:
        raise ValueError(f"PDF could not be read: {exc}") from exc

    max_pages = settings.app.max_pdf_pages
    if page_count > max_pages:
        raise ValueError(
            f"PDF has too many pages: {page_count} (max allowed: {max_pages})"
        )

    return {"pages": page_count}
