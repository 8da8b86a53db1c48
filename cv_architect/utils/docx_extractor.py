import re
from io import BytesIO

from docx import Document

from cv_architect.core.config import settings


def _normalize_whitespace(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def extract_text_from_docx_bytes(data: bytes) -> tuple[str, dict]:
    """Extract plain text from a DOCX file, paragraphs then table cells.

    Args:
        data: Raw bytes of the DOCX file.

    Returns:
        tuple: Normalized text and metadata with paragraph/table counts.

    Raises:
        ValueError: If the document has too many paragraphs.
    """
    doc = Document(BytesIO(data))

    para_count = len(doc.paragraphs)
    max_paras = settings.app.max_docx_paragraphs
    if para_count > max_paras:
        raise ValueError(
            f"DOCX has too many paragraphs: {para_count} (max allowed: {max_paras})"
        )

    lines = [p.text for p in doc.paragraphs if p.text.strip()]

    # Many CV templates lay out skills and dates in tables
    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(cells))

    text = _normalize_whitespace("\n".join(lines))
    return text, {"paragraphs": para_count, "tables": len(doc.tables)}
