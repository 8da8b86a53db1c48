"""Word-compatible ``.doc`` downloads.

Word opens HTML carrying the Office namespaces as a document; the UTF-8 BOM
keeps non-ASCII text intact.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, get_args

from jinja2 import TemplateError
from markupsafe import Markup, escape

from cv_architect.core.errors import NotFoundAppError, PresentationBlockedError
from cv_architect.core.templating import get_template_environment

logger = logging.getLogger(__name__)

DOC_MEDIA_TYPE = "application/msword"
UTF8_BOM = "\ufeff"

TemplateKind = Literal["ats", "executive", "fresher"]
TEMPLATE_KINDS: tuple[str, ...] = get_args(TemplateKind)

TEMPLATE_FILENAMES: dict[str, str] = {
    "ats": "ATS_Standard_CV_Template.doc",
    "executive": "Modern_Executive_CV_Template.doc",
    "fresher": "Academic_Fresher_CV_Template.doc",
}

COVER_LETTER_FILENAME = "Cover_Letter.doc"


@dataclass(frozen=True)
class ExportedDocument:
    filename: str
    content: bytes
    media_type: str = DOC_MEDIA_TYPE


def _wrap(body: Markup, title: str, filename: str) -> ExportedDocument:
    try:
        template = get_template_environment().get_template("documents/office_document.html")
        html = template.render(title=title, body=body)
    except TemplateError as exc:
        logger.exception("document.render_failed", extra={"file_name": filename})
        raise PresentationBlockedError(
            code="document_render_failed",
            message="The document could not be generated.",
        ) from exc
    return ExportedDocument(filename=filename, content=(UTF8_BOM + html).encode("utf-8"))


def export_template(kind: str) -> ExportedDocument:
    """Build one of the HR CV templates as a ``.doc`` download.

    Raises:
        NotFoundAppError: If ``kind`` is not a known template.
    """
    if kind not in TEMPLATE_KINDS:
        raise NotFoundAppError(
            code="template_not_found",
            message=f"Unknown template '{kind}'. Available: {', '.join(TEMPLATE_KINDS)}",
        )
    try:
        body = get_template_environment().get_template(f"documents/{kind}.html").render()
    except TemplateError as exc:
        logger.exception("document.render_failed", extra={"template": kind})
        raise PresentationBlockedError(
            code="document_render_failed",
            message="The document could not be generated.",
        ) from exc
    return _wrap(Markup(body), "CV Template", TEMPLATE_FILENAMES[kind])


def export_cover_letter(cover_letter: str) -> ExportedDocument:
    """Build the cover letter download; text is escaped and newlines become breaks."""
    body = Markup("<p>{}</p>").format(
        Markup("<br/>").join(escape(line) for line in cover_letter.split("\n"))
    )
    return _wrap(body, "Cover Letter", COVER_LETTER_FILENAME)
