from __future__ import annotations

import logging
from io import BytesIO

from docx import Document
from pypdf import PdfReader

from ats_service.core.errors import ExtractionFailed, UnsupportedFormat

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _normalize_media_type(media_type: str | None) -> str:
    return (media_type or "").split(";", 1)[0].strip().lower()


def _extract_pdf(content: bytes) -> str:
    reader = PdfReader(BytesIO(content))
    page_chunks: list[str] = []
    for page in reader.pages:
        page_text = page.extract_text() or ""
        if page_text.strip():
            page_chunks.append(page_text)
    return "\n".join(page_chunks)


def _extract_docx(content: bytes) -> str:
    document = Document(BytesIO(content))
    return "\n".join(paragraph.text for paragraph in document.paragraphs if paragraph.text.strip())


_EXTRACTORS = {
    PDF_MEDIA_TYPE: _extract_pdf,
    DOCX_MEDIA_TYPE: _extract_docx,
}


def extract(content: bytes, media_type: str | None) -> str:
    """Return the plain text of a PDF or DOCX document.

    Raises UnsupportedFormat for any other media type and ExtractionFailed
    when the parser cannot read the bytes (corrupt, encrypted, truncated).
    """
    normalized = _normalize_media_type(media_type)
    extractor = _EXTRACTORS.get(normalized)
    if extractor is None:
        raise UnsupportedFormat(media_type or "unknown")

    try:
        return extractor(content)
    except Exception as exc:
        logger.warning("text_extraction_failed media_type=%s bytes=%s: %s", normalized, len(content), exc)
        raise ExtractionFailed(f"Unable to extract text from {normalized} file: {exc}") from exc
