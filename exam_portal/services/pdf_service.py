from __future__ import annotations

import io
import logging
from pathlib import Path

from pypdf import PdfReader

from exam_portal.config import get_settings

_TEXT_EXTENSIONS = {".txt", ".md"}
_ALLOWED_EXTENSIONS = _TEXT_EXTENSIONS | {".pdf"}

logger = logging.getLogger(__name__)


class PdfExtractionError(ValueError):
    """The uploaded bytes could not be read as a PDF."""


def extract_text_from_pdf(pdf_bytes: bytes) -> str:
    """
    Flatten a PDF into one string, one newline after every page.

    Notes:
    - Scanned PDFs without a text layer come back as blank lines only.
    - Page boundaries are kept as newlines so numbered lines at the top of a
      page still start a line.
    """
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        parts: list[str] = []
        for page in reader.pages:
            text = page.extract_text() or ""
            parts.append(text + "\n")
    except Exception as exc:  # noqa: BLE001 - malformed streams surface as many error types
        logger.warning("pdf.extract_failed", extra={"error": str(exc), "error_type": type(exc).__name__})
        raise PdfExtractionError("Could not read text from the PDF") from exc
    return "".join(parts)


def read_answer_text(filename: str, content: bytes) -> str:
    settings = get_settings()
    extension = Path(filename).suffix.lower()
    if extension not in _ALLOWED_EXTENSIONS:
        raise ValueError("Only .pdf, .txt, and .md files are supported")

    if not content:
        raise ValueError("Uploaded file is empty")

    if len(content) > settings.max_upload_bytes:
        raise ValueError(f"File exceeds {settings.max_upload_size_mb} MB limit")

    if extension in _TEXT_EXTENSIONS:
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValueError("File must be UTF-8 encoded text") from exc

    return extract_text_from_pdf(content)
