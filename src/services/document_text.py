"""Extract plain text from uploaded contract documents (PDF or text)."""

from __future__ import annotations

import io
import logging

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from core.exceptions import (
    DocumentParseError,
    EmptyDocumentError,
    UnsupportedDocumentError,
)


logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
TEXT_CONTENT_TYPE = "text/plain"

# Browsers sometimes send these for files they cannot classify
_GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "binary/octet-stream"}
_EXTENSION_TYPES = {".pdf": PDF_CONTENT_TYPE, ".txt": TEXT_CONTENT_TYPE}

NO_FILE_MESSAGE = "No file uploaded"
PDF_PARSE_MESSAGE = "Failed to parse PDF file. Please ensure it is a valid document."
UNSUPPORTED_MESSAGE = "Unsupported file type. Please upload a PDF or TXT file."
EMPTY_MESSAGE = "The uploaded file appears to be empty or unreadable."


def resolve_content_type(filename: str | None, content_type: str | None) -> str:
    """Media type of an upload, using the file extension when the browser
    sent a generic type."""
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    if media_type in _GENERIC_CONTENT_TYPES and filename:
        for ext, guessed in _EXTENSION_TYPES.items():
            if filename.lower().endswith(ext):
                return guessed
    return media_type


def extract_pdf_text(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PyPdfError, ValueError, OSError) as e:
        logger.error("PDF parsing failed: %s", e)
        raise DocumentParseError(PDF_PARSE_MESSAGE) from e
    return "\n".join(pages)


def extract_contract_text(
    filename: str | None, content_type: str | None, data: bytes
) -> str:
    """Return the text of an uploaded contract.

    Blocking (pypdf is synchronous); call it from a worker thread inside
    request handlers.

    Raises:
        UnsupportedDocumentError: not a PDF or plain-text upload.
        DocumentParseError: the PDF could not be read.
        EmptyDocumentError: nothing but whitespace was extracted.
    """
    media_type = resolve_content_type(filename, content_type)

    if media_type == PDF_CONTENT_TYPE:
        text = extract_pdf_text(data)
    elif media_type == TEXT_CONTENT_TYPE:
        text = data.decode("utf-8", errors="replace")
    else:
        logger.warning("Unsupported file type: %s", media_type or "<none>")
        raise UnsupportedDocumentError(UNSUPPORTED_MESSAGE)

    if not text.strip():
        logger.warning("Extracted text is empty for %s", filename)
        raise EmptyDocumentError(EMPTY_MESSAGE)

    logger.info("Extracted %d characters from %s", len(text), filename)
    return text
