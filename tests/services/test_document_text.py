"""Tests for contract upload text extraction."""

import io

import pytest
from pypdf import PdfWriter

from core.exceptions import (
    DocumentParseError,
    EmptyDocumentError,
    UnsupportedDocumentError,
)
from services.document_text import (
    EMPTY_MESSAGE,
    PDF_PARSE_MESSAGE,
    UNSUPPORTED_MESSAGE,
    extract_contract_text,
    resolve_content_type,
)


def _blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def test_plain_text_is_decoded():
    text = extract_contract_text("terms.txt", "text/plain", b"Deposit: 50%\n")
    assert text == "Deposit: 50%\n"


def test_content_type_parameters_are_ignored():
    assert resolve_content_type("a.txt", "text/plain; charset=utf-8") == "text/plain"


def test_generic_content_type_falls_back_to_extension():
    assert resolve_content_type("Contract.PDF", "application/octet-stream") == "application/pdf"
    assert resolve_content_type("notes.txt", None) == "text/plain"
    assert resolve_content_type("image.png", "") == ""


def test_unsupported_type_is_rejected():
    with pytest.raises(UnsupportedDocumentError) as exc_info:
        extract_contract_text("photo.png", "image/png", b"\x89PNG")
    assert str(exc_info.value) == UNSUPPORTED_MESSAGE


def test_whitespace_only_text_is_empty():
    with pytest.raises(EmptyDocumentError) as exc_info:
        extract_contract_text("blank.txt", "text/plain", b"  \n\t ")
    assert str(exc_info.value) == EMPTY_MESSAGE


def test_invalid_pdf_bytes_fail_to_parse():
    with pytest.raises(DocumentParseError) as exc_info:
        extract_contract_text("broken.pdf", "application/pdf", b"this is not a pdf")
    assert str(exc_info.value) == PDF_PARSE_MESSAGE


def test_pdf_without_text_is_empty():
    with pytest.raises(EmptyDocumentError):
        extract_contract_text("scan.pdf", "application/pdf", _blank_pdf())
