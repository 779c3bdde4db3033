"""
PDF text extraction for page-oriented statements.

Text is pulled page by page with pdfplumber and joined with newlines. PyPDF2
is used first to detect encryption and check the password, so a wrong
password is reported as such instead of as a generic parse failure.
"""

import io
from typing import Optional

import pdfplumber
import PyPDF2

from statement_ledger.exceptions import DocumentError
from statement_ledger.logging_setup import get_logger

logger = get_logger(__name__)


def _open_reader(data: bytes) -> PyPDF2.PdfReader:
    try:
        return PyPDF2.PdfReader(io.BytesIO(data))
    except Exception as exc:
        raise DocumentError(f"Could not read document: {exc}") from exc


def _try_decrypt(reader: PyPDF2.PdfReader, candidate: str) -> bool:
    try:
        return bool(reader.decrypt(candidate))
    except Exception as exc:
        raise DocumentError(f"Could not decrypt document: {exc}") from exc


def _resolve_password(reader: PyPDF2.PdfReader, password: Optional[str]) -> Optional[str]:
    """
    Check the password against an encrypted document and return the one to use.

    Documents with an empty user password open without a credential, so a
    supplied password that does not match falls back to the empty one.
    """
    if not reader.is_encrypted:
        return None

    if password and _try_decrypt(reader, password):
        return password
    if _try_decrypt(reader, ""):
        if password:
            logger.debug("Supplied password not needed; document opened with an empty password")
        return ""

    if not password:
        raise DocumentError("Document is encrypted and requires a password")
    raise DocumentError("Incorrect password for document")


def extract_text_from_pdf(data: bytes, password: Optional[str] = None) -> str:
    """
    Extract flattened text from a PDF document.

    Args:
        data: Raw PDF bytes
        password: Optional password for encrypted documents

    Returns:
        Text of all pages joined with newlines

    Raises:
        DocumentError: If the document is unreadable, or encrypted and the
            password is missing or incorrect
    """
    reader = _open_reader(data)
    password = _resolve_password(reader, password)

    try:
        with pdfplumber.open(io.BytesIO(data), password=password or "") as pdf:
            text_parts = []
            for page in pdf.pages:
                text_parts.append(page.extract_text() or "")
    except Exception as exc:
        raise DocumentError(f"Could not read document: {exc}") from exc

    logger.debug("Extracted text from %d page(s)", len(text_parts))
    return "\n".join(text_parts)
