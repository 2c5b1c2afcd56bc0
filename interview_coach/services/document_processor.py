"""
Document Processor
Extracts plain text from uploaded resume PDFs using PyPDF2.
"""

import io
import logging

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

logger = logging.getLogger(__name__)


class DocumentProcessingError(Exception):
    """Raised when text cannot be extracted from a document."""
    pass


def extract_text_from_pdf(content: bytes) -> str:
    """
    Extract the text of every page of a PDF.

    Args:
        content: Raw PDF bytes

    Returns:
        Page texts joined by newlines, stripped

    Raises:
        DocumentProcessingError: If the PDF is unreadable or contains no text
    """
    if not content:
        raise DocumentProcessingError("Empty PDF upload")

    try:
        reader = PdfReader(io.BytesIO(content))
        if reader.is_encrypted:
            # Many resumes are "encrypted" with an empty owner password
            reader.decrypt("")
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PdfReadError, ValueError, KeyError, TypeError) as e:
        logger.error(f"Failed to read PDF: {e}")
        raise DocumentProcessingError(f"Could not read PDF: {e}") from e

    text = "\n".join(pages).strip()
    if not text:
        raise DocumentProcessingError("No extractable text found in PDF")

    logger.info(f"Extracted {len(text)} chars from {len(pages)} PDF page(s)")
    return text
