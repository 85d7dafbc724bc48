"""PDF text extraction for uploaded statements."""

import io

import pdfplumber

from cardsense.core.errors import StatementParseError
from cardsense.core.utils import get_logger

logger = get_logger("cardsense.parsers.pdf")


def extract_text(data: bytes) -> str:
    """Return the best-effort plain text of a PDF, one page after another."""
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as exc:
        logger.exception("PDF text extraction failed")
        msg = "Could not read the PDF file"
        raise StatementParseError(msg) from exc
    logger.info(f"Extracted {sum(len(p) for p in pages)} characters from {len(pages)} PDF pages")
    return "\n".join(pages)
