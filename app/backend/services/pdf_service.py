"""
PDF text extraction service using pdfplumber.

Handles conversion of PDF documents into an ordered sequence of page texts.
"""

import io
import logging
from typing import BinaryIO

import pdfplumber

# Handle both package imports and standalone imports
try:
    from ..models import Page
except ImportError:
    from models import Page

logger = logging.getLogger(__name__)

# How far into the file the PDF header may appear
HEADER_SEARCH_BYTES = 1024


class DocumentParseError(Exception):
    """Raised when document bytes cannot be read as a PDF."""

    pass


class PDFService:
    """
    Service for PDF text extraction.

    Uses pdfplumber (backed by pdfminer.six) to read the words on each page.
    """

    def __init__(self, use_text_flow: bool = True):
        """
        Initialize the PDF service.

        Args:
            use_text_flow: Keep words in the order the PDF content stream
                yields them instead of re-sorting them by position.
        """
        self.use_text_flow = use_text_flow

    def extract_pages(self, file_bytes: bytes | BinaryIO) -> list[Page]:
        """
        Extract the text of every page, in document order.

        Words on a page are joined by a single space. Pages without text
        yield an empty string.

        Args:
            file_bytes: PDF file as bytes or file-like object.

        Returns:
            List of Page objects numbered from 1.

        Raises:
            DocumentParseError: If the file is not a readable PDF, has no
                pages, or any single page fails to extract.
        """
        pdf_bytes = self._read_bytes(file_bytes)

        try:
            pdf = pdfplumber.open(io.BytesIO(pdf_bytes))
        except Exception as e:
            logger.error("Could not open PDF: %s", e)
            raise DocumentParseError(f"Invalid or corrupted PDF file: {e}") from e

        with pdf:
            try:
                pdf_pages = pdf.pages
            except Exception as e:
                logger.error("Could not read PDF page tree: %s", e)
                raise DocumentParseError(f"Could not read PDF pages: {e}") from e

            if not pdf_pages:
                raise DocumentParseError("PDF contains no pages")

            pages: list[Page] = []
            for page_number, pdf_page in enumerate(pdf_pages, start=1):
                try:
                    words = pdf_page.extract_words(use_text_flow=self.use_text_flow)
                except Exception as e:
                    logger.error("Text extraction failed on page %d: %s", page_number, e)
                    raise DocumentParseError(
                        f"Text extraction failed on page {page_number}: {e}"
                    ) from e
                finally:
                    # Release cached layout objects for long documents
                    pdf_page.flush_cache()

                text = " ".join(word["text"] for word in words or [])
                pages.append(Page(page_number=page_number, text=text))

        logger.info("Extracted text from %d page(s)", len(pages))
        return pages

    def _read_bytes(self, file_bytes: bytes | BinaryIO) -> bytes:
        """Normalize input to bytes and check it looks like a PDF."""
        if hasattr(file_bytes, "read"):
            pdf_bytes = file_bytes.read()
        else:
            pdf_bytes = file_bytes

        if not pdf_bytes:
            raise DocumentParseError("Empty PDF file provided")

        # The header may follow a few leading junk bytes
        if b"%PDF" not in pdf_bytes[:HEADER_SEARCH_BYTES]:
            raise DocumentParseError(
                "Invalid PDF file: does not contain a PDF header"
            )

        return pdf_bytes
