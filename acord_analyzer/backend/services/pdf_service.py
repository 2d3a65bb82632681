"""
PDF processing service using pypdf.

Handles upload checks and truncation of PDF documents to their first pages
before they are sent for AI processing.
"""

import io
import logging
from dataclasses import dataclass
from typing import BinaryIO

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


class DocumentError(Exception):
    """Base class for errors about an uploaded document."""

    pass


class NoFileSelectedError(DocumentError):
    """Raised when a request carries no file."""

    pass


class UnsupportedMediaTypeError(DocumentError):
    """Raised when the declared media type is not PDF."""

    pass


class FileTooLargeError(DocumentError):
    """Raised when a document exceeds the upload size ceiling."""

    pass


class MalformedDocumentError(DocumentError):
    """Raised when the bytes cannot be parsed as a PDF."""

    pass


@dataclass(frozen=True)
class Document:
    """
    An uploaded document held in memory for the lifetime of one request.

    Attributes:
        filename: Original filename as given by the uploader.
        content: Raw file bytes.
        media_type: Declared media type of the upload.
    """

    filename: str
    content: bytes
    media_type: str = PDF_MEDIA_TYPE

    @property
    def size(self) -> int:
        return len(self.content)

    def check(self, max_bytes: int) -> None:
        """
        Enforce the media-type and size invariants.

        Raises:
            UnsupportedMediaTypeError: If the media type is not PDF.
            FileTooLargeError: If the content exceeds max_bytes.
        """
        if self.media_type != PDF_MEDIA_TYPE:
            raise UnsupportedMediaTypeError("Uploaded file must be a PDF")
        if self.size > max_bytes:
            raise FileTooLargeError(
                f"File too large. Max {max_bytes // (1024 * 1024)}MB."
            )


class PDFService:
    """
    Service for PDF processing operations.

    Uses pypdf to count pages and to copy the leading pages of a document
    into a new, smaller PDF.
    """

    def __init__(self, max_pages: int = 5):
        """
        Initialize the PDF service.

        Args:
            max_pages: Default page cap applied by truncate().
        """
        if max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        self.max_pages = max_pages

    def _open(self, file_bytes: bytes | BinaryIO) -> tuple[bytes, PdfReader]:
        # Ensure we have bytes
        if hasattr(file_bytes, "read"):
            pdf_bytes = file_bytes.read()
        else:
            pdf_bytes = file_bytes

        if not pdf_bytes:
            raise MalformedDocumentError("Empty PDF file provided")

        # Validate PDF magic bytes
        if not pdf_bytes[:4] == b"%PDF":
            raise MalformedDocumentError(
                "Invalid PDF file: does not start with PDF header"
            )

        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
            # Touch the page tree so structural errors surface here
            len(reader.pages)
        except PdfReadError as e:
            logger.error("PDF read error: %s", e)
            raise MalformedDocumentError(f"Invalid or corrupted PDF file: {e}") from e
        except Exception as e:
            logger.exception("Unexpected error while parsing PDF")
            raise MalformedDocumentError(f"Could not parse PDF: {e}") from e

        return pdf_bytes, reader

    def get_page_count(self, file_bytes: bytes | BinaryIO) -> int:
        """
        Get the total number of pages in a PDF.

        Args:
            file_bytes: PDF file as bytes or file-like object.

        Returns:
            Number of pages in the PDF.

        Raises:
            MalformedDocumentError: If the PDF cannot be parsed.
        """
        _, reader = self._open(file_bytes)
        return len(reader.pages)

    def truncate(
        self, file_bytes: bytes | BinaryIO, max_pages: int | None = None
    ) -> bytes:
        """
        Keep only the first pages of a PDF.

        If the document already has max_pages pages or fewer, the input bytes
        are returned as-is (no re-serialization). Otherwise a new PDF holding
        pages [0, max_pages) in their original order is written out.

        Args:
            file_bytes: PDF file as bytes or file-like object.
            max_pages: Page cap. None uses the service default.

        Returns:
            PDF bytes with at most max_pages pages.

        Raises:
            MalformedDocumentError: If the PDF cannot be parsed or rewritten.
        """
        limit = self.max_pages if max_pages is None else max_pages
        if limit < 1:
            raise ValueError("max_pages must be at least 1")

        pdf_bytes, reader = self._open(file_bytes)
        page_count = len(reader.pages)

        if page_count <= limit:
            logger.info("PDF has %d page(s), no truncation needed", page_count)
            return pdf_bytes

        try:
            writer = PdfWriter()
            for index in range(limit):
                writer.add_page(reader.pages[index])

            buffer = io.BytesIO()
            writer.write(buffer)
        except Exception as e:
            logger.exception("PDF truncation failed")
            raise MalformedDocumentError(f"PDF truncation failed: {e}") from e

        logger.info("Truncated PDF from %d to %d pages", page_count, limit)
        return buffer.getvalue()


# Singleton instance for convenience
_pdf_service: PDFService | None = None


def get_pdf_service() -> PDFService:
    """Get or create the PDF service singleton."""
    global _pdf_service
    if _pdf_service is None:
        try:
            from ..config import get_settings
        except ImportError:
            from config import get_settings

        _pdf_service = PDFService(max_pages=get_settings().max_pages)
    return _pdf_service
