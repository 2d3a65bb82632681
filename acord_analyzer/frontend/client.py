"""
Submission client for the analyze endpoint.

Truncates the PDF locally, uploads it as multipart form data and maps the
JSON answer to an AnalysisOutcome.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Any, Union

import httpx

from ..backend.services.pdf_service import Document, PDFService
from .config import get_client_settings

logger = logging.getLogger(__name__)

ANALYZE_PATH = "/api/analyze"
UNKNOWN_ERROR = "Unknown error"


@dataclass(frozen=True)
class Success:
    """
    The request completed.

    `data` holds the extracted certificate, or None when the document was
    not recognised as an ACORD 25.
    """

    data: dict[str, Any] | None


@dataclass(frozen=True)
class Failure:
    """The request failed; `message` is safe to show to the user."""

    message: str


AnalysisOutcome = Union[Success, Failure]


class SubmissionClient:
    """
    Client for POST /api/analyze.

    Each submit() call is independent: it builds its own upload buffer and
    HTTP connection and yields exactly one outcome.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_pages: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Root URL of the backend. If None, read from settings.
            timeout: Request timeout in seconds.
            max_pages: Client-side page cap.
            transport: Custom httpx transport, mainly for tests.
        """
        settings = get_client_settings()
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout or settings.timeout_seconds
        self.max_pages = max_pages or settings.max_pages
        self.transport = transport
        self.pdf_service = PDFService(max_pages=self.max_pages)

    def _prepare(self, document: Document) -> Document:
        """
        Cut the document down to the page cap before upload.

        Any failure here falls back to the original document; the server
        truncates again anyway.
        """
        try:
            content = self.pdf_service.truncate(document.content)
        except Exception as e:
            logger.warning("Client-side truncation failed, sending original file: %s", e)
            return document

        if content is document.content:
            return document

        stem = re.sub(r"\.pdf$", "", document.filename, flags=re.IGNORECASE)
        return Document(
            filename=f"{stem}.first{self.max_pages}.pdf",
            content=content,
            media_type=document.media_type,
        )

    async def submit(self, document: Document | None) -> AnalysisOutcome:
        """
        Upload a document for analysis.

        Args:
            document: The selected PDF, or None if nothing was selected.

        Returns:
            Success with the extracted data (possibly None), or Failure with
            a user-facing message.
        """
        if document is None:
            return Failure("Please select a PDF file")

        upload = await asyncio.to_thread(self._prepare, document)
        files = {"file": (upload.filename, upload.content, upload.media_type)}

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                logger.info(
                    "Submitting %s (%d bytes) to %s",
                    upload.filename,
                    upload.size,
                    self.base_url,
                )
                response = await client.post(ANALYZE_PATH, files=files)
            result = response.json()
        except httpx.HTTPError as e:
            logger.error("Request to analyze endpoint failed: %s", e)
            return Failure(str(e) or UNKNOWN_ERROR)
        except ValueError:
            logger.error("Analyze endpoint returned a non-JSON response")
            return Failure(UNKNOWN_ERROR)

        if not isinstance(result, dict):
            return Failure(UNKNOWN_ERROR)

        if result.get("error"):
            return Failure(str(result["error"]))

        if not response.is_success:
            detail = result.get("detail")
            return Failure(detail if isinstance(detail, str) and detail else UNKNOWN_ERROR)

        return Success(result.get("data"))
