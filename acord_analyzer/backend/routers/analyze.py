"""
Router for the certificate analysis endpoint.

Handles:
- PDF upload checks (presence, media type, size)
- Server-side truncation to the first pages
- Certificate extraction through the AI service
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool

# Handle both package imports and standalone imports
try:
    from ..config import Settings, get_settings
    from ..models import AnalyzeResponse, ErrorResponse
    from ..services.ai import AIService, get_ai_service
    from ..services.pdf_service import (
        Document,
        NoFileSelectedError,
        PDFService,
        get_pdf_service,
    )
except ImportError:
    from config import Settings, get_settings
    from models import AnalyzeResponse, ErrorResponse
    from services.ai import AIService, get_ai_service
    from services.pdf_service import (
        Document,
        NoFileSelectedError,
        PDFService,
        get_pdf_service,
    )

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analyze"])


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def analyze(
    settings: Annotated[Settings, Depends(get_settings)],
    pdf_service: Annotated[PDFService, Depends(get_pdf_service)],
    ai_service: Annotated[AIService, Depends(get_ai_service)],
    file: Annotated[UploadFile | None, File(description="ACORD 25 PDF to analyze")] = None,
) -> AnalyzeResponse:
    """
    Analyze an uploaded ACORD 25 certificate.

    Accepts a single PDF, keeps its first pages, and returns the extracted
    certificate data, or null if the document is not an ACORD 25.
    """
    if file is None:
        raise NoFileSelectedError("No file uploaded")

    try:
        # Read one byte past the ceiling so oversize uploads are detected
        # without buffering the whole body
        content = await file.read(settings.max_upload_bytes + 1)
        document = Document(
            filename=file.filename or "upload.pdf",
            content=content,
            media_type=file.content_type or "",
        )
        document.check(settings.max_upload_bytes)

        logger.info("Processing PDF: %s (%d bytes)", document.filename, document.size)

        # The server-side cut always runs, whatever the client already did
        pdf_bytes = await run_in_threadpool(
            pdf_service.truncate, document.content, settings.max_pages
        )

        certificate = await ai_service.analyze(pdf_bytes)
        return AnalyzeResponse(data=certificate)

    finally:
        await file.close()
