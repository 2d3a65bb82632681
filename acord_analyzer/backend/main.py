"""
FastAPI application for the ACORD 25 certificate analyzer.

Provides endpoints for:
- Uploading a PDF certificate and extracting its data
- Health checks
"""

import logging

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Handle both package imports (when running as module) and standalone imports (uvicorn main:app)
try:
    from .config import get_settings
    from .models import ErrorResponse, HealthResponse
    from .routers import analyze
    from .services.ai import (
        AIServiceError,
        ConfigurationError,
        RetriesExhaustedError,
        get_ai_service,
    )
    from .services.pdf_service import (
        DocumentError,
        MalformedDocumentError,
        get_pdf_service,
    )
except ImportError:
    import sys
    from pathlib import Path
    # Add parent directory to path for standalone imports
    backend_dir = Path(__file__).parent
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))
    from config import get_settings
    from models import ErrorResponse, HealthResponse
    from routers import analyze
    from services.ai import (
        AIServiceError,
        ConfigurationError,
        RetriesExhaustedError,
        get_ai_service,
    )
    from services.pdf_service import (
        DocumentError,
        MalformedDocumentError,
        get_pdf_service,
    )

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if get_settings().debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting ACORD 25 Analyzer...")
    # Initialize services on startup
    get_pdf_service()
    ai_service = get_ai_service()
    if not ai_service.is_configured:
        logger.warning("OpenAI API key is not set; analysis requests will be rejected")
    logger.info("Services initialized successfully")
    yield
    logger.info("Shutting down ACORD 25 Analyzer...")


# Create FastAPI application
app = FastAPI(
    title="ACORD 25 Analyzer API",
    description="Extracts structured data from ACORD 25 certificates of liability insurance",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for the frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Endpoints
# =============================================================================


@app.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """Root endpoint - health check."""
    return HealthResponse(status="healthy")


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy")


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(analyze.router)


# =============================================================================
# Exception Handlers
# =============================================================================


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


@app.exception_handler(DocumentError)
async def document_error_handler(request: Request, exc: DocumentError):
    """Handle rejected uploads and unreadable PDFs."""
    if isinstance(exc, MalformedDocumentError):
        logger.warning("Rejected unreadable PDF: %s", exc)
        return _error_response(
            status.HTTP_400_BAD_REQUEST, "The uploaded file is not a valid PDF"
        )
    logger.info("Rejected upload: %s", exc)
    return _error_response(status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(AIServiceError)
async def ai_service_error_handler(request: Request, exc: AIServiceError):
    """Handle AI service errors. Provider text is logged, never returned."""
    # The credential's name is never echoed back to the caller
    if isinstance(exc, ConfigurationError) or "API_KEY" in str(exc):
        logger.error("AI service misconfigured: %s", exc)
        return _error_response(
            status.HTTP_400_BAD_REQUEST, "API key configuration error"
        )
    logger.error("AI service failed: %s", exc)
    if isinstance(exc, RetriesExhaustedError):
        message = f"Failed to get a valid response after {exc.attempts} attempts"
    else:
        message = "The extraction service is unavailable"
    return _error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE, f"Error processing PDF: {message}"
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """Handle anything else without leaking a traceback or its message."""
    logger.exception("Unexpected error processing request")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Error processing PDF: an unexpected error occurred",
    )
