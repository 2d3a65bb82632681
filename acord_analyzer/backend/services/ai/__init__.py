"""
AI service package for ACORD 25 certificate extraction.

This package provides modular AI functionality split into:
- prompts: Static extraction instructions and schema descriptor
- extraction: Model call with validation and retry
- validation: Validation of model answers into typed records

The AIService class wires these together with the application settings.
"""

import asyncio
import logging
import os

# Handle both package imports and standalone imports
try:
    from ...models import AcordCertificate
except ImportError:
    from models import AcordCertificate

from .exceptions import (
    AIServiceError,
    ConfigurationError,
    ProviderCallError,
    RetriesExhaustedError,
    SchemaMismatchError,
)
from .extraction import (
    TEMPERATURE,
    AttemptState,
    RetryConfig,
    Sleep,
    call_with_retry,
    request_extraction,
)
from .prompts import EXTRACTION_PROMPT, ExtractionRequest, build_extraction_request
from .validation import ValidationResult, validate_extraction

logger = logging.getLogger(__name__)

# Export public functions and classes
__all__ = [
    "AIService",
    "AIServiceError",
    "AttemptState",
    "ConfigurationError",
    "EXTRACTION_PROMPT",
    "ExtractionRequest",
    "ProviderCallError",
    "RetriesExhaustedError",
    "RetryConfig",
    "SchemaMismatchError",
    "TEMPERATURE",
    "ValidationResult",
    "build_extraction_request",
    "call_with_retry",
    "get_ai_service",
    "request_extraction",
    "validate_extraction",
]


# =============================================================================
# AIService Class
# =============================================================================


class AIService:
    """
    Service for AI-powered certificate extraction.

    Sends PDFs to an OpenAI model that accepts file input and validates the
    answer against the ACORD 25 schema.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        retry: RetryConfig | None = None,
        timeout: float | None = None,
        client=None,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize the AI service.

        Args:
            api_key: OpenAI API key. If None, reads from config/environment.
            model: OpenAI model to use (must accept PDF input).
            retry: Retry policy. If None, built from settings.
            timeout: Per-request timeout in seconds for the OpenAI client.
            client: Pre-built client, mainly for tests.
            sleep: Awaitable used for backoff waits.
        """
        settings = None
        try:
            try:
                from ...config import get_settings
            except ImportError:
                from config import get_settings

            settings = get_settings()
        except ImportError:
            logger.warning("Settings module not available, using environment defaults")

        # Load API key from settings if not provided
        if api_key is None:
            if settings is not None:
                api_key = settings.openai_api_key
            else:
                # Fallback to direct env var if config not available
                api_key = os.getenv("OPENAI_API_KEY")

        if retry is None:
            retry = (
                RetryConfig(
                    max_attempts=settings.max_attempts,
                    exponential_base=settings.backoff_base_seconds,
                )
                if settings is not None
                else RetryConfig()
            )

        self.api_key = api_key
        self.model = model or (settings.openai_model if settings else "gpt-4.1")
        self.timeout = timeout or (settings.request_timeout_seconds if settings else 120.0)
        self.retry = retry
        self.sleep = sleep
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @property
    def client(self):
        """Lazy-load the OpenAI client."""
        if self._client is None:
            if not self.is_configured:
                raise ConfigurationError(
                    "OpenAI API key not provided. Set OPENAI_API_KEY environment variable."
                )
            try:
                from openai import AsyncOpenAI

                self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
            except ImportError as e:
                raise AIServiceError(
                    "openai library not installed. Run: pip install openai"
                ) from e
        return self._client

    async def analyze(self, pdf_bytes: bytes) -> AcordCertificate | None:
        """
        Extract certificate data from a PDF.

        Args:
            pdf_bytes: The PDF, already truncated to the page cap.

        Returns:
            The validated certificate, or None if the document is not an ACORD 25.

        Raises:
            ConfigurationError: If no API key is configured. No attempt is made.
            RetriesExhaustedError: If every attempt failed.
        """
        if not self.is_configured:
            raise ConfigurationError(
                "OpenAI API key not provided. Set OPENAI_API_KEY environment variable."
            )

        logger.info(
            "Analyzing PDF (%d bytes) with model '%s', up to %d attempt(s)",
            len(pdf_bytes),
            self.model,
            self.retry.max_attempts,
        )
        return await call_with_retry(
            pdf_bytes,
            build_extraction_request(),
            client=self.client,
            model=self.model,
            retry=self.retry,
            sleep=self.sleep,
        )


# =============================================================================
# Singleton Factory
# =============================================================================

_ai_service: AIService | None = None


def get_ai_service() -> AIService:
    """Get or create the AI service singleton."""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service
