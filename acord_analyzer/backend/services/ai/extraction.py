"""
Certificate extraction from PDF documents.

Sends the PDF to an OpenAI chat model together with the static extraction
instructions, validates the answer and retries with exponential backoff.
"""

import asyncio
import base64
import json
import logging
import re
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable

# Handle both package imports and standalone imports
try:
    from ...models import AcordCertificate
except ImportError:
    from models import AcordCertificate

from .exceptions import (
    AIServiceError,
    ProviderCallError,
    RetriesExhaustedError,
    SchemaMismatchError,
)
from .prompts import ExtractionRequest
from .validation import validate_extraction

logger = logging.getLogger(__name__)

# Deterministic output is required for reproducible extraction
TEMPERATURE = 0

PDF_FILENAME = "certificate.pdf"

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")

Sleep = Callable[[float], Awaitable[Any]]


# =============================================================================
# Retry State
# =============================================================================


@dataclass(frozen=True)
class RetryConfig:
    """
    Configuration for retry logic.

    Attributes:
        max_attempts: Maximum number of attempts (including the first).
        exponential_base: The delay before attempt n+1 is base ** n seconds.
    """

    max_attempts: int = 3
    exponential_base: float = 2.0

    def delay_for(self, attempt: int) -> float:
        return self.exponential_base ** attempt


@dataclass(frozen=True)
class AttemptState:
    """Where a single call is in its retry cycle. Replaced, never mutated."""

    attempt: int = 1
    last_error: AIServiceError | None = None

    def failed(self, error: AIServiceError) -> "AttemptState":
        return replace(self, last_error=error)

    def next(self) -> "AttemptState":
        return replace(self, attempt=self.attempt + 1)


# =============================================================================
# Helper Functions
# =============================================================================


def _pdf_to_data_url(pdf_bytes: bytes) -> str:
    """Encode PDF bytes as a base64 data URL for the API."""
    encoded = base64.b64encode(pdf_bytes).decode("utf-8")
    return f"data:application/pdf;base64,{encoded}"


def _build_messages(pdf_bytes: bytes, request: ExtractionRequest) -> list[dict[str, Any]]:
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": request.instructions},
                {"type": "text", "text": request.schema_text()},
                {
                    "type": "file",
                    "file": {
                        "filename": PDF_FILENAME,
                        "file_data": _pdf_to_data_url(pdf_bytes),
                    },
                },
            ],
        }
    ]


def _decode_answer(content: str) -> Any:
    """Parse the model text as JSON, tolerating a surrounding code fence."""
    text = _CODE_FENCE.sub("", content.strip()).strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse model answer: %s", text[:500])
        raise SchemaMismatchError(f"Model answer is not valid JSON: {e}") from e


# =============================================================================
# Main Extraction Functions
# =============================================================================


async def request_extraction(
    pdf_bytes: bytes,
    request: ExtractionRequest,
    client: Any,  # AsyncOpenAI client
    model: str = "gpt-4.1",
) -> AcordCertificate | None:
    """
    Make a single extraction attempt.

    Returns:
        The validated certificate, or None if the model judged the document
        not to be an ACORD 25.

    Raises:
        ProviderCallError: If the API request fails or returns nothing.
        SchemaMismatchError: If the answer is not JSON or not a valid certificate.
    """
    try:
        response = await client.chat.completions.create(
            model=model,
            messages=_build_messages(pdf_bytes, request),
            temperature=TEMPERATURE,
        )

        content = response.choices[0].message.content
        if not content:
            raise ProviderCallError("Empty response from model")

        validation = validate_extraction(_decode_answer(content), request.schema)
        if not validation.is_valid:
            raise SchemaMismatchError(
                "Model answer does not match the certificate schema: "
                + "; ".join(validation.errors[:5]),
                validation.errors,
            )
        return validation.certificate

    except AIServiceError:
        raise
    except Exception as e:
        logger.error("Model call failed: %s", e)
        raise ProviderCallError(f"Model call failed: {e}") from e


async def call_with_retry(
    pdf_bytes: bytes,
    request: ExtractionRequest,
    client: Any,  # AsyncOpenAI client
    model: str = "gpt-4.1",
    retry: RetryConfig | None = None,
    sleep: Sleep = asyncio.sleep,
) -> AcordCertificate | None:
    """
    Extract a certificate, retrying failed attempts with exponential backoff.

    Provider errors and schema mismatches are retried; after attempt n fails
    the call waits base ** n seconds. The wait only suspends this call.

    Args:
        pdf_bytes: The (already truncated) PDF.
        request: Static instructions and schema.
        client: AsyncOpenAI client instance.
        model: Model name to use.
        retry: Retry policy. Defaults to 3 attempts with base 2.
        sleep: Awaitable sleep, replaceable in tests.

    Returns:
        The validated certificate, or None when the document is not an ACORD 25.

    Raises:
        RetriesExhaustedError: If every attempt failed.
    """
    retry = retry or RetryConfig()
    state = AttemptState()

    while True:
        try:
            certificate = await request_extraction(pdf_bytes, request, client, model)
        except (ProviderCallError, SchemaMismatchError) as e:
            state = state.failed(e)
            if state.attempt >= retry.max_attempts:
                logger.error(
                    "Extraction failed after %d attempt(s): %s", state.attempt, e
                )
                raise RetriesExhaustedError(state.attempt, state.last_error) from e

            delay = retry.delay_for(state.attempt)
            logger.warning(
                "Extraction attempt %d/%d failed (%s), retrying in %.1fs",
                state.attempt,
                retry.max_attempts,
                e,
                delay,
            )
            await sleep(delay)
            state = state.next()
            continue

        logger.info(
            "Extraction succeeded on attempt %d (%s)",
            state.attempt,
            "ACORD 25" if certificate is not None else "not an ACORD 25",
        )
        return certificate
