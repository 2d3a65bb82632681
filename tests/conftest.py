"""Pytest configuration and fixtures."""

import copy
import io
import json
from types import SimpleNamespace
from typing import Any, Callable, Generator

import pytest
from fastapi.testclient import TestClient
from pypdf import PdfReader, PdfWriter

from acord_analyzer.backend.main import app

SAMPLE_CERTIFICATE: dict[str, Any] = {
    "certificate_information": {
        "certificate_holder": "Acme Construction LLC",
        "certificate_number": "CERT-2024-0001",
        "revision_number": None,
        "issue_date": "01/15/2024",
    },
    "insurers": [
        {
            "insurer_letter": "A",
            "insurer_name": "Hartford Fire Insurance Co",
            "naic_code": "19682",
        },
        {
            "insurer_letter": "B",
            "insurer_name": "Travelers Indemnity Co",
            "naic_code": None,
        },
    ],
    "policies": [
        {
            "policy_information": {
                "policy_type": "COMMERCIAL GENERAL LIABILITY",
                "policy_number": "GL-123456",
                "effective_date": "01/01/2024",
                "expiry_date": "01/01/2025",
            },
            "insurer_letter": "A",
            "coverages": [
                {"limit_type": "EACH OCCURRENCE", "limit_value": 1000000},
                {"limit_type": "MED EXP", "limit_value": 10000},
            ],
        }
    ],
    "producer_information": {
        "primary_details": {
            "full_name": "Jane Smith",
            "email_address": "jane@example-agency.com",
            "doing_business_as": "Example Insurance Agency",
        },
        "contact_information": {
            "phone_number": "5551234567",
            "fax_number": None,
            "license_number": "0123456",
        },
        "address_details": {
            "address_line_1": "100 Main Street",
            "address_line_2": "Suite 200",
            "address_line_3": None,
            "city": "Hartford",
            "state": "CT",
            "zip_code": "06103",
            "country": "USA",
        },
    },
}


def build_pdf(page_count: int) -> bytes:
    """
    Create a PDF with blank pages.

    Page i is 100 + i points wide so page order can be checked after a copy.
    """
    writer = PdfWriter()
    for index in range(page_count):
        writer.add_blank_page(width=100 + index, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def read_page_widths(pdf_bytes: bytes) -> list[int]:
    """Return the width of every page, in order."""
    reader = PdfReader(io.BytesIO(pdf_bytes))
    return [int(page.mediabox.width) for page in reader.pages]


class FakeCompletions:
    """Stands in for client.chat.completions; replays scripted answers."""

    def __init__(self, answers: list[Any]):
        self.answers = list(answers)
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=answer))]
        )


class FakeOpenAI:
    """Minimal AsyncOpenAI lookalike."""

    def __init__(self, answers: list[Any]):
        self.completions = FakeCompletions(answers)
        self.chat = SimpleNamespace(completions=self.completions)


class RecordingSleep:
    """Async sleep that returns at once and remembers each delay."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeAIService:
    """AI service double for endpoint tests."""

    is_configured = True

    def __init__(self, result: Any = None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.received: list[bytes] = []

    async def analyze(self, pdf_bytes: bytes) -> Any:
        self.received.append(pdf_bytes)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_pdf() -> Callable[[int], bytes]:
    """Factory for PDFs with a given number of pages."""
    return build_pdf


@pytest.fixture
def page_widths() -> Callable[[bytes], list[int]]:
    """Reads back page widths of a PDF."""
    return read_page_widths


@pytest.fixture
def invalid_file_bytes() -> bytes:
    """Create invalid (non-PDF) file bytes for testing."""
    return b"This is not a PDF file"


@pytest.fixture
def sample_certificate() -> dict[str, Any]:
    """A complete, valid model answer."""
    return copy.deepcopy(SAMPLE_CERTIFICATE)


@pytest.fixture
def sample_answer(sample_certificate: dict[str, Any]) -> str:
    """The valid model answer as raw JSON text."""
    return json.dumps(sample_certificate)


@pytest.fixture
def fake_openai() -> Callable[[list[Any]], FakeOpenAI]:
    """Factory for a fake OpenAI client with scripted answers."""
    return FakeOpenAI


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def fake_ai_service() -> Callable[..., FakeAIService]:
    return FakeAIService
