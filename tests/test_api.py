"""Tests for FastAPI endpoints."""

import pytest
from fastapi.testclient import TestClient

from acord_analyzer.backend.main import app
from acord_analyzer.backend.models import AcordCertificate
from acord_analyzer.backend.services.ai import (
    AIService,
    ConfigurationError,
    ProviderCallError,
    RetriesExhaustedError,
    get_ai_service,
)


@pytest.fixture
def use_ai_service():
    """Install an AI service double for the analyze endpoint."""

    def install(service):
        app.dependency_overrides[get_ai_service] = lambda: service
        return service

    return install


def post_pdf(client: TestClient, content: bytes, filename="cert.pdf", media_type="application/pdf"):
    return client.post("/api/analyze", files={"file": (filename, content, media_type)})


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_root_endpoint(self, client: TestClient):
        """Test root endpoint returns health status."""
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data

    def test_health_endpoint(self, client: TestClient):
        """Test /health endpoint returns health status."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"


class TestAnalyzeUploadChecks:
    """Tests for rejected uploads on POST /api/analyze."""

    def test_missing_file(self, client: TestClient, use_ai_service, fake_ai_service):
        service = use_ai_service(fake_ai_service())
        response = client.post("/api/analyze")
        assert response.status_code == 400
        assert response.json() == {"error": "No file uploaded"}
        assert service.received == []

    def test_rejects_non_pdf(self, client: TestClient, use_ai_service, fake_ai_service):
        """Test that non-PDF files are rejected."""
        service = use_ai_service(fake_ai_service())
        response = post_pdf(client, b"hello", filename="notes.txt", media_type="text/plain")
        assert response.status_code == 400
        assert response.json() == {"error": "Uploaded file must be a PDF"}
        assert service.received == []

    def test_rejects_oversize_file(self, client: TestClient, use_ai_service, fake_ai_service):
        service = use_ai_service(fake_ai_service())
        response = post_pdf(client, b"%PDF-" + b"0" * (5 * 1024 * 1024))
        assert response.status_code == 400
        assert response.json()["error"] == "File too large. Max 4MB."
        assert service.received == []

    def test_rejects_unreadable_pdf(
        self, client: TestClient, use_ai_service, fake_ai_service, invalid_file_bytes
    ):
        service = use_ai_service(fake_ai_service())
        response = post_pdf(client, invalid_file_bytes)
        assert response.status_code == 400
        assert response.json() == {"error": "The uploaded file is not a valid PDF"}
        assert service.received == []


class TestAnalyzeEndpoint:
    """Tests for successful and failed analysis on POST /api/analyze."""

    def test_long_pdf_is_truncated_before_analysis(
        self, client: TestClient, use_ai_service, fake_ai_service, make_pdf, page_widths
    ):
        service = use_ai_service(fake_ai_service())
        response = post_pdf(client, make_pdf(10))
        assert response.status_code == 200
        assert page_widths(service.received[0]) == [100, 101, 102, 103, 104]

    def test_short_pdf_is_sent_unchanged(
        self, client: TestClient, use_ai_service, fake_ai_service, make_pdf
    ):
        service = use_ai_service(fake_ai_service())
        original = make_pdf(3)
        post_pdf(client, original)
        assert service.received == [original]

    def test_returns_extracted_data(
        self, client: TestClient, use_ai_service, fake_ai_service, make_pdf, sample_certificate
    ):
        certificate = AcordCertificate.model_validate(sample_certificate)
        use_ai_service(fake_ai_service(result=certificate))
        response = post_pdf(client, make_pdf(1))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["certificate_information"]["certificate_holder"] == "Acme Construction LLC"
        assert data["policies"][0]["coverages"][0]["limit_value"] == 1000000
        assert data["insurers"][1]["naic_code"] is None

    def test_not_recognized_returns_null_data(
        self, client: TestClient, use_ai_service, fake_ai_service, make_pdf
    ):
        use_ai_service(fake_ai_service(result=None))
        response = post_pdf(client, make_pdf(2))
        assert response.status_code == 200
        assert response.json() == {"data": None}

    def test_missing_api_key(self, client: TestClient, use_ai_service, make_pdf):
        """The real service without a key answers with a generic message."""
        use_ai_service(AIService(api_key=""))
        response = post_pdf(client, make_pdf(1))
        assert response.status_code == 400
        assert response.json() == {"error": "API key configuration error"}
        assert "OPENAI" not in response.text

    def test_configuration_error_message_is_generic(
        self, client: TestClient, use_ai_service, fake_ai_service, make_pdf
    ):
        use_ai_service(fake_ai_service(error=ConfigurationError("OPENAI_API_KEY missing")))
        response = post_pdf(client, make_pdf(1))
        assert response.status_code == 400
        assert response.json() == {"error": "API key configuration error"}

    def test_retries_exhausted(
        self, client: TestClient, use_ai_service, fake_ai_service, make_pdf
    ):
        error = RetriesExhaustedError(3, ProviderCallError("Model call failed: timeout"))
        use_ai_service(fake_ai_service(error=error))
        response = post_pdf(client, make_pdf(1))
        assert response.status_code == 503
        message = response.json()["error"]
        assert message.startswith("Error processing PDF: ")
        assert "3 attempts" in message
        assert "timeout" not in message

    def test_provider_error_text_is_not_returned(
        self, client: TestClient, use_ai_service, make_pdf, fake_openai, recording_sleep
    ):
        """Provider messages may carry credential fragments; only the attempt count is shown."""
        provider_message = "Error code: 401 - Incorrect API key provided: sk-proj-abcd****WXYZ"
        openai_client = fake_openai([RuntimeError(provider_message)] * 3)
        use_ai_service(
            AIService(api_key="sk-test", client=openai_client, sleep=recording_sleep)
        )
        response = post_pdf(client, make_pdf(1))

        assert response.status_code == 503
        message = response.json()["error"]
        assert message == "Error processing PDF: Failed to get a valid response after 3 attempts"
        assert "sk-" not in message
        assert "Incorrect API key" not in message
        assert len(openai_client.completions.calls) == 3

    def test_provider_error_is_generic(
        self, client: TestClient, use_ai_service, fake_ai_service, make_pdf
    ):
        use_ai_service(fake_ai_service(error=ProviderCallError("Model call failed: sk-secret")))
        response = post_pdf(client, make_pdf(1))
        assert response.status_code == 503
        assert response.json() == {
            "error": "Error processing PDF: The extraction service is unavailable"
        }

    def test_unexpected_error(self, use_ai_service, fake_ai_service, make_pdf):
        use_ai_service(fake_ai_service(error=RuntimeError("disk on fire")))
        try:
            with TestClient(app, raise_server_exceptions=False) as client:
                response = post_pdf(client, make_pdf(1))
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 500
        assert response.json() == {
            "error": "Error processing PDF: an unexpected error occurred"
        }
        assert "disk on fire" not in response.text


class TestCors:
    """Tests for CORS headers."""

    def test_allows_streamlit_origin(self, client: TestClient):
        response = client.options(
            "/api/analyze",
            headers={
                "Origin": "http://localhost:8501",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:8501"
