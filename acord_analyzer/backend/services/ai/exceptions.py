"""
Shared exceptions for AI service modules.
"""


class AIServiceError(Exception):
    """Raised when AI service operations fail."""

    pass


class ConfigurationError(AIServiceError):
    """Raised when the model credential is missing. Never retried."""

    pass


class ProviderCallError(AIServiceError):
    """Raised when the request to the model provider fails."""

    pass


class SchemaMismatchError(AIServiceError):
    """Raised when the model answer does not match the certificate schema."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class RetriesExhaustedError(AIServiceError):
    """Raised after the last allowed attempt has failed."""

    def __init__(self, attempts: int, last_error: Exception | None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Failed to get a valid response after {attempts} attempts: {last_error}"
        )
