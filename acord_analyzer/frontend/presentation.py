"""
UI state and result formatting for the analyzer page.

Kept free of Streamlit so it can be tested directly.
"""

import json
from dataclasses import dataclass
from typing import Any

from .client import AnalysisOutcome, Failure, Success

WELCOME_MESSAGE = "Upload an ACORD 25 Certificate of Insurance to analyze its contents."
NOT_RECOGNIZED_MESSAGE = (
    "The document was not recognized as an ACORD 25 Certificate of Liability Insurance."
)


def format_result(data: dict[str, Any] | None) -> str:
    """Render extracted data as indented JSON text."""
    return json.dumps(data, indent=2, ensure_ascii=False)


@dataclass
class PresentationState:
    """
    What the page currently shows.

    Attributes:
        filename: Name of the selected file, empty if none.
        loading: True while a submission is in flight.
        error: Message of the last failure.
        result: Data of the last success (None for "not recognized").
        has_result: True once a Success has been received.
    """

    filename: str = ""
    loading: bool = False
    error: str | None = None
    result: dict[str, Any] | None = None
    has_result: bool = False

    @property
    def can_submit(self) -> bool:
        return bool(self.filename) and not self.loading

    def select(self, filename: str) -> None:
        self.filename = filename

    def begin(self) -> None:
        """Clear the previous outcome and enter the loading state."""
        self.loading = True
        self.error = None
        self.result = None
        self.has_result = False

    def finish(self, outcome: AnalysisOutcome) -> None:
        self.loading = False
        if isinstance(outcome, Failure):
            self.error = outcome.message
        elif isinstance(outcome, Success):
            self.result = outcome.data
            self.has_result = True

    def reset(self) -> None:
        """Forget the selection and any outcome on display."""
        self.filename = ""
        self.loading = False
        self.error = None
        self.result = None
        self.has_result = False

    def message(self) -> str | None:
        """Informational text for the current state, if any."""
        if self.loading or self.error:
            return None
        if self.has_result and self.result is None:
            return NOT_RECOGNIZED_MESSAGE
        if not self.has_result:
            return WELCOME_MESSAGE
        return None
