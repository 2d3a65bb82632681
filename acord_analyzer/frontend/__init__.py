"""
Frontend package for the ACORD 25 analyzer.

Contains:
- client: Submission client for the analyze endpoint
- presentation: UI state and result formatting
- streamlit_app: Streamlit page (run with `streamlit run`)
"""

from .client import AnalysisOutcome, Failure, SubmissionClient, Success

__all__ = ["AnalysisOutcome", "Failure", "SubmissionClient", "Success"]
