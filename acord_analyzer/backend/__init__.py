"""
ACORD 25 Analyzer Backend Application.

A FastAPI service that extracts structured data from ACORD 25
certificates of liability insurance using AI (OpenAI).
"""

__version__ = "1.0.0"
