"""
Services package for the ACORD 25 analyzer.

Contains:
- pdf_service: Upload checks and PDF page truncation
- ai: OpenAI integration for certificate extraction
"""

from .ai import AIService
from .pdf_service import PDFService

__all__ = ["PDFService", "AIService"]
