"""
Routers package for FastAPI endpoints.

Organized by domain:
- analyze: Certificate upload and extraction
"""

from . import analyze

__all__ = ["analyze"]
