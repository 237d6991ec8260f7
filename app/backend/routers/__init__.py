"""
Routers package for FastAPI endpoints.

Organized by domain:
- classify: Batch thesis classification and model listing
"""

from . import classify

__all__ = ["classify"]
