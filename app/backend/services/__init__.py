"""
Services package for the thesis classifier.

Contains:
- pdf_service: Page-by-page PDF text extraction
- abstract_locator: Abstract page detection
- ai: OpenRouter integration for categorization
- batch_service: Sequential batch orchestration with per-document isolation
"""

from .ai import AIService
from .batch_service import BatchClassifier
from .pdf_service import PDFService

__all__ = ["AIService", "BatchClassifier", "PDFService"]
