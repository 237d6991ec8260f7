"""
PDF Classifier Backend Application.

A FastAPI service that sorts Thai university thesis PDFs into project
categories by locating each abstract and asking an LLM (via OpenRouter).
"""

__version__ = "1.0.0"
