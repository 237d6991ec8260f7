"""Pytest configuration and fixtures."""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from app.backend.main import app
from app.backend.routers.classify import get_batch_classifier
from app.backend.services.ai import ModelRegistry
from app.backend.services.batch_service import BatchClassifier

from .fakes import FakeAIService, FakePDFService, make_pdf, pages_from


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """A three-page PDF whose second page carries the abstract heading."""
    return make_pdf(
        [
            "Faculty of Engineering Senior Project",
            "ABSTRACT This project builds a web application for booking rooms",
            "Acknowledgements",
        ]
    )


@pytest.fixture
def invalid_file_bytes() -> bytes:
    """Create invalid (non-PDF) file bytes for testing."""
    return b"This is not a PDF file"


@pytest.fixture
def fake_pdf_service() -> FakePDFService:
    return FakePDFService(
        {
            b"%PDF-web": pages_from("Cover", "Abstract web application", "Thanks"),
            b"%PDF-mobile": pages_from("Abstract Android mobile app"),
            b"%PDF-nohead": pages_from("p1", "p2", "p3", "p4"),
        }
    )


@pytest.fixture
def fake_ai_service() -> FakeAIService:
    return FakeAIService()


@pytest.fixture
def batch_classifier(
    fake_pdf_service: FakePDFService, fake_ai_service: FakeAIService
) -> BatchClassifier:
    return BatchClassifier(
        pdf_service=fake_pdf_service,
        ai_service=fake_ai_service,
        model_registry=ModelRegistry(),
        document_timeout=5.0,
    )


@pytest.fixture
def client(batch_classifier: BatchClassifier) -> Generator[TestClient, None, None]:
    """Create a test client whose classifier uses fake services."""
    app.dependency_overrides[get_batch_classifier] = lambda: batch_classifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
