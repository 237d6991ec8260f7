"""
FastAPI application for the thesis classification service.

Provides endpoints for:
- Classifying batches of uploaded thesis PDFs
- Listing available models
- Health checks
"""

import logging

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Handle both package imports (when running as module) and standalone imports (uvicorn main:app)
try:
    from . import __version__
    from .config import get_settings
    from .models import HealthResponse
    from .routers import classify
    from .services.ai import AIService, ModelRegistry
    from .services.batch_service import BatchClassifier, BatchInputError, OrchestrationError
    from .services.pdf_service import PDFService
except ImportError:
    import sys
    from pathlib import Path
    # Add parent directory to path for standalone imports
    backend_dir = Path(__file__).parent
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))
    from config import get_settings
    from models import HealthResponse
    from routers import classify
    from services.ai import AIService, ModelRegistry
    from services.batch_service import BatchClassifier, BatchInputError, OrchestrationError
    from services.pdf_service import PDFService
    __version__ = "1.0.0"

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_batch_classifier(settings=None) -> BatchClassifier:
    """Create the extraction and AI handles and wire them into the classifier."""
    settings = settings or get_settings()
    model_registry = ModelRegistry.from_settings(settings)
    return BatchClassifier(
        pdf_service=PDFService(),
        ai_service=AIService(settings=settings),
        model_registry=model_registry,
        document_timeout=settings.document_timeout_seconds,
        batch_timeout=settings.batch_timeout_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting PDF Classifier Service...")
    classifier = build_batch_classifier()
    app.state.batch_classifier = classifier
    logger.info("AI Model: %s", classifier.model_registry.default.name)
    logger.info("Text extraction: Using pdfplumber for page-by-page extraction")
    logger.info("Services initialized successfully")
    yield
    logger.info("Shutting down PDF Classifier Service...")
    await classifier.ai_service.close()


# Create FastAPI application
app = FastAPI(
    title="PDF Classifier API",
    description="Classifies Thai university thesis PDFs into project categories using an LLM",
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Endpoints
# =============================================================================


@app.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """Root endpoint - health check."""
    return HealthResponse(
        status="healthy", version=__version__, message="PDF Classifier API is running"
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__, message="Service is healthy")


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(classify.router)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(BatchInputError)
async def batch_input_error_handler(request: Request, exc: BatchInputError):
    """Handle unusable classification requests."""
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


@app.exception_handler(OrchestrationError)
async def orchestration_error_handler(request: Request, exc: OrchestrationError):
    """Handle faults outside per-document isolation."""
    from fastapi import status

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc)},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
