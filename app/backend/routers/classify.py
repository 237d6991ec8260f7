"""
Router for thesis classification endpoints.

Handles:
- Batch classification of uploaded PDFs
- Listing the available logical model names
"""

import asyncio
import contextlib
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

# Handle both package imports and standalone imports
try:
    from ..config import Settings, get_settings
    from ..models import BatchResult, ErrorResponse, ModelListResponse, UploadedDocument
    from ..services.batch_service import BatchClassifier, BatchInputError, OrchestrationError
    from ..services.filenames import repair_filename
except ImportError:
    from config import Settings, get_settings
    from models import BatchResult, ErrorResponse, ModelListResponse, UploadedDocument
    from services.batch_service import BatchClassifier, BatchInputError, OrchestrationError
    from services.filenames import repair_filename

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["classify"])

NO_FILES_MESSAGE = "กรุณาอัปโหลดไฟล์ PDF อย่างน้อย 1 ไฟล์"
BATCH_FAILED_MESSAGE = "เกิดข้อผิดพลาดในการประมวลผลไฟล์"

# Seconds between client-disconnect checks while a batch runs
DISCONNECT_POLL_INTERVAL = 1.0


def get_batch_classifier(request: Request) -> BatchClassifier:
    """Return the classifier built at startup."""
    return request.app.state.batch_classifier


async def _watch_disconnect(request: Request, cancel_event: asyncio.Event) -> None:
    """Set cancel_event once the client goes away."""
    while not cancel_event.is_set():
        if await request.is_disconnected():
            logger.warning("Client disconnected, cancelling remaining documents")
            cancel_event.set()
            return
        await asyncio.sleep(DISCONNECT_POLL_INTERVAL)


async def _read_documents(
    files: list[UploadFile], settings: Settings
) -> list[UploadedDocument]:
    """Read uploads into memory, enforcing the per-file size limit."""
    documents: list[UploadedDocument] = []
    for upload in files:
        filename = repair_filename(upload.filename, settings.repair_filename_encoding)
        content = await upload.read()
        if len(content) > settings.max_file_size_bytes:
            raise BatchInputError(
                f"File too large: {filename} exceeds "
                f"{settings.max_file_size_bytes // (1024 * 1024)}MB",
                status_code=413,
            )
        documents.append(UploadedDocument(filename=filename, content=content))
    return documents


@router.post(
    "/classify",
    response_model=BatchResult,
    response_model_exclude_none=True,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def classify(
    request: Request,
    classifier: Annotated[BatchClassifier, Depends(get_batch_classifier)],
    settings: Annotated[Settings, Depends(get_settings)],
    files: Annotated[
        list[UploadFile] | None,
        File(alias="pdfFiles", description="PDF files to classify (1-20)"),
    ] = None,
    model: Annotated[
        str | None,
        Form(description="Logical model name; the default model is used if omitted"),
    ] = None,
) -> BatchResult:
    """
    Classify a batch of thesis PDFs.

    Each file is processed independently; a file that fails shows up as an
    Error row while the rest of the batch is still classified.
    """
    if not files:
        raise BatchInputError(NO_FILES_MESSAGE)

    if len(files) > settings.max_files:
        raise BatchInputError(
            f"Too many files: at most {settings.max_files} files per request"
        )

    cancel_event = asyncio.Event()
    watcher: asyncio.Task | None = None
    try:
        documents = await _read_documents(files, settings)

        watcher = asyncio.create_task(_watch_disconnect(request, cancel_event))
        return await classifier.classify_batch(
            documents, model_name=model, cancel_event=cancel_event
        )

    except BatchInputError:
        raise
    except Exception as e:
        logger.exception("Error processing batch")
        raise OrchestrationError(BATCH_FAILED_MESSAGE) from e
    finally:
        if watcher is not None:
            watcher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await watcher
        for upload in files:
            await upload.close()


@router.get("/models", response_model=ModelListResponse)
async def list_models(
    classifier: Annotated[BatchClassifier, Depends(get_batch_classifier)],
) -> ModelListResponse:
    """List the logical model names accepted by /api/classify."""
    registry = classifier.model_registry
    return ModelListResponse(default=registry.default_key, models=registry.as_dict())
