"""
Batch classification of uploaded theses.

Documents are processed one at a time, in input order. Any failure inside a
single document becomes an Error row for that document and the batch moves
on, so the response always has one result per uploaded file.
"""

import asyncio
import logging
from collections.abc import Sequence
from concurrent.futures import Executor, ThreadPoolExecutor

# Handle both package imports and standalone imports
try:
    from ..models import (
        BatchResult,
        Category,
        ClassificationResult,
        ModelConfig,
        UploadedDocument,
    )
except ImportError:
    from models import (
        BatchResult,
        Category,
        ClassificationResult,
        ModelConfig,
        UploadedDocument,
    )

from .abstract_locator import join_page_text, select_abstract_pages
from .ai import AIService, ModelRegistry, RemoteClassificationError, normalize_category
from .pdf_service import DocumentParseError, PDFService

logger = logging.getLogger(__name__)


class BatchInputError(Exception):
    """Raised when the request itself is unusable (no files, too many, too large)."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class OrchestrationError(Exception):
    """Raised for faults outside the per-document isolation boundary."""

    pass


class BatchClassifier:
    """
    Runs the per-document pipeline over a batch.

    extract pages -> locate abstract -> build prompt -> classify
    """

    def __init__(
        self,
        pdf_service: PDFService,
        ai_service: AIService,
        model_registry: ModelRegistry,
        document_timeout: float | None = 120.0,
        batch_timeout: float | None = None,
    ):
        """
        Initialize the batch classifier.

        Args:
            pdf_service: Ready-to-use text extractor.
            ai_service: Ready-to-use completion client wrapper.
            model_registry: Table used to resolve logical model names.
            document_timeout: Seconds allowed per document. None disables.
            batch_timeout: Seconds allowed for the whole batch. None disables.
        """
        self.pdf_service = pdf_service
        self.ai_service = ai_service
        self.model_registry = model_registry
        self.document_timeout = document_timeout
        self.batch_timeout = batch_timeout

    async def classify_batch(
        self,
        documents: Sequence[UploadedDocument],
        model_name: str | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> BatchResult:
        """
        Classify every document, strictly in input order.

        Args:
            documents: Uploaded documents (1-20, checked by the caller).
            model_name: Logical model name; unknown or missing uses the default.
            cancel_event: When set, documents not yet started are marked failed.

        Returns:
            BatchResult with exactly one result per document.
        """
        model_config = self.model_registry.resolve(model_name)
        total = len(documents)
        logger.info("Processing %d file(s) with %s...", total, model_config.name)

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.batch_timeout if self.batch_timeout else None

        results: list[ClassificationResult] = []
        # A single extraction thread per batch keeps documents from overlapping,
        # even when a timed-out parse is still running
        extractor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pdf-extract")
        try:
            for position, document in enumerate(documents, start=1):
                logger.info("[%d/%d] Processing: %s", position, total, document.filename)

                if cancel_event is not None and cancel_event.is_set():
                    results.append(
                        self._failed(document, "Batch cancelled before processing")
                    )
                    continue

                timeout = self.document_timeout
                if deadline is not None:
                    remaining = deadline - loop.time()
                    if remaining <= 0:
                        results.append(
                            self._failed(document, "Batch deadline exceeded before processing")
                        )
                        continue
                    timeout = remaining if timeout is None else min(timeout, remaining)

                results.append(
                    await self._classify_isolated(document, model_config, timeout, extractor)
                )
        finally:
            extractor.shutdown(wait=False)

        succeeded = sum(1 for result in results if result.success)
        logger.info(
            "Completed processing %d file(s) (%d succeeded, %d failed)",
            len(results),
            succeeded,
            len(results) - succeeded,
        )
        return BatchResult.from_results(results)

    async def _classify_isolated(
        self,
        document: UploadedDocument,
        model_config: ModelConfig,
        timeout: float | None,
        extractor: Executor | None = None,
    ) -> ClassificationResult:
        """Run one document, turning any failure into an Error result."""
        selected: list[int] = []
        try:
            return await asyncio.wait_for(
                self.classify_document(document, model_config, selected, extractor),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            message = (
                f"Processing timed out after {timeout:.0f} seconds"
                if timeout is not None
                else "Processing timed out"
            )
            logger.warning("%s: %s", message, document.filename)
            return self._failed(document, message, selected)
        except (DocumentParseError, RemoteClassificationError) as e:
            logger.warning("Error processing %s: %s", document.filename, e)
            return self._failed(document, str(e) or type(e).__name__, selected)
        except Exception as e:
            logger.exception("Unexpected error processing %s", document.filename)
            return self._failed(document, str(e) or type(e).__name__, selected)

    async def classify_document(
        self,
        document: UploadedDocument,
        model_config: ModelConfig,
        selected: list[int] | None = None,
        extractor: Executor | None = None,
    ) -> ClassificationResult:
        """
        Run the full pipeline for a single document.

        Args:
            document: The uploaded document.
            model_config: Resolved model configuration.
            selected: Optional list that receives the selected page numbers
                as soon as they are known, so a later failure can report them.
            extractor: Executor for the blocking PDF parse; the loop default
                when omitted.

        Raises:
            DocumentParseError: If the PDF cannot be read.
            RemoteClassificationError: If the model call fails.
        """
        logger.info("  - Extracting text from PDF pages...")
        loop = asyncio.get_running_loop()
        pages = await loop.run_in_executor(
            extractor, self.pdf_service.extract_pages, document.content
        )
        logger.info("  - Total pages: %d", len(pages))

        selection = select_abstract_pages(pages)
        if selection.heading_found:
            logger.info(
                "  - Found abstract pages: %s",
                ", ".join(str(n) for n in selection.page_numbers),
            )
        else:
            logger.info(
                "  - Abstract pages not found, using first %d pages...",
                len(selection.indices),
            )
        if selected is not None:
            selected.extend(selection.page_numbers)

        text = join_page_text(pages, selection.indices)
        if not text.strip():
            logger.warning("  - No extractable text in selected pages of %s", document.filename)

        logger.info("  - Sending to %s...", model_config.name)
        label = await self.ai_service.classify(text, model_config)
        category = normalize_category(label)
        if category.value != label:
            logger.info("  - Model answered %r, normalized to %s", label, category.value)
        logger.info("  - Result: %s", category.value)

        return ClassificationResult(
            filename=document.filename,
            category=category,
            pages_processed=selection.page_numbers,
            success=True,
        )

    @staticmethod
    def _failed(
        document: UploadedDocument,
        message: str,
        pages_processed: list[int] | None = None,
    ) -> ClassificationResult:
        return ClassificationResult(
            filename=document.filename,
            category=Category.ERROR,
            pages_processed=list(pages_processed or []),
            success=False,
            error=message,
        )
