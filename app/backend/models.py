"""
Pydantic models for the thesis classification pipeline.

Defines strict types for uploaded documents, extracted pages, the closed
category taxonomy, model configuration, and per-document/batch results.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Category(str, Enum):
    """Project categories a thesis can be assigned to."""

    WEB_APPLICATION = "Web-application"
    MOBILE_APPLICATION = "Mobile-application"
    HARDWARE_IOT_NETWORK = "Hardware/IoT & Network"
    DIGITAL_IMAGE_PROCESSING = "Digital Image Processing"
    OTHER = "Other"
    # Sentinel for pipeline failures, never offered to the model
    ERROR = "Error"

    @classmethod
    def taxonomy(cls) -> list["Category"]:
        """Return the categories the model may choose from, in prompt order."""
        return [category for category in cls if category is not cls.ERROR]


class UploadedDocument(BaseModel):
    """A single uploaded file, alive only for the duration of one request."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., description="Display filename (encoding already repaired)")
    content: bytes = Field(..., repr=False, description="Raw file bytes")


class Page(BaseModel):
    """Extracted text of one document page."""

    model_config = ConfigDict(frozen=True)

    page_number: int = Field(..., ge=1, description="1-based page number")
    text: str = Field(default="", description="Page text, empty if none was found")


class AbstractSelection(BaseModel):
    """
    Pages chosen as classification input.

    Attributes:
        indices: 0-based page indices, strictly increasing.
        page_numbers: 1-based page numbers of the selected pages.
        heading_found: False when the leading-page fallback was used.
    """

    model_config = ConfigDict(frozen=True)

    indices: list[int] = Field(default_factory=list)
    page_numbers: list[int] = Field(default_factory=list)
    heading_found: bool = False


class ModelConfig(BaseModel):
    """Provider settings behind a logical model name."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Provider model identifier")
    name: str = Field(..., min_length=1, description="Human-readable display name")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0)


class ClassificationResult(BaseModel):
    """
    Outcome for a single document.

    Serialized with camelCase keys to match the frontend contract:
    {
        "filename": str,
        "category": str,
        "pagesProcessed": [int, ...],
        "success": bool,
        "error": str (failures only)
    }
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    filename: str = Field(..., description="Original filename of the document")
    category: Category = Field(..., description="Assigned category or Error")
    pages_processed: list[int] = Field(
        default_factory=list,
        alias="pagesProcessed",
        description="Page numbers whose text was sent for classification",
    )
    success: bool = Field(..., description="Whether the document was classified")
    error: str | None = Field(default=None, description="Failure message")

    @model_validator(mode="after")
    def check_failure_shape(self) -> "ClassificationResult":
        """Failed results carry the Error sentinel and a message."""
        if not self.success:
            if self.category is not Category.ERROR:
                raise ValueError("Failed results must use the Error category")
            if not self.error:
                raise ValueError("Failed results must include an error message")
        elif self.category is Category.ERROR:
            raise ValueError("Successful results cannot use the Error category")
        return self


class BatchResult(BaseModel):
    """Aggregated results of one classification request, in input order."""

    total: int = Field(..., ge=0, description="Number of documents in the batch")
    results: list[ClassificationResult] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_total(self) -> "BatchResult":
        """Ensure total always matches the number of results."""
        if self.total != len(self.results):
            raise ValueError(
                f"total ({self.total}) does not match number of results ({len(self.results)})"
            )
        return self

    @classmethod
    def from_results(cls, results: list[ClassificationResult]) -> "BatchResult":
        return cls(total=len(results), results=results)


class ErrorResponse(BaseModel):
    """Error body returned for request-level failures."""

    error: str


class ModelListResponse(BaseModel):
    """Available logical model names."""

    default: str = Field(..., description="Key used when no model is requested")
    models: dict[str, ModelConfig] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    version: str = Field(default="1.0.0")
    message: str | None = None
