"""
AI service package for thesis categorization.

This package provides modular AI functionality split into:
- prompts: Fixed system instruction, truncation and label normalization
- model_registry: Logical model names mapped to provider configuration
- classification: The chat completion call itself

The AIService class owns the configured client and delegates to these modules.
"""

import logging

from openai import AsyncOpenAI

# Handle both package imports and standalone imports
try:
    from ...config import Settings, get_settings
    from ...models import ModelConfig
except ImportError:
    from config import Settings, get_settings
    from models import ModelConfig

from .classification import classify_text as _classify_text
from .exceptions import RemoteClassificationError
from .model_registry import BUILTIN_MODELS, DEFAULT_MODEL_KEY, ModelRegistry
from .prompts import (
    MAX_TEXT_CHARS,
    SYSTEM_PROMPT,
    build_messages,
    build_user_content,
    normalize_category,
    truncate_text,
)

logger = logging.getLogger(__name__)

# Export public functions and classes
__all__ = [
    "AIService",
    "BUILTIN_MODELS",
    "DEFAULT_MODEL_KEY",
    "MAX_TEXT_CHARS",
    "ModelRegistry",
    "RemoteClassificationError",
    "SYSTEM_PROMPT",
    "build_messages",
    "build_user_content",
    "classify_text",
    "normalize_category",
    "truncate_text",
]


class AIService:
    """
    Service for AI-powered thesis categorization.

    Talks to an OpenAI-compatible endpoint (OpenRouter by default) through
    the async OpenAI client. Runs in mock mode when no API key is configured.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_headers: dict[str, str] | None = None,
        timeout: float | None = None,
        use_mock: bool = False,
        client: AsyncOpenAI | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the AI service.

        Args:
            api_key: Provider API key. If None, read from settings.
            base_url: Completion endpoint base URL. If None, read from settings.
            default_headers: Extra headers sent with every request. If None,
                the referer and title headers from settings are used.
            timeout: Per-request timeout in seconds. If None, read from settings.
            use_mock: If True, return a mock category instead of calling the API.
            client: Pre-built client, mainly for tests.
            settings: Settings to read defaults from. Defaults to get_settings().
        """
        settings = settings or get_settings()

        if api_key is None:
            api_key = settings.openrouter_api_key

        self.api_key = api_key
        self.base_url = base_url or settings.openrouter_base_url
        self.default_headers = (
            default_headers
            if default_headers is not None
            else {
                "HTTP-Referer": settings.http_referer,
                "X-Title": settings.app_title,
            }
        )
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self.use_mock = use_mock or (client is None and not self.api_key)
        self._client = client

        if self.use_mock:
            logger.warning(
                "AI Service running in MOCK MODE. Set OPENROUTER_API_KEY in .env for real classification."
            )

    @property
    def client(self) -> AsyncOpenAI:
        """The completion client, created on first use."""
        if self._client is None:
            if not self.api_key:
                raise RemoteClassificationError(
                    "API key not provided. Set OPENROUTER_API_KEY environment variable."
                )
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                default_headers=self.default_headers,
                timeout=self.timeout,
            )
        return self._client

    async def classify(self, text: str, model_config: ModelConfig) -> str:
        """
        Return the raw category label the model assigns to the text.

        Delegates to the classification module.

        Args:
            text: Joined text of the selected pages.
            model_config: Resolved model id and temperature.

        Returns:
            The model's label with surrounding whitespace removed.
        """
        if self.use_mock:
            return await _classify_text(text, model_config, use_mock=True)
        return await _classify_text(text, model_config, client=self.client)

    async def close(self) -> None:
        """Close the underlying HTTP client, if one was created."""
        if self._client is not None:
            await self._client.close()


# Re-export module function for direct use without AIService
classify_text = _classify_text
