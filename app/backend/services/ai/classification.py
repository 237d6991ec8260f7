"""
Thesis categorization through an OpenAI-compatible chat completion call.
"""

import logging

from openai import AsyncOpenAI, OpenAIError

# Handle both package imports and standalone imports
try:
    from ...models import Category, ModelConfig
except ImportError:
    from models import Category, ModelConfig

from .exceptions import RemoteClassificationError
from .prompts import build_messages

logger = logging.getLogger(__name__)


async def classify_text(
    text: str,
    model_config: ModelConfig,
    client: AsyncOpenAI | None = None,
    use_mock: bool = False,
) -> str:
    """
    Ask the model for the category of a thesis abstract.

    Args:
        text: Joined text of the selected pages; truncated before sending.
        model_config: Resolved provider model id and temperature.
        client: AsyncOpenAI client pointed at the completion endpoint.
        use_mock: If True, skip the remote call and answer "Other".

    Returns:
        The first completion's content with surrounding whitespace removed.

    Raises:
        RemoteClassificationError: On provider, network or response errors.
    """
    if use_mock:
        logger.info("Mock mode: returning mock category")
        return Category.OTHER.value

    if client is None:
        raise RemoteClassificationError("No completion client configured")

    try:
        response = await client.chat.completions.create(
            model=model_config.id,
            messages=build_messages(text),
            temperature=model_config.temperature,
        )

        if not response.choices:
            raise RemoteClassificationError("Model returned no choices")

        content = response.choices[0].message.content
        if not content or not content.strip():
            raise RemoteClassificationError("Empty response from model")

        return content.strip()

    except RemoteClassificationError:
        raise
    except OpenAIError as e:
        logger.error("Classification request failed: %s", e)
        raise RemoteClassificationError(f"Classification request failed: {e}") from e
    except Exception as e:
        logger.exception("Malformed classification response")
        raise RemoteClassificationError(f"Malformed classification response: {e}") from e
