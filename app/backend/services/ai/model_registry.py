"""
Logical model names mapped to provider model configuration.

Adding a model is a data change: register a new entry (or supply it via the
EXTRA_MODELS setting) without touching calling code.
"""

import logging
from collections.abc import Mapping

# Handle both package imports and standalone imports
try:
    from ...config import Settings
    from ...models import ModelConfig
except ImportError:
    from config import Settings
    from models import ModelConfig

logger = logging.getLogger(__name__)

DEFAULT_MODEL_KEY = "Nvidia-AI"

BUILTIN_MODELS: dict[str, ModelConfig] = {
    DEFAULT_MODEL_KEY: ModelConfig(
        id="nvidia/nemotron-3-nano-30b-a3b:free",
        name="Nvidia Nemotron 3 Nano 30B A3B",
        temperature=0.1,
    ),
}


class ModelRegistry:
    """
    Lookup table from logical model names to ModelConfig entries.

    Unknown, empty, or missing names resolve to the default entry rather
    than failing.
    """

    def __init__(
        self,
        configs: Mapping[str, ModelConfig] | None = None,
        default_key: str = DEFAULT_MODEL_KEY,
    ):
        """
        Initialize the registry.

        Args:
            configs: Entries to start from. Defaults to the built-in table.
            default_key: Key used for unrecognized names. Must be present.

        Raises:
            ValueError: If default_key is not one of the entries.
        """
        self._configs: dict[str, ModelConfig] = dict(
            BUILTIN_MODELS if configs is None else configs
        )
        if default_key not in self._configs:
            raise ValueError(f"Default model '{default_key}' is not configured")
        self.default_key = default_key

    @classmethod
    def from_settings(cls, settings: Settings) -> "ModelRegistry":
        """Build the registry from the built-in table plus EXTRA_MODELS entries."""
        configs = dict(BUILTIN_MODELS)
        for key, raw in settings.extra_models.items():
            configs[key] = ModelConfig.model_validate(raw)
        return cls(configs, default_key=settings.default_model)

    def register(self, key: str, config: ModelConfig) -> None:
        """Add or replace an entry."""
        self._configs[key] = config

    @property
    def default(self) -> ModelConfig:
        return self._configs[self.default_key]

    def resolve(self, name: str | None) -> ModelConfig:
        """
        Resolve a caller-supplied model name.

        Args:
            name: Logical model name, possibly None or blank.

        Returns:
            The matching ModelConfig, or the default entry.
        """
        if name is None or not name.strip():
            return self.default

        config = self._configs.get(name.strip())
        if config is None:
            logger.info(
                "Unknown model '%s', using default '%s'", name, self.default_key
            )
            return self.default
        return config

    def as_dict(self) -> dict[str, ModelConfig]:
        return dict(self._configs)

    def __contains__(self, key: object) -> bool:
        return key in self._configs

    def __len__(self) -> int:
        return len(self._configs)
