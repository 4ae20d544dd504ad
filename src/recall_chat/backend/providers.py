"""casual-llm provider construction for routed backend models."""

import logging
from typing import Dict

from casual_llm import LLMProvider, ModelConfig, Provider, create_provider

logger = logging.getLogger(__name__)


class OllamaProviderFactory:
    """
    Builds one casual-llm provider per backend model id and reuses it.

    Routes are resolved per turn, so the backend model isn't known until the
    turn runs; the provider for a given model is created on first use.
    """

    def __init__(self, base_url: str = "http://127.0.0.1:11434"):
        self.base_url = base_url
        self._providers: Dict[str, LLMProvider] = {}

    def __call__(self, backend_model_id: str) -> LLMProvider:
        provider = self._providers.get(backend_model_id)
        if provider is None:
            provider = create_provider(
                ModelConfig(
                    name=backend_model_id,
                    provider=Provider.OLLAMA,
                    base_url=self.base_url,
                )
            )
            self._providers[backend_model_id] = provider
            logger.info(f"Created Ollama provider for {backend_model_id} ({self.base_url})")

        return provider
