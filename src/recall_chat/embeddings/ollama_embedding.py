"""Ollama embedding adapter for recall-chat."""

import logging
from typing import List

from recall_chat.backend.ollama_client import OllamaClient

logger = logging.getLogger(__name__)


class OllamaEmbedding:
    """
    Embedding adapter using Ollama's ``/api/embeddings`` endpoint.

    Typical models:
    - nomic-embed-text (768 dims) - Default
    - mxbai-embed-large (1024 dims)
    - all-minilm (384 dims)

    Example:
        >>> embedder = OllamaEmbedding(OllamaClient("http://127.0.0.1:11434"))
        >>> if await embedder.check_available():
        ...     vector = await embedder.embed_document("I like pizza")
    """

    def __init__(self, client: OllamaClient, model: str = "nomic-embed-text"):
        """
        Initialize Ollama embedder.

        Args:
            client: Shared Ollama HTTP client
            model: Embedding model name as installed in Ollama
        """
        self._client = client
        self._model = model

        logger.info(f"Ollama embedder initialized: {model}")

    @property
    def model_name(self) -> str:
        """Identifier of the Ollama model."""
        return self._model

    async def check_available(self) -> bool:
        """
        Check that the embedding model is installed.

        Matches by substring so tagged names (``nomic-embed-text:latest``)
        count as installed. Any failure to reach Ollama counts as unavailable.
        """
        try:
            models = await self._client.list_models()
        except Exception as e:
            logger.warning(f"Unable to check embedding model availability: {e}")
            return False

        available = any(self._model in (m.get("name") or "") for m in models)

        if available:
            logger.info(f"Embedding model {self._model} available - long-term memory enabled")
        else:
            logger.warning(
                f"Embedding model {self._model} not found - long-term memory disabled. "
                f"To enable, run: ollama pull {self._model}"
            )

        return available

    async def _embed(self, text: str) -> List[float]:
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")

        return await self._client.embeddings(self._model, text)

    async def embed_document(self, text: str) -> List[float]:
        """
        Generate embedding for a message to be stored.

        Ollama models don't distinguish documents from queries, so this is
        identical to embed_query().
        """
        return await self._embed(text)

    async def embed_query(self, text: str) -> List[float]:
        """Generate embedding for a retrieval query."""
        return await self._embed(text)
