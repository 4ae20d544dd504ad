"""
Text embedding protocol for recall-chat.

Provides a unified interface for embedding message text into dense vectors
for long-term memory search.
"""

from typing import List, Protocol

from typing_extensions import runtime_checkable


@runtime_checkable
class TextEmbedding(Protocol):
    """
    Protocol for text embedding providers.

    All vectors produced by one provider share a dimensionality; the
    embedding store does not check it.

    Example:
        >>> embedder = OllamaEmbedding(client, model="nomic-embed-text")
        >>> await embedder.check_available()
        True
        >>> vector = await embedder.embed_document("Hello world")
    """

    @property
    def model_name(self) -> str:
        """
        Identifier of the embedding model.

        Returns:
            Model name (e.g., "nomic-embed-text")
        """
        ...

    async def check_available(self) -> bool:
        """
        Probe whether the embedding model can be used at all.

        Called once at startup; the result is not re-evaluated.

        Returns:
            True if the model is installed on the backend
        """
        ...

    async def embed_document(self, text: str) -> List[float]:
        """
        Generate embedding for a message to be stored.

        Args:
            text: Message text to embed

        Returns:
            Embedding vector

        Raises:
            ValueError: If text is empty
        """
        ...

    async def embed_query(self, text: str) -> List[float]:
        """
        Generate embedding for a retrieval query.

        Args:
            text: Query text to embed

        Returns:
            Embedding vector

        Raises:
            ValueError: If text is empty
        """
        ...
