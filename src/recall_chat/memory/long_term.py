"""
Long-term semantic memory over past messages.

Writes (enrichment) and reads (recall) go through the embedding backend and
the embedding store. Embedding failures never escape this module: they are
logged and turn into "no embedding".
"""

import logging
from typing import List, Optional

from recall_chat.embeddings.protocol import TextEmbedding
from recall_chat.models import MemoryHit, Message
from recall_chat.storage.protocols import EmbeddingStore

logger = logging.getLogger(__name__)


class LongTermMemory:
    """
    Embedding-backed memory shared by all conversations.

    Disabled until `initialize()` confirms the embedding model exists; the
    decision is made once for the process lifetime.
    """

    def __init__(
        self,
        embedding: TextEmbedding,
        store: EmbeddingStore,
        top_k: int = 5,
        min_similarity: float = 0.5,
    ):
        """
        Args:
            embedding: Embedding backend
            store: Store holding one vector per message
            top_k: Number of nearest neighbours fetched per query
            min_similarity: Hits at or below this similarity are dropped
        """
        self.embedding = embedding
        self.store = store
        self.top_k = top_k
        self.min_similarity = min_similarity
        self._enabled = False
        self._initialized = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def initialize(self) -> bool:
        """Probe the embedding backend once and fix the enabled flag."""
        if not self._initialized:
            self._enabled = await self.embedding.check_available()
            self._initialized = True
        return self._enabled

    async def remember(self, message: Message) -> bool:
        """
        Embed a stored message and upsert its vector.

        Returns:
            True if the vector was stored
        """
        if not self._enabled:
            return False

        try:
            vector = await self.embedding.embed_document(message.content)
            self.store.upsert(message.id, vector)
        except Exception as e:
            logger.error(f"Embedding failed for message {message.id}: {e}")
            return False

        logger.debug(f"Stored embedding for message {message.id}")
        return True

    async def query_embedding(self, text: str) -> Optional[List[float]]:
        """Embed a retrieval query, None when disabled or on failure."""
        if not self._enabled:
            return None

        try:
            return await self.embedding.embed_query(text)
        except Exception as e:
            logger.error(f"Query embedding failed: {e}")
            return None

    def recall(self, query_vector: List[float], conversation_id: str) -> List[MemoryHit]:
        """
        Find relevant memories from other conversations.

        Searches the whole corpus, then drops hits from the current
        conversation and hits with similarity <= min_similarity.
        """
        hits = self.store.search(query_vector, self.top_k)

        relevant = [
            hit
            for hit in hits
            if hit.conversation_id != conversation_id and hit.similarity > self.min_similarity
        ]

        logger.debug(f"Recall kept {len(relevant)} of {len(hits)} hits")
        return relevant
