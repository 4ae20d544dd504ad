"""
In-memory embedding storage implementation.

Keeps vectors in a dictionary keyed by message id and resolves message
metadata through a MessageStore. Data is lost on restart.
"""

import logging
import threading
from typing import Dict, List, Optional

from recall_chat.models import MemoryHit
from recall_chat.storage.embeddings.similarity import top_k
from recall_chat.storage.protocols import MessageStore

logger = logging.getLogger(__name__)


class InMemoryEmbeddingStore:
    """
    In-memory implementation of the EmbeddingStore protocol.

    Search is a full linear scan with cosine similarity. A search running
    while another task upserts may or may not see the new vector.
    """

    def __init__(self, message_store: MessageStore):
        """
        Initialize the store.

        Args:
            message_store: Store used to join embeddings with their messages
        """
        self._message_store = message_store
        self._vectors: Dict[int, List[float]] = {}
        self._lock = threading.Lock()

        logger.info("InMemoryEmbeddingStore initialized")

    def upsert(self, message_id: int, vector: List[float]) -> None:
        """Store the vector for a message, replacing any previous one."""
        with self._lock:
            self._vectors[message_id] = list(vector)

        logger.debug(f"Upserted embedding for message {message_id} ({len(vector)} dims)")

    def get(self, message_id: int) -> Optional[List[float]]:
        """Return the stored vector for a message."""
        vector = self._vectors.get(message_id)
        return list(vector) if vector is not None else None

    def search(self, query_vector: List[float], k: int = 5) -> List[MemoryHit]:
        """Rank the full corpus by cosine similarity."""
        with self._lock:
            snapshot = list(self._vectors.items())

        candidates = []
        for message_id, vector in snapshot:
            message = self._message_store.get_message(message_id)
            if message is None:
                logger.warning(f"Embedding for unknown message {message_id}, skipping")
                continue
            candidates.append((message, vector))

        results = [
            MemoryHit(
                message_id=message.id,
                conversation_id=message.conversation_id,
                role=message.role,
                content=message.content,
                similarity=score,
            )
            for message, score in top_k(query_vector, candidates, k)
        ]

        logger.debug(f"{len(results)} results found (k={k}, corpus={len(snapshot)})")
        return results

    def count(self) -> int:
        """Number of stored embeddings."""
        return len(self._vectors)
