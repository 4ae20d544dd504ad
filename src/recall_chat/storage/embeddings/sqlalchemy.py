"""
SQLAlchemy-based embedding storage implementation.

Vectors are stored as JSON text in the ``message_embeddings`` table and
scored in Python; there is no index, every search scans the whole corpus.
"""

import json
import logging
from typing import List, Optional

from sqlalchemy import Engine

from recall_chat.models import MemoryHit
from recall_chat.storage.database import (
    MessageDB,
    MessageEmbeddingDB,
    create_tables,
    session_scope,
)
from recall_chat.storage.embeddings.similarity import top_k

logger = logging.getLogger(__name__)


class SQLAlchemyEmbeddingStore:
    """SQLAlchemy implementation of the EmbeddingStore protocol."""

    def __init__(self, engine: Engine):
        """
        Initialize the SQLAlchemy embedding store.

        Args:
            engine: Engine shared with the SQLAlchemyMessageStore
        """
        self.engine = engine
        logger.info(f"SQLAlchemyEmbeddingStore initialized (engine={engine.url})")

    def create_tables(self):
        """Create database tables if they don't exist."""
        create_tables(self.engine)

    def upsert(self, message_id: int, vector: List[float]) -> None:
        """Store the vector for a message, replacing any previous one."""
        with session_scope(self.engine) as session:
            session.merge(
                MessageEmbeddingDB(message_id=message_id, embedding_json=json.dumps(list(vector)))
            )

        logger.debug(f"Upserted embedding for message {message_id} ({len(vector)} dims)")

    def get(self, message_id: int) -> Optional[List[float]]:
        """Return the stored vector for a message."""
        with session_scope(self.engine) as session:
            db_embedding = session.get(MessageEmbeddingDB, message_id)
            if db_embedding is None:
                return None
            return json.loads(db_embedding.embedding_json)

    def search(self, query_vector: List[float], k: int = 5) -> List[MemoryHit]:
        """Rank the full corpus by cosine similarity."""
        with session_scope(self.engine) as session:
            rows = (
                session.query(
                    MessageEmbeddingDB.embedding_json,
                    MessageDB.id,
                    MessageDB.conversation_id,
                    MessageDB.role,
                    MessageDB.content,
                )
                .join(MessageDB, MessageEmbeddingDB.message_id == MessageDB.id)
                .order_by(MessageDB.id)
                .all()
            )

        candidates = [
            ((message_id, conversation_id, role, content), json.loads(embedding_json))
            for embedding_json, message_id, conversation_id, role, content in rows
        ]

        results = [
            MemoryHit(
                message_id=message_id,
                conversation_id=conversation_id,
                role=role,
                content=content,
                similarity=score,
            )
            for (message_id, conversation_id, role, content), score in top_k(
                query_vector, candidates, k
            )
        ]

        logger.debug(f"{len(results)} results found (k={k}, corpus={len(rows)})")
        return results

    def count(self) -> int:
        """Number of stored embeddings."""
        with session_scope(self.engine) as session:
            return session.query(MessageEmbeddingDB).count()
