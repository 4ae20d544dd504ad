"""
Storage protocols and implementations for conversations, messages and embeddings.

Implementations can use any SQLAlchemy database or plain memory as long as
they satisfy the protocol interface.
"""

from recall_chat.storage.embeddings import InMemoryEmbeddingStore, SQLAlchemyEmbeddingStore
from recall_chat.storage.messages import InMemoryMessageStore, SQLAlchemyMessageStore
from recall_chat.storage.protocols import EmbeddingStore, MessageStore

__all__ = [
    "MessageStore",
    "EmbeddingStore",
    "InMemoryMessageStore",
    "SQLAlchemyMessageStore",
    "InMemoryEmbeddingStore",
    "SQLAlchemyEmbeddingStore",
]
