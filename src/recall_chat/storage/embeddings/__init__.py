from recall_chat.storage.embeddings.memory import InMemoryEmbeddingStore
from recall_chat.storage.embeddings.similarity import cosine_similarity, top_k
from recall_chat.storage.embeddings.sqlalchemy import SQLAlchemyEmbeddingStore

__all__ = [
    "InMemoryEmbeddingStore",
    "SQLAlchemyEmbeddingStore",
    "cosine_similarity",
    "top_k",
]
