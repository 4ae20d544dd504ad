"""
Text embedding abstractions for recall-chat.

Provides a protocol-based embedding interface with backend adapters:
- OllamaEmbedding: embeddings served by the local Ollama backend
"""

from recall_chat.embeddings.ollama_embedding import OllamaEmbedding
from recall_chat.embeddings.protocol import TextEmbedding

__all__ = [
    "TextEmbedding",
    "OllamaEmbedding",
]
