"""
recall-chat: chat backend with long-term semantic memory across conversations.

Core components:
- orchestrator: Memory-augmented chat turn pipeline
- storage: Message and embedding stores (in-memory and SQLAlchemy)
- routing: Logical model name to backend parameters
- memory: Embedding-backed recall of past messages
- embeddings: Text embedding protocol and Ollama adapter
- models: Core data models (Conversation, Message, RouteConfig, etc.)
"""

__version__ = "0.1.0"

from recall_chat.models import (
    ChatTurnRequest,
    ChatTurnResult,
    Conversation,
    MemoryHit,
    Message,
    RouteConfig,
    TurnState,
)
from recall_chat.orchestrator import ChatTurnOrchestrator

__all__ = [
    "__version__",
    # Models
    "Conversation",
    "Message",
    "MemoryHit",
    "RouteConfig",
    "TurnState",
    "ChatTurnRequest",
    "ChatTurnResult",
    "ChatTurnOrchestrator",
]
