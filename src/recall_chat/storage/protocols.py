"""
Storage protocol definitions for conversations, messages and embeddings.

These protocols define the interface that storage implementations must provide.
They are implementation-agnostic and can be backed by any SQLAlchemy database
or kept in memory for testing.
"""

from typing import List, Optional, Protocol

from recall_chat.models import Conversation, MemoryHit, Message


class MessageStore(Protocol):
    """
    Protocol for the append-only conversation log.

    Implementations serialize their own writes but do not coordinate
    across chat turns.
    """

    def create_conversation(
        self,
        owner_id: str,
        title: Optional[str] = None,
        conversation_id: Optional[str] = None,
    ) -> Conversation:
        """
        Create a conversation.

        Args:
            owner_id: Opaque id of the owning user
            title: Optional title
            conversation_id: Caller-chosen id (a UUID4 is generated when None)

        Returns:
            The created conversation
        """
        ...

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        """Retrieve a conversation by id, None if unknown."""
        ...

    def list_conversations(self, owner_id: str) -> List[Conversation]:
        """List a user's conversations, most recently updated first."""
        ...

    def append_message(self, conversation_id: str, role: str, content: str) -> Message:
        """
        Append a message to a conversation.

        Args:
            conversation_id: Target conversation
            role: One of "system", "user", "assistant"
            content: Message text

        Returns:
            The stored message with its assigned id and timestamp

        Raises:
            ValueError: If role is not a known role
            NotFoundError: If the conversation does not exist
        """
        ...

    def get_message(self, message_id: int) -> Optional[Message]:
        """Retrieve a message by id, None if unknown."""
        ...

    def list_messages(self, conversation_id: str, limit: int = 50) -> List[Message]:
        """
        Get the most recent messages of a conversation.

        Args:
            conversation_id: The conversation
            limit: Maximum number of messages to return

        Returns:
            Up to `limit` messages, oldest first
        """
        ...

    def touch_conversation(self, conversation_id: str) -> None:
        """Advance the conversation's updated_at to now."""
        ...

    def count_messages(self, conversation_id: str) -> int:
        """Number of messages stored for a conversation."""
        ...


class EmbeddingStore(Protocol):
    """
    Protocol for message embeddings with brute-force similarity search.

    The store is conversation-agnostic: search always scans the whole corpus
    and scoping is left to the caller.
    """

    def upsert(self, message_id: int, vector: List[float]) -> None:
        """Store the vector for a message, replacing any previous one."""
        ...

    def get(self, message_id: int) -> Optional[List[float]]:
        """Return the stored vector for a message, None if absent."""
        ...

    def search(self, query_vector: List[float], k: int = 5) -> List[MemoryHit]:
        """
        Rank the full corpus by cosine similarity.

        Args:
            query_vector: The query embedding
            k: Maximum number of hits

        Returns:
            min(k, corpus size) hits, highest similarity first
        """
        ...

    def count(self) -> int:
        """Number of stored embeddings."""
        ...
