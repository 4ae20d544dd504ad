"""
In-memory message storage implementation.

Keeps conversations and messages in dictionaries, suitable for testing and
single-process development. Data is lost on restart; use the SQLAlchemy
implementation for durable storage.
"""

import itertools
import logging
import threading
from datetime import datetime
from typing import Dict, List, Optional

from recall_chat.errors import NotFoundError
from recall_chat.models import ROLES, Conversation, Message

logger = logging.getLogger(__name__)


class InMemoryMessageStore:
    """
    In-memory implementation of the MessageStore protocol.

    Writes are serialized with a lock so concurrent turns never share a
    message id.
    """

    def __init__(self):
        self._conversations: Dict[str, Conversation] = {}
        self._messages: Dict[int, Message] = {}
        self._by_conversation: Dict[str, List[int]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

        logger.info("InMemoryMessageStore initialized")

    def create_conversation(
        self,
        owner_id: str,
        title: Optional[str] = None,
        conversation_id: Optional[str] = None,
    ) -> Conversation:
        """Create a conversation."""
        now = datetime.now()
        fields = {"owner_id": owner_id, "title": title, "created_at": now, "updated_at": now}
        if conversation_id:
            fields["id"] = conversation_id
        conversation = Conversation(**fields)

        with self._lock:
            if conversation.id in self._conversations:
                raise ValueError(f"Conversation {conversation.id} already exists")
            self._conversations[conversation.id] = conversation
            self._by_conversation[conversation.id] = []

        logger.debug(f"Created conversation {conversation.id} for owner {owner_id}")
        return conversation.model_copy()

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        """Retrieve a conversation by id."""
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            return conversation.model_copy() if conversation else None

    def list_conversations(self, owner_id: str) -> List[Conversation]:
        """List a user's conversations, most recently updated first."""
        with self._lock:
            conversations = [
                c.model_copy() for c in self._conversations.values() if c.owner_id == owner_id
            ]

        conversations.sort(key=lambda c: c.updated_at, reverse=True)
        return conversations

    def append_message(self, conversation_id: str, role: str, content: str) -> Message:
        """Append a message to a conversation."""
        if role not in ROLES:
            raise ValueError(f"Invalid role: {role}")

        with self._lock:
            if conversation_id not in self._conversations:
                raise NotFoundError(f"Unknown conversation {conversation_id}")

            message = Message(
                id=next(self._ids),
                conversation_id=conversation_id,
                role=role,
                content=content,
                created_at=datetime.now(),
            )
            self._messages[message.id] = message
            self._by_conversation[conversation_id].append(message.id)

        logger.debug(f"Appended {role} message {message.id} to {conversation_id}")
        return message

    def get_message(self, message_id: int) -> Optional[Message]:
        """Retrieve a message by id."""
        return self._messages.get(message_id)

    def list_messages(self, conversation_id: str, limit: int = 50) -> List[Message]:
        """Get the most recent messages of a conversation, oldest first."""
        if limit <= 0:
            return []

        with self._lock:
            message_ids = list(self._by_conversation.get(conversation_id, []))

        messages = [self._messages[message_id] for message_id in message_ids]
        messages.sort(key=lambda m: (m.created_at, m.id))

        return messages[-limit:]

    def touch_conversation(self, conversation_id: str) -> None:
        """Advance the conversation's updated_at to now."""
        with self._lock:
            conversation = self._conversations.get(conversation_id)
            if conversation is None:
                raise NotFoundError(f"Unknown conversation {conversation_id}")

            conversation.updated_at = max(datetime.now(), conversation.updated_at)

    def count_messages(self, conversation_id: str) -> int:
        """Number of messages stored for a conversation."""
        return len(self._by_conversation.get(conversation_id, []))
