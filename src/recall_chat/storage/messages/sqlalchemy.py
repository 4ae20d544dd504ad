"""
SQLAlchemy-based message storage implementation.

Durable conversation log for any SQLAlchemy-compatible database. Message ids
come from the database's autoincrement column, so they stay unique across
concurrent turns.

Example:
    from recall_chat.storage.database import create_db_engine
    engine = create_db_engine("sqlite:///recall.db")
    store = SQLAlchemyMessageStore(engine)
    store.create_tables()
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Engine

from recall_chat.errors import NotFoundError
from recall_chat.models import ROLES, Conversation, Message
from recall_chat.storage.database import (
    ConversationDB,
    MessageDB,
    create_tables,
    session_scope,
)

logger = logging.getLogger(__name__)


class SQLAlchemyMessageStore:
    """SQLAlchemy implementation of the MessageStore protocol."""

    def __init__(self, engine: Engine):
        """
        Initialize the SQLAlchemy message store.

        Args:
            engine: SQLAlchemy engine for database connection
        """
        self.engine = engine
        logger.info(f"SQLAlchemyMessageStore initialized (engine={engine.url})")

    def create_tables(self):
        """Create database tables if they don't exist."""
        create_tables(self.engine)

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

        with session_scope(self.engine) as session:
            session.add(
                ConversationDB(
                    id=conversation.id,
                    owner_id=conversation.owner_id,
                    title=conversation.title,
                    created_at=conversation.created_at,
                    updated_at=conversation.updated_at,
                )
            )

        logger.info(f"Created conversation {conversation.id} for owner {owner_id}")
        return conversation

    def get_conversation(self, conversation_id: str) -> Optional[Conversation]:
        """Retrieve a conversation by id."""
        with session_scope(self.engine) as session:
            db_conversation = session.get(ConversationDB, conversation_id)

            if not db_conversation:
                return None

            return db_conversation.to_conversation()

    def list_conversations(self, owner_id: str) -> List[Conversation]:
        """List a user's conversations, most recently updated first."""
        with session_scope(self.engine) as session:
            db_conversations = (
                session.query(ConversationDB)
                .filter(ConversationDB.owner_id == owner_id)
                .order_by(ConversationDB.updated_at.desc())
                .all()
            )
            return [c.to_conversation() for c in db_conversations]

    def append_message(self, conversation_id: str, role: str, content: str) -> Message:
        """Append a message to a conversation."""
        if role not in ROLES:
            raise ValueError(f"Invalid role: {role}")

        with session_scope(self.engine) as session:
            if session.get(ConversationDB, conversation_id) is None:
                raise NotFoundError(f"Unknown conversation {conversation_id}")

            db_message = MessageDB(
                conversation_id=conversation_id,
                role=role,
                content=content,
                created_at=datetime.now(),
            )
            session.add(db_message)
            session.flush()

            message = db_message.to_message()

        logger.debug(f"Appended {role} message {message.id} to {conversation_id}")
        return message

    def get_message(self, message_id: int) -> Optional[Message]:
        """Retrieve a message by id."""
        with session_scope(self.engine) as session:
            db_message = session.get(MessageDB, message_id)
            return db_message.to_message() if db_message else None

    def list_messages(self, conversation_id: str, limit: int = 50) -> List[Message]:
        """Get the most recent messages of a conversation, oldest first."""
        if limit <= 0:
            return []

        with session_scope(self.engine) as session:
            db_messages = (
                session.query(MessageDB)
                .filter(MessageDB.conversation_id == conversation_id)
                .order_by(MessageDB.created_at.desc(), MessageDB.id.desc())
                .limit(limit)
                .all()
            )
            messages = [m.to_message() for m in db_messages]

        messages.reverse()
        return messages

    def touch_conversation(self, conversation_id: str) -> None:
        """Advance the conversation's updated_at to now."""
        with session_scope(self.engine) as session:
            db_conversation = session.get(ConversationDB, conversation_id)

            if db_conversation is None:
                raise NotFoundError(f"Unknown conversation {conversation_id}")

            db_conversation.updated_at = max(datetime.now(), db_conversation.updated_at)

    def count_messages(self, conversation_id: str) -> int:
        """Number of messages stored for a conversation."""
        with session_scope(self.engine) as session:
            return (
                session.query(MessageDB)
                .filter(MessageDB.conversation_id == conversation_id)
                .count()
            )
