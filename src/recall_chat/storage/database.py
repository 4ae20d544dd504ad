"""
SQLAlchemy schema shared by the durable message and embedding stores.

Works with any SQLAlchemy-compatible database (SQLite, PostgreSQL, ...).
Both stores bind to the same engine so embeddings can be joined with their
messages.
"""

import logging
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Engine,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    create_engine,
)
from sqlalchemy.orm import Session, declarative_base

from recall_chat.models import Conversation, Message

logger = logging.getLogger(__name__)

Base = declarative_base()


class ConversationDB(Base):
    """SQLAlchemy model for conversations."""

    __tablename__ = "conversations"

    id = Column(String, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    title = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)

    def to_conversation(self) -> Conversation:
        return Conversation(
            id=self.id,
            owner_id=self.owner_id,
            title=self.title,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class MessageDB(Base):
    """SQLAlchemy model for messages."""

    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    conversation_id = Column(String, ForeignKey("conversations.id"), nullable=False)
    role = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (Index("idx_messages_conversation_created", "conversation_id", "created_at"),)

    def to_message(self) -> Message:
        return Message(
            id=self.id,
            conversation_id=self.conversation_id,
            role=self.role,
            content=self.content,
            created_at=self.created_at,
        )


class MessageEmbeddingDB(Base):
    """SQLAlchemy model for message embeddings (vector stored as JSON text)."""

    __tablename__ = "message_embeddings"

    message_id = Column(Integer, ForeignKey("messages.id"), primary_key=True)
    embedding_json = Column(Text, nullable=False)


def create_db_engine(database_url: str) -> Engine:
    """Create an engine, allowing SQLite connections to cross threads."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False

    return create_engine(database_url, connect_args=connect_args)


def create_tables(engine: Engine) -> None:
    """Create database tables if they don't exist."""
    Base.metadata.create_all(engine)
    logger.info("Database tables created/verified")


@contextmanager
def session_scope(engine: Engine):
    """Context manager for database sessions with automatic commit/rollback."""
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Database error: {e}")
        raise
    finally:
        session.close()
