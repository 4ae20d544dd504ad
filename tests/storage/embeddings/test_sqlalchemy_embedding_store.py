"""
Unit tests for SQLAlchemy embedding storage.

Embeddings share the engine with the message store so search results are
joined with their messages.
"""

import pytest
from sqlalchemy import create_engine

from recall_chat.storage.embeddings.sqlalchemy import SQLAlchemyEmbeddingStore
from recall_chat.storage.messages.sqlalchemy import SQLAlchemyMessageStore


@pytest.fixture
def engine():
    return create_engine("sqlite:///:memory:")


@pytest.fixture
def message_store(engine):
    store = SQLAlchemyMessageStore(engine)
    store.create_tables()
    return store


@pytest.fixture
def embedding_store(engine, message_store):
    """Create a SQLAlchemy embedding store on the shared engine."""
    return SQLAlchemyEmbeddingStore(engine)


def test_upsert_and_get(message_store, embedding_store):
    conversation = message_store.create_conversation("user1")
    message = message_store.append_message(conversation.id, "user", "Hello")

    embedding_store.upsert(message.id, [0.25, -0.5, 1.0])

    assert embedding_store.get(message.id) == [0.25, -0.5, 1.0]
    assert embedding_store.count() == 1


def test_upsert_replaces_vector(message_store, embedding_store):
    conversation = message_store.create_conversation("user1")
    message = message_store.append_message(conversation.id, "user", "Hello")

    embedding_store.upsert(message.id, [1.0, 0.0])
    embedding_store.upsert(message.id, [0.0, 1.0])

    assert embedding_store.get(message.id) == [0.0, 1.0]
    assert embedding_store.count() == 1


def test_get_missing(embedding_store):
    assert embedding_store.get(1) is None


def test_search_joins_messages(message_store, embedding_store):
    """Test that hits carry conversation, role and content."""
    conv_x = message_store.create_conversation("user1")
    conv_y = message_store.create_conversation("user1")
    a = message_store.append_message(conv_x.id, "user", "I have a dog named Rex")
    b = message_store.append_message(conv_y.id, "assistant", "Rex sounds lovely")
    c = message_store.append_message(conv_y.id, "user", "Unrelated")
    embedding_store.upsert(a.id, [1.0, 0.0])
    embedding_store.upsert(b.id, [0.9, 0.1])
    embedding_store.upsert(c.id, [0.0, 1.0])

    results = embedding_store.search([1.0, 0.0], k=2)

    assert [r.message_id for r in results] == [a.id, b.id]
    assert results[0].conversation_id == conv_x.id
    assert results[1].conversation_id == conv_y.id
    assert results[1].role == "assistant"
    assert results[1].content == "Rex sounds lovely"
    assert results[0].similarity == pytest.approx(1.0)


def test_search_returns_min_of_k_and_corpus(message_store, embedding_store):
    conversation = message_store.create_conversation("user1")
    for i in range(3):
        message = message_store.append_message(conversation.id, "user", f"Message {i}")
        embedding_store.upsert(message.id, [float(i + 1), 1.0])

    assert len(embedding_store.search([1.0, 1.0], k=5)) == 3
    assert len(embedding_store.search([1.0, 1.0], k=2)) == 2


def test_search_empty(embedding_store):
    assert embedding_store.search([1.0, 0.0], k=5) == []
