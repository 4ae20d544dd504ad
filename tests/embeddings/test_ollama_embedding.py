"""Tests for the Ollama embedding adapter."""

from unittest.mock import AsyncMock, Mock

import pytest

from recall_chat.embeddings import OllamaEmbedding, TextEmbedding


@pytest.fixture
def mock_client():
    client = Mock()
    client.list_models = AsyncMock(return_value=[])
    client.embeddings = AsyncMock(return_value=[0.1, 0.2, 0.3])
    return client


def test_is_protocol(mock_client):
    """OllamaEmbedding implements TextEmbedding protocol."""
    embedder = OllamaEmbedding(mock_client)

    assert isinstance(embedder, TextEmbedding)
    assert embedder.model_name == "nomic-embed-text"


@pytest.mark.asyncio
async def test_available_when_model_installed(mock_client):
    mock_client.list_models.return_value = [
        {"name": "llama3.2:latest"},
        {"name": "nomic-embed-text:latest"},
    ]
    embedder = OllamaEmbedding(mock_client)

    assert await embedder.check_available() is True


@pytest.mark.asyncio
async def test_unavailable_when_model_missing(mock_client):
    mock_client.list_models.return_value = [{"name": "llama3.2:latest"}]
    embedder = OllamaEmbedding(mock_client)

    assert await embedder.check_available() is False


@pytest.mark.asyncio
async def test_unavailable_when_backend_unreachable(mock_client):
    mock_client.list_models.side_effect = ConnectionError("refused")
    embedder = OllamaEmbedding(mock_client)

    assert await embedder.check_available() is False


@pytest.mark.asyncio
async def test_embed_document_and_query(mock_client):
    embedder = OllamaEmbedding(mock_client, model="mxbai-embed-large")

    doc = await embedder.embed_document("I live in Lisbon")
    query = await embedder.embed_query("Where do I live?")

    assert doc == [0.1, 0.2, 0.3]
    assert query == [0.1, 0.2, 0.3]
    mock_client.embeddings.assert_any_await("mxbai-embed-large", "I live in Lisbon")
    mock_client.embeddings.assert_any_await("mxbai-embed-large", "Where do I live?")


@pytest.mark.asyncio
async def test_embed_empty_text(mock_client):
    embedder = OllamaEmbedding(mock_client)

    with pytest.raises(ValueError):
        await embedder.embed_document("   ")

    mock_client.embeddings.assert_not_called()
