"""Tests for the Ollama HTTP client."""

import json

import httpx
import pytest

from recall_chat.backend.ollama_client import OllamaClient, OllamaError


def make_client(handler) -> OllamaClient:
    return OllamaClient("http://ollama.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_models():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/api/tags"
        return httpx.Response(200, json={"models": [{"name": "llama3.2:latest"}]})

    client = make_client(handler)

    models = await client.list_models()

    assert models == [{"name": "llama3.2:latest"}]
    await client.aclose()


@pytest.mark.asyncio
async def test_list_models_non_success():
    client = make_client(lambda request: httpx.Response(503, text="unavailable"))

    with pytest.raises(OllamaError, match="503"):
        await client.list_models()


@pytest.mark.asyncio
async def test_embeddings_request_shape():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"embedding": [0.1, 0.2, 0.3]})

    client = make_client(handler)

    vector = await client.embeddings("nomic-embed-text", "I like pizza")

    assert vector == [0.1, 0.2, 0.3]
    assert seen["path"] == "/api/embeddings"
    assert seen["body"] == {"model": "nomic-embed-text", "prompt": "I like pizza"}


@pytest.mark.asyncio
async def test_embeddings_missing_vector():
    client = make_client(lambda request: httpx.Response(200, json={}))

    with pytest.raises(OllamaError):
        await client.embeddings("nomic-embed-text", "hello")


@pytest.mark.asyncio
async def test_pull_request_shape():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"status": "success"})

    client = make_client(handler)

    result = await client.pull("qwen3:4b")

    assert result == {"status": "success"}
    assert seen["path"] == "/api/pull"
    assert seen["body"] == {"name": "qwen3:4b", "stream": False}
