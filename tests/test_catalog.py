"""Tests for the model catalog."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from recall_chat.catalog import ModelCatalog
from recall_chat.execution import BackgroundTaskRunner
from recall_chat.routing import ModelRouteResolver, build_route_table


@pytest.fixture
def resolver():
    return ModelRouteResolver(
        build_route_table(
            {
                "qwen3-4b": {"backend_model_id": "qwen3:4b"},
                "deepseek-r1-8b": {
                    "backend_model_id": "deepseek-r1:8b",
                    "max_tokens": 512,
                    "forced_language": True,
                },
            }
        )
    )


@pytest.fixture
def mock_client():
    client = Mock()
    client.list_models = AsyncMock(return_value=[{"name": "qwen3:4b"}])
    client.pull = AsyncMock(return_value={"status": "success"})
    return client


@pytest.fixture
def catalog(resolver, mock_client):
    return ModelCatalog(resolver, mock_client)


def test_available_lists_routes(catalog):
    models = catalog.available()

    assert [m["name"] for m in models] == ["qwen3-4b", "deepseek-r1-8b"]
    assert models[1] == {
        "name": "deepseek-r1-8b",
        "type": "ollama",
        "details": {
            "backend_model_id": "deepseek-r1:8b",
            "max_tokens": 512,
            "forced_language": True,
        },
    }


@pytest.mark.asyncio
async def test_installed_reports_models(catalog):
    result = await catalog.installed()

    assert result == {"models": [{"name": "qwen3:4b"}], "ollama_available": True}


@pytest.mark.asyncio
async def test_installed_backend_unreachable(catalog, mock_client):
    mock_client.list_models.side_effect = ConnectionError("connection refused")

    result = await catalog.installed()

    assert result["models"] == []
    assert result["ollama_available"] is False
    assert "connection refused" in result["error"]


@pytest.mark.asyncio
async def test_download_resolves_logical_name(catalog, mock_client):
    tag = catalog.download("deepseek-r1-8b")
    await catalog.background.drain()

    assert tag == "deepseek-r1:8b"
    mock_client.pull.assert_awaited_once_with("deepseek-r1:8b")


@pytest.mark.asyncio
async def test_download_raw_tag(catalog, mock_client):
    tag = catalog.download("phi3:mini")
    await catalog.background.drain()

    assert tag == "phi3:mini"
    mock_client.pull.assert_awaited_once_with("phi3:mini")


@pytest.mark.asyncio
async def test_download_failure_is_detached(catalog, mock_client):
    mock_client.pull.side_effect = RuntimeError("pull failed")

    catalog.download("qwen3-4b")
    await catalog.background.drain()

    assert catalog.background.failure_count == 1


@pytest.mark.parametrize("name", ["", "   "])
def test_download_requires_name(catalog, name):
    with pytest.raises(ValueError):
        catalog.download(name)


@pytest.mark.asyncio
async def test_pending_pull_does_not_block_embedding_work(resolver, mock_client):
    """A pull that never finishes leaves the embedding runner free and is cancellable."""
    pull_started = asyncio.Event()

    async def never_finishes(tag):
        pull_started.set()
        await asyncio.Event().wait()

    mock_client.pull.side_effect = never_finishes
    embedding_runner = BackgroundTaskRunner(max_concurrency=1)
    catalog = ModelCatalog(resolver, mock_client)

    catalog.download("qwen3-4b")
    await pull_started.wait()

    embedded = asyncio.Event()

    async def embed():
        embedded.set()

    embedding_runner.submit(embed(), name="embed")
    await asyncio.wait_for(embedded.wait(), timeout=1)
    await asyncio.wait_for(embedding_runner.drain(), timeout=1)

    await asyncio.wait_for(catalog.cancel_downloads(), timeout=1)
    assert catalog.background.pending == 0
