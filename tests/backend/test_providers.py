"""Tests for casual-llm provider construction."""

from unittest.mock import Mock, patch

from casual_llm import Provider

from recall_chat.backend.providers import OllamaProviderFactory


def test_factory_creates_ollama_provider():
    with patch("recall_chat.backend.providers.create_provider") as create_provider:
        create_provider.return_value = Mock()
        factory = OllamaProviderFactory("http://ollama.test")

        provider = factory("qwen3:4b")

    assert provider is create_provider.return_value
    config = create_provider.call_args.args[0]
    assert config.name == "qwen3:4b"
    assert config.provider == Provider.OLLAMA
    assert config.base_url == "http://ollama.test"


def test_factory_reuses_provider_per_model():
    with patch("recall_chat.backend.providers.create_provider") as create_provider:
        create_provider.side_effect = lambda config: Mock(name=config.name)
        factory = OllamaProviderFactory()

        first = factory("qwen3:4b")
        again = factory("qwen3:4b")
        other = factory("gemma3:12b")

    assert first is again
    assert other is not first
    assert create_provider.call_count == 2
