"""Clients for the local inference backend (Ollama)."""

from recall_chat.backend.ollama_client import OllamaClient, OllamaError
from recall_chat.backend.providers import OllamaProviderFactory

__all__ = ["OllamaClient", "OllamaError", "OllamaProviderFactory"]
