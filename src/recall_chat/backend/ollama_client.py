"""
Minimal async HTTP client for the Ollama endpoints not covered by casual-llm.

Covers the model listing probe (``/api/tags``), embeddings
(``/api/embeddings``) and model pulls (``/api/pull``). Each call is attempted
once; there is no retry loop.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class OllamaError(Exception):
    """Ollama returned a non-success status or an unexpected payload."""


class OllamaClient:
    """Thin wrapper around the Ollama REST API."""

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:11434",
        timeout: Optional[float] = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Ollama server URL
            timeout: Per-request timeout in seconds (None = no timeout)
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _check(response: httpx.Response, action: str) -> Dict[str, Any]:
        if response.status_code != 200:
            raise OllamaError(
                f"Ollama {action} failed ({response.status_code}): {response.text[:200]}"
            )
        return response.json()

    async def list_models(self) -> List[Dict[str, Any]]:
        """Return the installed models as reported by ``/api/tags``."""
        response = await self._client.get("/api/tags")
        data = self._check(response, "tags")
        return data.get("models") or []

    async def embeddings(self, model: str, prompt: str) -> List[float]:
        """Compute an embedding for a single prompt."""
        response = await self._client.post(
            "/api/embeddings", json={"model": model, "prompt": prompt}
        )
        data = self._check(response, "embeddings")

        embedding = data.get("embedding")
        if not embedding:
            raise OllamaError("Ollama embeddings response has no embedding")
        return embedding

    async def pull(self, name: str) -> Dict[str, Any]:
        """Pull a model; blocks until Ollama reports completion."""
        logger.info(f"Pulling model {name}")
        # Pulls can take minutes, so the request is not bound by the client timeout
        response = await self._client.post(
            "/api/pull", json={"name": name, "stream": False}, timeout=None
        )
        return self._check(response, "pull")
