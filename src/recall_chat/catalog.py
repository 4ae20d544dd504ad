"""
Model catalog: configured routes, installed backend models and model pulls.
"""

import logging
from typing import Any, Dict, List, Optional

from recall_chat.backend.ollama_client import OllamaClient
from recall_chat.execution.background import BackgroundTaskRunner
from recall_chat.routing.resolver import ModelRouteResolver

logger = logging.getLogger(__name__)


class ModelCatalog:
    """
    Pulls run on their own unbounded runner so long downloads never hold
    the slots used by embedding work.
    """

    def __init__(
        self,
        resolver: ModelRouteResolver,
        client: OllamaClient,
        background: Optional[BackgroundTaskRunner] = None,
    ):
        self.resolver = resolver
        self.client = client
        self.background = background or BackgroundTaskRunner(max_concurrency=None)

    def available(self) -> List[Dict[str, Any]]:
        """Models from the static route table."""
        return [
            {
                "name": route.logical_name,
                "type": "ollama",
                "details": route.model_dump(exclude={"logical_name"}),
            }
            for route in self.resolver.routes()
        ]

    async def installed(self) -> Dict[str, Any]:
        """Models installed on the backend. Never raises; reports reachability instead."""
        try:
            models = await self.client.list_models()
        except Exception as e:
            logger.warning(f"Unable to list installed models: {e}")
            return {"models": [], "ollama_available": False, "error": str(e)}

        return {"models": models, "ollama_available": True}

    def download(self, name: str) -> str:
        """
        Start pulling a model in the background.

        Args:
            name: Logical model name or raw backend tag

        Returns:
            The backend tag being pulled
        """
        if not name or not name.strip():
            raise ValueError("Model name required")

        tag = self.resolver.resolve(name).backend_model_id
        self.background.submit(self._pull(tag), name=f"pull-{tag}")
        return tag

    async def cancel_downloads(self) -> None:
        """Abandon in-flight pulls (used at shutdown)."""
        if self.background.pending:
            logger.info(f"Cancelling {self.background.pending} model pull(s)")
        await self.background.cancel_all()

    async def _pull(self, tag: str) -> None:
        await self.client.pull(tag)
        logger.info(f"Pull complete for {tag}")
