import logging
from typing import List, Optional

from recall_chat.models import RouteConfig
from recall_chat.routing.loader import RouteTable

logger = logging.getLogger(__name__)


class ModelRouteResolver:
    """
    Maps logical model names to backend invocation parameters.

    Resolution never fails: an unknown name is used verbatim as the backend
    model id with the default token budget.
    """

    def __init__(
        self,
        routes: RouteTable,
        default_model: Optional[str] = None,
        fallback_model: str = "llama3.2-latest",
        default_max_tokens: int = 2048,
    ):
        """
        Args:
            routes: Read-only route table built at startup
            default_model: Model used when a turn doesn't request one
            fallback_model: Model used when neither a request nor a default names one
            default_max_tokens: Token budget for synthesized routes
        """
        self._routes = routes
        self.default_model = default_model
        self.fallback_model = fallback_model
        self.default_max_tokens = default_max_tokens

    def resolve(self, logical_name: str) -> RouteConfig:
        """Return the configured route or synthesize one from the name itself."""
        route = self._routes.get(logical_name)
        if route is not None:
            return route

        logger.debug(f"No route for {logical_name!r}, using it as backend model id")
        return RouteConfig(
            logical_name=logical_name,
            backend_model_id=logical_name,
            max_tokens=self.default_max_tokens,
            forced_language=False,
        )

    def select(self, requested: Optional[str] = None) -> RouteConfig:
        """Resolve the requested model, else the configured default, else the fallback."""
        return self.resolve(requested or self.default_model or self.fallback_model)

    def routes(self) -> List[RouteConfig]:
        """All configured routes, in table order."""
        return list(self._routes.values())
