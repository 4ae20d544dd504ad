"""Loads the static model route table from JSON or the built-in defaults."""

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from recall_chat.models import RouteConfig

logger = logging.getLogger(__name__)

DEFAULT_ROUTES: Dict[str, dict] = {
    "tinyllama-1.1b": {"backend_model_id": "tinyllama:1.1b", "max_tokens": 512},
    "qwen3-4b": {"backend_model_id": "qwen3:4b", "max_tokens": 2048},
    "deepseek-r1-8b": {
        "backend_model_id": "deepseek-r1:8b",
        "max_tokens": 512,
        "forced_language": True,
    },
    "gemma3-12b": {"backend_model_id": "gemma3:12b", "max_tokens": 2048},
    "llama3.2-latest": {"backend_model_id": "llama3.2:latest", "max_tokens": 2048},
    "llama3.2-1b": {"backend_model_id": "llama3.2:1b", "max_tokens": 512},
}


class RouteEntry(BaseModel):
    """Single route entry as written in a models file."""

    backend_model_id: str = Field(..., description="Model id passed to the inference backend")
    max_tokens: int = Field(2048, gt=0, description="Token budget (num_predict)")
    forced_language: bool = Field(False, description="Force the reply language")


class RoutesFile(BaseModel):
    """Container for all route entries."""

    models: Dict[str, RouteEntry]


RouteTable = Mapping[str, RouteConfig]


def build_route_table(entries: Mapping[str, dict]) -> RouteTable:
    """Validate raw entries and freeze them into a read-only mapping."""
    try:
        parsed = RoutesFile(models=dict(entries))
    except ValidationError as e:
        raise ValueError(f"Invalid model routes: {e}")

    table = {
        name: RouteConfig(logical_name=name, **entry.model_dump())
        for name, entry in parsed.models.items()
    }
    return MappingProxyType(table)


def load_route_table(path: Optional[str | Path] = None) -> RouteTable:
    """
    Load the model route table.

    Args:
        path: JSON file of the form {"models": {"<name>": {...}}}. When None,
              the built-in default routes are used.

    Returns:
        Read-only mapping of logical name to RouteConfig

    Raises:
        FileNotFoundError: If path is given but doesn't exist
        ValueError: If the file is not valid JSON or has an invalid structure
    """
    if path is None:
        table = build_route_table(DEFAULT_ROUTES)
        logger.info(f"Loaded {len(table)} built-in model routes")
        return table

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Model routes file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {config_path}: {e}")

    if not isinstance(data, dict) or not isinstance(data.get("models"), dict):
        raise ValueError(f"{config_path} must contain a 'models' object")

    table = build_route_table(data["models"])
    logger.info(f"Loaded {len(table)} model routes from {config_path}")
    return table
