"""Command-line entry point running the HTTP API with uvicorn."""

import argparse
import logging
from typing import Optional

import uvicorn

from recall_chat.api.app import create_app
from recall_chat.config import Settings

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the recall-chat API server.")
    parser.add_argument("--host", help="Host interface to bind (default: RECALL_HOST).")
    parser.add_argument("--port", type=int, help="Port to bind (default: RECALL_PORT).")
    parser.add_argument("--database-url", help="SQLAlchemy database URL.")
    parser.add_argument("--ollama-url", help="Ollama server URL.")
    parser.add_argument("--models-config", help="JSON file with model routes.")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...).")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)

    overrides = {
        "host": args.host,
        "port": args.port,
        "database_url": args.database_url,
        "ollama_url": args.ollama_url,
        "models_config_path": args.models_config,
        "log_level": args.log_level,
    }
    settings = Settings(**{k: v for k, v in overrides.items() if v is not None})

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(settings)
    logger.info(f"Starting recall-chat on {settings.host}:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
