"""FastAPI application exposing conversations, chat turns and the model catalog."""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from recall_chat import __version__
from recall_chat.backend.ollama_client import OllamaClient
from recall_chat.backend.providers import OllamaProviderFactory
from recall_chat.catalog import ModelCatalog
from recall_chat.config import Settings
from recall_chat.embeddings.ollama_embedding import OllamaEmbedding
from recall_chat.errors import (
    BackendError,
    ChatError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from recall_chat.execution.background import BackgroundTaskRunner
from recall_chat.memory.long_term import LongTermMemory
from recall_chat.models import ChatTurnRequest
from recall_chat.orchestrator import ChatTurnOrchestrator
from recall_chat.routing.loader import load_route_table
from recall_chat.routing.resolver import ModelRouteResolver
from recall_chat.storage.database import create_db_engine, create_tables
from recall_chat.storage.embeddings.sqlalchemy import SQLAlchemyEmbeddingStore
from recall_chat.storage.messages.sqlalchemy import SQLAlchemyMessageStore

logger = logging.getLogger(__name__)

_STATUS_CODES = {
    ValidationError: 400,
    NotFoundError: 404,
    BackendError: 500,
    PersistenceError: 500,
}


class ConversationCreate(BaseModel):
    title: Optional[str] = Field(None, description="Optional conversation title")


class ChatRequest(BaseModel):
    # Presence is validated by the orchestrator so missing fields map to 400
    conversation_id: Optional[str] = Field(None, description="Target conversation id")
    message: Optional[str] = Field(None, description="User message text")
    model: Optional[str] = Field(None, description="Logical model name or raw backend model id")


class DownloadRequest(BaseModel):
    name: Optional[str] = Field(None, description="Logical model name or backend tag")


@dataclass
class AppComponents:
    """Everything the HTTP layer needs, built once per process."""

    orchestrator: ChatTurnOrchestrator
    catalog: ModelCatalog
    memory: LongTermMemory
    background: BackgroundTaskRunner
    ollama_client: Optional[OllamaClient] = None


def build_components(settings: Settings) -> AppComponents:
    """Wire the SQLAlchemy stores, Ollama clients and orchestrator from settings."""
    engine = create_db_engine(settings.database_url)
    create_tables(engine)

    message_store = SQLAlchemyMessageStore(engine)
    embedding_store = SQLAlchemyEmbeddingStore(engine)

    ollama_client = OllamaClient(settings.ollama_url)
    memory = LongTermMemory(
        OllamaEmbedding(ollama_client, model=settings.embedding_model),
        embedding_store,
        top_k=settings.memory_top_k,
        min_similarity=settings.memory_min_similarity,
    )

    resolver = ModelRouteResolver(
        load_route_table(settings.models_config_path),
        default_model=settings.default_model,
        fallback_model=settings.fallback_model,
        default_max_tokens=settings.default_max_tokens,
    )
    background = BackgroundTaskRunner(max_concurrency=settings.background_concurrency)

    orchestrator = ChatTurnOrchestrator(
        message_store=message_store,
        memory=memory,
        resolver=resolver,
        provider_factory=OllamaProviderFactory(settings.ollama_url),
        background=background,
        history_limit=settings.history_limit,
        temperature=settings.temperature,
        reply_language=settings.reply_language,
    )

    return AppComponents(
        orchestrator=orchestrator,
        catalog=ModelCatalog(resolver, ollama_client),
        memory=memory,
        background=background,
        ollama_client=ollama_client,
    )


def create_app(
    settings: Optional[Settings] = None, components: Optional[AppComponents] = None
) -> FastAPI:
    settings = settings or Settings()
    components = components or build_components(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await components.memory.initialize()
        yield
        # Pulls can run for minutes; only embedding work is waited for
        await components.catalog.cancel_downloads()
        await components.background.drain()
        if components.ollama_client is not None:
            await components.ollama_client.aclose()

    app = FastAPI(title="recall-chat", version=__version__, lifespan=lifespan)
    app.state.components = components

    def get_owner_id(request: Request) -> str:
        # Identity is verified upstream; the header is trusted as-is
        owner_id = request.headers.get(settings.identity_header)
        if not owner_id:
            raise HTTPException(status_code=401, detail="Unauthorized: missing identity")
        return owner_id

    @app.exception_handler(ChatError)
    async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
        status_code = _STATUS_CODES.get(type(exc), 500)
        content = {"error": exc.user_message}
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
            content["details"] = exc.detail
        return JSONResponse(status_code=status_code, content=content)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.post("/api/conversations")
    async def create_conversation(
        body: ConversationCreate, owner_id: str = Depends(get_owner_id)
    ):
        conversation = components.orchestrator.create_conversation(owner_id, title=body.title)
        return conversation.model_dump(mode="json")

    @app.get("/api/conversations")
    async def list_conversations(owner_id: str = Depends(get_owner_id)):
        conversations = components.orchestrator.list_conversations(owner_id)
        return [c.model_dump(mode="json") for c in conversations]

    @app.get("/api/conversations/{conversation_id}/messages")
    async def list_messages(
        conversation_id: str,
        limit: int = Query(50, gt=0),
        owner_id: str = Depends(get_owner_id),
    ):
        messages = components.orchestrator.get_history(owner_id, conversation_id, limit)
        return {
            "conversation_id": conversation_id,
            "messages": [m.model_dump(mode="json") for m in messages],
        }

    @app.post("/api/chat")
    async def chat(body: ChatRequest, owner_id: str = Depends(get_owner_id)):
        result = await components.orchestrator.run_turn(
            owner_id,
            ChatTurnRequest(
                conversation_id=body.conversation_id, message=body.message, model=body.model
            ),
        )
        return {
            "conversation_id": result.conversation_id,
            "reply": result.reply,
            "model": result.model,
            "messages_appended": result.messages_appended,
        }

    @app.get("/api/models/available")
    async def available_models(owner_id: str = Depends(get_owner_id)):
        return components.catalog.available()

    @app.get("/api/models/installed")
    async def installed_models(owner_id: str = Depends(get_owner_id)):
        return await components.catalog.installed()

    @app.post("/api/models/download")
    async def download_model(body: DownloadRequest, owner_id: str = Depends(get_owner_id)):
        try:
            tag = components.catalog.download(body.name or "")
        except ValueError as exc:
            return JSONResponse(status_code=400, content={"error": str(exc)})

        return {
            "status": "download_started",
            "message": f"Ollama download started for {tag}. Check /api/models/installed later.",
        }

    return app
