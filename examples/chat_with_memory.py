"""
Example: Chat turns with long-term memory across conversations

Demonstrates:
1. Wiring the SQLite stores, Ollama embeddings and the orchestrator
2. Telling a fact in one conversation
3. Recalling it from a different conversation
4. Model routing with a logical model name

Requires a local Ollama server with a chat model and nomic-embed-text:
    ollama pull llama3.2:latest
    ollama pull nomic-embed-text
"""

import asyncio

from recall_chat.backend import OllamaClient, OllamaProviderFactory
from recall_chat.embeddings import OllamaEmbedding
from recall_chat.execution import BackgroundTaskRunner
from recall_chat.memory import LongTermMemory
from recall_chat.models import ChatTurnRequest
from recall_chat.orchestrator import ChatTurnOrchestrator
from recall_chat.routing import ModelRouteResolver, load_route_table
from recall_chat.storage import SQLAlchemyEmbeddingStore, SQLAlchemyMessageStore
from recall_chat.storage.database import create_db_engine, create_tables

OLLAMA_URL = "http://127.0.0.1:11434"


async def main():
    engine = create_db_engine("sqlite:///example_chat.db")
    create_tables(engine)

    client = OllamaClient(OLLAMA_URL)
    memory = LongTermMemory(OllamaEmbedding(client), SQLAlchemyEmbeddingStore(engine))
    background = BackgroundTaskRunner()

    orchestrator = ChatTurnOrchestrator(
        message_store=SQLAlchemyMessageStore(engine),
        memory=memory,
        resolver=ModelRouteResolver(load_route_table()),
        provider_factory=OllamaProviderFactory(OLLAMA_URL),
        background=background,
    )

    if not await memory.initialize():
        print("⚠️  nomic-embed-text not installed - chatting without long-term memory")

    print("\n=== Conversation 1 ===")
    first = orchestrator.create_conversation("demo-user", title="About me")
    result = await orchestrator.run_turn(
        "demo-user",
        ChatTurnRequest(
            conversation_id=first.id,
            message="My sister Ana lives in Porto and works as a nurse.",
        ),
    )
    print(f"[{result.model}] {result.reply}")

    # Embeddings are written in the background
    await background.drain()

    print("\n=== Conversation 2 ===")
    second = orchestrator.create_conversation("demo-user", title="Travel plans")
    result = await orchestrator.run_turn(
        "demo-user",
        ChatTurnRequest(
            conversation_id=second.id,
            message="I'm visiting Portugal next month. Who could I stay with?",
            model="llama3.2-latest",
        ),
    )
    print(f"[{result.model}] {result.reply}")

    print(f"\nMemories used: {len(result.memories_used)}")
    for hit in result.memories_used:
        print(f"  - ({hit.similarity:.2f}) [{hit.role}] {hit.content}")

    await background.drain()
    await client.aclose()


if __name__ == "__main__":
    asyncio.run(main())
