"""
Memory-augmented chat turn orchestration.

One turn persists the user message, recalls related messages from other
conversations, assembles the prompt, calls the inference backend and
persists the reply. Embedding work for both messages runs detached and
never affects the turn's outcome.

Turn states:
    RECEIVED -> USER_MSG_PERSISTED -> CONTEXT_READY -> PROMPT_ASSEMBLED
    -> BACKEND_INVOKED -> COMPLETED | FAILED

Concurrent turns on the same conversation are not serialized; their history
reads and appends may interleave.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from casual_llm import LLMProvider

from recall_chat.errors import BackendError, NotFoundError, PersistenceError, ValidationError
from recall_chat.execution.background import BackgroundTaskRunner
from recall_chat.memory.long_term import LongTermMemory
from recall_chat.models import (
    ChatTurnRequest,
    ChatTurnResult,
    Conversation,
    MemoryHit,
    Message,
    TurnState,
)
from recall_chat.prompting.prompt_builder import build_prompt
from recall_chat.routing.resolver import ModelRouteResolver
from recall_chat.storage.protocols import MessageStore

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[str], LLMProvider]


@dataclass
class _Turn:
    conversation_id: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    state: TurnState = TurnState.RECEIVED

    def advance(self, state: TurnState) -> None:
        logger.debug(
            f"Turn {self.id} ({self.conversation_id}): {self.state.value} -> {state.value}"
        )
        self.state = state


class ChatTurnOrchestrator:
    """
    Coordinates the message store, long-term memory, model routing and the
    inference backend into a single chat turn.
    """

    def __init__(
        self,
        message_store: MessageStore,
        memory: LongTermMemory,
        resolver: ModelRouteResolver,
        provider_factory: ProviderFactory,
        background: BackgroundTaskRunner,
        history_limit: int = 20,
        temperature: float = 0.7,
        reply_language: str = "English",
    ):
        """
        Args:
            message_store: Durable conversation log
            memory: Long-term memory used for enrichment and recall
            resolver: Logical model name resolver
            provider_factory: Returns a casual-llm provider for a backend model id
            background: Runner for detached embedding work
            history_limit: Number of recent messages sent as context
            temperature: Sampling temperature for every backend call
            reply_language: Language enforced by routes with forced_language
        """
        self.message_store = message_store
        self.memory = memory
        self.resolver = resolver
        self.provider_factory = provider_factory
        self.background = background
        self.history_limit = history_limit
        self.temperature = temperature
        self.reply_language = reply_language

    # -- Conversations --------------------------------------------------------

    def create_conversation(
        self, owner_id: str, title: Optional[str] = None, conversation_id: Optional[str] = None
    ) -> Conversation:
        try:
            return self.message_store.create_conversation(
                owner_id, title=title, conversation_id=conversation_id
            )
        except Exception as e:
            logger.error(f"Failed to create conversation for {owner_id}: {e}")
            raise PersistenceError(str(e), "Failed to create conversation") from e

    def list_conversations(self, owner_id: str) -> List[Conversation]:
        return self.message_store.list_conversations(owner_id)

    def get_owned_conversation(self, owner_id: str, conversation_id: str) -> Conversation:
        """
        Return the conversation if it exists and belongs to `owner_id`.

        Raises:
            NotFoundError: Same error whether the conversation is missing or
                           owned by someone else
        """
        conversation = self.message_store.get_conversation(conversation_id)
        if conversation is None or conversation.owner_id != owner_id:
            raise NotFoundError(f"Conversation {conversation_id} not found for owner {owner_id}")
        return conversation

    def get_history(self, owner_id: str, conversation_id: str, limit: int = 50) -> List[Message]:
        """Ownership-checked message listing, oldest first."""
        self.get_owned_conversation(owner_id, conversation_id)
        return self.message_store.list_messages(conversation_id, limit)

    # -- Chat turn ------------------------------------------------------------

    async def run_turn(self, owner_id: str, request: ChatTurnRequest) -> ChatTurnResult:
        """
        Run one chat turn.

        Args:
            owner_id: Verified identity of the caller
            request: Conversation id, message text and optional logical model name

        Returns:
            ChatTurnResult with the reply and the model the turn was routed to

        Raises:
            ValidationError: conversation_id or message missing
            NotFoundError: Conversation missing or not owned by the caller
            BackendError: Inference backend failed; the user message stays stored
            PersistenceError: A message store write failed
        """
        conversation_id = request.conversation_id
        text = request.message
        if not conversation_id or not text:
            raise ValidationError("conversation_id and message are required")

        self.get_owned_conversation(owner_id, conversation_id)
        turn = _Turn(conversation_id=conversation_id)

        # 1. Persist the user message; it stays even if later steps fail
        user_message = self._append(turn, "user", text)
        turn.advance(TurnState.USER_MSG_PERSISTED)
        self._schedule_remember(user_message)

        # 2. Context: history window and route
        try:
            history = self.message_store.list_messages(conversation_id, self.history_limit)
        except Exception as e:
            turn.advance(TurnState.FAILED)
            logger.error(f"Turn {turn.id}: failed to load history: {e}")
            raise PersistenceError(f"Failed to load history: {e}") from e

        route = self.resolver.select(request.model)
        turn.advance(TurnState.CONTEXT_READY)

        # 3. Long-term memory and prompt
        memories = await self._recall(turn, text)
        messages = build_prompt(
            history,
            memories,
            forced_language=route.forced_language,
            reply_language=self.reply_language,
        )
        turn.advance(TurnState.PROMPT_ASSEMBLED)

        # 4. Backend call, no deadline beyond the backend's own
        logger.info(
            f"Turn {turn.id}: invoking {route.backend_model_id} "
            f"({len(messages)} messages, max_tokens={route.max_tokens})"
        )
        turn.advance(TurnState.BACKEND_INVOKED)
        try:
            provider = self.provider_factory(route.backend_model_id)
            response = await provider.chat(
                messages,
                response_format="text",
                temperature=self.temperature,
                max_tokens=route.max_tokens,
            )
            reply = response.content
            if reply is None:
                raise ValueError("backend response has no message content")
        except Exception as e:
            turn.advance(TurnState.FAILED)
            logger.error(f"Turn {turn.id}: backend {route.backend_model_id} failed: {e}")
            raise BackendError(f"{type(e).__name__}: {e}") from e

        # 5. Persist the reply
        assistant_message = self._append(turn, "assistant", reply)
        self._schedule_remember(assistant_message)

        try:
            self.message_store.touch_conversation(conversation_id)
        except Exception as e:
            turn.advance(TurnState.FAILED)
            logger.error(f"Turn {turn.id}: failed to update conversation timestamp: {e}")
            raise PersistenceError(f"Failed to update conversation: {e}") from e

        turn.advance(TurnState.COMPLETED)
        logger.info(
            f"Turn {turn.id} completed: conversation={conversation_id}, "
            f"model={route.logical_name}, memories={len(memories)}"
        )

        return ChatTurnResult(
            conversation_id=conversation_id,
            reply=reply,
            model=route.logical_name,
            backend_model=route.backend_model_id,
            messages_appended=2,
            memories_used=memories,
        )

    def _append(self, turn: _Turn, role: str, content: str) -> Message:
        try:
            return self.message_store.append_message(turn.conversation_id, role, content)
        except NotFoundError:
            turn.advance(TurnState.FAILED)
            raise
        except Exception as e:
            turn.advance(TurnState.FAILED)
            logger.error(f"Turn {turn.id}: failed to store {role} message: {e}")
            raise PersistenceError(f"Failed to store {role} message: {e}") from e

    def _schedule_remember(self, message: Message) -> None:
        """Embed a message in the background; the turn never waits for it."""
        if not self.memory.enabled:
            return
        self.background.submit(self.memory.remember(message), name=f"embed-message-{message.id}")

    async def _recall(self, turn: _Turn, text: str) -> List[MemoryHit]:
        """Retrieve memories for the turn; any failure means no memories."""
        query_vector = await self.memory.query_embedding(text)
        if query_vector is None:
            return []

        try:
            memories = self.memory.recall(query_vector, turn.conversation_id)
        except Exception as e:
            logger.error(f"Turn {turn.id}: memory retrieval failed: {e}")
            return []

        if memories:
            logger.info(f"Turn {turn.id}: injected {len(memories)} memories")
        return memories
