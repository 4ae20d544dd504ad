"""
Assembly of the message sequence sent to the inference backend.

Final order is fixed: language directive (if the route forces one), memory
directive (if any memories were recalled), then the conversation history.
"""

import logging
from typing import List, Optional, Sequence

from casual_llm import AssistantMessage, ChatMessage, SystemMessage, UserMessage

from recall_chat.models import MemoryHit, Message
from recall_chat.prompting.prompts import (
    LANGUAGE_DIRECTIVE_PROMPT,
    MEMORY_LINE,
    MEMORY_SYSTEM_PROMPT,
)

logger = logging.getLogger(__name__)

_MESSAGE_TYPES = {
    "system": SystemMessage,
    "user": UserMessage,
    "assistant": AssistantMessage,
}


def to_chat_messages(history: Sequence[Message]) -> List[ChatMessage]:
    """Convert stored messages to casual-llm chat messages, keeping order."""
    return [_MESSAGE_TYPES[message.role](content=message.content) for message in history]


def render_memories(memories: Sequence[MemoryHit]) -> str:
    """Render recalled memories as one line each."""
    return "\n".join(MEMORY_LINE.format(role=m.role, content=m.content) for m in memories)


def build_memory_prompt(memories: Sequence[MemoryHit]) -> Optional[str]:
    """The memory system prompt, or None when nothing was recalled."""
    if not memories:
        return None
    return MEMORY_SYSTEM_PROMPT.format(memories=render_memories(memories))


def apply_system_prompt(
    messages: List[ChatMessage], system_prompt: Optional[str]
) -> List[ChatMessage]:
    """
    Install `system_prompt` as the single leading system message.

    A system message already at position 0 is replaced, not kept alongside.
    """
    if not system_prompt:
        return list(messages)

    if messages and messages[0].role == "system":
        return [SystemMessage(content=system_prompt), *messages[1:]]

    return [SystemMessage(content=system_prompt), *messages]


def build_prompt(
    history: Sequence[Message],
    memories: Sequence[MemoryHit] = (),
    forced_language: bool = False,
    reply_language: str = "English",
) -> List[ChatMessage]:
    """
    Build the full message sequence for one turn.

    Args:
        history: Recent conversation messages, oldest first
        memories: Recalled memories from other conversations
        forced_language: Whether the route forces the reply language
        reply_language: Language named by the directive

    Returns:
        Messages ordered as language directive, memory directive, history
    """
    messages = apply_system_prompt(to_chat_messages(history), build_memory_prompt(memories))

    if forced_language:
        directive = LANGUAGE_DIRECTIVE_PROMPT.format(language=reply_language)
        messages.insert(0, SystemMessage(content=directive))

    logger.debug(
        f"Prompt assembled: {len(messages)} messages "
        f"(memories={len(memories)}, forced_language={forced_language})"
    )
    return messages
