from recall_chat.prompting.prompt_builder import (
    apply_system_prompt,
    build_memory_prompt,
    build_prompt,
    render_memories,
    to_chat_messages,
)

__all__ = [
    "apply_system_prompt",
    "build_memory_prompt",
    "build_prompt",
    "render_memories",
    "to_chat_messages",
]
