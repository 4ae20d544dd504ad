"""Tests for prompt assembly."""

from casual_llm import AssistantMessage, SystemMessage, UserMessage

from recall_chat.models import MemoryHit, Message
from recall_chat.prompting import (
    apply_system_prompt,
    build_memory_prompt,
    build_prompt,
    render_memories,
    to_chat_messages,
)


def make_history(*pairs):
    return [
        Message(id=i, conversation_id="conv-1", role=role, content=content)
        for i, (role, content) in enumerate(pairs, start=1)
    ]


def make_hit(role, content, similarity=0.8):
    return MemoryHit(
        message_id=99,
        conversation_id="conv-2",
        role=role,
        content=content,
        similarity=similarity,
    )


def test_to_chat_messages_preserves_roles_and_order():
    history = make_history(("system", "Be brief"), ("user", "Hi"), ("assistant", "Hello"))

    messages = to_chat_messages(history)

    assert isinstance(messages[0], SystemMessage)
    assert isinstance(messages[1], UserMessage)
    assert isinstance(messages[2], AssistantMessage)
    assert [m.content for m in messages] == ["Be brief", "Hi", "Hello"]


def test_render_memories():
    text = render_memories([make_hit("user", "I have a cat"), make_hit("assistant", "Noted")])

    assert text == "[Past user]: I have a cat\n[Past assistant]: Noted"


def test_build_memory_prompt_none_without_memories():
    assert build_memory_prompt([]) is None


def test_build_memory_prompt_contains_memories():
    prompt = build_memory_prompt([make_hit("user", "My sister is Ana")])

    assert "long-term memory" in prompt
    assert "[Past user]: My sister is Ana" in prompt


def test_apply_system_prompt_prepends():
    messages = [UserMessage(content="Hi")]

    result = apply_system_prompt(messages, "Memories")

    assert [m.role for m in result] == ["system", "user"]
    assert result[0].content == "Memories"


def test_apply_system_prompt_replaces_leading_system():
    """The memory directive replaces a system message at position 0."""
    messages = [SystemMessage(content="Old"), UserMessage(content="Hi")]

    result = apply_system_prompt(messages, "Memories")

    assert len(result) == 2
    assert result[0].content == "Memories"


def test_apply_system_prompt_noop_without_prompt():
    messages = [SystemMessage(content="Old"), UserMessage(content="Hi")]

    result = apply_system_prompt(messages, None)

    assert [m.content for m in result] == ["Old", "Hi"]


def test_build_prompt_history_only():
    history = make_history(("user", "Hi"))

    messages = build_prompt(history)

    assert [m.role for m in messages] == ["user"]


def test_build_prompt_order_language_memories_history():
    """Language directive, memory directive, then history, in that order."""
    history = make_history(("system", "Old system"), ("user", "Hi"), ("assistant", "Hey"))

    messages = build_prompt(
        history,
        [make_hit("user", "I speak Portuguese")],
        forced_language=True,
        reply_language="English",
    )

    assert [m.role for m in messages] == ["system", "system", "user", "assistant"]
    assert messages[0].content == "You are an assistant. Always reply in English."
    assert "[Past user]: I speak Portuguese" in messages[1].content
    assert messages[2].content == "Hi"
    assert all(m.content != "Old system" for m in messages)


def test_build_prompt_language_without_memories_keeps_history_system():
    history = make_history(("system", "Be brief"), ("user", "Hi"))

    messages = build_prompt(history, [], forced_language=True, reply_language="French")

    assert [m.content for m in messages] == [
        "You are an assistant. Always reply in French.",
        "Be brief",
        "Hi",
    ]
