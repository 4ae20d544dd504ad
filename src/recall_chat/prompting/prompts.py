"""
System prompts injected into chat turns.
"""

# Wraps the rendered past memories; {memories} is one "[Past role]: content" line per hit
MEMORY_SYSTEM_PROMPT = """You are a helpful assistant with long-term memory.

Relevant Past Memories:
{memories}

Answer the user's question using these memories if relevant."""


MEMORY_LINE = "[Past {role}]: {content}"


# Prepended for routes whose model drifts away from the expected reply language
LANGUAGE_DIRECTIVE_PROMPT = "You are an assistant. Always reply in {language}."
