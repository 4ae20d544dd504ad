"""
Error taxonomy for chat turns.

Every error carries a generic, user-facing message and an internal detail
string. ValidationError and NotFoundError are raised before any side effect;
BackendError and PersistenceError surface failures after the turn started.
"""

from typing import Optional


class ChatError(Exception):
    """Base class for errors surfaced to callers of the orchestrator."""

    user_message = "Failed to process chat message"

    def __init__(self, detail: Optional[str] = None, user_message: Optional[str] = None):
        self.detail = detail or ""
        if user_message is not None:
            self.user_message = user_message
        super().__init__(self.detail or self.user_message)


class ValidationError(ChatError):
    """A required input is missing."""

    user_message = "conversation_id and message required"


class NotFoundError(ChatError):
    """Conversation does not exist or is not owned by the caller."""

    user_message = "Conversation not found"


class BackendError(ChatError):
    """The inference backend failed or returned a non-success response."""


class PersistenceError(ChatError):
    """A durable store write failed."""
