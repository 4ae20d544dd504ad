import uuid
from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]

ROLES = ("system", "user", "assistant")


class Conversation(BaseModel):
    """A conversation owned by exactly one user."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()), description="Unique conversation identifier"
    )
    owner_id: str = Field(..., description="Opaque id of the owning user")
    title: Optional[str] = Field(default=None, description="Optional human-readable title")
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Message(BaseModel):
    """An immutable message in a conversation."""

    id: int = Field(..., description="Store-assigned, monotonically increasing id")
    conversation_id: str
    role: Role
    content: str
    created_at: datetime = Field(default_factory=datetime.now)


class MemoryHit(BaseModel):
    """A similarity search result joined with its message."""

    message_id: int
    conversation_id: str
    role: Role
    content: str
    similarity: float


class RouteConfig(BaseModel):
    """Backend invocation parameters for a logical model name."""

    model_config = ConfigDict(frozen=True)

    logical_name: str
    backend_model_id: str
    max_tokens: int = Field(default=2048, gt=0)
    forced_language: bool = False


class TurnState(str, Enum):
    RECEIVED = "received"
    USER_MSG_PERSISTED = "user_msg_persisted"
    CONTEXT_READY = "context_ready"
    PROMPT_ASSEMBLED = "prompt_assembled"
    BACKEND_INVOKED = "backend_invoked"
    COMPLETED = "completed"
    FAILED = "failed"


class ChatTurnRequest(BaseModel):
    """Input of one chat turn. Presence of fields is checked by the orchestrator."""

    conversation_id: Optional[str] = None
    message: Optional[str] = None
    model: Optional[str] = None


class ChatTurnResult(BaseModel):
    """Outcome of a completed chat turn."""

    conversation_id: str
    reply: str
    model: str = Field(..., description="Logical model name the turn was routed with")
    backend_model: str = Field(..., description="Backend model id actually invoked")
    messages_appended: int = 2
    memories_used: List[MemoryHit] = Field(default_factory=list)
