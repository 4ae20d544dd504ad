from recall_chat.storage.messages.memory import InMemoryMessageStore
from recall_chat.storage.messages.sqlalchemy import SQLAlchemyMessageStore

__all__ = ["InMemoryMessageStore", "SQLAlchemyMessageStore"]
