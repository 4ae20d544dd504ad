from recall_chat.memory.long_term import LongTermMemory

__all__ = ["LongTermMemory"]
