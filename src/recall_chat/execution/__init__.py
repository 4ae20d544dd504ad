"""
Background execution for work that must not block a chat turn.
"""

from recall_chat.execution.background import BackgroundTaskRunner

__all__ = ["BackgroundTaskRunner"]
