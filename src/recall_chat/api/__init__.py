"""HTTP surface for recall-chat."""

from recall_chat.api.app import AppComponents, build_components, create_app

__all__ = ["AppComponents", "build_components", "create_app"]
