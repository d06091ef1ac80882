"""Conversation turns and the append-only conversation state."""

from .models import Role, Turn, latest_user_turn
from .conversation import ConversationState

__all__ = ["Role", "Turn", "ConversationState", "latest_user_turn"]
