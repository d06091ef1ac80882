"""Expose the OpenAI-compatible model collaborator."""

from .core import OpenAIModelClient
from .adapter import OpenAIMessageAdapter

__all__ = ["OpenAIModelClient", "OpenAIMessageAdapter"]
