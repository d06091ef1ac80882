"""Re-export the model collaborator interface shared by all implementations."""

from .base import ModelClient, ModelResponse

__all__ = [
    "ModelClient",
    "ModelResponse",
]
