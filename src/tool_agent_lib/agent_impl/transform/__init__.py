"""Tiers behind the ``transform`` tool."""

from .prompts import build_transform_prompt
from .tiers import (
    TransformTier,
    WorkflowEndpointTier,
    GenerationTier,
    TruncationTier,
    TransformChain,
    build_transform_chain,
)

__all__ = [
    "build_transform_prompt",
    "TransformTier",
    "WorkflowEndpointTier",
    "GenerationTier",
    "TruncationTier",
    "TransformChain",
    "build_transform_chain",
]
