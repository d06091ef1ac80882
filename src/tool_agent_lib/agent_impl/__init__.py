"""Concrete collaborators: model clients, search strategies and transform tiers."""

from .offline import OfflineModelClient
from .openai_api import OpenAIModelClient, OpenAIMessageAdapter
from .search import SearchChain, build_search_chain
from .transform import TransformChain, build_transform_chain

__all__ = [
    "OfflineModelClient",
    "OpenAIModelClient",
    "OpenAIMessageAdapter",
    "SearchChain",
    "build_search_chain",
    "TransformChain",
    "build_transform_chain",
]
