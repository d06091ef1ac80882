"""Search strategies and the ordered chain behind the ``search`` tool."""

from .chain import SearchChain, build_search_chain
from .providers import (
    SearchStrategy,
    GoogleCustomSearch,
    DuckDuckGoInstantAnswer,
    WikipediaSearch,
    FallbackSearch,
)

__all__ = [
    "SearchChain",
    "build_search_chain",
    "SearchStrategy",
    "GoogleCustomSearch",
    "DuckDuckGoInstantAnswer",
    "WikipediaSearch",
    "FallbackSearch",
]
