"""Ordered search strategies behind the ``search`` tool."""

from typing import Sequence

import httpx

from tool_agent_lib.agent_core.logger import get_logger
from tool_agent_lib.agent_core.tools.models import SearchResult
from .providers import (
    DuckDuckGoInstantAnswer,
    FallbackSearch,
    GoogleCustomSearch,
    SearchStrategy,
    WikipediaSearch,
)

logger = get_logger(__name__)


class SearchChain:
    """
    Tries each strategy in order and returns the first non-empty result.

    Unavailable strategies (missing credentials) are skipped. A strategy that
    raises or finds nothing hands over to the next one. When none yields hits
    the result is empty and tagged with the last strategy's provider.
    """

    def __init__(self, strategies: Sequence[SearchStrategy]) -> None:
        if not strategies:
            raise ValueError("SearchChain needs at least one strategy.")
        self.strategies = list(strategies)

    async def search(self, query: str, limit: int) -> SearchResult:
        for strategy in self.strategies:
            if not strategy.available:
                logger.debug("Search strategy '%s' is not configured; skipping.", strategy.provider)
                continue
            try:
                hits = await strategy.search(query, limit)
            except Exception as e:
                logger.warning(f"Search strategy '{strategy.provider}' failed: {e}")
                continue
            if hits:
                return SearchResult(provider=strategy.provider, query=query, results=list(hits[:limit]))
            logger.info(f"Search strategy '{strategy.provider}' found nothing for {query!r}.")

        return SearchResult(provider=self.strategies[-1].provider, query=query, results=[])


def build_search_chain(http_client: httpx.AsyncClient, api_key: str = "", engine_id: str = "") -> SearchChain:
    """Google Custom Search first, then DuckDuckGo merged with Wikipedia."""
    return SearchChain(
        strategies=[
            GoogleCustomSearch(http_client, api_key=api_key, engine_id=engine_id),
            FallbackSearch(sources=[DuckDuckGoInstantAnswer(http_client), WikipediaSearch(http_client)]),
        ]
    )
