"""
Search Providers
================

HTTP clients for the search backends used by the ``search`` tool.

- ``GoogleCustomSearch``: keyed Custom Search JSON API, used when an API key
  and an engine id are configured.
- ``DuckDuckGoInstantAnswer`` and ``WikipediaSearch``: unkeyed APIs merged by
  ``FallbackSearch``.

Every provider returns a plain list of ``SearchHit`` and raises on transport
or format errors; the chain decides what to do with failures.
"""

import re
from typing import Any, List, Protocol, Sequence
from urllib.parse import quote

import httpx

from tool_agent_lib.agent_core.exceptions import ProviderError
from tool_agent_lib.agent_core.logger import get_logger
from tool_agent_lib.agent_core.tools.models import SearchHit

logger = get_logger(__name__)

GOOGLE_CSE_URL = "https://www.googleapis.com/customsearch/v1"
DUCKDUCKGO_URL = "https://api.duckduckgo.com/"
WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"
WIKIPEDIA_ARTICLE_URL = "https://en.wikipedia.org/wiki/"

_SPAN_TAG = re.compile(r"</?span[^>]*>")
_WHITESPACE = re.compile(r"\s")


class SearchStrategy(Protocol):
    provider: str

    @property
    def available(self) -> bool: ...

    async def search(self, query: str, limit: int) -> List[SearchHit]: ...


def _json_object(response: httpx.Response) -> dict[str, Any]:
    response.raise_for_status()
    body = response.json()
    if not isinstance(body, dict):
        raise ProviderError(f"Expected a JSON object from {response.request.url}, got {type(body).__name__}.")
    return body


class GoogleCustomSearch:
    """Google Custom Search JSON API."""

    provider = "google-cse"

    def __init__(self, http_client: httpx.AsyncClient, api_key: str, engine_id: str) -> None:
        self._http = http_client
        self._api_key = api_key
        self._engine_id = engine_id

    @property
    def available(self) -> bool:
        return bool(self._api_key and self._engine_id)

    async def search(self, query: str, limit: int) -> List[SearchHit]:
        response = await self._http.get(
            GOOGLE_CSE_URL, params={"key": self._api_key, "cx": self._engine_id, "q": query}
        )
        items = _json_object(response).get("items") or []
        return [
            SearchHit(title=item.get("title") or "", link=item.get("link") or "", snippet=item.get("snippet") or "")
            for item in items[:limit]
        ]


class DuckDuckGoInstantAnswer:
    """DuckDuckGo Instant Answer API: the abstract plus flat related topics."""

    provider = "duckduckgo"

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    @property
    def available(self) -> bool:
        return True

    async def search(self, query: str, limit: int) -> List[SearchHit]:
        response = await self._http.get(
            DUCKDUCKGO_URL, params={"q": query, "format": "json", "no_redirect": "1", "no_html": "1"}
        )
        body = _json_object(response)

        hits: List[SearchHit] = []
        if body.get("AbstractText"):
            hits.append(
                SearchHit(
                    title=body.get("Heading") or "DuckDuckGo",
                    link=body.get("AbstractURL") or "",
                    snippet=body["AbstractText"],
                )
            )
        for topic in body.get("RelatedTopics") or []:
            if len(hits) >= limit:
                break
            # Grouped topics carry "Topics" instead of "Text" and are skipped.
            text = topic.get("Text") if isinstance(topic, dict) else None
            if text:
                hits.append(SearchHit(title=text[:60], link=topic.get("FirstURL") or "", snippet=text))
        return hits[:limit]


class WikipediaSearch:
    """MediaWiki full-text search on English Wikipedia."""

    provider = "wikipedia"

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    @property
    def available(self) -> bool:
        return True

    async def search(self, query: str, limit: int) -> List[SearchHit]:
        response = await self._http.get(
            WIKIPEDIA_API_URL,
            params={
                "action": "query",
                "list": "search",
                "srsearch": query,
                "srlimit": str(limit),
                "format": "json",
                "origin": "*",
            },
        )
        matches = (_json_object(response).get("query") or {}).get("search") or []
        return [
            SearchHit(
                title=match.get("title", ""),
                link=self.article_url(match.get("title", "")),
                snippet=self.clean_snippet(match.get("snippet") or ""),
            )
            for match in matches[:limit]
        ]

    @staticmethod
    def article_url(title: str) -> str:
        return WIKIPEDIA_ARTICLE_URL + quote(_WHITESPACE.sub("_", title), safe="!*'()")

    @staticmethod
    def clean_snippet(snippet: str) -> str:
        return _SPAN_TAG.sub("", snippet).replace("&quot;", '"')


class FallbackSearch:
    """
    Merges unkeyed sources in order until ``limit`` hits are collected.

    A failing source is logged and skipped so the others can still contribute.
    """

    provider = "fallback"

    def __init__(self, sources: Sequence[SearchStrategy]) -> None:
        self.sources = list(sources)

    @property
    def available(self) -> bool:
        return bool(self.sources)

    async def search(self, query: str, limit: int) -> List[SearchHit]:
        merged: List[SearchHit] = []
        for source in self.sources:
            remaining = limit - len(merged)
            if remaining <= 0:
                break
            try:
                hits = await source.search(query, remaining)
            except (httpx.HTTPError, ValueError, ProviderError) as e:
                logger.warning(f"Fallback search source '{source.provider}' failed: {e}")
                continue
            merged.extend(hits[:remaining])
        return merged
