from typing import Callable, Dict, List

import httpx
import pytest

from tool_agent_lib.agent_core import SearchHit, SearchResult
from tool_agent_lib.agent_impl.search import (
    DuckDuckGoInstantAnswer,
    FallbackSearch,
    GoogleCustomSearch,
    SearchChain,
    WikipediaSearch,
    build_search_chain,
)

Handler = Callable[[httpx.Request], httpx.Response]

GOOGLE_BODY = {
    "items": [
        {"title": "Python", "link": "https://python.org", "snippet": "Official site"},
        {"title": "Docs", "link": "https://docs.python.org", "snippet": "Documentation"},
        {"title": "PyPI", "link": "https://pypi.org", "snippet": "Packages"},
    ]
}

DDG_BODY = {
    "Heading": "Python (programming language)",
    "AbstractText": "Python is a programming language.",
    "AbstractURL": "https://en.wikipedia.org/wiki/Python_(programming_language)",
    "RelatedTopics": [
        {"Text": "Guido van Rossum - Dutch programmer and creator of Python", "FirstURL": "https://duckduckgo.com/Guido"},
        {"Name": "Grouped", "Topics": [{"Text": "nested", "FirstURL": "https://duckduckgo.com/nested"}]},
        {"Text": "CPython", "FirstURL": "https://duckduckgo.com/CPython"},
    ],
}

WIKI_BODY = {
    "query": {
        "search": [
            {"title": "Monty Python", "snippet": 'The <span class="searchmatch">Python</span> &quot;troupe&quot;'},
            {"title": "Python (genus)", "snippet": "A genus of snakes"},
        ]
    }
}


def routed(routes: Dict[str, Handler], calls: List[httpx.Request]) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        for host, route in routes.items():
            if request.url.host == host:
                return route(request)
        return httpx.Response(404)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def json_response(body: object) -> Handler:
    return lambda request: httpx.Response(200, json=body)


def server_error(request: httpx.Request) -> httpx.Response:
    return httpx.Response(500, text="nope")


@pytest.mark.asyncio
async def test_google_is_used_when_configured() -> None:
    calls: List[httpx.Request] = []
    async with routed({"www.googleapis.com": json_response(GOOGLE_BODY)}, calls) as client:
        chain = build_search_chain(client, api_key="key", engine_id="cx")
        result = await chain.search("python", 2)

    assert result.provider == "google-cse"
    assert result.query == "python"
    assert [hit.title for hit in result.results] == ["Python", "Docs"]
    params = calls[0].url.params
    assert (params["key"], params["cx"], params["q"]) == ("key", "cx", "python")


@pytest.mark.asyncio
async def test_google_is_skipped_without_credentials() -> None:
    calls: List[httpx.Request] = []
    routes = {"api.duckduckgo.com": json_response(DDG_BODY), "en.wikipedia.org": json_response(WIKI_BODY)}
    async with routed(routes, calls) as client:
        result = await build_search_chain(client).search("python", 5)

    assert result.provider == "fallback"
    assert all(request.url.host != "www.googleapis.com" for request in calls)


@pytest.mark.asyncio
async def test_google_failure_falls_through_to_fallback() -> None:
    calls: List[httpx.Request] = []
    routes = {
        "www.googleapis.com": server_error,
        "api.duckduckgo.com": json_response(DDG_BODY),
        "en.wikipedia.org": json_response(WIKI_BODY),
    }
    async with routed(routes, calls) as client:
        result = await build_search_chain(client, api_key="key", engine_id="cx").search("python", 5)

    assert result.provider == "fallback"
    assert len(result.results) == 5
    assert result.results[0] == SearchHit(
        title="Python (programming language)",
        link="https://en.wikipedia.org/wiki/Python_(programming_language)",
        snippet="Python is a programming language.",
    )


@pytest.mark.asyncio
async def test_fallback_merges_until_limit() -> None:
    calls: List[httpx.Request] = []
    routes = {"api.duckduckgo.com": json_response(DDG_BODY), "en.wikipedia.org": json_response(WIKI_BODY)}
    async with routed(routes, calls) as client:
        fallback = FallbackSearch([DuckDuckGoInstantAnswer(client), WikipediaSearch(client)])
        hits = await fallback.search("python", 4)

    # abstract + two flat related topics from DuckDuckGo, then one Wikipedia hit
    assert [hit.link for hit in hits] == [
        "https://en.wikipedia.org/wiki/Python_(programming_language)",
        "https://duckduckgo.com/Guido",
        "https://duckduckgo.com/CPython",
        "https://en.wikipedia.org/wiki/Monty_Python",
    ]
    assert hits[1].title == "Guido van Rossum - Dutch programmer and creator of Python"[:60]
    wiki_request = calls[-1]
    assert wiki_request.url.params["srlimit"] == "1"


@pytest.mark.asyncio
async def test_fallback_source_failure_does_not_stop_others() -> None:
    calls: List[httpx.Request] = []
    routes = {"api.duckduckgo.com": server_error, "en.wikipedia.org": json_response(WIKI_BODY)}
    async with routed(routes, calls) as client:
        result = await build_search_chain(client).search("python", 5)

    assert result.provider == "fallback"
    assert [hit.title for hit in result.results] == ["Monty Python", "Python (genus)"]
    assert result.results[0].snippet == 'The Python "troupe"'


@pytest.mark.asyncio
async def test_every_source_failing_yields_empty_fallback_result() -> None:
    calls: List[httpx.Request] = []
    routes = {
        "www.googleapis.com": server_error,
        "api.duckduckgo.com": server_error,
        "en.wikipedia.org": lambda request: httpx.Response(200, text="not json"),
    }
    async with routed(routes, calls) as client:
        result = await build_search_chain(client, api_key="key", engine_id="cx").search("anything", 5)

    assert result.provider == "fallback"
    assert result.query == "anything"
    assert result.results == []


@pytest.mark.asyncio
async def test_no_hits_anywhere_yields_empty_fallback_result() -> None:
    calls: List[httpx.Request] = []
    routes = {
        "api.duckduckgo.com": json_response({"Heading": "", "AbstractText": "", "RelatedTopics": []}),
        "en.wikipedia.org": json_response({"query": {"search": []}}),
    }
    async with routed(routes, calls) as client:
        result = await build_search_chain(client).search("zzqx", 5)

    assert result == SearchResult(provider="fallback", query="zzqx", results=[])
    assert [request.url.host for request in calls] == ["api.duckduckgo.com", "en.wikipedia.org"]


@pytest.mark.asyncio
async def test_empty_first_strategy_hands_over() -> None:
    calls: List[httpx.Request] = []
    routes = {
        "www.googleapis.com": json_response({"searchInformation": {"totalResults": "0"}}),
        "api.duckduckgo.com": json_response({"AbstractText": "", "RelatedTopics": []}),
        "en.wikipedia.org": json_response(WIKI_BODY),
    }
    async with routed(routes, calls) as client:
        result = await build_search_chain(client, api_key="key", engine_id="cx").search("python", 1)

    assert result.provider == "fallback"
    assert [hit.title for hit in result.results] == ["Monty Python"]


@pytest.mark.asyncio
async def test_duckduckgo_request_parameters() -> None:
    calls: List[httpx.Request] = []
    async with routed({"api.duckduckgo.com": json_response(DDG_BODY)}, calls) as client:
        await DuckDuckGoInstantAnswer(client).search("rust", 2)

    params = calls[0].url.params
    assert params["q"] == "rust"
    assert params["format"] == "json"
    assert params["no_redirect"] == "1"
    assert params["no_html"] == "1"


def test_wikipedia_article_url_and_snippet_cleanup() -> None:
    assert WikipediaSearch.article_url("C (programming language)") == (
        "https://en.wikipedia.org/wiki/C_(programming_language)"
    )
    assert WikipediaSearch.article_url("AT&T") == "https://en.wikipedia.org/wiki/AT%26T"
    assert WikipediaSearch.clean_snippet('<span class="searchmatch">a</span> &quot;b&quot;') == 'a "b"'


def test_google_availability_needs_both_credentials() -> None:
    client = httpx.AsyncClient()
    assert not GoogleCustomSearch(client, api_key="key", engine_id="").available
    assert GoogleCustomSearch(client, api_key="key", engine_id="cx").available


def test_chain_needs_a_strategy() -> None:
    with pytest.raises(ValueError):
        SearchChain([])
