from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from hn_glance.datamodels import Story
from hn_glance.fetcher import DELETED_COMMENT, ContentFetcher, flatten_comments
from hn_glance.session import FetchError, session_from_config
from hn_glance.sources.html import HtmlListingStrategy
from hn_glance.sources.manager import StrategyChain
from hn_glance.sources.search_api import SearchApiStrategy

LISTING_HTML = b"""
<table>
  <tr class="athing" id="101">
    <td class="title"><span class="rank">1.</span></td>
    <td class="title"><span class="titleline"><a href="https://example.com/a">First story</a></span></td>
  </tr>
  <tr><td class="subtext">
    <span class="score">120 points</span> by <a class="hnuser">alice</a>
    <span class="age"><a href="item?id=101">3 hours ago</a></span> |
    <a href="item?id=101">45&nbsp;comments</a>
  </td></tr>
  <tr class="athing" id="102">
    <td class="title"><a class="storylink" href="item?id=102">Ask HN: Old markup</a></td>
  </tr>
  <tr><td class="subtext">
    <span class="score">7 points</span> by <a class="hnuser">bob</a>
    <a href="item?id=102">discuss</a>
  </td></tr>
  <tr class="athing" id="103">
    <td class="votelinks"><span>no link here</span></td>
  </tr>
  <tr><td class="subtext"></td></tr>
</table>
"""


@pytest.fixture
def html_strategy():
    return HtmlListingStrategy({}, session=MagicMock())


@pytest.fixture
def api_strategy():
    return SearchApiStrategy({}, session=MagicMock())


def test_html_strategy_parses_rows(html_strategy):
    with patch("hn_glance.sources.html.retryable_fetch") as mock_fetch:
        mock_fetch.return_value = LISTING_HTML
        stories = html_strategy.fetch_page(1)

    assert len(stories) == 2
    first, second = stories
    assert first == Story(
        id="101",
        title="First story",
        url="https://example.com/a",
        score=120,
        author="alice",
        comment_count=45,
        age="3 hours ago",
    )
    assert second.title == "Ask HN: Old markup"
    assert second.url == "https://news.ycombinator.com/item?id=102"
    assert second.comment_count == 0
    assert second.age is None
    assert mock_fetch.call_args.kwargs["params"] is None
    # Retries come from the session adapter only.
    assert mock_fetch.call_args.kwargs["attempts"] == 1


def test_html_strategy_pages_by_query_param(html_strategy):
    with patch("hn_glance.sources.html.retryable_fetch") as mock_fetch:
        mock_fetch.return_value = b"<html></html>"
        assert html_strategy.fetch_page(3) == []
    assert mock_fetch.call_args.args[1] == "https://news.ycombinator.com/news"
    assert mock_fetch.call_args.kwargs["params"] == {"p": 3}


def test_html_strategy_fetch_failure_is_empty(html_strategy):
    with patch("hn_glance.sources.html.retryable_fetch") as mock_fetch:
        mock_fetch.return_value = None
        assert html_strategy.fetch_page(1) == []


def test_api_strategy_maps_hits(api_strategy):
    with patch("hn_glance.sources.search_api.fetch_json") as mock_fetch:
        mock_fetch.return_value = {
            "hits": [
                {
                    "objectID": "9",
                    "title": "  Launch  ",
                    "url": "https://launch.example",
                    "points": 50,
                    "author": "carol",
                    "num_comments": 12,
                    "created_at": "2024-05-01T10:00:00.000Z",
                },
                {"objectID": "10", "title": None, "url": None},
            ]
        }
        stories = api_strategy.fetch_page(2)

    assert mock_fetch.call_args.kwargs["params"] == {
        "tags": "front_page",
        "page": 1,
        "hitsPerPage": 30,
    }
    assert stories[0] == Story(
        id="9",
        title="Launch",
        url="https://launch.example",
        score=50,
        author="carol",
        comment_count=12,
        age="2024-05-01",
    )
    assert stories[1].title == "Untitled"
    assert stories[1].url == "https://news.ycombinator.com/item?id=10"
    assert stories[1].score is None
    assert stories[1].author is None


def test_chain_falls_back_when_html_is_empty(html_strategy, api_strategy):
    chain = StrategyChain({}, strategies=[html_strategy, api_strategy])
    with patch("hn_glance.sources.html.retryable_fetch") as html_fetch, patch(
        "hn_glance.sources.search_api.fetch_json"
    ) as api_fetch:
        html_fetch.return_value = b"<html><body>markup changed</body></html>"
        api_fetch.return_value = {"hits": [{"objectID": "1", "title": "From API"}]}
        stories = chain.fetch_page(2)

    assert [s.title for s in stories] == ["From API"]
    assert api_fetch.call_args.kwargs["params"]["page"] == 1


def test_chain_skips_api_when_html_has_stories(html_strategy, api_strategy):
    chain = StrategyChain({}, strategies=[html_strategy, api_strategy])
    with patch("hn_glance.sources.html.retryable_fetch") as html_fetch, patch(
        "hn_glance.sources.search_api.fetch_json"
    ) as api_fetch:
        html_fetch.return_value = LISTING_HTML
        stories = chain.fetch_page(1)

    assert len(stories) == 2
    api_fetch.assert_not_called()


def test_chain_propagates_fallback_error(html_strategy, api_strategy):
    chain = StrategyChain({}, strategies=[html_strategy, api_strategy])
    with patch("hn_glance.sources.html.retryable_fetch") as html_fetch, patch(
        "hn_glance.sources.search_api.fetch_json"
    ) as api_fetch:
        html_fetch.return_value = None
        api_fetch.side_effect = FetchError("boom")
        with pytest.raises(FetchError):
            chain.fetch_page(1)


def test_chain_skips_raising_primary():
    broken = MagicMock(name="broken")
    broken.fetch_page.side_effect = RuntimeError("layout changed")
    working = MagicMock(name="working")
    working.fetch_page.return_value = [Story(id="1", title="ok", url="u")]
    chain = StrategyChain({}, strategies=[broken, working])
    assert chain.fetch_page(1)[0].title == "ok"


def test_flatten_comments_preorder_with_depth():
    tree = [
        {
            "id": 1,
            "author": "a",
            "text": "<p>root one</p>",
            "created_at": "2024-01-02T03:04:05Z",
            "children": [
                {"id": 2, "author": "b", "text": "child", "children": [
                    {"id": 3, "author": "c", "text": "grandchild", "children": []},
                ]},
                {"id": 4, "author": None, "text": None, "children": []},
            ],
        },
        None,
        {"id": 5, "author": "e", "text": "root two"},
    ]
    comments = flatten_comments(tree)

    assert [c.id for c in comments] == ["1", "2", "3", "4", "5"]
    assert [c.depth for c in comments] == [0, 1, 2, 1, 0]
    assert comments[0].text == "root one"
    assert comments[0].age == "2024-01-02"
    assert comments[3].text == DELETED_COMMENT
    assert comments[3].author is None


def test_flatten_handles_deep_threads():
    node = {"id": 0, "text": "leaf", "children": []}
    for i in range(1, 3000):
        node = {"id": i, "text": f"level {i}", "children": [node]}
    comments = flatten_comments([node])
    assert len(comments) == 3000
    assert comments[-1].depth == 2999


def test_fetch_comments_uses_item_api():
    session = MagicMock()
    fetcher = ContentFetcher({}, session=session, chain=MagicMock())
    with patch("hn_glance.fetcher.fetch_json") as mock_fetch:
        mock_fetch.return_value = {"id": 42, "children": [{"id": 1, "text": "hi"}]}
        comments = fetcher.fetch_comments("42")
    assert mock_fetch.call_args.args[1] == "https://hn.algolia.com/api/v1/items/42"
    assert [c.text for c in comments] == ["hi"]


def test_fetch_comments_propagates_errors():
    fetcher = ContentFetcher({}, session=MagicMock(), chain=MagicMock())
    with patch("hn_glance.fetcher.fetch_json") as mock_fetch:
        mock_fetch.side_effect = FetchError("404")
        with pytest.raises(FetchError):
            fetcher.fetch_comments("42")


def test_session_retries_follow_config():
    session = session_from_config({"retry_attempts": 2, "user_agent": "glance"})
    assert session.get_adapter("https://news.ycombinator.com/").max_retries.total == 2
    assert session.headers["User-Agent"] == "glance"
