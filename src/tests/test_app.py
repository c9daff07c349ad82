from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

from hn_glance.app import GlanceApp
from hn_glance.datamodels import Story, View
from hn_glance.widgets import ListRegion, TextRegion


def make_app():
    app = GlanceApp(config={})
    fetcher = MagicMock()
    fetcher.fetch_stories_page.return_value = [
        Story(id=str(i), title=f"Story {i}", url=f"https://s.example/{i}") for i in range(3)
    ]
    fetcher.fetch_comments.return_value = []
    summary_fetcher = MagicMock()
    summary_fetcher.fetch_summary.return_value = ""
    app.controller.fetcher = fetcher
    app.controller.summary_fetcher = summary_fetcher
    return app, fetcher


def test_app_renders_first_page_and_opens_story():
    app, fetcher = make_app()

    async def scenario():
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            list_region = app.query_one(ListRegion)
            assert len(list_region.children) == 4
            assert app.controller.state.view is View.LIST

            await pilot.press("enter")
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert app.controller.state.view is View.STORY
            assert app.controller.state.active_story.id == "0"
            assert len(list_region.children) == 1
            assert app.query_one(TextRegion).styles.height.value == 175

            await pilot.press("backspace")
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert app.controller.state.view is View.LIST
            assert len(list_region.children) == 4

    asyncio.run(scenario())
    fetcher.fetch_stories_page.assert_called_once_with(1)
