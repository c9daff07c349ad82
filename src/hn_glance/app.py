from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.widgets import Footer, Header, ListView
from textual.worker import Worker, WorkerState

from .config import LIST_CONTAINER_NAME, TEXT_CONTAINER_NAME
from .controller import NavigationController
from .fetcher import ContentFetcher
from .gateway import (
    PageSpec,
    RenderGateway,
    SelectionCallback,
    SelectionEvent,
    SelectionKind,
    TextContainer,
)
from .summary import PageSummaryFetcher
from .widgets import ListRegion, TextRegion

logger = logging.getLogger("hn_glance")


class TextualGateway(RenderGateway):
    """Renders container specs into the widgets of a running GlanceApp."""

    def __init__(self, app: "GlanceApp"):
        self.app = app
        self._callback: Optional[SelectionCallback] = None

    async def create_surface(self, page: PageSpec) -> int:
        try:
            await self._apply(page)
        except NoMatches as e:
            logger.error("Surface widgets are not mounted: %s", e)
            return 1
        return 0

    async def rebuild(self, page: PageSpec) -> None:
        await self._apply(page)

    async def update_text(self, container: TextContainer) -> None:
        text_region = self.app.query_one(f"#{container.name}", TextRegion)
        text_region.set_height(container.height)
        text_region.set_content(container.content)

    def on_selection_event(self, callback: SelectionCallback) -> None:
        if self._callback is not None:
            logger.warning("Replacing an already registered selection handler")
        self._callback = callback

    def dispatch(self, event: SelectionEvent) -> None:
        if self._callback is None:
            return
        # Each event runs as its own task; the controller serializes them.
        self.app.run_worker(self._callback(event), name="selection", exit_on_error=False)

    async def _apply(self, page: PageSpec) -> None:
        spec = page.list_container
        list_region = self.app.query_one(f"#{spec.name}", ListRegion)
        list_region.set_height(spec.height)
        await list_region.set_items(spec.items)
        await self.update_text(page.text_container)


class GlanceApp(App):
    TITLE = "Hacker News"
    SUB_TITLE = "Two-region reader"

    CSS = f"""
    #surface {{
        height: 1fr;
    }}
    #{LIST_CONTAINER_NAME} {{
        border: round $accent;
    }}
    #{TEXT_CONTAINER_NAME} {{
        border: round $secondary;
        padding: 0 1;
    }}
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("escape,backspace", "back", "Back", priority=True),
    ]

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        start_page: int = 1,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.config = config or {}
        self.start_page = start_page
        self.gateway = TextualGateway(self)
        self.controller = NavigationController(
            self.gateway,
            fetcher=ContentFetcher(self.config),
            summary_fetcher=PageSummaryFetcher(self.config),
        )

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="surface"):
            yield ListRegion(id=LIST_CONTAINER_NAME)
            yield TextRegion(id=TEXT_CONTAINER_NAME)
        yield Footer()

    def on_mount(self) -> None:
        self.query_one(ListRegion).focus()
        self.run_worker(
            self.controller.start(self.start_page), name="startup", exit_on_error=False
        )

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if event.state is WorkerState.ERROR:
            logger.error("Worker %s failed: %s", event.worker.name, event.worker.error)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        index = event.list_view.index
        self.gateway.dispatch(
            SelectionEvent(SelectionKind.CLICK, index if index is not None else 0)
        )

    def action_back(self) -> None:
        index = self.query_one(ListRegion).index
        self.gateway.dispatch(
            SelectionEvent(SelectionKind.DOUBLE_CLICK, index if index is not None else 0)
        )
