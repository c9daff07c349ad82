from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from .config import (
    LIST_HEIGHT_DEFAULT,
    LIST_HEIGHT_EXPANDED,
    MAX_LIST_ITEMS,
    TEXT_HEIGHT_DEFAULT,
    TEXT_HEIGHT_EXPANDED,
)
from .datamodels import (
    ACTION_TYPES,
    Action,
    CommentNext,
    CommentNode,
    CommentPrev,
    Layout,
    ListSnapshot,
    NavigationState,
    Next,
    Prev,
    Retry,
    SelectComment,
    SelectStory,
    Story,
    View,
)
from .fetcher import ContentFetcher
from .gateway import (
    RenderGateway,
    SelectionEvent,
    SelectionKind,
    build_page_spec,
    text_container,
)
from .listing import NEXT_PAGE_LABEL, build_comment_list, build_story_list, paginate
from .summary import PageSummaryFetcher
from .text import normalize

logger = logging.getLogger("hn_glance")

RETRY_LABEL = "Retry"
LOADING_LABEL = "Loading..."
EMPTY_LIST_LABEL = "No stories"
STARTUP_TEXT = "Hacker News reader"
LIST_HINT = "Select a story. Use Prev/Next to change page."
NO_STORIES_TEXT = "No stories returned."
LOAD_FAILED_TEXT = "Failed to load Hacker News."
BACK_HINT = "Double click to go back."


def layout_heights(layout: Layout) -> Tuple[int, int]:
    """(list height, text height) for a layout."""
    if layout is Layout.EXPANDED:
        return LIST_HEIGHT_EXPANDED, TEXT_HEIGHT_EXPANDED
    return LIST_HEIGHT_DEFAULT, TEXT_HEIGHT_DEFAULT


def format_story_details(story: Story) -> str:
    meta_parts = []
    if story.score is not None:
        meta_parts.append(f"{story.score} points")
    if story.author:
        meta_parts.append(f"by {story.author}")
    if story.comment_count is not None:
        meta_parts.append(f"{story.comment_count} comments")
    if story.age:
        meta_parts.append(story.age)
    return "\n".join(p for p in (story.title, story.url, " · ".join(meta_parts)) if p)


def format_comment_details(comment: CommentNode) -> str:
    meta_parts = []
    if comment.author:
        meta_parts.append(f"by {comment.author}")
    if comment.age:
        meta_parts.append(comment.age)
    return "\n".join(p for p in (" · ".join(meta_parts), comment.text) if p)


def single_flight(method: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
    """Run the navigation only if no other one is in flight; otherwise drop it."""

    @functools.wraps(method)
    async def wrapper(self: "NavigationController", *args: Any, **kwargs: Any) -> Any:
        if self.busy:
            logger.debug("Dropping %s: another navigation is in flight", method.__name__)
            return None
        self.busy = True
        try:
            return await method(self, *args, **kwargs)
        finally:
            self.busy = False

    return wrapper


class NavigationController:
    """Owns what the screen shows and drives every transition between views."""

    def __init__(
        self,
        gateway: RenderGateway,
        fetcher: Optional[ContentFetcher] = None,
        summary_fetcher: Optional[PageSummaryFetcher] = None,
        capacity: int = MAX_LIST_ITEMS,
    ):
        self.gateway = gateway
        self.fetcher = fetcher or ContentFetcher()
        self.summary_fetcher = summary_fetcher or PageSummaryFetcher()
        self.capacity = capacity
        self.state = NavigationState()
        self.busy = False
        self._surface_ready = False
        self._handler_registered = False
        self._handlers: Dict[type, Callable[[Any], Awaitable[None]]] = {
            Prev: self._on_prev,
            Next: self._on_next,
            Retry: self._on_retry,
            SelectStory: self._on_select_story,
            SelectComment: self._on_select_comment,
            CommentPrev: self._on_comment_prev,
            CommentNext: self._on_comment_next,
        }
        missing = set(ACTION_TYPES) - set(self._handlers)
        if missing:
            raise TypeError(f"No handler for actions: {sorted(t.__name__ for t in missing)}")

    # --- Entry points ---
    async def start(self, page: int = 1) -> None:
        if not self._handler_registered:
            self.gateway.on_selection_event(self.handle_selection)
            self._handler_registered = True
        await self.load_page(page)

    @single_flight
    async def load_page(self, page: int) -> None:
        await self._update_text(f"Loading page {page}...")
        try:
            stories = await asyncio.to_thread(self.fetcher.fetch_stories_page, page)
        except Exception as e:
            logger.error("Failed to load page %d: %s", page, e)
            await self._show_list(
                [RETRY_LABEL, NEXT_PAGE_LABEL], [Retry(page), Next()], page, [], LOAD_FAILED_TEXT
            )
            return

        if not stories:
            logger.info("Page %d has no stories", page)
            await self._show_list(
                [RETRY_LABEL, NEXT_PAGE_LABEL], [Retry(page), Next()], page, [], NO_STORIES_TEXT
            )
            return

        built = build_story_list(stories, page, self.capacity)
        await self._show_list(
            built.labels, built.actions, page, stories, f"HN page {page}. {LIST_HINT}"
        )

    @single_flight
    async def show_story(self, story: Story) -> None:
        st = self.state
        st.view = View.STORY
        st.active_story = story
        st.comments = []
        st.comment_page = 1
        st.page_summary = ""
        st.layout = Layout.EXPANDED
        await self._update_text(f'Loading "{story.title}"...')

        comments, summary = await asyncio.gather(
            asyncio.to_thread(self.fetcher.fetch_comments, story.id),
            asyncio.to_thread(self.summary_fetcher.fetch_summary, story),
            return_exceptions=True,
        )
        if isinstance(comments, BaseException):
            logger.error("Failed to load comments for %s: %s", story.id, comments)
            comments = []
        if isinstance(summary, BaseException):
            logger.warning("Failed to load page summary for %s: %s", story.id, summary)
            summary = ""

        st.comments = list(comments)
        st.page_summary = summary
        await self._render_comment_page(1)

    async def show_list_view(self) -> None:
        if self.busy:
            logger.debug("Dropping show_list_view: another navigation is in flight")
            return
        if self.state.list_cache is None:
            await self.load_page(1)
            return
        await self._restore_list(self.state.list_cache)

    @single_flight
    async def show_comment_page(self, page: int) -> None:
        st = self.state
        if st.view is not View.STORY or st.active_story is None:
            return
        st.layout = Layout.EXPANDED
        await self._render_comment_page(page)

    # --- Selection ---
    def resolve_action(self, index: int) -> Optional[Action]:
        """Map a raw list index to its action.

        The surface can report an index one past the row it means, so an
        out-of-range index falls back to the row before it.
        """
        actions = self.state.actions
        if 0 <= index < len(actions):
            return actions[index]
        if 0 <= index - 1 < len(actions):
            return actions[index - 1]
        return None

    async def handle_selection(self, event: SelectionEvent) -> None:
        if self.busy:
            logger.debug("Ignoring %s: navigation in flight", event)
            return
        if event.kind is SelectionKind.DOUBLE_CLICK:
            if self.state.view is View.STORY:
                await self.show_list_view()
            return

        action = self.resolve_action(event.index)
        if action is None:
            logger.debug("No action for list index %d", event.index)
            return
        logger.debug("Dispatching %s", action)
        await self._handlers[type(action)](action)

    async def _on_prev(self, action: Prev) -> None:
        page = max(1, self.state.page - 1)
        if page != self.state.page:
            await self.load_page(page)

    async def _on_next(self, action: Next) -> None:
        await self.load_page(self.state.page + 1)

    async def _on_retry(self, action: Retry) -> None:
        await self.load_page(action.page)

    async def _on_select_story(self, action: SelectStory) -> None:
        if 0 <= action.index < len(self.state.stories):
            await self.show_story(self.state.stories[action.index])

    async def _on_select_comment(self, action: SelectComment) -> None:
        if not 0 <= action.index < len(self.state.comments):
            return
        await self._update_text(format_comment_details(self.state.comments[action.index]))

    async def _on_comment_prev(self, action: CommentPrev) -> None:
        await self.show_comment_page(self.state.comment_page - 1)

    async def _on_comment_next(self, action: CommentNext) -> None:
        await self.show_comment_page(self.state.comment_page + 1)

    # --- Rendering ---
    @single_flight
    async def _restore_list(self, snapshot: ListSnapshot) -> None:
        st = self.state
        self._reset_to_list(snapshot.page, snapshot.stories, snapshot.actions)
        await self._rebuild(list(snapshot.labels), snapshot.text)
        st.list_cache = snapshot

    async def _show_list(
        self,
        labels: List[str],
        actions: List[Action],
        page: int,
        stories: Sequence[Story],
        text: str,
    ) -> None:
        self._reset_to_list(page, stories, actions)
        if not await self._rebuild(labels, text):
            return
        st = self.state
        st.list_cache = ListSnapshot(
            labels=tuple(st.labels),
            actions=tuple(st.actions),
            text=text,
            page=page,
            stories=tuple(st.stories),
        )

    def _reset_to_list(self, page: int, stories: Sequence[Story], actions: Sequence[Action]) -> None:
        st = self.state
        st.view = View.LIST
        st.page = page
        st.stories = list(stories)
        st.actions = list(actions)
        st.comments = []
        st.comment_page = 1
        st.active_story = None
        st.page_summary = ""
        st.layout = Layout.DEFAULT

    async def _render_comment_page(self, page: int) -> None:
        st = self.state
        built = build_comment_list(st.comments, page, self.capacity)
        st.comment_page = paginate(st.comments, page, self.capacity).page
        st.actions = built.actions
        text = "\n".join(
            p
            for p in (
                format_story_details(st.active_story),
                st.page_summary,
                f"Comments page {st.comment_page}/{built.total_pages}.",
                BACK_HINT,
            )
            if p
        )
        await self._rebuild(built.labels, text)

    async def _ensure_surface(self) -> bool:
        if self._surface_ready:
            return True
        list_height, text_height = layout_heights(Layout.DEFAULT)
        result = await self.gateway.create_surface(
            build_page_spec([LOADING_LABEL], STARTUP_TEXT, list_height, text_height)
        )
        self._surface_ready = result == 0
        if not self._surface_ready:
            logger.error("Surface creation failed with status %s", result)
        return self._surface_ready

    async def _rebuild(self, labels: List[str], text: str) -> bool:
        """Render labels and text; returns False if the surface is not ready."""
        safe_labels = [
            label if label and label.strip() else f"{i + 1}. Untitled"
            for i, label in enumerate(labels)
        ]
        # Labels track actions even when nothing could be drawn.
        self.state.labels = safe_labels
        if not await self._ensure_surface():
            logger.warning("Skipping rebuild, surface not ready")
            return False
        list_height, text_height = layout_heights(self.state.layout)
        await self.gateway.rebuild(
            build_page_spec(
                safe_labels or [EMPTY_LIST_LABEL], normalize(text), list_height, text_height
            )
        )
        return True

    async def _update_text(self, text: str) -> None:
        if not await self._ensure_surface():
            logger.warning("Skipping text update, surface not ready")
            return
        list_height, text_height = layout_heights(self.state.layout)
        await self.gateway.update_text(text_container(normalize(text), list_height, text_height))
