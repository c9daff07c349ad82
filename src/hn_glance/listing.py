from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Sized

from .config import MAX_COMMENT_INDENT, MAX_LIST_ITEMS
from .datamodels import (
    Action,
    BuiltList,
    CommentNext,
    CommentNode,
    CommentPrev,
    Next,
    Prev,
    SelectComment,
    SelectStory,
    Story,
)
from .text import clamp_label, clamp_label_loose, collapse_whitespace, truncate_title

PREV_PAGE_LABEL = "◀ Prev page"
NEXT_PAGE_LABEL = "Next page ▶"
PREV_COMMENTS_LABEL = "◀ Previous comments"
MORE_COMMENTS_LABEL = "More comments ▶"
NO_COMMENTS_LABEL = "No comments yet."


# --- Comment pagination ---
@dataclass(frozen=True)
class CommentPage:
    start: int
    end: int
    page: int
    total_pages: int
    paginated: bool

    @property
    def has_prev(self) -> bool:
        return self.paginated and self.page > 1

    @property
    def has_next(self) -> bool:
        return self.paginated and self.page < self.total_pages


def per_page(count: int, capacity: int = MAX_LIST_ITEMS) -> int:
    if count <= capacity:
        return capacity
    # Two rows go to the prev/next controls.
    return max(1, capacity - 2)


def total_pages(count: int, capacity: int = MAX_LIST_ITEMS) -> int:
    if count <= capacity:
        return 1
    return max(1, math.ceil(count / per_page(count, capacity)))


def paginate(
    comments: Sized, requested_page: int, capacity: int = MAX_LIST_ITEMS
) -> CommentPage:
    """Window comments into pages, clamping the requested page."""
    count = len(comments)
    pages = total_pages(count, capacity)
    page = min(max(1, requested_page), pages)
    size = per_page(count, capacity)
    start = (page - 1) * size
    return CommentPage(
        start=start,
        end=min(count, start + size),
        page=page,
        total_pages=pages,
        paginated=count > capacity,
    )


# --- List building ---
def build_story_list(
    stories: Sequence[Story], page: int, capacity: int = MAX_LIST_ITEMS
) -> BuiltList:
    labels: List[str] = []
    actions: List[Action] = []

    has_prev = page > 1
    # The feed has no known end, so Next is always offered.
    reserved = (1 if has_prev else 0) + 1
    visible = stories[: max(0, capacity - reserved)]

    if has_prev:
        labels.append(PREV_PAGE_LABEL)
        actions.append(Prev())

    for index, story in enumerate(visible):
        position = index + 1
        label = clamp_label(f"{position}. {truncate_title(story.title)}")
        if not truncate_title(story.title):
            label = f"{position}. Untitled"
        labels.append(label)
        actions.append(SelectStory(index))

    labels.append(NEXT_PAGE_LABEL)
    actions.append(Next())
    return BuiltList(labels, actions)


def format_comment_label(comment: CommentNode) -> str:
    depth = min(comment.depth, MAX_COMMENT_INDENT)
    indent = f"{'>' * depth} " if depth > 0 else ""
    author = f"{comment.author}: " if comment.author else ""
    text = collapse_whitespace(comment.text) or "[comment]"
    return clamp_label_loose(f"{indent}{author}{text}")


def build_comment_list(
    comments: Sequence[CommentNode], page: int, capacity: int = MAX_LIST_ITEMS
) -> BuiltList:
    if not comments:
        return BuiltList([NO_COMMENTS_LABEL], [SelectComment(-1)])

    window = paginate(comments, page, capacity)
    labels: List[str] = []
    actions: List[Action] = []

    if window.has_prev:
        labels.append(PREV_COMMENTS_LABEL)
        actions.append(CommentPrev())

    for offset, comment in enumerate(comments[window.start : window.end]):
        labels.append(format_comment_label(comment))
        actions.append(SelectComment(window.start + offset))

    if window.has_next:
        labels.append(MORE_COMMENTS_LABEL)
        actions.append(CommentNext())

    return BuiltList(labels, actions, total_pages=window.total_pages)
