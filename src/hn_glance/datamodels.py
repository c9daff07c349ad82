from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


# --- Content ---
@dataclass(frozen=True)
class Story:
    id: str
    title: str
    url: str
    score: Optional[int] = None
    author: Optional[str] = None
    comment_count: Optional[int] = None
    age: Optional[str] = None


@dataclass(frozen=True)
class CommentNode:
    id: str
    text: str
    depth: int
    author: Optional[str] = None
    age: Optional[str] = None


# --- List actions ---
@dataclass(frozen=True)
class Action:
    """What selecting one rendered list row does."""


@dataclass(frozen=True)
class Prev(Action):
    pass


@dataclass(frozen=True)
class Next(Action):
    pass


@dataclass(frozen=True)
class Retry(Action):
    page: int


@dataclass(frozen=True)
class SelectStory(Action):
    index: int


@dataclass(frozen=True)
class SelectComment(Action):
    # -1 marks the "no comments" row, selecting it does nothing.
    index: int


@dataclass(frozen=True)
class CommentPrev(Action):
    pass


@dataclass(frozen=True)
class CommentNext(Action):
    pass


ACTION_TYPES: Tuple[type, ...] = (
    Prev,
    Next,
    Retry,
    SelectStory,
    SelectComment,
    CommentPrev,
    CommentNext,
)


# --- Navigation ---
class View(Enum):
    LIST = "list"
    STORY = "story"


class Layout(Enum):
    DEFAULT = "default"
    EXPANDED = "expanded"


@dataclass
class BuiltList:
    labels: List[str]
    actions: List[Action]
    total_pages: int = 1

    def __post_init__(self) -> None:
        if len(self.labels) != len(self.actions):
            raise ValueError(
                f"{len(self.labels)} labels but {len(self.actions)} actions"
            )


@dataclass(frozen=True)
class ListSnapshot:
    """The story list exactly as last rendered, for instant re-display."""

    labels: Tuple[str, ...]
    actions: Tuple[Action, ...]
    text: str
    page: int
    stories: Tuple[Story, ...]


@dataclass
class NavigationState:
    view: View = View.LIST
    page: int = 1
    stories: List[Story] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    comments: List[CommentNode] = field(default_factory=list)
    comment_page: int = 1
    active_story: Optional[Story] = None
    page_summary: str = ""
    layout: Layout = Layout.DEFAULT
    list_cache: Optional[ListSnapshot] = None
