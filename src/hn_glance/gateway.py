from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List

from .config import (
    LIST_CONTAINER_ID,
    LIST_CONTAINER_NAME,
    SURFACE_WIDTH,
    TEXT_CONTAINER_ID,
    TEXT_CONTAINER_NAME,
)


# --- Surface description ---
@dataclass
class ListContainer:
    x: int
    y: int
    width: int
    height: int
    items: List[str] = field(default_factory=list)
    container_id: int = LIST_CONTAINER_ID
    name: str = LIST_CONTAINER_NAME
    item_select_border: bool = True
    event_capture: bool = True


@dataclass
class TextContainer:
    x: int
    y: int
    width: int
    height: int
    content: str = ""
    container_id: int = TEXT_CONTAINER_ID
    name: str = TEXT_CONTAINER_NAME
    event_capture: bool = False


@dataclass
class PageSpec:
    list_container: ListContainer
    text_container: TextContainer

    @property
    def container_count(self) -> int:
        return 2


def build_page_spec(
    labels: List[str], text: str, list_height: int, text_height: int
) -> PageSpec:
    """Stack the list region above the text region."""
    return PageSpec(
        list_container=ListContainer(
            x=0, y=0, width=SURFACE_WIDTH, height=list_height, items=list(labels)
        ),
        text_container=text_container(text, list_height, text_height),
    )


def text_container(text: str, list_height: int, text_height: int) -> TextContainer:
    return TextContainer(
        x=0, y=list_height, width=SURFACE_WIDTH, height=text_height, content=text
    )


# --- Events ---
class SelectionKind(Enum):
    CLICK = "click"
    DOUBLE_CLICK = "double_click"


@dataclass(frozen=True)
class SelectionEvent:
    kind: SelectionKind
    index: int


SelectionCallback = Callable[[SelectionEvent], Awaitable[None]]


class RenderGateway(ABC):
    """The only thing that talks to the physical display."""

    @abstractmethod
    async def create_surface(self, page: PageSpec) -> int:
        """Create both regions once. Returns 0 on success."""
        pass

    @abstractmethod
    async def rebuild(self, page: PageSpec) -> None:
        """Replace the list items and the text together."""
        pass

    @abstractmethod
    async def update_text(self, container: TextContainer) -> None:
        """Replace only the text region."""
        pass

    @abstractmethod
    def on_selection_event(self, callback: SelectionCallback) -> None:
        """Register the handler for list selections."""
        pass
