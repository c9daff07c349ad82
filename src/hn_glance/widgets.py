from __future__ import annotations

from typing import List

from rich.text import Text
from textual.widgets import ListItem, ListView, Static


# --- Surface regions ---
class LabelItem(ListItem):
    def __init__(self, label: str):
        super().__init__()
        self.label = label

    def compose(self):
        yield Static(Text(self.label), classes="item-label")


class ListRegion(ListView):
    """The selectable list region."""

    def set_height(self, height: int) -> None:
        self.styles.height = f"{height}fr"

    async def set_items(self, labels: List[str]) -> None:
        await self.clear()
        await self.extend([LabelItem(label) for label in labels])
        self.index = 0


class TextRegion(Static):
    """The read-only text region."""

    def set_height(self, height: int) -> None:
        self.styles.height = f"{height}fr"

    def set_content(self, content: str) -> None:
        self.update(Text(content))
