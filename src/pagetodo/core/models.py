from dataclasses import dataclass, field
from typing import Literal

ItemState = Literal["idle", "done", "failed", "late"]
ITEM_STATE_ORDER: tuple[ItemState, ...] = ("idle", "done", "failed", "late")


@dataclass
class Item:
    id: int
    title: str
    description: str = ""
    state: ItemState = "idle"

    def rename(self, title: str) -> None:
        self.title = title


@dataclass
class Group:
    title: str
    items: list[Item] = field(default_factory=list)  # 挿入順 = 表示順
    show_items: bool = True

    def rename(self, title: str) -> None:
        self.title = title

    def toggle_show_items(self) -> bool:
        self.show_items = not self.show_items
        return self.show_items

    def clear_items(self) -> int:
        removed = len(self.items)
        self.items.clear()
        return removed


@dataclass
class Page:
    title: str
    groups: list[Group] = field(default_factory=list)

    def rename(self, title: str) -> None:
        self.title = title


def next_item_state(state: ItemState) -> ItemState:
    """Return the state after `state` in the idle -> done -> failed -> late cycle."""
    idx = ITEM_STATE_ORDER.index(state)
    return ITEM_STATE_ORDER[(idx + 1) % len(ITEM_STATE_ORDER)]
