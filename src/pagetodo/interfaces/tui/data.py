from dataclasses import dataclass, field
from typing import Literal

from pagetodo.core.ops import Hierarchy
from pagetodo.core.selection import Selection

TextKind = Literal[
    "new_page",
    "new_group",
    "new_todo",
]
AlertKind = Literal[
    "error",
    "warning",
    "message",
]


@dataclass(frozen=True)
class PageSelect:
    """Choosing a page from the page list."""


@dataclass(frozen=True)
class Browsing:
    """Moving the flat cursor over the selected page."""


@dataclass(frozen=True)
class ChooseAddTarget:
    """Asking whether to add an item or a group."""


@dataclass(frozen=True)
class TextEntry:
    kind: TextKind


@dataclass(frozen=True)
class Alert:
    kind: AlertKind
    message: str
    origin: TextKind | None = None  # アラート発生直前の入力種別


Mode = PageSelect | Browsing | ChooseAddTarget | TextEntry | Alert

TEXT_ENTRY_TITLES: dict[TextKind, str] = {
    "new_page": "Create new Page:",
    "new_group": "Create new Group:",
    "new_todo": "Create new Todo:",
}
ALERT_TITLES: dict[AlertKind, str] = {
    "error": "Error!",
    "warning": "Warning!",
    "message": "Message...",
}
MSG_SELECT_GROUP_FIRST = "Please have a group selected/highlighted\nto create a todo item"
MSG_PAGE_GONE = "Selected page no longer exists"


@dataclass
class AppState:
    title: str = "pagetodo"
    model: Hierarchy = field(default_factory=Hierarchy)
    selection: Selection = field(default_factory=Selection)
    mode: Mode = field(default_factory=PageSelect)
    buffer: str = ""  # 全 TextEntry 共通の編集バッファ
    should_quit: bool = False

    # UI用
    msg_footer: str | None = None  # フッターメッセージ表示

    @property
    def has_popup(self) -> bool:
        return isinstance(self.mode, Alert)
