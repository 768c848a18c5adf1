STATE_MARK_MAP = {
    "idle": " ",
    "done": "x",
    "failed": "!",
    "late": "L",
}

MAIN_THEME_COLOR = 1
SELECTED_ROW_COLOR = 3
COMPLETED_COLOR = 5
FAILED_COLOR = 6
LATE_COLOR = 7
POPUP_BG_COLOR = 8
ALERT_BG_COLOR = 9

PAGE_MENU_WIDTH = 50
PAGE_MENU_HEIGHT = 25
INPUT_BOX_WIDTH = 50
ALERT_BOX_WIDTH = 50
ALERT_BOX_HEIGHT = 7
ADD_SELECT_BOX_WIDTH = 30
ITEM_INDENT = "    "


class HeaderLines:
    """Header lines for the TUI."""

    @classmethod
    def height(cls) -> int:
        return 2

    @classmethod
    def title(cls, app_title: str, page_title: str | None = None) -> str:
        _title = f"--- {app_title} ---"
        if page_title is not None:
            _title += f" Page: {page_title}"
        return _title

    @classmethod
    def help(cls, *, browsing: bool) -> str:
        if browsing:
            return cls._browsing_help_line()
        return cls._page_select_help_line()

    @classmethod
    def _page_select_help_line(cls) -> str:
        return "[↑/↓ j/k Move] [Enter Open] [(a)dd page] [(q)uit/Esc]"

    @classmethod
    def _browsing_help_line(cls) -> str:
        help_line = "[↑/↓ j/k Move] [(a)dd] [(t)oggle] [(s)tate] "
        help_line += "[K/J Reorder] [(d)elete] [(C)lear] [Esc Back]"
        return help_line
