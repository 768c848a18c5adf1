import curses
from dataclasses import dataclass

from pyresults import Ok

from pagetodo.core.flatten import GroupHeader, ItemRow, Row, flatten
from pagetodo.core.models import Page
from pagetodo.interfaces.tui.data import (
    ALERT_TITLES,
    TEXT_ENTRY_TITLES,
    Alert,
    AppState,
    Browsing,
    ChooseAddTarget,
    PageSelect,
    TextEntry,
)
from pagetodo.interfaces.tui.helper import _center_x, _clip_to_width, _scroll_offset, _string_width
from pagetodo.interfaces.tui.style import (
    ADD_SELECT_BOX_WIDTH,
    ALERT_BG_COLOR,
    ALERT_BOX_HEIGHT,
    ALERT_BOX_WIDTH,
    COMPLETED_COLOR,
    FAILED_COLOR,
    INPUT_BOX_WIDTH,
    ITEM_INDENT,
    LATE_COLOR,
    MAIN_THEME_COLOR,
    PAGE_MENU_HEIGHT,
    PAGE_MENU_WIDTH,
    POPUP_BG_COLOR,
    SELECTED_ROW_COLOR,
    STATE_MARK_MAP,
    HeaderLines,
)
from pagetodo.util.logger import setup_logger

logger = setup_logger("pagetodo")


def init_colors() -> None:
    if curses.has_colors():
        curses.start_color()
        curses.use_default_colors()
        # color pair indexes (idx, foreground, background)
        curses.init_pair(MAIN_THEME_COLOR, curses.COLOR_YELLOW, -1)  # header
        curses.init_pair(SELECTED_ROW_COLOR, curses.COLOR_BLACK, curses.COLOR_GREEN)  # selected-row
        curses.init_pair(COMPLETED_COLOR, curses.COLOR_GREEN, -1)  # done
        curses.init_pair(FAILED_COLOR, curses.COLOR_RED, -1)  # failed
        curses.init_pair(LATE_COLOR, curses.COLOR_MAGENTA, -1)  # late
        curses.init_pair(POPUP_BG_COLOR, -1, curses.COLOR_BLUE)  # input/add-select popup
        curses.init_pair(ALERT_BG_COLOR, curses.COLOR_WHITE, curses.COLOR_RED)  # alert


@dataclass
class AppView:
    """AppView class to draw overall app screen.

    Reads the state and never writes to it. The only thing kept here is
    the scroll offset of the row list.

    Attributes:
        stdscr: curses.window
        state: AppState
    """

    stdscr: curses.window
    state: AppState
    list_offset: int = 0

    def draw(self) -> None:
        """Draw overall app screen."""
        self.stdscr.erase()
        max_y, max_x = self.stdscr.getmaxyx()
        if max_y < 2 or max_x < 2:
            # give up drawing if terminal size is too small
            self.stdscr.refresh()
            return

        mode = self.state.mode
        page = self._current_page()
        on_page = page is not None and not isinstance(mode, PageSelect)
        if isinstance(mode, TextEntry) and mode.kind == "new_page":
            on_page = False
        if isinstance(mode, Alert) and mode.origin in (None, "new_page"):
            on_page = False

        self._draw_header(max_x, page if on_page else None)
        self._draw_footer(max_y - 1, max_x)

        content_y = HeaderLines.height()
        content_height = max_y - content_y - 1
        if content_height <= 0:
            self.stdscr.refresh()
            return

        if on_page and page is not None:
            self._draw_rows(page, content_y, content_height, max_x)
        else:
            self._draw_page_select(content_y, content_height, max_x)

        # popups
        match mode:
            case ChooseAddTarget():
                self._draw_add_select(max_y, max_x)
            case TextEntry(kind=kind):
                self._draw_input_box(TEXT_ENTRY_TITLES[kind], max_y, max_x)
            case Alert(kind=kind, message=message):
                self._draw_alert_box(ALERT_TITLES[kind], message, max_y, max_x)
            case PageSelect() | Browsing():
                pass

        if not isinstance(mode, TextEntry):
            self._cursor_off()

        self.stdscr.refresh()

    def _current_page(self) -> Page | None:
        sel = self.state.selection.selected_page
        if sel is None:
            return None
        match self.state.model.page(sel):
            case Ok(page):
                return page  # type: ignore[no-any-return]
            case _:
                return None

    def _safe_addnstr(self, y: int, x: int, s: str, n: int, attr: int = 0) -> None:
        """Add a string to the screen safely."""
        max_y, max_x = self.stdscr.getmaxyx()

        # 画面外なら描かない
        if y < 0 or y >= max_y or x < 0 or x >= max_x:
            return
        # 右端を超えないようにクリップ
        limit = max_x - x
        if limit <= 0 or n <= 0:
            return
        # 最終行では右端1マスを開ける
        if y == max_y - 1 and limit == max_x:
            limit -= 1

        s = s.replace("\t", " ")  # タブがいると幅が読めないので潰す
        n = min(n, len(s), limit)
        if n <= 0:
            return

        # nを減らしながらトライ (例外が発生したら1文字ずつ減らして再試行)
        while n > 0:
            chunk = s[:n]
            try:
                self.stdscr.addnstr(y, x, chunk, n, attr)
            except curses.error:
                n -= 1
            else:
                return

    def _color(self, pair: int) -> int:
        return curses.color_pair(pair) if curses.has_colors() else 0

    # header/footer
    def _draw_header(self, width: int, page: Page | None) -> None:
        title = HeaderLines.title(self.state.title, page.title if page is not None else None)
        helps = HeaderLines.help(browsing=page is not None)
        attr = self._color(MAIN_THEME_COLOR)
        self._safe_addnstr(0, 0, title.ljust(width), width, attr)
        self._safe_addnstr(1, 0, helps.ljust(width), width, attr)

    def _draw_footer(self, y: int, width: int) -> None:
        msg = self.state.msg_footer or ""
        self._safe_addnstr(y, 0, msg.ljust(width), width)

    # page select
    def _draw_page_select(self, y: int, height: int, max_x: int) -> None:
        pages = self.state.model.pages
        box_width = min(PAGE_MENU_WIDTH, max_x)
        box_height = min(PAGE_MENU_HEIGHT, height)
        left = max(0, (max_x - box_width) // 2)

        self._safe_addnstr(y, left, "[Pages]".center(box_width), box_width)
        if not pages:
            lines = ["No pages found...", "Press 'a' to create one."]
            for i, line in enumerate(lines):
                self._safe_addnstr(y + 2 + i, left + _center_x(box_width, line), line, box_width)
            return

        list_height = max(0, box_height - 1)
        selected = self.state.selection.selected_page
        offset = _scroll_offset(selected, 0, list_height, len(pages))
        for i, page in enumerate(pages[offset : offset + list_height]):
            idx = offset + i
            marker = ">>" if idx == selected else "  "
            line = _clip_to_width(f"{marker} {page.title}", box_width)
            attr = self._color(SELECTED_ROW_COLOR) | curses.A_BOLD if idx == selected else 0
            self._safe_addnstr(y + 1 + i, left, line.ljust(box_width), box_width, attr)

    # browsing
    def _draw_rows(self, page: Page, y: int, height: int, width: int) -> None:
        rows = flatten(page)
        if not rows:
            self._safe_addnstr(y, 0, "(no groups: press 'a' then 'g')", width)
            return

        cursor = self.state.selection.flat_cursor
        self.list_offset = _scroll_offset(cursor, self.list_offset, height, len(rows))
        start = self.list_offset
        end = min(start + height, len(rows))

        for i, idx in enumerate(range(start, end)):
            row = rows[idx]
            line, attr = self._format_row(page, row)
            if idx == cursor:
                attr = self._color(SELECTED_ROW_COLOR) | curses.A_REVERSE
            self._safe_addnstr(y + i, 0, _clip_to_width(line, width).ljust(width), width, attr)

    def _format_row(self, page: Page, row: Row) -> tuple[str, int]:
        match row:
            case GroupHeader(group=g):
                group = page.groups[g]
                fold = "v" if group.show_items else ">"
                return f"{fold} {group.title} ({len(group.items)})", curses.A_BOLD
            case ItemRow(group=g, item=i):
                item = page.groups[g].items[i]
                mark = STATE_MARK_MAP.get(item.state, "?")
                attr = 0
                if item.state == "done":
                    attr = self._color(COMPLETED_COLOR)
                elif item.state == "failed":
                    attr = self._color(FAILED_COLOR)
                elif item.state == "late":
                    attr = self._color(LATE_COLOR)
                return f"{ITEM_INDENT}[{mark}] {item.title}", attr
            case _:
                return "", 0

    # popups
    def _fill_box(self, top: int, left: int, height: int, width: int, attr: int) -> None:
        for row in range(height):
            self._safe_addnstr(top + row, left, " " * width, width, attr)

    def _draw_add_select(self, max_y: int, max_x: int) -> None:
        width = min(ADD_SELECT_BOX_WIDTH, max_x)
        lines = ["[Select]", "(i) Add Item", "(g) Add Group", "(Esc) Back"]
        top = max(0, (max_y - len(lines)) // 2)
        left = max(0, (max_x - width) // 2)
        attr = self._color(POPUP_BG_COLOR)
        self._fill_box(top, left, len(lines), width, attr)
        for i, line in enumerate(lines):
            self._safe_addnstr(top + i, left, line.ljust(width), width, attr)

    def _draw_input_box(self, title: str, max_y: int, max_x: int) -> None:
        width = min(INPUT_BOX_WIDTH, max_x)
        top = max(0, (max_y - 3) // 2)
        left = max(0, (max_x - width) // 2)
        attr = self._color(POPUP_BG_COLOR)
        self._fill_box(top, left, 3, width, attr)
        self._safe_addnstr(top, left, f"[{title}]".ljust(width), width, attr)

        # 入力が長いときは末尾を見せる
        value = self.state.buffer
        inner = max(1, width - 2)
        while _string_width(value) > inner - 1:
            value = value[1:]
        self._safe_addnstr(top + 1, left + 1, value.ljust(inner), inner, attr)
        self._safe_addnstr(top + 2, left, "[Enter: Apply, Esc: Cancel]".ljust(width), width, attr)

        # ---- draw text cursor ---------------------------------------------
        cursor_row = top + 1
        cursor_col = left + 1 + _string_width(value)
        try:
            curses.curs_set(1)
            if 0 <= cursor_row < max_y and 0 <= cursor_col < max_x:
                self.stdscr.move(cursor_row, cursor_col)
        except curses.error:
            # cursor control may be failed depending on the terminal environment
            logger.warning("Cursor position out of screen: row=%d, col=%d", cursor_row, cursor_col)

    def _draw_alert_box(self, title: str, message: str, max_y: int, max_x: int) -> None:
        width = min(ALERT_BOX_WIDTH, max_x)
        height = min(ALERT_BOX_HEIGHT, max_y)
        top = max(0, (max_y - height) // 2)
        left = max(0, (max_x - width) // 2)
        attr = self._color(ALERT_BG_COLOR)
        self._fill_box(top, left, height, width, attr)
        self._safe_addnstr(top, left, f"[{title}]".ljust(width), width, attr)
        for i, line in enumerate(message.splitlines()[: max(0, height - 3)]):
            self._safe_addnstr(top + 2 + i, left + 1, line.strip(), width - 2, attr)
        self._safe_addnstr(top + height - 1, left, "[any key: close]".ljust(width), width, attr)

    def _cursor_off(self) -> None:
        """Turn off cursor."""
        try:
            curses.curs_set(0)
        except curses.error:
            logger.exception("Error (cursor off)")
