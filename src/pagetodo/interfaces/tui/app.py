from pyresults import Err, Ok

from pagetodo.core.flatten import Row, flatten
from pagetodo.core.models import Page
from pagetodo.interfaces.tui.data import (
    MSG_PAGE_GONE,
    MSG_SELECT_GROUP_FIRST,
    Alert,
    AlertKind,
    AppState,
    Browsing,
    ChooseAddTarget,
    Mode,
    PageSelect,
    TextEntry,
    TextKind,
)
from pagetodo.interfaces.tui.keymap import Keymap, is_printable
from pagetodo.util.logger import setup_logger

logger = setup_logger("pagetodo")


class App:
    """Mode state machine: one router per mode, one key per call."""

    def __init__(
        self,
        state: AppState | None = None,
        keymap: Keymap | None = None,
    ) -> None:
        self.state = state if state is not None else AppState()
        self.keymap = keymap if keymap is not None else Keymap.default()

    # ---- selection helpers ----------------------------------------------

    def current_page(self) -> Page | None:
        sel = self.state.selection.selected_page
        if sel is None:
            return None
        match self.state.model.page(sel):
            case Ok(page):
                return page  # type: ignore[no-any-return]
            case _:
                return None

    def rows(self) -> list[Row]:
        """Flattened rows of the selected page (empty when there is none)."""
        page = self.current_page()
        if page is None:
            return []
        return flatten(page)

    def sync_selection(self) -> list[Row]:
        """Recompute rows and clamp the flat cursor against them."""
        rows = self.rows()
        self.state.selection.sync(rows)
        return rows

    def current_group(self) -> int | None:
        group, _ = self.state.selection.resolve(self.sync_selection())
        return group

    def current_item(self) -> int | None:
        _, item = self.state.selection.resolve(self.sync_selection())
        return item

    # ---- mode helpers ---------------------------------------------------

    def _set_mode(self, mode: Mode) -> None:
        logger.debug("mode: %s -> %s", self.state.mode, mode)
        self.state.mode = mode

    def alert_box(self, kind: AlertKind, message: str, origin: TextKind | None = None) -> None:
        self._set_mode(Alert(kind=kind, message=message, origin=origin))

    def _start_text_entry(self, kind: TextKind) -> None:
        self.state.buffer = ""
        self._set_mode(TextEntry(kind))

    def _leave_text_entry(self, kind: TextKind) -> None:
        self.state.buffer = ""
        if kind == "new_page":
            self._set_mode(PageSelect())
        else:
            self._set_mode(Browsing())

    def _lose_page(self) -> None:
        """Selected page index went stale: drop the selection and tell the user."""
        logger.warning("stale page index: %s", self.state.selection.selected_page)
        self.state.selection.clear()
        self.state.buffer = ""
        self.alert_box("error", MSG_PAGE_GONE)

    # ---- page select ----------------------------------------------------

    def _handle_page_select_key(self, key: int, ch: str | None = None) -> None:
        km = self.keymap
        sel = self.state.selection
        n_pages = len(self.state.model.pages)

        if km.matches("quit", key, ch):
            self.state.should_quit = True
        elif km.matches("up", key, ch):
            sel.move_page(n_pages, -1)
        elif km.matches("down", key, ch):
            sel.move_page(n_pages, +1)
        elif km.matches("confirm", key, ch):
            if sel.selected_page is not None and self.current_page() is not None:
                self.sync_selection()
                self._set_mode(Browsing())
        elif km.matches("add", key, ch):
            self._start_text_entry("new_page")

    # ---- browsing -------------------------------------------------------

    def _toggle_group(self) -> None:
        page = self.state.selection.selected_page
        group = self.current_group()
        if page is None or group is None:
            self.state.msg_footer = "No group selected"
            return
        match self.state.model.toggle_group_visibility(page, group):
            case Ok(shown):
                # 折りたたみ後もヘッダ行にカーソルを残す
                self.state.selection.locate(self.rows(), group)
                self.state.msg_footer = f"Items {'shown' if shown else 'hidden'}"
            case Err(e):
                self.state.msg_footer = f"Error (toggle): {e}"

    def _clear_group(self) -> None:
        page = self.state.selection.selected_page
        group = self.current_group()
        if page is None or group is None:
            self.state.msg_footer = "No group selected"
            return
        match self.state.model.clear_group_items(page, group):
            case Ok(removed):
                self.state.selection.locate(self.rows(), group)
                self.state.msg_footer = f"Cleared: {removed} item(s)"
            case Err(e):
                self.state.msg_footer = f"Error (clear): {e}"

    def _cycle_item_state(self) -> None:
        page = self.state.selection.selected_page
        group = self.current_group()
        item = self.current_item()
        if page is None or group is None or item is None:
            self.state.msg_footer = "No item selected"
            return
        match self.state.model.cycle_item_state(page, group, item):
            case Ok(new_state):
                self.state.msg_footer = f"State -> {new_state}"
            case Err(e):
                self.state.msg_footer = f"Error (state): {e}"

    def _move_item(self, delta: int) -> None:
        page = self.state.selection.selected_page
        group = self.current_group()
        item = self.current_item()
        if page is None or group is None or item is None:
            self.state.msg_footer = "No item selected"
            return
        match self.state.model.move_item(page, group, item, delta):
            case Ok(new_index):
                # カーソルは移動したアイテムに追従
                self.state.selection.locate(self.rows(), group, new_index)
            case Err(e):
                self.state.msg_footer = f"Error (move): {e}"

    def _remove_selected(self) -> None:
        page = self.state.selection.selected_page
        group = self.current_group()
        item = self.current_item()
        if page is None or group is None:
            self.state.msg_footer = "No group selected"
            return
        if item is not None:
            match self.state.model.remove_item(page, group, item):
                case Ok(removed):
                    self.state.msg_footer = f"Removed item: {removed.title}"
                case Err(e):
                    self.state.msg_footer = f"Error (remove): {e}"
        else:
            match self.state.model.remove_group(page, group):
                case Ok(removed):
                    self.state.msg_footer = f"Removed group: {removed.title}"
                case Err(e):
                    self.state.msg_footer = f"Error (remove): {e}"
        self.sync_selection()

    def _handle_browsing_key(self, key: int, ch: str | None = None) -> None:  # noqa: C901
        if self.current_page() is None:
            self._lose_page()
            return

        km = self.keymap
        if km.matches("back", key, ch):
            self._set_mode(PageSelect())
        elif km.matches("up", key, ch):
            self.state.selection.move_cursor(self.sync_selection(), -1)
        elif km.matches("down", key, ch):
            self.state.selection.move_cursor(self.sync_selection(), +1)
        elif km.matches("add", key, ch):
            self._set_mode(ChooseAddTarget())
        elif km.matches("toggle", key, ch):
            self._toggle_group()
        elif km.matches("clear", key, ch):
            self._clear_group()
        elif km.matches("cycle_state", key, ch):
            self._cycle_item_state()
        elif km.matches("move_up", key, ch):
            self._move_item(-1)
        elif km.matches("move_down", key, ch):
            self._move_item(+1)
        elif km.matches("remove", key, ch):
            self._remove_selected()

    # ---- choose add target ----------------------------------------------

    def _handle_add_target_key(self, key: int, ch: str | None = None) -> None:
        if self.current_page() is None:
            self._lose_page()
            return

        km = self.keymap
        if km.matches("add_item", key, ch):
            self._start_text_entry("new_todo")
        elif km.matches("add_group", key, ch):
            self._start_text_entry("new_group")
        elif km.matches("back", key, ch):
            self._set_mode(Browsing())

    # ---- text entry -----------------------------------------------------

    def _commit_text(self, kind: TextKind, text: str) -> None:
        model = self.state.model
        sel = self.state.selection

        if kind == "new_page":
            page = model.add_page(text)
            sel.select_page(page)
            self.state.msg_footer = f"Added page: {text}"
            self._leave_text_entry(kind)
            return

        if sel.selected_page is None:
            self._lose_page()
            return

        if kind == "new_group":
            match model.add_group(sel.selected_page, text):
                case Ok(_):
                    self.state.msg_footer = f"Added group: {text}"
                    self.sync_selection()
                    self._leave_text_entry(kind)
                case Err(e):
                    logger.warning("add_group failed: %s", e)
                    self._lose_page()
            return

        # new_todo
        group = self.current_group()
        if group is None:
            self.state.buffer = ""
            self.alert_box("error", MSG_SELECT_GROUP_FIRST, origin=kind)
            return
        match model.add_todo(sel.selected_page, group, text):
            case Ok(item):
                self.state.msg_footer = f"Added todo: #{item.id} {text}"
                self.sync_selection()
                self._leave_text_entry(kind)
            case Err(e):
                logger.warning("add_todo failed: %s", e)
                self.state.buffer = ""
                self.alert_box("error", MSG_SELECT_GROUP_FIRST, origin=kind)

    def _handle_text_entry_key(self, kind: TextKind, key: int, ch: str | None = None) -> None:
        km = self.keymap

        # Enter: commit (空文字なら何もしない)
        if km.matches("confirm", key, ch):
            text = self.state.buffer.strip()
            if text:
                self._commit_text(kind, text)
            return

        # Esc: cancel
        if km.matches("back", key, ch):
            self.state.msg_footer = "Canceled"
            self._leave_text_entry(kind)
            return

        if km.matches("backspace", key, ch):
            self.state.buffer = self.state.buffer[:-1]
            return

        # 文字入力
        # chがstrのときはget_wch()からきた通常文字として扱う
        insert_ch: str | None = None
        if ch is not None:
            insert_ch = ch
        elif 32 <= key <= 126:
            insert_ch = chr(key)

        if insert_ch is not None and is_printable(insert_ch):
            self.state.buffer += insert_ch

    # ---- alert ----------------------------------------------------------

    def _dismiss_alert(self, alert: Alert) -> None:
        if alert.origin in (None, "new_page"):
            self._set_mode(PageSelect())
        else:
            self._set_mode(Browsing())

    # ---- routing --------------------------------------------------------

    def handle_key(self, key: int, ch: str | None = None) -> bool:
        """Route one key event by mode. Returns False once the app should quit."""
        if self.state.should_quit:
            return False

        match self.state.mode:
            case PageSelect():
                self._handle_page_select_key(key, ch)
            case Browsing():
                self._handle_browsing_key(key, ch)
            case ChooseAddTarget():
                self._handle_add_target_key(key, ch)
            case TextEntry(kind=kind):
                self._handle_text_entry_key(kind, key, ch)
            case Alert() as alert:
                self._dismiss_alert(alert)

        return not self.state.should_quit
