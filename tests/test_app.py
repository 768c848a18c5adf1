import curses
import unittest

from pagetodo.core.flatten import GroupHeader, ItemRow
from pagetodo.interfaces.tui.app import App
from pagetodo.interfaces.tui.data import (
    MSG_PAGE_GONE,
    MSG_SELECT_GROUP_FIRST,
    Alert,
    AppState,
    Browsing,
    ChooseAddTarget,
    PageSelect,
    TextEntry,
)

ENTER = 10
ESC = 27


def press(app: App, *keys: int | str) -> None:
    """Feed keys like get_wch() would: str -> (ord, ch), int -> (key, None)."""
    for k in keys:
        if isinstance(k, str):
            for c in k:
                app.handle_key(ord(c), c)
        else:
            app.handle_key(k)


def browsing_app(*groups: tuple[str, list[str]]) -> App:
    """An app already browsing page 0 with the given groups/items."""
    app = App()
    model = app.state.model
    p = model.add_page("Home")
    for title, items in groups:
        g = model.add_group(p, title).unwrap()
        for item in items:
            model.add_todo(p, g, item)
    app.state.selection.select_page(p)
    app.sync_selection()
    app.state.mode = Browsing()
    return app


class TestInitialState(unittest.TestCase):
    def test_initial(self) -> None:
        app = App()
        assert app.state.mode == PageSelect()
        assert app.state.selection.selected_page is None
        assert app.state.buffer == ""
        assert app.state.should_quit is False
        assert app.state.has_popup is False
        assert app.rows() == []


class TestPageSelect(unittest.TestCase):
    def test_add_key_enters_text_entry(self) -> None:
        app = App()
        app.state.buffer = "stale"
        press(app, "a")
        assert app.state.mode == TextEntry("new_page")
        assert app.state.buffer == ""

    def test_confirm_without_pages_stays(self) -> None:
        app = App()
        press(app, ENTER)
        assert app.state.mode == PageSelect()

    def test_confirm_without_cursor_stays(self) -> None:
        app = App()
        app.state.model.add_page("Home")
        press(app, ENTER)
        assert app.state.mode == PageSelect()

    def test_confirm_with_page_enters_browsing(self) -> None:
        app = App()
        app.state.model.add_page("Home")
        press(app, "j", ENTER)
        assert app.state.selection.selected_page == 0
        assert app.state.mode == Browsing()

    def test_page_cursor_wraps(self) -> None:
        app = App()
        for title in ("a", "b", "c"):
            app.state.model.add_page(title)
        press(app, curses.KEY_DOWN)
        assert app.state.selection.selected_page == 0
        press(app, "k")
        assert app.state.selection.selected_page == 2
        press(app, curses.KEY_DOWN)
        assert app.state.selection.selected_page == 0

    def test_page_cursor_without_pages_is_noop(self) -> None:
        app = App()
        press(app, "j", "k")
        assert app.state.selection.selected_page is None

    def test_quit_key(self) -> None:
        app = App()
        assert app.handle_key(ord("q"), "q") is False
        assert app.state.should_quit is True

    def test_escape_quits(self) -> None:
        app = App()
        assert app.handle_key(ESC) is False
        assert app.state.should_quit is True

    def test_no_input_after_quit(self) -> None:
        app = App()
        press(app, "q")
        assert app.handle_key(ord("a"), "a") is False
        assert app.state.mode == PageSelect()


class TestTextEntry(unittest.TestCase):
    def test_type_and_backspace(self) -> None:
        app = App()
        press(app, "a", "Grocx", curses.KEY_BACKSPACE)
        assert app.state.buffer == "Groc"
        press(app, 127, 8)
        assert app.state.buffer == "Gr"

    def test_backspace_on_empty_is_noop(self) -> None:
        app = App()
        press(app, "a", curses.KEY_BACKSPACE)
        assert app.state.buffer == ""
        assert app.state.mode == TextEntry("new_page")

    def test_navigation_letters_are_text(self) -> None:
        app = App()
        press(app, "a", "jkqa")
        assert app.state.buffer == "jkqa"
        assert app.state.mode == TextEntry("new_page")
        assert app.state.should_quit is False

    def test_control_chars_ignored(self) -> None:
        app = App()
        press(app, "a")
        app.handle_key(1, "\x01")
        assert app.state.buffer == ""

    def test_wide_chars(self) -> None:
        app = App()
        press(app, "a", "買い物")
        assert app.state.buffer == "買い物"

    def test_confirm_empty_after_trim_stays(self) -> None:
        app = App()
        press(app, "a", "   ", ENTER)
        assert app.state.mode == TextEntry("new_page")
        assert app.state.model.pages == []
        assert app.state.buffer == "   "

    def test_cancel_new_page(self) -> None:
        app = App()
        press(app, "a", "Work", ESC)
        assert app.state.mode == PageSelect()
        assert app.state.buffer == ""
        assert app.state.model.pages == []

    def test_commit_new_page_selects_it(self) -> None:
        app = App()
        app.state.model.add_page("Old")
        press(app, "a", "  New  ", ENTER)
        assert [p.title for p in app.state.model.pages] == ["Old", "New"]
        assert app.state.selection.selected_page == 1
        assert app.state.mode == PageSelect()
        assert app.state.buffer == ""

    def test_commit_new_group(self) -> None:
        app = browsing_app()
        press(app, "a", "g")
        assert app.state.mode == TextEntry("new_group")
        press(app, "Dairy", ENTER)
        assert app.state.mode == Browsing()
        assert [g.title for g in app.state.model.pages[0].groups] == ["Dairy"]
        assert app.state.selection.flat_cursor == 0
        assert app.current_group() == 0

    def test_cancel_new_group(self) -> None:
        app = browsing_app(("A", []))
        press(app, "a", "g", "xyz", ESC)
        assert app.state.mode == Browsing()
        assert len(app.state.model.pages[0].groups) == 1
        assert app.state.buffer == ""

    def test_commit_new_todo_on_header(self) -> None:
        app = browsing_app(("A", ["a1"]), ("B", []))
        press(app, "j", "j")  # B のヘッダ
        assert app.current_group() == 1
        press(app, "a", "i", "milk", ENTER)
        assert app.state.mode == Browsing()
        items = app.state.model.pages[0].groups[1].items
        assert [t.title for t in items] == ["milk"]
        assert items[0].id == 2

    def test_commit_new_todo_on_item_row_uses_its_group(self) -> None:
        app = browsing_app(("A", ["a1"]), ("B", []))
        press(app, "j")  # a1
        assert app.current_item() == 0
        press(app, "a", "i", "a2", ENTER)
        assert [t.title for t in app.state.model.pages[0].groups[0].items] == ["a1", "a2"]

    def test_commit_new_todo_without_group_alerts(self) -> None:
        app = browsing_app()
        press(app, "a", "i", "milk", ENTER)
        assert app.state.mode == Alert("error", MSG_SELECT_GROUP_FIRST, origin="new_todo")
        assert app.state.has_popup is True
        assert app.state.buffer == ""
        assert app.state.model.pages[0].groups == []

    def test_chars_sharing_key_codes_are_text(self) -> None:
        # ord("ć") == KEY_BACKSPACE, ord("ŗ") == KEY_ENTER
        app = App()
        press(app, "a", "Ćwić")
        assert app.state.buffer == "Ćwić"
        assert app.state.mode == TextEntry("new_page")
        press(app, "ŗ")
        assert app.state.buffer == "Ćwićŗ"
        assert app.state.mode == TextEntry("new_page")
        assert app.state.model.pages == []
        press(app, curses.KEY_BACKSPACE, ENTER)
        assert [p.title for p in app.state.model.pages] == ["Ćwić"]
        assert app.state.mode == PageSelect()


class TestBrowsing(unittest.TestCase):
    def test_back_to_page_select(self) -> None:
        app = browsing_app()
        press(app, ESC)
        assert app.state.mode == PageSelect()
        assert app.state.should_quit is False

    def test_add_opens_choose_target(self) -> None:
        app = browsing_app()
        press(app, "a")
        assert app.state.mode == ChooseAddTarget()
        press(app, ESC)
        assert app.state.mode == Browsing()

    def test_choose_target_ignores_other_keys(self) -> None:
        app = browsing_app()
        press(app, "a", "x", "j")
        assert app.state.mode == ChooseAddTarget()

    def test_cursor_wraps(self) -> None:
        app = browsing_app(("A", ["a1", "a2"]))
        assert app.state.selection.flat_cursor == 0
        press(app, "k")
        assert app.state.selection.flat_cursor == 2
        press(app, "j")
        assert app.state.selection.flat_cursor == 0

    def test_cursor_on_empty_page(self) -> None:
        app = browsing_app()
        press(app, "j", curses.KEY_UP)
        assert app.state.selection.flat_cursor is None
        assert app.current_group() is None

    def test_chars_sharing_arrow_codes_do_not_move(self) -> None:
        # ord("ă") == KEY_UP, ord("Ă") == KEY_DOWN
        app = browsing_app(("A", ["a1", "a2"]))
        press(app, "ă", "Ă")
        assert app.state.selection.flat_cursor == 0
        assert app.state.mode == Browsing()

    def test_toggle_collapses_and_keeps_header(self) -> None:
        app = browsing_app(("A", ["a1", "a2"]), ("B", ["b1"]))
        press(app, "j")  # a1
        press(app, "t")
        assert app.state.model.pages[0].groups[0].show_items is False
        assert app.rows() == [GroupHeader(0), GroupHeader(1), ItemRow(1, 0)]
        assert app.state.selection.flat_cursor == 0
        press(app, " ")
        assert len(app.rows()) == 5

    def test_toggle_without_group(self) -> None:
        app = browsing_app()
        press(app, "t")
        assert app.state.msg_footer == "No group selected"

    def test_cycle_state(self) -> None:
        app = browsing_app(("A", ["a1"]))
        press(app, "j", "s")
        assert app.state.model.pages[0].groups[0].items[0].state == "done"
        assert app.state.msg_footer == "State -> done"

    def test_cycle_state_on_header(self) -> None:
        app = browsing_app(("A", ["a1"]))
        press(app, "s")
        assert app.state.model.pages[0].groups[0].items[0].state == "idle"
        assert app.state.msg_footer == "No item selected"

    def test_move_item_cursor_follows(self) -> None:
        app = browsing_app(("A", ["a1", "a2", "a3"]))
        press(app, "j", "J")
        titles = [t.title for t in app.state.model.pages[0].groups[0].items]
        assert titles == ["a2", "a1", "a3"]
        assert app.state.selection.flat_cursor == 2
        assert app.current_item() == 1
        press(app, "K", "K")
        titles = [t.title for t in app.state.model.pages[0].groups[0].items]
        assert titles == ["a1", "a2", "a3"]
        assert app.current_item() == 0

    def test_remove_last_item_reclamps(self) -> None:
        app = browsing_app(("A", ["a1", "a2"]))
        press(app, "k")  # a2 (最終行)
        press(app, "d")
        assert [t.title for t in app.state.model.pages[0].groups[0].items] == ["a1"]
        assert app.state.selection.flat_cursor == 1

    def test_remove_group_on_header(self) -> None:
        app = browsing_app(("A", ["a1"]))
        press(app, "d")
        assert app.state.model.pages[0].groups == []
        assert app.state.selection.flat_cursor is None
        assert app.current_group() is None

    def test_clear_group(self) -> None:
        app = browsing_app(("A", ["a1", "a2"]), ("B", []))
        press(app, "k")  # B
        press(app, "k")  # a2
        press(app, "C")
        assert app.state.model.pages[0].groups[0].items == []
        assert app.state.selection.flat_cursor == 0
        assert app.state.msg_footer == "Cleared: 2 item(s)"

    def test_stale_page_raises_alert(self) -> None:
        app = browsing_app(("A", []))
        app.state.selection.selected_page = 4
        press(app, "j")
        assert app.state.mode == Alert("error", MSG_PAGE_GONE, origin=None)
        assert app.state.selection.selected_page is None
        press(app, "x")
        assert app.state.mode == PageSelect()


class TestAlert(unittest.TestCase):
    def test_dismiss_after_new_todo_returns_to_browsing(self) -> None:
        app = browsing_app()
        press(app, "a", "i", "milk", ENTER)
        assert isinstance(app.state.mode, Alert)
        press(app, "z")
        assert app.state.mode == Browsing()
        assert app.state.has_popup is False

    def test_dismiss_without_origin_returns_to_page_select(self) -> None:
        app = browsing_app()
        app.alert_box("message", "hello")
        press(app, ENTER)
        assert app.state.mode == PageSelect()

    def test_dismiss_new_page_origin_returns_to_page_select(self) -> None:
        app = App()
        app.alert_box("warning", "careful", origin="new_page")
        press(app, ESC)
        assert app.state.mode == PageSelect()
        assert app.state.should_quit is False

    def test_dismiss_new_group_origin_returns_to_browsing(self) -> None:
        app = browsing_app()
        app.alert_box("error", "boom", origin="new_group")
        press(app, "q")
        assert app.state.mode == Browsing()
        assert app.state.should_quit is False


class TestInjectedState(unittest.TestCase):
    def test_uses_given_state(self) -> None:
        state = AppState(title="Mine")
        app = App(state)
        assert app.state is state
        assert app.state.title == "Mine"


if __name__ == "__main__":
    unittest.main()
