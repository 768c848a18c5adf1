import argparse
import curses
import locale
from collections.abc import Callable

from pyresults import Err, Ok

from pagetodo.interfaces.tui.app import App
from pagetodo.interfaces.tui.data import AppState
from pagetodo.interfaces.tui.keymap import Keymap, load_keymap
from pagetodo.interfaces.tui.view import AppView, init_colors
from pagetodo.util.dirs import DEFAULT_POLL_MS
from pagetodo.util.logger import setup_logger

logger = setup_logger("pagetodo")

KeyEvent = tuple[int, str | None]


def read_event(stdscr: curses.window) -> KeyEvent | None:
    """Wait for one key (bounded by stdscr.timeout). None means no key arrived."""
    try:
        key_raw = stdscr.get_wch()
    except curses.error:
        return None
    key = ord(key_raw) if isinstance(key_raw, str) else key_raw
    ch = key_raw if isinstance(key_raw, str) else None
    return key, ch


def event_loop(
    app: App,
    draw: Callable[[], None],
    read: Callable[[], KeyEvent | None],
) -> int:
    """Render, then handle at most one event, until the quit flag is set."""
    while not app.state.should_quit:
        app.sync_selection()
        draw()
        event = read()
        if event is None:
            continue
        key, ch = event
        cont = app.handle_key(key, ch)
        if not cont:
            break
    logger.info("quit")
    return 0


def build_app(args: argparse.Namespace | None = None) -> App:
    title = getattr(args, "title", None) or "pagetodo"
    keymap = Keymap.default()
    keymap_path = getattr(args, "keymap", None)
    if keymap_path:
        match load_keymap(keymap_path):
            case Ok(loaded):
                keymap = loaded
            case Err(e):
                logger.warning("keymap ignored: %s", e)
    return App(AppState(title=title), keymap)


def main(stdscr: curses.window, args: argparse.Namespace | None = None) -> int:
    locale.setlocale(locale.LC_ALL, "")
    curses.curs_set(0)
    stdscr.keypad(True)  # noqa: FBT003
    stdscr.timeout(getattr(args, "poll_ms", None) or DEFAULT_POLL_MS)
    init_colors()

    app = build_app(args)
    view = AppView(stdscr, app.state)
    return event_loop(app, view.draw, lambda: read_event(stdscr))


def run(args: argparse.Namespace | None = None) -> int:
    return curses.wrapper(main, args)
