import curses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import yaml  # type: ignore[import-untyped]
from pyresults import Err, Ok, Result

Action = Literal[
    "up",
    "down",
    "confirm",
    "back",
    "quit",
    "add",
    "add_item",
    "add_group",
    "backspace",
    "toggle",
    "cycle_state",
    "move_up",
    "move_down",
    "remove",
    "clear",
]
KeyBinding = int | str  # int: キーコード, str: 入力文字

# 特殊キー名 -> キーコード (SPACE だけは文字として扱う)
NAMED_KEYS: dict[str, tuple[KeyBinding, ...]] = {
    "ESC": (27,),
    "ENTER": (curses.KEY_ENTER, 10, 13),
    "BACKSPACE": (curses.KEY_BACKSPACE, 127, 8),
    "SPACE": (" ",),
    "TAB": (9,),
}

# テキスト入力中にも効くので、印字可能文字は割り当てられない
TEXT_ENTRY_ACTIONS = ("confirm", "back", "backspace")

DEFAULT_BINDINGS: dict[str, list[str]] = {
    "up": ["k", "KEY_UP"],
    "down": ["j", "KEY_DOWN"],
    "confirm": ["ENTER"],
    "back": ["ESC"],
    "quit": ["ESC", "q"],
    "add": ["a"],
    "add_item": ["i"],
    "add_group": ["g"],
    "backspace": ["BACKSPACE"],
    "toggle": ["t", "SPACE"],
    "cycle_state": ["s"],
    "move_up": ["K"],
    "move_down": ["J"],
    "remove": ["d"],
    "clear": ["C"],
}


def is_printable(ch: str) -> bool:
    return len(ch) == 1 and ch >= " " and ch != "\x7f"


def parse_key_name(name: str) -> Result[tuple[KeyBinding, ...], str]:
    """Turn a key name from the keymap file into bindings.

    One literal character stays a character binding. A name from
    NAMED_KEYS or a curses constant such as ``KEY_UP`` becomes key codes.
    """
    if len(name) == 1:
        return Ok[tuple[KeyBinding, ...], str]((name,) if is_printable(name) else (ord(name),))
    if name.upper() in NAMED_KEYS:
        return Ok[tuple[KeyBinding, ...], str](NAMED_KEYS[name.upper()])
    if name.startswith("KEY_") and isinstance(code := getattr(curses, name, None), int):
        return Ok[tuple[KeyBinding, ...], str]((code,))
    return Err[tuple[KeyBinding, ...], str](f"Unknown key name: {name!r}")


@dataclass
class Keymap:
    """Action bindings, split into key codes and typed characters.

    get_wch() hands over a printable character as ``(ord(ch), ch)``, and
    ``ord(ch)`` can equal a curses code (``ord("ć") == KEY_BACKSPACE``).
    A printable ``ch`` is therefore only compared with character bindings.
    """

    codes: dict[str, frozenset[int]] = field(default_factory=dict)
    chars: dict[str, frozenset[str]] = field(default_factory=dict)

    def matches(self, action: Action, key: int, ch: str | None = None) -> bool:
        chars = self.chars.get(action, frozenset())
        if ch is not None and is_printable(ch):
            return ch in chars
        # 従来互換: int だけ渡ってきた場合は ASCII 文字としても照合する
        if ch is None and 32 <= key <= 126 and chr(key) in chars:
            return True
        return key in self.codes.get(action, frozenset())

    @classmethod
    def from_names(cls, names: dict[str, list[str]]) -> Result["Keymap", str]:
        codes: dict[str, frozenset[int]] = {}
        chars: dict[str, frozenset[str]] = {}
        for action, key_names in names.items():
            action_codes: set[int] = set()
            action_chars: set[str] = set()
            for key_name in key_names:
                match parse_key_name(str(key_name)):
                    case Ok(parsed):
                        for binding in parsed:
                            if isinstance(binding, str):
                                action_chars.add(binding)
                            else:
                                action_codes.add(binding)
                    case Err(e):
                        return Err[Keymap, str](f"{action}: {e}")
                    case _:
                        return Err[Keymap, str]("Unexpected error")
            if action in TEXT_ENTRY_ACTIONS and any(is_printable(c) for c in action_chars):
                _msg = f"{action}: printable characters cannot be bound (they are typed as text)"
                return Err[Keymap, str](_msg)
            codes[action] = frozenset(action_codes)
            chars[action] = frozenset(action_chars)
        return Ok[Keymap, str](cls(codes, chars))

    @classmethod
    def default(cls) -> "Keymap":
        return cls.from_names(DEFAULT_BINDINGS).unwrap()  # type: ignore[no-any-return]


def _validate_names(raw: Any) -> Result[dict[str, list[str]], str]:
    if raw is None:
        return Ok[dict[str, list[str]], str]({})
    if not isinstance(raw, dict):
        return Err[dict[str, list[str]], str]("Keymap must be a mapping of action -> keys")
    names: dict[str, list[str]] = {}
    for action, keys in raw.items():
        if action not in DEFAULT_BINDINGS:
            return Err[dict[str, list[str]], str](f"Unknown action: {action!r}")
        if isinstance(keys, str):
            keys = [keys]
        if not isinstance(keys, list) or not keys:
            return Err[dict[str, list[str]], str](f"{action}: keys must be a non-empty list")
        names[action] = [str(k) for k in keys]
    return Ok[dict[str, list[str]], str](names)


def parse_keymap(text: str) -> Result[Keymap, str]:
    """Build a keymap from YAML text. Listed actions replace the defaults."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        return Err[Keymap, str](f"Invalid YAML: {e!s}")
    match _validate_names(raw):
        case Ok(names):
            return Keymap.from_names({**DEFAULT_BINDINGS, **names})
        case Err(e):
            return Err[Keymap, str](e)
        case _:
            return Err[Keymap, str]("Unexpected error")


def load_keymap(path: str) -> Result[Keymap, str]:
    """Load a keymap file; a missing file means the default bindings."""
    _path = Path(path)
    if not _path.exists():
        return Ok[Keymap, str](Keymap.default())
    try:
        text = _path.read_text(encoding="utf-8")
    except OSError as e:
        return Err[Keymap, str](f"Cannot read keymap {path}: {e!s}")
    return parse_keymap(text)
