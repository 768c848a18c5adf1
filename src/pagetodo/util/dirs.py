import os
import re
from pathlib import Path

DEFAULT_HOME = os.environ.get("PT_HOME_DIR", (Path.home() / ".pagetodo").as_posix())
DEFAULT_ENV_PATH = (Path(DEFAULT_HOME) / "config.env").as_posix()
DEFAULT_KEYMAP_PATH = (Path(DEFAULT_HOME) / "keymap.yaml").as_posix()
DEFAULT_TITLE = "pagetodo"
DEFAULT_POLL_MS = 100


def ensure_dirs() -> None:
    _path = Path(DEFAULT_HOME)
    _path.mkdir(parents=True, exist_ok=True)


def get_poll_ms(env: dict[str, str]) -> int:
    match env.get("POLL_MS"):
        case None:
            return DEFAULT_POLL_MS
        case value:
            try:
                poll_ms = int(value)
            except ValueError:
                _msg = f"Invalid POLL_MS: {value!r} (must be an integer)"
                raise ValueError(_msg) from None
            if poll_ms <= 0:
                _msg = f"Invalid POLL_MS: {value!r} (must be positive)"
                raise ValueError(_msg)
            return poll_ms


def load_env(path: str = DEFAULT_ENV_PATH) -> dict[str, str]:
    env: dict[str, str] = {}
    _path = Path(path)
    if _path.exists():
        with _path.open(encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                m = re.match(r"([^=]+)=(.*)", line)
                if m:
                    key = m.group(1).strip()
                    val = m.group(2).strip()
                    env[key] = val

    # OS環境変数を上書き優先
    env.update(
        {
            "TITLE": os.environ.get("PT_TITLE", env.get("TITLE", DEFAULT_TITLE)),
            "KEYMAP_PATH": os.environ.get("PT_KEYMAP_PATH", env.get("KEYMAP_PATH", DEFAULT_KEYMAP_PATH)),
            "POLL_MS": os.environ.get("PT_POLL_MS", env.get("POLL_MS", str(DEFAULT_POLL_MS))),
        },
    )
    return env
