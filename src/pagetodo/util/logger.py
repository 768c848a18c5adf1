import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from pagetodo.util.dirs import DEFAULT_HOME, ensure_dirs


def setup_mode(*, is_debug: bool, name: str = "pagetodo") -> None:
    # root には触らない (stderr への出力は curses 画面を壊す)
    logging.getLogger(name).setLevel(logging.DEBUG if is_debug else logging.INFO)


def setup_logger(
    name: str,
    *,
    is_stream: bool = False,
    is_file: bool = True,
) -> logging.Logger:
    logger = logging.getLogger(name)
    # モジュールごとに呼ばれるので、ハンドラは一度だけ付ける
    if logger.handlers:
        return logger
    logger.setLevel(logging.DEBUG)
    # curses 画面を壊さないよう root へは流さない
    logger.propagate = False
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if is_stream or not is_file:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(logging.DEBUG)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if is_file:
        ensure_dirs()
        time_rotate_file_handler = TimedRotatingFileHandler(
            (Path(DEFAULT_HOME) / f"{name.lower()}.log").as_posix(),
            when="MIDNIGHT",
            interval=1,
            backupCount=7,
            encoding="utf-8",
        )
        time_rotate_file_handler.setLevel(logging.DEBUG)
        time_rotate_file_handler.setFormatter(formatter)
        logger.addHandler(time_rotate_file_handler)

    return logger
