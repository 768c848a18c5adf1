# ruff: noqa: T201

import argparse
import sys

from pagetodo.interfaces.tui import endpoint
from pagetodo.util.dirs import get_poll_ms, load_env
from pagetodo.util.logger import setup_logger, setup_mode

logger = setup_logger("pagetodo")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pagetodo",
        description="Pages -> Groups -> Items terminal todo manager",
    )
    p.add_argument("--debug", action="store_true", help="enable debug logging")
    p.add_argument("--title", help="title shown on the page list")
    p.add_argument("--keymap", help="path to a YAML keymap file")
    p.add_argument("--poll-ms", type=int, dest="poll_ms", help="input poll timeout in milliseconds")
    return p


def resolve_args(args: argparse.Namespace, env: dict[str, str]) -> argparse.Namespace:
    """Fill options not given on the command line from config.env / PT_* variables."""
    if args.title is None:
        args.title = env["TITLE"]
    if args.keymap is None:
        args.keymap = env["KEYMAP_PATH"]
    if args.poll_ms is None:
        args.poll_ms = get_poll_ms(env)
    elif args.poll_ms <= 0:
        _msg = f"Invalid --poll-ms: {args.poll_ms} (must be positive)"
        raise ValueError(_msg)
    return args


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_mode(is_debug=args.debug)
    try:
        args = resolve_args(args, load_env())
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    logger.info("start: title=%r keymap=%s poll_ms=%d", args.title, args.keymap, args.poll_ms)
    return endpoint.run(args)


if __name__ == "__main__":
    sys.exit(main())
