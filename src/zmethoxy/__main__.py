"""Entry point for `python -m zmethoxy`."""

import argparse
import logging
import sys
from pathlib import Path

from zmethoxy import jump
from zmethoxy.utils.config import state_dir
from zmethoxy.utils.history_file import HistoryFile


def _configure_logging(verbose: bool) -> None:
    # Diagnostics carry a "# " prefix so the shell wrapper can ignore them.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("# %(message)s"))
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, handlers=[handler], force=True)


def _build_parser() -> argparse.ArgumentParser:
    """Parser used only for --help; tokens may start with '-' so argv is routed by hand."""
    parser = argparse.ArgumentParser(
        prog="z-methoxy",
        description="Jump to frequently and recently used directories",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print diagnostics to stderr (must come first)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--cut", action="store_true",
        help="Read history lines on stdin and print only their paths",
    )
    mode.add_argument("--print-history", action="store_true", help="List the whole history")
    mode.add_argument("--show-matches", action="store_true", help="List history entries matching the tokens")
    mode.add_argument("--pick", action="store_true", help="Choose a history entry interactively")
    parser.add_argument(
        "tokens", nargs="*", metavar="token",
        help="Directory, or path fragments to look up in the history ('-' for $OLD_DIR)",
    )
    return parser


def _pick(tokens: list[str], history_file: HistoryFile) -> str:
    from zmethoxy.widgets.picker import PickerApp

    now = jump.current_time()
    chosen = PickerApp(history_file.load(), tokens, now).run()
    return jump.finish_pick(chosen, history_file, now=now)


def main(argv: list[str] | None = None) -> None:
    args = list(sys.argv[1:] if argv is None else argv)
    verbose = bool(args) and args[0] in ("-v", "--verbose")
    if verbose:
        args = args[1:]
    _configure_logging(verbose)

    # Only the first argument selects a mode; the rest are tokens, passed on untouched.
    first = args[0] if args else None
    if first in ("-h", "--help"):
        _build_parser().print_help()
        return

    if first == "--cut":
        for path in jump.cut(sys.stdin):
            print(path)
        return

    history_file = HistoryFile(state_dir())

    if first == "--print-history":
        lines = jump.history_lines(history_file)
    elif first == "--show-matches":
        lines = jump.match_lines(args[1:], history_file)
    elif first == "--pick":
        lines = [_pick(args[1:], history_file)]
    elif first == "-":
        lines = [jump.visit_previous(history_file)]
    elif args:
        lines = [jump.visit(args, history_file)]
    else:
        lines = [str(Path.home())]

    for line in lines:
        print(line)


if __name__ == "__main__":
    main()
