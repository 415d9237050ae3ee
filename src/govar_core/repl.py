"""GovarRepl: incremental session for interactive use.

Also provides the ``govar-repl`` CLI entry point via ``main()``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import IO

from .environment import Environment
from .errors import GovarError
from .evaluator import evaluate
from .parser import parse_tree
from .values import Empty, Result, VChar, VString

MODES = ("evaluate", "ast")


# ---------------------------------------------------------------------------
# GovarRepl class (programmatic use)
# ---------------------------------------------------------------------------

class GovarRepl:
    """Stateful session that keeps bindings across calls.

    ``history`` holds the results of every ``eval`` since the last
    ``reset()`` and is never pruned.

    Usage::

        repl = GovarRepl()
        repl.eval("var a, b = 2, 3")
        repl.eval("var c = a * b")   # → [VInt(6)]

        repl.env.bindings    # all user bindings
        repl.reset()         # clear state
    """

    def __init__(self, env: Environment | None = None) -> None:
        self.env = env if env is not None else Environment()
        self.history: list[list[Result]] = []

    def eval(self, text: str) -> list[Result]:
        """Evaluate *text* against the session environment.

        Raises ``GovarParseError`` if *text* does not parse; the session
        is left untouched in that case.
        """
        results = evaluate(text, self.env)
        self.history.append(results)
        return results

    @property
    def last_results(self) -> list[Result] | None:
        return self.history[-1] if self.history else None

    def reset(self) -> None:
        """Clear all user bindings and history."""
        self.env.reset()
        self.history.clear()


# ---------------------------------------------------------------------------
# CLI helpers
# ---------------------------------------------------------------------------

def format_value(value: Result) -> str:
    if value is Empty:
        return "<no value>"
    return str(value)


def format_values(values: list[Result]) -> str:
    """Comma-joined rendering of one evaluation's results."""
    return ", ".join(format_value(v) for v in values)


def _fmt_inline(value: Result) -> str:
    """Format a single value with its literal delimiters, for :vars."""
    if isinstance(value, VString):
        return f'"{value.value}"'
    if isinstance(value, VChar):
        return f"'{value}'"
    return format_value(value)


def _show_vars(repl: GovarRepl, dest: IO[str]) -> None:
    entries = repl.env.bindings
    if not entries:
        print("  (no variables defined)", file=dest)
        return
    width = max(len(k) for k in entries)
    for name, value in entries.items():
        kind = value.kind.name if value is not Empty else "-"
        print(f"  {name:<{width}} {kind:<13} = {_fmt_inline(value)}", file=dest)


def _show_ast(source: str, dest: IO[str]) -> None:
    print(parse_tree(source).pretty().rstrip("\n"), file=dest)


def _process_line(repl: GovarRepl, line: str, dest: IO[str], mode: str = "evaluate") -> bool:
    """Process one input line.  Returns False when the session should end."""
    line = line.strip()
    if not line:
        return True

    # ── Exit ──────────────────────────────────────────────────────────────
    if line in (":q", ":quit"):
        return False

    # ── Control commands ──────────────────────────────────────────────────
    if line == ":vars":
        _show_vars(repl, dest)
        return True

    if line == ":reset":
        repl.reset()
        return True

    try:
        if line.startswith(":ast "):
            _show_ast(line[5:], dest)
        elif mode == "ast":
            _show_ast(line, dest)
        else:
            print(format_values(repl.eval(line)), file=dest)
    except GovarError as exc:
        print(f"error: {exc}", file=sys.stderr)
    return True


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="govar-repl",
        description="Evaluate Go-style var/const declarations.",
    )
    parser.add_argument("file", nargs="?", help="read source lines from FILE instead of a prompt")
    parser.add_argument("-c", "--command", metavar="SRC", help="evaluate SRC and exit")
    parser.add_argument(
        "--mode",
        choices=MODES,
        default="evaluate",
        help="evaluate declarations, or print their syntax tree (default: evaluate)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging threshold (default: WARNING)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Interactive shell (``govar-repl`` / ``python -m govar_core.repl``)."""
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    repl = GovarRepl()
    dest: IO[str] = sys.stdout

    if args.command is not None:
        _process_line(repl, args.command, dest, args.mode)
        return 0

    if args.file:
        try:
            with open(args.file, encoding="utf-8") as fh:
                for file_line in fh:
                    if not _process_line(repl, file_line.rstrip("\n"), dest, args.mode):
                        break
        except OSError as exc:
            print(f"Error reading '{args.file}': {exc}", file=sys.stderr)
            return 1
        return 0

    print("govar REPL  (:q to quit  |  :vars  :reset  |  :ast <src>)")

    while True:
        try:
            line = input("govar> ")
        except EOFError:
            print()
            return 0
        except KeyboardInterrupt:
            print()
            print("See you later")
            return 1

        if not _process_line(repl, line, dest, args.mode):
            return 0


if __name__ == "__main__":
    sys.exit(main())
