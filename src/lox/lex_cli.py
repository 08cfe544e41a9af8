"""loxscan: lex a Lox source file, or lines typed at a prompt, and print tokens."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from .diagnostics import ErrorReporter
from .lexer import TAB_WIDTH, Lexer, Token

# sysexits.h
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        prog="loxscan", description="Lex Lox source and print its tokens"
    )
    ap.add_argument(
        "script", nargs="*", type=Path, help="Lox source file (omit for a prompt)"
    )
    ap.add_argument(
        "--tab-width",
        type=int,
        default=TAB_WIDTH,
        help=f"Columns a tab advances (default: {TAB_WIDTH})",
    )
    ap.add_argument(
        "--verbose", action="store_true", help="Print progress messages"
    )
    args = ap.parse_args(argv)

    if len(args.script) > 1:
        print("Usage: loxscan [script]")
        return EX_USAGE
    if args.tab_width < 1:
        log_error(f"--tab-width must be positive, got {args.tab_width}")
        return EX_USAGE

    reporter = ErrorReporter(tab_width=args.tab_width)
    if args.script:
        return run_file(args.script[0], reporter, args.tab_width, args.verbose)
    return run_prompt(reporter, args.tab_width, verbose=args.verbose)


def run_file(
    path: Path,
    reporter: ErrorReporter,
    tab_width: int = TAB_WIDTH,
    verbose: bool = False,
) -> int:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log_error(f"file not found: {path}")
        return EX_NOINPUT
    except UnicodeDecodeError as e:
        log_error(f"{path} is not valid UTF-8: {e}")
        return EX_DATAERR
    except OSError as e:
        log_error(f"cannot read {path}: {e.strerror or e}")
        return EX_NOINPUT

    if verbose:
        log_step(f"lexing {path}")
    run(text, reporter, tab_width, verbose)
    if reporter.had_error:
        return EX_DATAERR
    return EX_OK


def run_prompt(
    reporter: ErrorReporter,
    tab_width: int = TAB_WIDTH,
    stdin: Optional[TextIO] = None,
    verbose: bool = False,
) -> int:
    stream = stdin if stdin is not None else sys.stdin
    while True:
        print("> ", end="", flush=True)
        line = stream.readline()
        if not line:
            print()
            break
        run(line.rstrip("\n"), reporter, tab_width, verbose)
        # a bad line must not end the session
        reporter.reset()
    return EX_OK


def run(
    source: str,
    reporter: ErrorReporter,
    tab_width: int = TAB_WIDTH,
    verbose: bool = False,
) -> List[Token]:
    tokens = Lexer(source, reporter=reporter, tab_width=tab_width).scan()
    for t in tokens:
        print(format_token(t))
    if verbose:
        log_step(f"{len(tokens)} tokens, {len(reporter.diagnostics)} errors")
    return tokens


def format_token(t: Token) -> str:
    literal = "" if t.literal is None else f"\t{t.literal!r}"
    return f"{t.kind.name}\t{t.lexeme!r}\t(line {t.line}, col {t.col}){literal}"


def log_step(msg: str) -> None:
    print(f"[loxscan] {msg}...")


def log_error(msg: str) -> None:
    print(f"[loxscan:error] {msg}", file=sys.stderr)


if __name__ == "__main__":
    raise SystemExit(main())
