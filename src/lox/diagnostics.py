"""Lexical diagnostics and the default error reporter."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, TextIO

# Columns a tab advances; shared by the lexer and diagnostic rendering.
TAB_WIDTH = 4

# (line, column, message, source_line) -> None
Reporter = Callable[[int, int, str, Optional[str]], None]


class LexErrorKind(Enum):
    """Lexical error categories; the value is the reported message."""

    UNEXPECTED_CHARACTER = "Unexpected character."
    UNTERMINATED_STRING = "Unterminated string."
    UNTERMINATED_COMMENT = "Unterminated comment."

    @classmethod
    def from_message(cls, message: str) -> Optional[LexErrorKind]:
        try:
            return cls(message)
        except ValueError:
            return None


@dataclass(frozen=True)
class Diagnostic:
    kind: Optional[LexErrorKind]
    line: int
    column: int
    message: str
    source_line: Optional[str] = None

    def __str__(self) -> str:
        return format_diagnostic(
            self.line, self.column, self.message, self.source_line
        )


class LexerError(Exception):
    def __init__(self, diagnostics: List[Diagnostic]):
        self.diagnostics = list(diagnostics)
        super().__init__("\n".join(str(d) for d in self.diagnostics))


def format_diagnostic(
    line: int,
    column: int,
    message: str,
    source_line: Optional[str] = None,
    tab_width: int = TAB_WIDTH,
) -> str:
    """Render a diagnostic with the offending line and a caret under ``column``.

    Tabs in ``source_line`` are printed as ``tab_width`` spaces, the same
    width the lexer counted for them, so the caret lines up.
    """
    head = f"error: {message} at {line}:{column}"
    if source_line is None:
        return head
    source_line = source_line.replace("\t", " " * tab_width)
    caret = " " * (column - 1 if column > 0 else 0) + "^"
    return f"{head}\n    {source_line}\n    {caret}"


class ErrorReporter:
    """Collects diagnostics for a run and prints them as they arrive.

    An instance is a valid ``Reporter`` and can be handed straight to
    ``Lexer``. ``had_error`` stays set until ``reset()`` so a driver can pick
    its exit status after the pass.
    """

    def __init__(self, stream: Optional[TextIO] = None, tab_width: int = TAB_WIDTH):
        self.stream = stream
        self.tab_width = tab_width
        self.diagnostics: List[Diagnostic] = []
        self.had_error = False

    def __call__(
        self,
        line: int,
        column: int,
        message: str,
        source_line: Optional[str] = None,
    ) -> None:
        self.report(line, column, message, source_line)

    def report(
        self,
        line: int,
        column: int,
        message: str,
        source_line: Optional[str] = None,
    ) -> None:
        kind = LexErrorKind.from_message(message)
        self.diagnostics.append(Diagnostic(kind, line, column, message, source_line))
        self.had_error = True
        stream = self.stream if self.stream is not None else sys.stderr
        text = format_diagnostic(line, column, message, source_line, self.tab_width)
        print(text, file=stream)

    def reset(self) -> None:
        self.diagnostics.clear()
        self.had_error = False

    def raise_if_errors(self) -> None:
        if self.had_error:
            raise LexerError(self.diagnostics)


__all__ = [
    "Diagnostic",
    "ErrorReporter",
    "LexErrorKind",
    "LexerError",
    "Reporter",
    "format_diagnostic",
]
