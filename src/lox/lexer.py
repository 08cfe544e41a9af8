"""
Lox lexer.

Turns source text into a flat list of tokens with 1-based line/column
positions. Lexical errors never abort the pass: they are recorded as
diagnostics, handed to an optional reporter, and scanning carries on.
"""

from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType
from typing import List, Optional, Tuple, Union

from .diagnostics import TAB_WIDTH, Diagnostic, LexErrorKind, Reporter


class TokenKind(Enum):
    # Single-char punctuation
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    STAR = auto()
    PERCENT = auto()

    # One or two char operators
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()
    SLASH = auto()

    # Literals / identifiers
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FOR = auto()
    FUN = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS = MappingProxyType(
    {
        "and": TokenKind.AND,
        "class": TokenKind.CLASS,
        "else": TokenKind.ELSE,
        "false": TokenKind.FALSE,
        "for": TokenKind.FOR,
        "fun": TokenKind.FUN,
        "if": TokenKind.IF,
        "nil": TokenKind.NIL,
        "or": TokenKind.OR,
        "print": TokenKind.PRINT,
        "return": TokenKind.RETURN,
        "super": TokenKind.SUPER,
        "this": TokenKind.THIS,
        "true": TokenKind.TRUE,
        "var": TokenKind.VAR,
        "while": TokenKind.WHILE,
    }
)

SINGLE_CHAR = MappingProxyType(
    {
        "(": TokenKind.LEFT_PAREN,
        ")": TokenKind.RIGHT_PAREN,
        "{": TokenKind.LEFT_BRACE,
        "}": TokenKind.RIGHT_BRACE,
        ",": TokenKind.COMMA,
        ".": TokenKind.DOT,
        "-": TokenKind.MINUS,
        "+": TokenKind.PLUS,
        ";": TokenKind.SEMICOLON,
        "*": TokenKind.STAR,
        "%": TokenKind.PERCENT,
    }
)

# first char -> (kind without '=', kind with '=')
ONE_OR_TWO_CHAR = MappingProxyType(
    {
        "!": (TokenKind.BANG, TokenKind.BANG_EQUAL),
        "=": (TokenKind.EQUAL, TokenKind.EQUAL_EQUAL),
        "<": (TokenKind.LESS, TokenKind.LESS_EQUAL),
        ">": (TokenKind.GREATER, TokenKind.GREATER_EQUAL),
    }
)

Literal = Union[float, str, None]


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    lexeme: str
    literal: Literal
    line: int
    col: int

    def __str__(self) -> str:
        return f"{self.kind.name} {self.lexeme} {self.literal}"


def _is_digit(c: str) -> bool:
    return "0" <= c <= "9"


def _is_alpha(c: str) -> bool:
    return ("a" <= c <= "z") or ("A" <= c <= "Z") or c == "_"


def _is_alnum(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


class Lexer:
    def __init__(
        self,
        source: str,
        reporter: Optional[Reporter] = None,
        tab_width: int = TAB_WIDTH,
    ):
        if tab_width < 1:
            raise ValueError(f"tab_width must be positive, got {tab_width}")
        self.source = source
        self.lines = source.split("\n")
        self.length = len(source)
        self.reporter = reporter
        self.tab_width = tab_width
        self.start = 0
        self.pos = 0
        self.line = 1
        self.col = 0
        # position of the first char of the current lexeme
        self.start_line = 1
        self.start_col = 1
        self.tokens: List[Token] = []
        self.diagnostics: List[Diagnostic] = []
        self._done = False

    def scan(self) -> List[Token]:
        if self._done:
            return self.tokens

        while not self._is_at_end():
            self.start = self.pos
            self.start_line = self.line
            self.start_col = self.col + 1
            self._scan_token()

        self.tokens.append(Token(TokenKind.EOF, "", None, self.line, self.col))
        self._done = True
        return self.tokens

    def _scan_token(self) -> None:
        c = self._advance()

        if c in SINGLE_CHAR:
            self._add(SINGLE_CHAR[c])
            return

        if c in ONE_OR_TWO_CHAR:
            short, long = ONE_OR_TWO_CHAR[c]
            self._add(long if self._match("=") else short)
            return

        if c == "/":
            if self._match("/"):
                self._skip_until_newline()
            elif self._match("*"):
                self._block_comment()
            else:
                self._add(TokenKind.SLASH)
            return

        # Whitespace: bookkeeping already done in _advance
        if c in " \r\t\n":
            return

        if c == '"':
            self._string()
            return

        if _is_digit(c):
            self._number()
            return

        if _is_alpha(c):
            self._identifier()
            return

        # Already consumed, so the pass always moves forward.
        self._error(LexErrorKind.UNEXPECTED_CHARACTER)

    def _add(self, kind: TokenKind, literal: Literal = None) -> None:
        text = self.source[self.start : self.pos]
        self.tokens.append(
            Token(kind, text, literal, self.start_line, self.start_col)
        )

    def _error(self, kind: LexErrorKind) -> None:
        message = kind.value
        source_line = self._line_text(self.line)
        diag = Diagnostic(kind, self.line, self.col, message, source_line)
        self.diagnostics.append(diag)
        if self.reporter is not None:
            self.reporter(self.line, self.col, message, source_line)

    def _line_text(self, line: int) -> str:
        # each newline bumps both line and len(lines), so this is in range
        return self.lines[line - 1].rstrip("\r")

    def _is_at_end(self) -> bool:
        return self.pos >= self.length

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.col = 0
        elif ch == "\t":
            self.col += self.tab_width
        elif ch != "\r":
            self.col += 1
        return ch

    def _peek(self) -> str:
        if self._is_at_end():
            return "\0"
        return self.source[self.pos]

    def _peek_next(self) -> str:
        if self.pos + 1 >= self.length:
            return "\0"
        return self.source[self.pos + 1]

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self.source[self.pos] != expected:
            return False
        self._advance()
        return True

    def _skip_until_newline(self) -> None:
        while not self._is_at_end() and self._peek() != "\n":
            self._advance()

    def _block_comment(self) -> None:
        depth = 1
        while not self._is_at_end():
            if self._peek() == "/" and self._peek_next() == "*":
                self._advance()
                self._advance()
                depth += 1
            elif self._peek() == "*" and self._peek_next() == "/":
                self._advance()
                self._advance()
                depth -= 1
                if depth == 0:
                    return
            else:
                self._advance()
        self._error(LexErrorKind.UNTERMINATED_COMMENT)

    def _string(self) -> None:
        while not self._is_at_end() and self._peek() != '"':
            self._advance()

        if self._is_at_end():
            self._error(LexErrorKind.UNTERMINATED_STRING)
            return

        self._advance()  # closing quote
        # Raw slice, no escape processing
        value = self.source[self.start + 1 : self.pos - 1]
        self._add(TokenKind.STRING, value)

    def _number(self) -> None:
        while _is_digit(self._peek()):
            self._advance()
        if self._peek() == "." and _is_digit(self._peek_next()):
            self._advance()  # consume '.'
            while _is_digit(self._peek()):
                self._advance()
        lexeme = self.source[self.start : self.pos]
        self._add(TokenKind.NUMBER, float(lexeme))

    def _identifier(self) -> None:
        while _is_alnum(self._peek()):
            self._advance()
        text = self.source[self.start : self.pos]
        self._add(KEYWORDS.get(text, TokenKind.IDENTIFIER))


def scan(
    text: str,
    reporter: Optional[Reporter] = None,
    tab_width: int = TAB_WIDTH,
) -> Tuple[List[Token], List[Diagnostic]]:
    """Scan ``text`` in one pass; return its tokens and any diagnostics."""
    lexer = Lexer(text, reporter=reporter, tab_width=tab_width)
    tokens = lexer.scan()
    return tokens, lexer.diagnostics


__all__ = [
    "Lexer",
    "Token",
    "TokenKind",
    "KEYWORDS",
    "TAB_WIDTH",
    "scan",
]
