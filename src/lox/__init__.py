from .diagnostics import Diagnostic, ErrorReporter, LexErrorKind, LexerError
from .lexer import KEYWORDS, TAB_WIDTH, Lexer, Token, TokenKind, scan

__all__ = [
    "Lexer",
    "Token",
    "TokenKind",
    "KEYWORDS",
    "TAB_WIDTH",
    "scan",
    "Diagnostic",
    "ErrorReporter",
    "LexErrorKind",
    "LexerError",
]
