"""
Token types for the Loa lexer.

Token type categories follow error code ranges:
- E0xx: Lexer errors
- E1xx: Parser errors
- E4xx: Runtime errors
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class TokenType(Enum):
    """All token types recognized by the Loa lexer."""

    # --- Literals ---
    NUMBER = auto()             # 42
    FLOAT = auto()              # 3.14
    STRING = auto()             # "hello" (lexeme keeps the quotes)

    # --- Identifiers ---
    IDENTIFIER = auto()         # user-defined names

    # --- Keywords ---
    FUN = auto()                # fun
    IF = auto()                 # if
    ELSE = auto()               # else
    WHILE = auto()              # while
    FOR = auto()                # for (reserved, not executable)
    IMPORT = auto()             # import (reserved)
    RETURN = auto()             # return
    CONTINUE = auto()           # continue
    BREAK = auto()              # break
    PRINT = auto()              # print
    PRINTLN = auto()            # println
    INPUT = auto()              # input (reserved)

    # --- Arithmetic operators ---
    PLUS = auto()               # +
    MINUS = auto()              # -
    STAR = auto()               # *
    SLASH = auto()              # /

    # --- Comparison operators ---
    EQ = auto()                 # ==
    NE = auto()                 # !=
    LT = auto()                 # <
    LE = auto()                 # <=
    GT = auto()                 # >
    GE = auto()                 # >=

    # --- Logical operators ---
    AND = auto()                # &&
    OR = auto()                 # ||
    NOT = auto()                # !
    CARET = auto()              # ^

    # --- Punctuation ---
    ASSIGN = auto()             # =
    DOT = auto()                # .
    COMMA = auto()              # ,
    COLON = auto()              # :
    SEMICOLON = auto()          # ;
    LPAREN = auto()             # (
    RPAREN = auto()             # )
    LBRACKET = auto()           # [
    RBRACKET = auto()           # ]

    # --- Indentation tokens ---
    INDENT = auto()             # Increase in indentation level
    DEDENT = auto()             # Decrease in indentation level

    # --- Special ---
    EOF = auto()                # end of input


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    value: Any              # Decoded payload (int, float, str) or None
    lexeme: str             # The original source text
    line: int               # 1-indexed line the token starts on

    def __str__(self) -> str:
        if self.type in (TokenType.NUMBER, TokenType.FLOAT,
                         TokenType.STRING, TokenType.IDENTIFIER):
            return f"{self.type.name}({self.value!r})"
        return self.type.name


# Keyword mapping - maps string to token type
KEYWORDS: dict = {
    "fun": TokenType.FUN,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "for": TokenType.FOR,
    "import": TokenType.IMPORT,
    "return": TokenType.RETURN,
    "continue": TokenType.CONTINUE,
    "break": TokenType.BREAK,
    "print": TokenType.PRINT,
    "println": TokenType.PRINTLN,
    "input": TokenType.INPUT,
}


# Single-character operators and punctuation
SINGLE_CHAR_TOKENS: dict = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    ".": TokenType.DOT,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    "^": TokenType.CARET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
}


def keyword_type(word: str) -> Optional[TokenType]:
    """Get the token type for a keyword, if any."""
    return KEYWORDS.get(word)
