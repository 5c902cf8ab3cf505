"""
Lexer for the Loa language.

Converts source text into a stream of tokens for the parser.
Supports:
- Python-style indentation (INDENT/DEDENT tokens, spaces only)
- Single-line comments (//)
- Multi-line comments (/* */)
- Double-quoted string literals (no escape sequences, may span lines)
- Integer and decimal float literals
- Keywords and one/two-character operators
"""

from collections import deque
from typing import Deque, Iterator, List, Optional

from .tokens import Token, TokenType, SINGLE_CHAR_TOKENS, keyword_type
from .errors import (
    error_unexpected_character,
    error_unterminated_string,
    error_unterminated_comment,
    error_null_character,
    error_incomplete_operator,
)


# Largest integer literal a Number token can hold
_INT64_MAX = 2 ** 63 - 1


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


class Lexer:
    """
    Tokenizer for Loa with Python-style indentation.

    Leading spaces after each newline are compared against a stack of open
    indentation widths. Growing the width queues one INDENT; shrinking it
    queues one DEDENT per level closed. Blank and comment-only lines never
    change the indentation.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()

    Or for streaming:
        lexer = Lexer(source_code)
        for token in lexer:
            process(token)
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self._lines: Optional[List[str]] = None  # Cached line list

        # Indentation tracking
        self.indent_stack = [0]  # Open indentation widths; base level never popped
        self.at_line_start = True
        self.pending_tokens: Deque[Token] = deque()

    @property
    def lines(self) -> List[str]:
        """Lazy-load line list for error reporting."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        return self._lines

    def get_source_line(self, line_num: int) -> Optional[str]:
        """Get a specific line of source (1-indexed)."""
        if 1 <= line_num <= len(self.lines):
            return self.lines[line_num - 1]
        return None

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return ''
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return ''
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
        return ch

    def _match(self, expected: str) -> bool:
        """Consume character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _make_token(self, token_type: TokenType, value, lexeme: str,
                    line: Optional[int] = None) -> Token:
        return Token(token_type, value, lexeme, self.line if line is None else line)

    def _skip_line_comment(self) -> None:
        """Skip a // comment, leaving the newline in place."""
        while self._peek() != '\n' and not self._is_at_end():
            self._advance()

    def _skip_block_comment(self) -> None:
        """Skip /* ... */ comment."""
        start_line = self.line
        self._advance()  # consume '/'
        self._advance()  # consume '*'

        while not self._is_at_end():
            if self._peek() == '*' and self._peek(1) == '/':
                self._advance()
                self._advance()
                return
            self._advance()

        raise error_unterminated_comment(start_line, self.get_source_line(start_line))

    def _skip_whitespace_within_line(self) -> None:
        """Skip horizontal whitespace, not newlines."""
        while self._peek() in (' ', '\t', '\r') and not self._is_at_end():
            self._advance()

    def _handle_line_start(self) -> None:
        """
        Measure indentation of the next non-blank line and queue
        INDENT/DEDENT tokens for it.
        """
        while True:
            indent = 0
            while self._peek() == ' ':
                indent += 1
                self._advance()
            self._skip_whitespace_within_line()

            if self._is_at_end():
                return
            if self._peek() == '\n':
                self._advance()
                continue
            if self._peek() == '/' and self._peek(1) == '/':
                self._skip_line_comment()
                continue
            if self._peek() == '/' and self._peek(1) == '*':
                self._skip_block_comment()
                self._skip_whitespace_within_line()
                if self._is_at_end() or self._peek() == '\n':
                    continue
            break

        self.at_line_start = False
        self._queue_indentation(indent)

    def _queue_indentation(self, width: int) -> None:
        current = self.indent_stack[-1]
        if width > current:
            self.indent_stack.append(width)
            self.pending_tokens.append(self._make_token(TokenType.INDENT, None, ""))
        elif width < current:
            # A width that was never opened just closes the deeper levels
            while self.indent_stack[-1] > width:
                self.indent_stack.pop()
                self.pending_tokens.append(self._make_token(TokenType.DEDENT, None, ""))

    def _scan_string(self) -> Token:
        """Scan a double-quoted string literal."""
        start_line = self.line
        start = self.pos
        self._advance()  # consume opening quote

        while not self._is_at_end() and self._peek() != '"':
            self._advance()

        if self._is_at_end():
            raise error_unterminated_string(start_line, self.get_source_line(start_line))

        self._advance()  # consume closing quote
        lexeme = self.source[start:self.pos]
        return self._make_token(TokenType.STRING, lexeme[1:-1], lexeme, start_line)

    def _scan_number(self) -> Token:
        """Scan a numeric literal (int or float)."""
        start = self.pos

        while _is_digit(self._peek()):
            self._advance()
        digits_end = self.pos

        if self._peek() == '.' and _is_digit(self._peek(1)):
            self._advance()  # consume '.'
            while _is_digit(self._peek()):
                self._advance()
            lexeme = self.source[start:self.pos]
            return self._make_token(TokenType.FLOAT, float(lexeme), lexeme)

        # A trailing '.' belongs to the literal but not to its value
        self._match('.')
        lexeme = self.source[start:self.pos]
        value = int(self.source[start:digits_end])
        if value > _INT64_MAX:
            value = 0  # digit runs that overflow a 64-bit integer read as 0
        return self._make_token(TokenType.NUMBER, value, lexeme)

    def _scan_identifier_or_keyword(self) -> Token:
        """Scan an identifier or keyword."""
        start = self.pos

        while _is_letter(self._peek()) or _is_digit(self._peek()) or self._peek() == "_":
            self._advance()

        lexeme = self.source[start:self.pos]
        token_type = keyword_type(lexeme)
        if token_type is not None:
            return self._make_token(token_type, None, lexeme)
        return self._make_token(TokenType.IDENTIFIER, lexeme, lexeme)

    def _scan_operator(self) -> Token:
        ch = self._advance()

        if ch == '=':
            if self._match('='):
                return self._make_token(TokenType.EQ, None, "==")
            return self._make_token(TokenType.ASSIGN, None, "=")
        if ch == '!':
            if self._match('='):
                return self._make_token(TokenType.NE, None, "!=")
            return self._make_token(TokenType.NOT, None, "!")
        if ch == '<':
            if self._match('='):
                return self._make_token(TokenType.LE, None, "<=")
            return self._make_token(TokenType.LT, None, "<")
        if ch == '>':
            if self._match('='):
                return self._make_token(TokenType.GE, None, ">=")
            return self._make_token(TokenType.GT, None, ">")
        if ch == '&':
            if self._match('&'):
                return self._make_token(TokenType.AND, None, "&&")
            raise error_incomplete_operator(ch, self.line, self.get_source_line(self.line))
        if ch == '|':
            if self._match('|'):
                return self._make_token(TokenType.OR, None, "||")
            raise error_incomplete_operator(ch, self.line, self.get_source_line(self.line))

        if ch in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[ch], None, ch)

        if ch == '\0':
            raise error_null_character(self.line, self.get_source_line(self.line))
        raise error_unexpected_character(ch, self.line, self.get_source_line(self.line))

    def next_token(self) -> Token:
        """Scan and return the next token, draining queued indentation first."""
        while True:
            if self.pending_tokens:
                return self.pending_tokens.popleft()

            if self.at_line_start:
                self._handle_line_start()
                if self.pending_tokens:
                    continue

            self._skip_whitespace_within_line()

            if self._is_at_end():
                # Close every open level before the single EOF
                while len(self.indent_stack) > 1:
                    self.indent_stack.pop()
                    self.pending_tokens.append(self._make_token(TokenType.DEDENT, None, ""))
                if self.pending_tokens:
                    continue
                return self._make_token(TokenType.EOF, None, "")

            ch = self._peek()

            if ch == '\n':
                self._advance()
                self.at_line_start = True
                continue
            if ch == '/' and self._peek(1) == '/':
                self._skip_line_comment()
                continue
            if ch == '/' and self._peek(1) == '*':
                self._skip_block_comment()
                continue

            if ch == '"':
                return self._scan_string()
            if _is_digit(ch):
                return self._scan_number()
            if _is_letter(ch):
                return self._scan_identifier_or_keyword()
            return self._scan_operator()

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens."""
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break
        return tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break


def tokenize(source: str) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize

    Returns:
        List of tokens, ending with a single EOF token

    Raises:
        LexerError: If tokenization fails
    """
    return Lexer(source).tokenize()
