"""
Unit tests for the Loa lexer.
"""

import textwrap

import pytest
from loa import tokenize, Lexer, TokenType, LexerError


def types_of(source):
    return [t.type for t in tokenize(source)]


class TestLexerBasics:
    """Test basic lexer functionality."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_whitespace_only(self):
        """Blank lines produce no tokens besides EOF."""
        assert types_of("   \n\n  \t \n") == [TokenType.EOF]

    def test_integer_literal(self):
        tokens = tokenize("42")
        assert [t.type for t in tokens] == [TokenType.NUMBER, TokenType.EOF]
        assert tokens[0].value == 42
        assert tokens[0].lexeme == "42"

    def test_float_literal(self):
        tokens = tokenize("3.14")
        assert tokens[0].type == TokenType.FLOAT
        assert tokens[0].value == pytest.approx(3.14)

    def test_float_with_zero_fraction(self):
        """A '.' followed by digits always makes a float."""
        tokens = tokenize("3.0")
        assert tokens[0].type == TokenType.FLOAT
        assert tokens[0].value == 3.0

    def test_integer_overflow_reads_as_zero(self):
        """A digit run too large for a 64-bit integer has value 0."""
        tokens = tokenize("99999999999999999999")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == 0
        assert tokens[0].lexeme == "99999999999999999999"

    def test_largest_integer(self):
        assert tokenize("9223372036854775807")[0].value == 2 ** 63 - 1
        assert tokenize("9223372036854775808")[0].value == 0

    def test_trailing_dot_stays_integer(self):
        """A trailing '.' is part of the lexeme but the value is the digit run."""
        tokens = tokenize("1.")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == 1
        assert tokens[0].lexeme == "1."
        assert tokens[1].type == TokenType.EOF

    def test_identifier(self):
        tokens = tokenize("x")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "x"

    def test_identifier_with_digits_and_underscores(self):
        tokens = tokenize("my_var2")
        assert tokens[0].type == TokenType.IDENTIFIER
        assert tokens[0].value == "my_var2"

    def test_keywords(self):
        source = "fun if else while for import return continue break print println input"
        assert types_of(source) == [
            TokenType.FUN, TokenType.IF, TokenType.ELSE, TokenType.WHILE,
            TokenType.FOR, TokenType.IMPORT, TokenType.RETURN, TokenType.CONTINUE,
            TokenType.BREAK, TokenType.PRINT, TokenType.PRINTLN, TokenType.INPUT,
            TokenType.EOF,
        ]

    def test_true_false_are_identifiers(self):
        assert types_of("true false") == [
            TokenType.IDENTIFIER, TokenType.IDENTIFIER, TokenType.EOF,
        ]

    def test_string_literal(self):
        tokens = tokenize('"hello world"')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "hello world"
        assert tokens[0].lexeme == '"hello world"'

    def test_string_has_no_escapes(self):
        tokens = tokenize(r'"a\nb"')
        assert tokens[0].value == r"a\nb"

    def test_multiline_string_tracks_lines(self):
        tokens = tokenize('"a\nb" x')
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "a\nb"
        assert tokens[0].line == 1
        assert tokens[1].line == 2

    def test_iteration(self):
        lexer = Lexer("x = 1")
        assert [t.type for t in lexer] == [
            TokenType.IDENTIFIER, TokenType.ASSIGN, TokenType.NUMBER, TokenType.EOF,
        ]

    def test_next_token_stays_at_eof(self):
        lexer = Lexer("x")
        assert lexer.next_token().type == TokenType.IDENTIFIER
        assert lexer.next_token().type == TokenType.EOF
        assert lexer.next_token().type == TokenType.EOF

    def test_line_numbers(self):
        tokens = tokenize("a\nb\n\nc")
        assert [t.line for t in tokens[:3]] == [1, 2, 4]


class TestLexerOperators:
    """Test operator and punctuation tokens."""

    def test_two_character_operators(self):
        assert types_of("== != <= >= && ||") == [
            TokenType.EQ, TokenType.NE, TokenType.LE, TokenType.GE,
            TokenType.AND, TokenType.OR, TokenType.EOF,
        ]

    def test_single_character_operators(self):
        assert types_of("+ - * / < > = ! ^") == [
            TokenType.PLUS, TokenType.MINUS, TokenType.STAR, TokenType.SLASH,
            TokenType.LT, TokenType.GT, TokenType.ASSIGN, TokenType.NOT,
            TokenType.CARET, TokenType.EOF,
        ]

    def test_punctuation(self):
        assert types_of("( ) [ ] , ; : .") == [
            TokenType.LPAREN, TokenType.RPAREN, TokenType.LBRACKET, TokenType.RBRACKET,
            TokenType.COMMA, TokenType.SEMICOLON, TokenType.COLON, TokenType.DOT,
            TokenType.EOF,
        ]

    def test_operators_without_spaces(self):
        assert types_of("a<=b") == [
            TokenType.IDENTIFIER, TokenType.LE, TokenType.IDENTIFIER, TokenType.EOF,
        ]

    def test_lexemes(self):
        tokens = tokenize("a != b")
        assert tokens[1].lexeme == "!="


class TestLexerComments:
    """Test comment handling."""

    def test_line_comment(self):
        assert types_of("x // comment here\ny") == [
            TokenType.IDENTIFIER, TokenType.IDENTIFIER, TokenType.EOF,
        ]

    def test_block_comment(self):
        tokens = tokenize("x /* a\n b */ y")
        assert [t.type for t in tokens] == [
            TokenType.IDENTIFIER, TokenType.IDENTIFIER, TokenType.EOF,
        ]
        assert tokens[1].line == 2

    def test_comment_only_source(self):
        assert types_of("// nothing\n/* still\nnothing */\n") == [TokenType.EOF]


class TestLexerIndentation:
    """Test INDENT/DEDENT generation."""

    def test_simple_block(self):
        source = textwrap.dedent("""
            if (x):
                y = 1
            z = 2
        """)
        assert types_of(source) == [
            TokenType.IF, TokenType.LPAREN, TokenType.IDENTIFIER, TokenType.RPAREN,
            TokenType.COLON, TokenType.INDENT,
            TokenType.IDENTIFIER, TokenType.ASSIGN, TokenType.NUMBER,
            TokenType.DEDENT,
            TokenType.IDENTIFIER, TokenType.ASSIGN, TokenType.NUMBER,
            TokenType.EOF,
        ]

    def test_multi_level_dedent(self):
        """Leaving two levels at once emits two DEDENTs on the same line."""
        source = textwrap.dedent("""\
            if (a):
                if (b):
                    x = 1
            y = 2
        """)
        tokens = tokenize(source)
        dedents = [t for t in tokens if t.type == TokenType.DEDENT]
        assert len(dedents) == 2
        assert all(t.line == 4 for t in dedents)
        y_index = next(i for i, t in enumerate(tokens) if t.value == "y")
        assert [t.type for t in tokens[y_index - 2:y_index]] == [
            TokenType.DEDENT, TokenType.DEDENT,
        ]

    def test_eof_closes_open_blocks(self):
        tokens = tokenize("if (a):\n    x = 1")
        assert [t.type for t in tokens[-2:]] == [TokenType.DEDENT, TokenType.EOF]

    def test_blank_and_comment_lines_keep_indentation(self):
        source = textwrap.dedent("""\
            while (a):
                x = 1

                // note
                y = 2
        """)
        types = types_of(source)
        assert types.count(TokenType.INDENT) == 1
        assert types.count(TokenType.DEDENT) == 1

    def test_one_indent_per_increase(self):
        """A deep jump in indentation still opens only one level."""
        types = types_of("if (a):\n            x = 1\n")
        assert types.count(TokenType.INDENT) == 1

    def test_dedent_to_unopened_width(self):
        """Dedenting to a width that was never opened only closes levels."""
        tokens = tokenize("if (a):\n    x = 1\n  y = 2\n")
        types = [t.type for t in tokens]
        assert types.count(TokenType.INDENT) == 1
        assert types.count(TokenType.DEDENT) == 1

    def test_tabs_do_not_count(self):
        assert types_of("\tx") == [TokenType.IDENTIFIER, TokenType.EOF]

    @pytest.mark.parametrize("source", [
        "x = 1\n",
        "if (a):\n    b = 1\n",
        "if (a):\n    if (b):\n        c = 1\n    d = 2\ne = 3\n",
        "while (a):\n    if (b):\n        if (c):\n            d = 1",
        "fun f(a:):\n    return a;\n\n\nx = 1\n",
    ])
    def test_indent_dedent_balance(self, source):
        tokens = tokenize(source)
        types = [t.type for t in tokens]
        assert types[-1] == TokenType.EOF
        assert types.count(TokenType.EOF) == 1
        assert types.count(TokenType.INDENT) == types.count(TokenType.DEDENT)


class TestLexerErrors:
    """Test lexical faults."""

    def test_unterminated_string(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize('x = "abc')
        assert "E002" in str(exc_info.value)

    def test_unterminated_comment(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize("x /* never closed")
        assert "E004" in str(exc_info.value)

    @pytest.mark.parametrize("source", ["a & b", "a | b"])
    def test_lone_ampersand_or_pipe(self, source):
        with pytest.raises(LexerError) as exc_info:
            tokenize(source)
        assert exc_info.value.code == "E010"

    def test_null_character(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize("x\0")
        assert exc_info.value.code == "E009"

    @pytest.mark.parametrize("char", ["@", "#", "$", "{", "'"])
    def test_unexpected_character(self, char):
        with pytest.raises(LexerError) as exc_info:
            tokenize(f"x {char} y")
        assert exc_info.value.code == "E001"

    def test_non_ascii_identifier_start(self):
        with pytest.raises(LexerError):
            tokenize("é = 1")

    def test_error_reports_line(self):
        with pytest.raises(LexerError) as exc_info:
            tokenize("x = 1\ny = @")
        assert exc_info.value.diagnostic.line == 2
        assert exc_info.value.diagnostic.source_line == "y = @"
