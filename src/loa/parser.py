"""
Recursive descent parser for Loa.

Converts a token stream into a list of statement nodes. Blocks are
introduced by ':' and delimited by INDENT/DEDENT tokens. The first
malformed statement aborts the whole parse; there is no error recovery.
"""

from typing import List, Optional, TextIO

from .tokens import Token, TokenType
from .ast import (
    Operator,
    # Expressions
    Expression, Literal, Variable, BinaryExpression, FunctionCall,
    # Statements
    Statement, PrintStatement, AssignStatement, IfStatement, WhileStatement,
    ReturnStatement, BreakStatement, ContinueStatement,
    # Declarations
    Parameter, FunctionDef,
)
from .errors import (
    ParserError,
    error_unexpected_token,
    error_unexpected_eof,
    error_invalid_expression,
    error_for_unsupported,
    error_duplicate_parameter,
    error_comma_separator,
    error_invalid_assignment_target,
    error_invalid_default,
    error_nesting_too_deep,
    report,
)


class Parser:
    """
    Recursive descent parser for Loa.

    Usage:
        parser = Parser(tokens)
        statements = parser.parse_program()

    The parser implements standard precedence climbing for expressions:
        Lowest:  ||
                 ^
                 &&
                 == !=
                 < > <= >=
                 + -
        Highest: * /
                 unary -
    """

    # Operator precedence levels (higher = tighter binding)
    PRECEDENCE = {
        TokenType.OR: 1,
        TokenType.CARET: 2,
        TokenType.AND: 3,
        TokenType.EQ: 4,
        TokenType.NE: 4,
        TokenType.LT: 5,
        TokenType.GT: 5,
        TokenType.LE: 5,
        TokenType.GE: 5,
        TokenType.PLUS: 6,
        TokenType.MINUS: 6,
        TokenType.STAR: 7,
        TokenType.SLASH: 7,
    }

    OPERATORS = {
        TokenType.OR: Operator.OR,
        TokenType.CARET: Operator.XOR,
        TokenType.AND: Operator.AND,
        TokenType.EQ: Operator.EQUAL,
        TokenType.NE: Operator.NOT_EQUAL,
        TokenType.LT: Operator.LESS,
        TokenType.GT: Operator.GREATER,
        TokenType.LE: Operator.LESS_EQUAL,
        TokenType.GE: Operator.GREATER_EQUAL,
        TokenType.PLUS: Operator.ADD,
        TokenType.MINUS: Operator.SUBTRACT,
        TokenType.STAR: Operator.MULTIPLY,
        TokenType.SLASH: Operator.DIVIDE,
    }

    LITERALS = (TokenType.NUMBER, TokenType.FLOAT, TokenType.STRING)

    def __init__(self, tokens: List[Token], source: Optional[str] = None):
        if not tokens or tokens[-1].type != TokenType.EOF:
            last_line = tokens[-1].line if tokens else 1
            tokens = list(tokens) + [Token(TokenType.EOF, None, "", last_line)]
        self.tokens = tokens
        self.source_lines = source.splitlines() if source else []
        self.pos = 0

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        """Get current token."""
        return self.tokens[self.pos]

    def _peek(self, offset: int = 0) -> Token:
        """Peek at token at current position + offset."""
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[idx]

    def _is_at_end(self) -> bool:
        return self._current().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        return self._current().type == token_type

    def _check_any(self, *token_types: TokenType) -> bool:
        return self._current().type in token_types

    def _check_ahead(self, token_type: TokenType, offset: int = 1) -> bool:
        return self._peek(offset).type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _consume(self, token_type: TokenType, expected: str) -> Token:
        """Consume token of expected type, or raise error."""
        if self._check(token_type):
            return self._advance()
        self._error(expected)

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume token if it matches any of the given types."""
        if self._current().type in token_types:
            return self._advance()
        return None

    def _source_line(self, line: int) -> Optional[str]:
        if 1 <= line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    @staticmethod
    def _describe(token: Token) -> str:
        if token.lexeme:
            return f"'{token.lexeme}'"
        return token.type.name

    def _error(self, expected: str) -> None:
        """Raise a parser error."""
        token = self._current()
        if token.type == TokenType.EOF:
            raise error_unexpected_eof(expected, token.line)
        raise error_unexpected_token(expected, self._describe(token), token.line,
                                     self._source_line(token.line))

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expression:
        return self._parse_binary_expr(1)

    def _parse_binary_expr(self, min_precedence: int) -> Expression:
        """Parse binary expressions with precedence climbing."""
        left = self._parse_unary_expr()

        while True:
            op_token = self._current()
            precedence = self.PRECEDENCE.get(op_token.type)

            if precedence is None or precedence < min_precedence:
                break

            self._advance()  # consume operator
            right = self._parse_binary_expr(precedence + 1)

            left = BinaryExpression(
                line=left.line,
                left=left,
                operator=self.OPERATORS[op_token.type],
                right=right,
            )

        return left

    def _parse_unary_expr(self) -> Expression:
        """Parse unary minus: folds into numeric literals, otherwise 0 - operand."""
        if self._check(TokenType.MINUS):
            op_token = self._advance()
            operand = self._parse_unary_expr()
            if isinstance(operand, Literal) and isinstance(operand.value, (int, float)):
                return Literal(line=op_token.line, value=-operand.value)
            return BinaryExpression(
                line=op_token.line,
                left=Literal(line=op_token.line, value=0),
                operator=Operator.SUBTRACT,
                right=operand,
            )
        return self._parse_primary_expr()

    def _parse_primary_expr(self) -> Expression:
        token = self._current()

        if token.type in self.LITERALS:
            self._advance()
            return Literal(line=token.line, value=token.value)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            if self._check(TokenType.LPAREN):
                return self._parse_call(token)
            return Variable(line=token.line, name=token.value)

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._consume(TokenType.RPAREN, "')'")
            return expr

        if token.type == TokenType.EOF:
            raise error_unexpected_eof("expression", token.line)
        raise error_invalid_expression(self._describe(token), token.line,
                                       self._source_line(token.line))

    def _parse_call(self, name: Token) -> FunctionCall:
        """Parse call arguments after the callee name."""
        self._consume(TokenType.LPAREN, "'('")
        args = []
        if not self._match(TokenType.RPAREN):
            while True:
                args.append(self._parse_expression())
                if self._match(TokenType.COMMA):
                    continue
                self._consume(TokenType.RPAREN, "',' or ')'")
                break
        return FunctionCall(line=name.line, name=name.value, args=args)

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_statement(self) -> Statement:
        """Parse a statement."""
        token = self._current()

        if token.type in (TokenType.PRINT, TokenType.PRINTLN):
            return self._parse_print_statement()

        if token.type == TokenType.IF:
            return self._parse_if_statement()

        if token.type == TokenType.WHILE:
            return self._parse_while_statement()

        if token.type == TokenType.FOR:
            raise error_for_unsupported(token.line, self._source_line(token.line))

        if token.type == TokenType.RETURN:
            return self._parse_return_statement()

        if token.type == TokenType.BREAK:
            self._advance()
            self._match(TokenType.SEMICOLON)
            return BreakStatement(line=token.line)

        if token.type == TokenType.CONTINUE:
            self._advance()
            self._match(TokenType.SEMICOLON)
            return ContinueStatement(line=token.line)

        if token.type == TokenType.FUN:
            return self._parse_function_def()

        if token.type == TokenType.IDENTIFIER:
            return self._parse_assignment()

        self._error("statement")

    def _parse_print_statement(self) -> PrintStatement:
        """Parse print(a, b, ...) / println(a, b, ...)."""
        start = self._advance()  # consume 'print' or 'println'
        self._consume(TokenType.LPAREN, "'('")

        args = []
        if not self._check(TokenType.RPAREN):
            args.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                args.append(self._parse_expression())
        self._consume(TokenType.RPAREN, "')'")
        self._match(TokenType.SEMICOLON)

        return PrintStatement(line=start.line, args=args)

    def _parse_assignment(self) -> AssignStatement:
        """Parse name = expr [;]."""
        start = self._current()
        target = self._parse_expression()

        if not self._check(TokenType.ASSIGN):
            self._error("'='")
        if not isinstance(target, Variable):
            raise error_invalid_assignment_target(
                target.__class__.__name__, start.line, self._source_line(start.line)
            )
        self._advance()  # consume '='

        value = self._parse_expression()
        self._match(TokenType.SEMICOLON)
        return AssignStatement(line=start.line, variable=target.name, value=value)

    def _parse_condition(self) -> Expression:
        """Parse a parenthesised condition: (expr)."""
        self._consume(TokenType.LPAREN, "'('")
        condition = self._parse_expression()
        self._consume(TokenType.RPAREN, "')'")
        return condition

    def _parse_if_statement(self) -> IfStatement:
        """
        Parse an if statement.

        An 'else if' is parsed by recursing into this method, so the nested
        node absorbs every 'else if'/'else' that follows it.
        """
        start = self._advance()  # consume 'if'
        condition = self._parse_condition()
        body = self._parse_block()

        else_if_blocks = []
        else_block = None
        while self._check(TokenType.ELSE):
            if self._check_ahead(TokenType.IF):
                self._advance()  # consume 'else'
                else_if_blocks.append(self._parse_if_statement())
            else:
                self._advance()  # consume 'else'
                else_block = self._parse_block()
                break

        return IfStatement(
            line=start.line,
            condition=condition,
            body=body,
            else_if_blocks=else_if_blocks,
            else_block=else_block,
        )

    def _parse_while_statement(self) -> WhileStatement:
        start = self._advance()  # consume 'while'
        condition = self._parse_condition()
        body = self._parse_block()
        return WhileStatement(line=start.line, condition=condition, body=body)

    def _parse_return_statement(self) -> ReturnStatement:
        """Parse return [expr] [;]. The value must start on the same line."""
        start = self._advance()  # consume 'return'

        value = None
        if (not self._check_any(TokenType.SEMICOLON, TokenType.DEDENT, TokenType.EOF)
                and self._current().line == start.line):
            value = self._parse_expression()
        self._match(TokenType.SEMICOLON)

        return ReturnStatement(line=start.line, value=value)

    def _parse_block(self) -> List[Statement]:
        """Parse ':' followed by an indented block of statements."""
        self._consume(TokenType.COLON, "':'")
        self._consume(TokenType.INDENT, "indented block")

        statements = []
        while not self._check(TokenType.DEDENT):
            if self._is_at_end():
                raise error_unexpected_eof("end of block", self._current().line)
            statements.append(self._parse_statement())

        self._consume(TokenType.DEDENT, "end of block")
        return statements

    # =========================================================================
    # Declarations
    # =========================================================================

    def _parse_parameter(self) -> Parameter:
        """Parse name: [type] [= literal]."""
        start = self._consume(TokenType.IDENTIFIER, "parameter name")
        self._consume(TokenType.COLON, "':'")

        type_name = None
        if self._check(TokenType.IDENTIFIER):
            type_name = self._advance().value

        default = None
        if self._match(TokenType.ASSIGN):
            token = self._current()
            if token.type not in self.LITERALS:
                raise error_invalid_default(start.value, token.line,
                                            self._source_line(token.line))
            self._advance()
            default = Literal(line=token.line, value=token.value)

        return Parameter(line=start.line, name=start.value, type_name=type_name,
                         default=default)

    def _parse_parameters(self) -> List[Parameter]:
        """Parse a ';'-separated parameter list up to and including ')'."""
        self._consume(TokenType.LPAREN, "'('")
        parameters = []
        seen = set()

        while not self._check(TokenType.RPAREN):
            param = self._parse_parameter()
            if param.name in seen:
                raise error_duplicate_parameter(param.name, param.line,
                                                self._source_line(param.line))
            seen.add(param.name)
            parameters.append(param)

            if self._match(TokenType.SEMICOLON):
                continue
            if self._check(TokenType.COMMA):
                line = self._current().line
                raise error_comma_separator(line, self._source_line(line))
            break

        self._consume(TokenType.RPAREN, "')'")
        return parameters

    def _parse_function_def(self) -> FunctionDef:
        """Parse fun name(params): body."""
        start = self._advance()  # consume 'fun'
        name = self._consume(TokenType.IDENTIFIER, "function name").value
        parameters = self._parse_parameters()
        body = self._parse_block()

        return FunctionDef(line=start.line, name=name, parameters=parameters, body=body)

    def parse_program(self) -> List[Statement]:
        """Parse statements until EOF."""
        statements = []
        try:
            while not self._is_at_end():
                statements.append(self._parse_statement())
        except RecursionError:
            line = self._current().line
            raise error_nesting_too_deep(line, self._source_line(line)) from None
        return statements


def parse(tokens: List[Token], source: Optional[str] = None,
          stream: Optional[TextIO] = None) -> Optional[List[Statement]]:
    """
    Convenience function to parse tokens into a program.

    Args:
        tokens: List of tokens from the lexer
        source: Optional original source code for error excerpts
        stream: Where to report a syntax error (stderr by default)

    Returns:
        List of statements, or None if the input is malformed. The
        diagnostic is reported before returning.
    """
    try:
        return Parser(tokens, source).parse_program()
    except ParserError as e:
        report(e.diagnostic, stream)
        return None
