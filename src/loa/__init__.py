r"""
Loa: a small indentation-based scripting language.

This module provides:
- Lexer: Tokenizes Loa source code
- Parser: Builds a statement list from tokens
- Interpreter: Executes the statements against one global environment

Usage:
    from loa import tokenize, parse, Interpreter

    source = 'x = 2 + 3;\nif (x > 4):\n    print(x)\n'
    program = parse(tokenize(source))
    if program is not None:
        Interpreter().execute(program)

Or in one call:
    from loa import run
    run(source)
"""

__version__ = "0.1.0"

from .tokens import (
    Token,
    TokenType,
    KEYWORDS,
)

from .lexer import (
    Lexer,
    tokenize,
)

from .parser import (
    Parser,
    parse,
)

from .ast import (
    # Base
    AstNode,
    AstVisitor,
    Operator,
    # Expressions
    Expression,
    Literal,
    Variable,
    BinaryExpression,
    FunctionCall,
    # Statements
    Statement,
    PrintStatement,
    AssignStatement,
    IfStatement,
    WhileStatement,
    ReturnStatement,
    BreakStatement,
    ContinueStatement,
    # Declarations
    Parameter,
    FunctionDef,
    # Utilities
    PrintVisitor,
    print_ast,
)

from .errors import (
    ErrorSeverity,
    Diagnostic,
    DiagnosticCollector,
    LoaError,
    LexerError,
    ParserError,
    LoaRuntimeError,
)

from .runtime import (
    Interpreter,
    Value,
    ValueKind,
    Environment,
    ExecutionContext,
    LoopState,
    execute,
    run,
)

__all__ = [
    '__version__',

    # Tokens
    'Token',
    'TokenType',
    'KEYWORDS',

    # Lexer
    'Lexer',
    'tokenize',

    # Parser
    'Parser',
    'parse',

    # AST
    'AstNode',
    'AstVisitor',
    'Operator',
    'Expression',
    'Literal',
    'Variable',
    'BinaryExpression',
    'FunctionCall',
    'Statement',
    'PrintStatement',
    'AssignStatement',
    'IfStatement',
    'WhileStatement',
    'ReturnStatement',
    'BreakStatement',
    'ContinueStatement',
    'Parameter',
    'FunctionDef',
    'PrintVisitor',
    'print_ast',

    # Errors
    'ErrorSeverity',
    'Diagnostic',
    'DiagnosticCollector',
    'LoaError',
    'LexerError',
    'ParserError',
    'LoaRuntimeError',

    # Runtime
    'Interpreter',
    'Value',
    'ValueKind',
    'Environment',
    'ExecutionContext',
    'LoopState',
    'execute',
    'run',
]
