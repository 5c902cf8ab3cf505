"""
Abstract Syntax Tree (AST) node definitions for Loa.

A parsed program is a flat list of statements. Every node records the
source line it started on for diagnostics.
"""

import sys
from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, TextIO, Union


# =============================================================================
# Base Classes
# =============================================================================

@dataclass
class AstNode(ABC):
    """Base class for all AST nodes."""
    line: int  # Source line for error reporting

    def accept(self, visitor: "AstVisitor") -> Any:
        """Accept a visitor for traversal."""
        method_name = f"visit_{self.__class__.__name__}"
        method = getattr(visitor, method_name, visitor.generic_visit)
        return method(self)


class AstVisitor(ABC):
    """Base class for AST visitors."""

    def generic_visit(self, node: AstNode) -> Any:
        """Default visit method."""
        raise NotImplementedError(f"No visitor for {node.__class__.__name__}")


class Operator(Enum):
    """Binary operators, valued by their source spelling."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    LESS = "<"
    GREATER = ">"
    LESS_EQUAL = "<="
    GREATER_EQUAL = ">="
    EQUAL = "=="
    NOT_EQUAL = "!="
    AND = "&&"
    OR = "||"
    XOR = "^"


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass
class Expression(AstNode):
    """Base class for all expressions."""
    pass


@dataclass
class Literal(Expression):
    """A literal value: int (Number), float (Float) or str (String)."""
    value: Union[int, float, str]


@dataclass
class Variable(Expression):
    """A reference to a named variable."""
    name: str


@dataclass
class BinaryExpression(Expression):
    """A binary operation: left op right."""
    left: Expression
    operator: Operator
    right: Expression


@dataclass
class FunctionCall(Expression):
    """A call expression: name(args)."""
    name: str
    args: List[Expression] = field(default_factory=list)


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class Statement(AstNode):
    """Base class for all statements."""
    pass


@dataclass
class PrintStatement(Statement):
    """print(a, b, ...) or println(a, b, ...): one value per output line."""
    args: List[Expression] = field(default_factory=list)


@dataclass
class AssignStatement(Statement):
    """name = value"""
    variable: str
    value: Expression


@dataclass
class IfStatement(Statement):
    """
    if (condition): body [else if (...): ...]* [else: else_block]

    Each else-if is itself an IfStatement. Because else-if chains are
    parsed recursively, an else-if node may carry its own else-ifs and
    else block.
    """
    condition: Expression
    body: List[Statement]
    else_if_blocks: List["IfStatement"] = field(default_factory=list)
    else_block: Optional[List[Statement]] = None


@dataclass
class WhileStatement(Statement):
    """while (condition): body"""
    condition: Expression
    body: List[Statement]


@dataclass
class ReturnStatement(Statement):
    """return [value]"""
    value: Optional[Expression] = None


@dataclass
class BreakStatement(Statement):
    pass


@dataclass
class ContinueStatement(Statement):
    pass


# =============================================================================
# Declarations
# =============================================================================

@dataclass
class Parameter(AstNode):
    """A function parameter: name: [type] [= default]."""
    name: str
    type_name: Optional[str] = None
    default: Optional[Literal] = None


@dataclass
class FunctionDef(Statement):
    """fun name(params): body"""
    name: str
    parameters: List[Parameter]
    body: List[Statement]


Program = List[Statement]


# =============================================================================
# Debug printing
# =============================================================================

class PrintVisitor(AstVisitor):
    """Debug visitor that prints the AST structure."""

    def __init__(self, indent: int = 0, out: Optional[TextIO] = None):
        self.indent = indent
        self.out = out

    def _print(self, text: str) -> None:
        print("  " * self.indent + text, file=self.out if self.out is not None else sys.stdout)

    def _child(self) -> "PrintVisitor":
        return PrintVisitor(self.indent + 2, self.out)

    def generic_visit(self, node: AstNode) -> None:
        self._print(f"{node.__class__.__name__} (line {node.line})")
        for name, value in node.__dict__.items():
            if name == "line":
                continue
            if isinstance(value, AstNode):
                self._print(f"  {name}:")
                value.accept(self._child())
            elif isinstance(value, list):
                self._print(f"  {name}: [")
                for item in value:
                    if isinstance(item, AstNode):
                        item.accept(self._child())
                    else:
                        self._print(f"    {item!r}")
                self._print("  ]")
            elif isinstance(value, Operator):
                self._print(f"  {name}: {value.value}")
            else:
                self._print(f"  {name}: {value!r}")


def print_ast(program: Union[AstNode, List[AstNode]], out: Optional[TextIO] = None) -> None:
    """Print an AST node, or a whole program, for debugging."""
    nodes = program if isinstance(program, list) else [program]
    for node in nodes:
        node.accept(PrintVisitor(out=out))
