"""
Tree-walking interpreter for Loa.

Walks the statement list in order. Side effects are output and mutation of
the single global environment.
"""

import sys
from typing import Dict, List, Optional, TextIO

from .values import (
    Value, ValueKind, NONE,
    number_val, bool_val, from_literal, render,
)
from .context import ExecutionContext, LoopState

from ..ast import (
    Operator,
    Statement, PrintStatement, AssignStatement, IfStatement, WhileStatement,
    ReturnStatement, BreakStatement, ContinueStatement, FunctionDef,
    Expression, Literal, Variable, BinaryExpression, FunctionCall,
)
from ..errors import (
    error_division_by_zero, error_evaluation_too_deep, warning_unused_else, report,
)


def _truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


class Interpreter:
    """
    Tree-walking interpreter for Loa programs.

    One instance owns one environment; executing several programs on the
    same instance (as the REPL does) keeps earlier bindings.
    """

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        """
        Initialize the interpreter.

        Args:
            out: Stream for print output (stdout by default)
            err: Stream for warnings (stderr by default)
        """
        self.out = out
        self.err = err
        self.ctx = ExecutionContext()

    @property
    def variables(self) -> Dict[str, Value]:
        """Snapshot of the current bindings."""
        return self.ctx.environment.snapshot()

    def execute(self, program: List[Statement], source: str = "") -> None:
        """
        Execute a parsed program.

        Args:
            program: Statements produced by the parser
            source: Original source code for warning excerpts

        Raises:
            LoaRuntimeError: On integer division by zero, or a program
                nested too deeply to evaluate
        """
        self.ctx.source_lines = source.split('\n') if source else []
        try:
            self._execute_block(program)
        except RecursionError:
            raise error_evaluation_too_deep() from None

    def _write(self, text: str) -> None:
        print(text, file=self.out if self.out is not None else sys.stdout)

    def _warn(self, diagnostic) -> None:
        self.ctx.add_warning(diagnostic)
        report(diagnostic, self.err)

    # =========================================================================
    # Statements
    # =========================================================================

    def _execute_block(self, statements: List[Statement]) -> None:
        for stmt in statements:
            self._execute_statement(stmt)
            if self.ctx.interrupted:
                return

    def _execute_statement(self, stmt: Statement) -> None:
        """Execute a single statement."""
        if isinstance(stmt, PrintStatement):
            self._execute_print(stmt)
        elif isinstance(stmt, AssignStatement):
            self.ctx.set_variable(stmt.variable, self._evaluate(stmt.value))
        elif isinstance(stmt, WhileStatement):
            self._execute_while(stmt)
        elif isinstance(stmt, IfStatement):
            self._execute_if(stmt)
        elif isinstance(stmt, BreakStatement):
            self.ctx.signal_break()
        elif isinstance(stmt, ContinueStatement):
            self.ctx.signal_continue()
        elif isinstance(stmt, (ReturnStatement, FunctionDef)):
            # No call mechanism: declarations are inert and return does nothing
            pass
        else:
            raise RuntimeError(f"Unknown statement type: {type(stmt).__name__}")

    def _execute_print(self, stmt: PrintStatement) -> None:
        for arg in stmt.args:
            self._write(render(self._evaluate(arg)))

    def _execute_while(self, stmt: WhileStatement) -> None:
        with self.ctx.loop():
            while self._evaluate(stmt.condition).is_truthy():
                self._execute_block(stmt.body)
                if self.ctx.take_loop_state() is LoopState.BREAK:
                    break

    def _execute_if(self, stmt: IfStatement) -> None:
        """
        Execute an if statement.

        When the condition fails, else-ifs are tried in order and only the
        body of the first truthy one runs. An else block carried by a
        skipped else-if is reported, not run. If nothing fired, the else
        block of the first else-if is the fallback; the top-level else
        block only runs when there are no else-ifs at all.
        """
        if self._evaluate(stmt.condition).is_truthy():
            self._execute_block(stmt.body)
            return

        if not stmt.else_if_blocks:
            if stmt.else_block is not None:
                self._execute_block(stmt.else_block)
            return

        for branch in stmt.else_if_blocks:
            if self._evaluate(branch.condition).is_truthy():
                self._execute_block(branch.body)
                return
            if branch.else_block is not None:
                self._warn(warning_unused_else(branch.line))

        fallback = stmt.else_if_blocks[0].else_block
        if fallback is not None:
            self._execute_block(fallback)

    # =========================================================================
    # Expressions
    # =========================================================================

    def _evaluate(self, expr: Expression) -> Value:
        """Evaluate an expression to a runtime value."""
        if isinstance(expr, Literal):
            return from_literal(expr.value)
        elif isinstance(expr, Variable):
            return self.ctx.get_variable(expr.name)
        elif isinstance(expr, BinaryExpression):
            return self._evaluate_binary(expr)
        elif isinstance(expr, FunctionCall):
            # Calls never reach a declaration; arguments are not evaluated
            return NONE
        else:
            raise RuntimeError(f"Unknown expression type: {type(expr).__name__}")

    def _evaluate_binary(self, expr: BinaryExpression) -> Value:
        """
        Evaluate a binary expression.

        Left-associative chains nest along the left operand, so the spine is
        walked with a loop; operands are still evaluated left to right.
        """
        spine = []
        node = expr
        while isinstance(node, BinaryExpression):
            spine.append(node)
            node = node.left

        result = self._evaluate(node)
        for binary in reversed(spine):
            right = self._evaluate(binary.right)
            result = self._eval_binary_op(binary, result, right)
        return result

    def _eval_binary_op(self, expr: BinaryExpression, left: Value, right: Value) -> Value:
        """Binary operations are defined only between two Numbers."""
        if left.kind != ValueKind.NUMBER or right.kind != ValueKind.NUMBER:
            return NONE

        a, b = left.data, right.data
        op = expr.operator

        if op == Operator.ADD:
            return number_val(a + b)
        elif op == Operator.SUBTRACT:
            return number_val(a - b)
        elif op == Operator.MULTIPLY:
            return number_val(a * b)
        elif op == Operator.DIVIDE:
            if b == 0:
                raise error_division_by_zero(expr.line)
            return number_val(_truncating_div(a, b))
        elif op == Operator.LESS:
            return bool_val(a < b)
        elif op == Operator.GREATER:
            return bool_val(a > b)
        elif op == Operator.EQUAL:
            return bool_val(a == b)
        elif op == Operator.NOT_EQUAL:
            return bool_val(a != b)
        return NONE


def execute(program: List[Statement], out: Optional[TextIO] = None) -> Interpreter:
    """
    Convenience function to execute a program on a fresh interpreter.

    Returns:
        The interpreter, so its bindings can be inspected
    """
    interpreter = Interpreter(out=out)
    interpreter.execute(program)
    return interpreter


def run(source: str, interpreter: Optional[Interpreter] = None,
        out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> bool:
    """
    Tokenize, parse and execute source code.

    Args:
        source: Loa source code
        interpreter: Interpreter to reuse (a fresh one by default)
        out: Output stream for a fresh interpreter
        err: Stream for syntax diagnostics and warnings

    Returns:
        True if the program ran, False if it failed to parse

    Raises:
        LexerError: On malformed lexical input
        LoaRuntimeError: On integer division by zero, or a program nested
            too deeply to evaluate
    """
    from ..lexer import tokenize
    from ..parser import parse

    if interpreter is None:
        interpreter = Interpreter(out=out, err=err)

    program = parse(tokenize(source), source, err)
    if program is None:
        return False
    interpreter.execute(program, source)
    return True
