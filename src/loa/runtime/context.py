"""
Execution context for the Loa interpreter.

Holds the variable environment, loop control state and the diagnostics
collected while a program runs.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from .values import Value, NONE
from ..errors import Diagnostic, DiagnosticCollector


@dataclass
class Environment:
    """
    The single flat mapping from names to values.

    Every assignment is globally visible for the rest of the run. Reads of
    unbound names give None.
    """
    variables: Dict[str, Value] = field(default_factory=dict)

    def get(self, name: str) -> Value:
        return self.variables.get(name, NONE)

    def set(self, name: str, value: Value) -> None:
        """Bind a value, overwriting any prior binding."""
        self.variables[name] = value

    def snapshot(self) -> Dict[str, Value]:
        return dict(self.variables)


class LoopState(Enum):
    """Control state of the innermost running loop."""
    RUNNING = "running"
    BREAK = "break"
    CONTINUE = "continue"


@dataclass
class ExecutionContext:
    """
    The full execution context for interpreting Loa code.

    Tracks:
    - The variable environment
    - Loop nesting and the pending break/continue request
    - Diagnostics (warnings)
    """
    environment: Environment = field(default_factory=Environment)

    # Diagnostics
    diagnostics: DiagnosticCollector = field(default_factory=DiagnosticCollector)

    # Source tracking for diagnostics
    source_lines: List[str] = field(default_factory=list)

    # Loop control
    loop_depth: int = 0
    loop_state: LoopState = LoopState.RUNNING

    def get_variable(self, name: str) -> Value:
        return self.environment.get(name)

    def set_variable(self, name: str, value: Value) -> None:
        self.environment.set(name, value)

    @contextmanager
    def loop(self):
        """
        Context manager around a loop's execution.

        Usage:
            with ctx.loop():
                while ...:
                    run body
                    if ctx.take_loop_state() is LoopState.BREAK:
                        break
        """
        outer_state = self.loop_state
        self.loop_depth += 1
        self.loop_state = LoopState.RUNNING
        try:
            yield
        finally:
            self.loop_depth -= 1
            self.loop_state = outer_state

    @property
    def in_loop(self) -> bool:
        return self.loop_depth > 0

    @property
    def interrupted(self) -> bool:
        """True while a break or continue is unwinding the loop body."""
        return self.loop_state is not LoopState.RUNNING

    def signal_break(self) -> None:
        """Request that the innermost loop stop. No-op outside a loop."""
        if self.in_loop:
            self.loop_state = LoopState.BREAK

    def signal_continue(self) -> None:
        """Request the next iteration of the innermost loop. No-op outside a loop."""
        if self.in_loop:
            self.loop_state = LoopState.CONTINUE

    def take_loop_state(self) -> LoopState:
        """Return the pending loop request and reset it to RUNNING."""
        state = self.loop_state
        self.loop_state = LoopState.RUNNING
        return state

    def add_warning(self, diagnostic: Diagnostic) -> None:
        """Record a warning, attaching the source line when known."""
        if diagnostic.source_line is None and diagnostic.line is not None:
            diagnostic.source_line = self._get_source_line(diagnostic.line)
        self.diagnostics.add(diagnostic)

    def _get_source_line(self, line_num: int) -> Optional[str]:
        if 1 <= line_num <= len(self.source_lines):
            return self.source_lines[line_num - 1]
        return None

    @property
    def has_warnings(self) -> bool:
        return self.diagnostics.has_warnings

    @property
    def warnings(self) -> List[Diagnostic]:
        return self.diagnostics.warnings
