"""
Loa runtime - tree-walking interpreter.

This module provides:
- Interpreter: Executes parsed Loa programs
- Value: Runtime values tagged with their kind
- Environment / ExecutionContext: Global bindings and loop control state
"""

from .values import (
    Value,
    ValueKind,
    NONE,
    number_val,
    float_val,
    string_val,
    bool_val,
    from_literal,
    render,
    wrap_int64,
)

from .context import (
    Environment,
    LoopState,
    ExecutionContext,
)

from .interpreter import (
    Interpreter,
    execute,
    run,
)

__all__ = [
    # Values
    'Value',
    'ValueKind',
    'NONE',
    'number_val',
    'float_val',
    'string_val',
    'bool_val',
    'from_literal',
    'render',
    'wrap_int64',

    # Context
    'Environment',
    'LoopState',
    'ExecutionContext',

    # Interpreter
    'Interpreter',
    'execute',
    'run',
]
