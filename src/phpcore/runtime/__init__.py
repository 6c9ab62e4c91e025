"""
phpcore runtime - values, variables, builtins and the execution engine.

This module provides:
- Value: Reference-counted tagged runtime values
- Environment: Variable storage for a single scope
- FunctionRegistry: Arity-checked builtin dispatch
- Engine: Lifecycle and the statement recognition loop
- OutputSink: The engine's connection to stdout/stderr
"""

from .values import (
    Value,
    ValueType,
    AllocationTracker,
    DEFAULT_TRACKER,
    null_val,
    bool_val,
    int_val,
    float_val,
    string_val,
    string_val_len,
    type_name,
)

from .environment import (
    Scope,
    VariableEntry,
    Environment,
)

from .output import (
    StreamId,
    OutputSink,
    BufferSink,
    format_float,
)

from .builtins import (
    BuiltinFunction,
    FunctionRegistry,
    UNBOUNDED,
    register_builtins,
    render_value,
    var_dump_text,
)

from .engine import (
    PHP_VERSION,
    ZEND_VERSION,
    Engine,
    EngineState,
    ExecutionResult,
    check_balance,
    execute,
)

__all__ = [
    # Values
    'Value',
    'ValueType',
    'AllocationTracker',
    'DEFAULT_TRACKER',
    'null_val',
    'bool_val',
    'int_val',
    'float_val',
    'string_val',
    'string_val_len',
    'type_name',

    # Environment
    'Scope',
    'VariableEntry',
    'Environment',

    # Output
    'StreamId',
    'OutputSink',
    'BufferSink',
    'format_float',

    # Builtins
    'BuiltinFunction',
    'FunctionRegistry',
    'UNBOUNDED',
    'register_builtins',
    'render_value',
    'var_dump_text',

    # Engine
    'PHP_VERSION',
    'ZEND_VERSION',
    'Engine',
    'EngineState',
    'ExecutionResult',
    'check_balance',
    'execute',
]
