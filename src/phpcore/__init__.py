"""
phpcore - the execution core of a small PHP runtime.

This module provides:
- Lexer: Tokenizes source text, never failing on malformed input
- Runtime: Reference-counted values, a variable environment, a builtin
  registry and the engine that drives them
- Config: YAML and directive based engine settings

Usage:
    from phpcore import Engine, BufferSink

    sink = BufferSink()
    engine = Engine(sink=sink)
    engine.init()
    engine.execute('<?php echo "Hello"; ?>')
    engine.cleanup()
    assert sink.stdout_bytes == b"Hello"
"""

__version__ = "1.0.0"

from .tokens import (
    Token,
    TokenType,
    SourceLocation,
    KEYWORDS,
    is_keyword,
)

from .lexer import (
    Lexer,
    tokenize,
    parse_source,
    scan_string_literal,
)

from .errors import (
    ErrorSeverity,
    Diagnostic,
    DiagnosticCollector,
    PhpCoreError,
    ValueReleasedError,
    EngineStateError,
)

from .config import (
    EngineConfig,
    load_config,
    parse_directive,
)

from .runtime import (
    # Values
    Value,
    ValueType,
    AllocationTracker,
    null_val,
    bool_val,
    int_val,
    float_val,
    string_val,
    string_val_len,
    # Environment
    Scope,
    Environment,
    # Builtins
    BuiltinFunction,
    FunctionRegistry,
    # Output
    StreamId,
    OutputSink,
    BufferSink,
    # Engine
    PHP_VERSION,
    ZEND_VERSION,
    Engine,
    EngineState,
    ExecutionResult,
    execute,
)

__all__ = [
    # Tokens
    'Token',
    'TokenType',
    'SourceLocation',
    'KEYWORDS',
    'is_keyword',

    # Lexer
    'Lexer',
    'tokenize',
    'parse_source',
    'scan_string_literal',

    # Errors
    'ErrorSeverity',
    'Diagnostic',
    'DiagnosticCollector',
    'PhpCoreError',
    'ValueReleasedError',
    'EngineStateError',

    # Config
    'EngineConfig',
    'load_config',
    'parse_directive',

    # Runtime
    'Value',
    'ValueType',
    'AllocationTracker',
    'null_val',
    'bool_val',
    'int_val',
    'float_val',
    'string_val',
    'string_val_len',
    'Scope',
    'Environment',
    'BuiltinFunction',
    'FunctionRegistry',
    'StreamId',
    'OutputSink',
    'BufferSink',
    'PHP_VERSION',
    'ZEND_VERSION',
    'Engine',
    'EngineState',
    'ExecutionResult',
    'execute',
]
