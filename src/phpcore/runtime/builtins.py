"""
Function registry and built-in functions for the phpcore engine.

A builtin callback receives ``(argc, argv)`` where ``argv`` is a list of
Values borrowed from the caller, and returns a new Value owned by the
caller. The registry checks arity before dispatch.

Known weaknesses kept on purpose:
- duplicate names are accepted; lookup finds the first registration
- an unknown name and an arity mismatch both make call() return None
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from .output import OutputSink, format_float
from .values import (
    Value, ValueType, AllocationTracker,
    null_val, bool_val, int_val, string_val, string_val_len, type_name,
)


logger = logging.getLogger(__name__)

BuiltinCallback = Callable[[int, List[Value]], Value]

DEFAULT_CAPACITY = 32
UNBOUNDED = -1


@dataclass
class BuiltinFunction:
    """A registered function with its arity bounds."""
    name: str
    callback: BuiltinCallback
    min_args: int = 0
    max_args: int = UNBOUNDED   # negative means no upper bound
    doc: str = ""

    def accepts(self, argc: int) -> bool:
        """Check an argument count against the arity bounds."""
        if argc < self.min_args:
            return False
        return self.max_args < 0 or argc <= self.max_args


class FunctionRegistry:
    """
    Registry of callable functions, searched linearly by name.

    ``capacity`` is growth bookkeeping only: it doubles when the table
    fills but never limits registration, since the list grows by itself.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        self.capacity = max(1, capacity)
        self._functions: List[BuiltinFunction] = []

    def register(self, name: str, callback: BuiltinCallback,
                 min_args: int = 0, max_args: int = UNBOUNDED, doc: str = "") -> bool:
        """
        Append a function entry.

        Returns False if ``name`` is empty or ``callback`` is not callable.
        """
        if not name or not callable(callback):
            return False

        if len(self._functions) >= self.capacity:
            self.capacity *= 2
        if self.lookup(name) is not None:
            logger.debug("function %r registered again; first registration stays visible", name)
        self._functions.append(BuiltinFunction(name, callback, min_args, max_args, doc))
        return True

    def register_function(self, func: BuiltinFunction) -> bool:
        """Register a prepared BuiltinFunction."""
        if func is None:
            return False
        return self.register(func.name, func.callback, func.min_args, func.max_args, func.doc)

    def lookup(self, name: str) -> Optional[BuiltinFunction]:
        """Find the first function registered under ``name``."""
        for func in self._functions:
            if func.name == name:
                return func
        return None

    def has_function(self, name: str) -> bool:
        return self.lookup(name) is not None

    def call(self, name: str, argv: Optional[List[Value]] = None) -> Optional[Value]:
        """
        Call a function by name.

        Returns the callback's result, or None when the name is unknown or
        the argument count is outside the function's bounds.
        """
        if name is None:
            return None
        argv = list(argv or [])
        func = self.lookup(name)
        if func is None:
            logger.debug("call to unknown function %r", name)
            return None
        if not func.accepts(len(argv)):
            logger.debug("call to %r rejected: %d argument(s), expected %d..%s",
                         name, len(argv), func.min_args,
                         func.max_args if func.max_args >= 0 else "*")
            return None
        return func.callback(len(argv), argv)

    def clear(self) -> None:
        self._functions.clear()

    def names(self) -> List[str]:
        return [func.name for func in self._functions]

    def __len__(self) -> int:
        return len(self._functions)

    def __contains__(self, name: str) -> bool:
        return self.has_function(name)


def render_value(value: Optional[Value]) -> bytes:
    """Render a value the way echo prints it."""
    if value is None:
        return b""
    if value.type == ValueType.STRING:
        return value.data
    if value.type == ValueType.INT:
        return str(value.data).encode("ascii")
    if value.type == ValueType.FLOAT:
        return format_float(value.data).encode("ascii")
    if value.type == ValueType.BOOL:
        return b"1" if value.data else b""
    return b"NULL"


def var_dump_text(value: Optional[Value]) -> bytes:
    """Render a value the way var_dump prints it, including the newline."""
    if value is None or value.type == ValueType.NULL:
        return b"NULL\n"
    if value.type == ValueType.BOOL:
        return b"bool(true)\n" if value.data else b"bool(false)\n"
    if value.type == ValueType.INT:
        return b"int(%d)\n" % value.data
    if value.type == ValueType.FLOAT:
        return b"float(" + format_float(value.data).encode("ascii") + b")\n"
    if value.type == ValueType.STRING:
        return b'string(%d) "' % len(value.data) + value.data + b'"\n'
    return type_name(value).encode("ascii") + b"\n"


def register_builtins(registry: FunctionRegistry, sink: OutputSink,
                      tracker: Optional[AllocationTracker] = None) -> None:
    """Register all built-in functions into ``registry``."""
    _register_output_functions(registry, sink, tracker)
    _register_string_functions(registry, tracker)
    _register_type_functions(registry, tracker)
    logger.debug("registered %d builtin functions", len(registry))


# --- Output functions ---

def _register_output_functions(registry: FunctionRegistry, sink: OutputSink,
                               tracker: Optional[AllocationTracker]) -> None:

    def _echo(argc: int, argv: List[Value]) -> Value:
        for arg in argv[:argc]:
            if arg is not None:
                sink.output(render_value(arg))
        return null_val(tracker)

    def _print(argc: int, argv: List[Value]) -> Value:
        if argc > 0 and argv[0] is not None:
            _echo(1, argv[:1]).destroy()
        return int_val(1, tracker)

    def _var_dump(argc: int, argv: List[Value]) -> Value:
        for arg in argv[:argc]:
            sink.output(var_dump_text(arg))
        return null_val(tracker)

    registry.register("echo", _echo, 1, UNBOUNDED, "Output one or more values")
    registry.register("print", _print, 1, 1, "Output a value and return 1")
    registry.register("var_dump", _var_dump, 1, UNBOUNDED, "Dump type and value")


# --- String functions ---

def _string_arg(argc: int, argv: List[Value]) -> Optional[bytes]:
    """The first argument's bytes, or None if absent or not a string."""
    if argc < 1 or argv[0] is None or argv[0].type != ValueType.STRING:
        return None
    return argv[0].data


def _bytes_val(data: bytes, tracker: Optional[AllocationTracker]) -> Value:
    return string_val_len(data, len(data), tracker)


def _register_string_functions(registry: FunctionRegistry,
                               tracker: Optional[AllocationTracker]) -> None:

    def _strlen(argc: int, argv: List[Value]) -> Value:
        data = _string_arg(argc, argv)
        return int_val(0 if data is None else len(data), tracker)

    def _strtolower(argc: int, argv: List[Value]) -> Value:
        data = _string_arg(argc, argv)
        return _bytes_val(b"" if data is None else data.lower(), tracker)

    def _strtoupper(argc: int, argv: List[Value]) -> Value:
        data = _string_arg(argc, argv)
        return _bytes_val(b"" if data is None else data.upper(), tracker)

    def _trim(argc: int, argv: List[Value]) -> Value:
        data = _string_arg(argc, argv)
        # Same character set as PHP's default: space, \t, \n, \r, \0, \x0B
        return _bytes_val(b"" if data is None else data.strip(b" \t\n\r\0\x0b"), tracker)

    # strlen() with no argument must return int(0), so the minimum is 0
    # rather than PHP's usual 1; the callback handles the missing argument.
    registry.register("strlen", _strlen, 0, 1, "Byte length of a string")
    registry.register("strtolower", _strtolower, 1, 1, "ASCII lowercase copy")
    registry.register("strtoupper", _strtoupper, 1, 1, "ASCII uppercase copy")
    registry.register("trim", _trim, 1, 1, "Strip surrounding whitespace")


# --- Type functions ---

def _register_type_functions(registry: FunctionRegistry,
                             tracker: Optional[AllocationTracker]) -> None:

    def _gettype(argc: int, argv: List[Value]) -> Value:
        return string_val(type_name(argv[0] if argc > 0 else None), tracker)

    def _make_is_type(value_type: ValueType) -> BuiltinCallback:
        def _is_type(argc: int, argv: List[Value]) -> Value:
            arg = argv[0] if argc > 0 else None
            if arg is None:
                return bool_val(value_type == ValueType.NULL, tracker)
            return bool_val(arg.type == value_type, tracker)
        return _is_type

    registry.register("gettype", _gettype, 1, 1, "Type name of a value")
    for fname, value_type in [
        ("is_null", ValueType.NULL),
        ("is_bool", ValueType.BOOL),
        ("is_int", ValueType.INT),
        ("is_float", ValueType.FLOAT),
        ("is_string", ValueType.STRING),
    ]:
        registry.register(fname, _make_is_type(value_type), 1, 1, f"Check for {value_type.value}")
