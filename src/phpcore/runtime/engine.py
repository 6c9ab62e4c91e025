"""
Execution engine for phpcore.

The engine owns one Environment and one FunctionRegistry for its lifetime
and drives source text through a statement recognition loop. It is not a
parser: only ``echo``/``print`` followed by a quoted literal has an effect,
and every other statement is skipped.

Lifecycle:
    engine = Engine(sink=BufferSink())
    engine.init()
    result = engine.execute('<?php echo "Hello"; ?>')
    engine.cleanup()
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from .builtins import BuiltinCallback, FunctionRegistry, UNBOUNDED, register_builtins
from .environment import Environment
from .output import OutputSink
from .values import AllocationTracker, Value
from ..config import EngineConfig
from ..errors import (
    Diagnostic, DiagnosticCollector, ErrorSeverity,
    diagnostic_open_failed, diagnostic_unbalanced, error_wrong_state,
)
from ..lexer import QUOTES, scan_string_literal
from ..tokens import SourceLocation


logger = logging.getLogger(__name__)

PHP_VERSION = "8.3.0"
ZEND_VERSION = "4.3.0"

OPEN_TAG = "<?php"
SHORT_OPEN_TAG = "<?"
CLOSE_TAG = "?>"

# Whitespace skipped between statements; note \v and \f are not included.
STATEMENT_SPACE = " \t\n\r"
STATEMENT_KEYWORDS = ("echo", "print")


class EngineState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    RUNNING = "running"
    ERROR = "error"


@dataclass
class ExecutionResult:
    """Result of executing source text."""
    success: bool
    error_message: Optional[str] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.success


class Engine:
    """
    A single interpreter instance.

    All state lives on the instance, so several engines can coexist. An
    engine is not thread safe; callers sharing one across threads must
    serialise init(), execute() and cleanup() themselves.
    """

    def __init__(self, config: Optional[EngineConfig] = None,
                 sink: Optional[OutputSink] = None,
                 tracker: Optional[AllocationTracker] = None):
        self.config = config if config is not None else EngineConfig()
        if sink is None:
            sink = OutputSink(encoding=self.config.output_encoding)
        self.sink = sink
        self.tracker = tracker
        self.diagnostics = DiagnosticCollector()

        self._state = EngineState.UNINITIALIZED
        self._environment: Optional[Environment] = None
        self._functions: Optional[FunctionRegistry] = None
        self._current_scope: Optional[Environment] = None

    # --- Lifecycle ---

    @property
    def state(self) -> EngineState:
        return self._state

    def get_state(self) -> EngineState:
        return self._state

    @property
    def environment(self) -> Optional[Environment]:
        return self._environment

    @property
    def current_scope(self) -> Optional[Environment]:
        """The scope variable operations act on; always the global one for now."""
        return self._current_scope

    @property
    def functions(self) -> Optional[FunctionRegistry]:
        return self._functions

    def init(self) -> bool:
        """Allocate the environment and registry and register builtins."""
        if self._state != EngineState.UNINITIALIZED:
            return True

        self._environment = Environment(self.config.variables_capacity)
        self._functions = FunctionRegistry(self.config.functions_capacity)
        register_builtins(self._functions, self.sink, self.tracker)
        self._current_scope = self._environment

        self._state = EngineState.INITIALIZED
        logger.debug("engine initialized with %d builtins", len(self._functions))
        return True

    def cleanup(self) -> None:
        """Destroy every owned value and return to the uninitialized state."""
        if self._state == EngineState.UNINITIALIZED:
            return

        if self._environment is not None:
            self._environment.clear()
        if self._functions is not None:
            self._functions.clear()
        self._environment = None
        self._functions = None
        self._current_scope = None
        self.diagnostics.clear()

        self._state = EngineState.UNINITIALIZED
        logger.debug("engine cleaned up")

    def require_state(self, expected: EngineState, operation: str) -> None:
        """Raise EngineStateError unless the engine is in ``expected`` state."""
        if self._state != expected:
            raise error_wrong_state(operation, expected.value, self._state.value)

    def _not_ready(self, operation: str) -> ExecutionResult:
        diag = error_wrong_state(operation, EngineState.INITIALIZED.value,
                                 self._state.value).diagnostic
        return ExecutionResult(success=False, error_message=diag.message, diagnostics=[diag])

    # --- Execution ---

    def execute(self, source: Optional[str]) -> ExecutionResult:
        """
        Run source text through the statement loop.

        Output already written is not retracted if a later step fails.
        """
        if self._state != EngineState.INITIALIZED:
            return self._not_ready("execute")
        if source is None:
            return ExecutionResult(success=False, error_message="no source given")

        self._state = EngineState.RUNNING
        try:
            self._run(source)
        except Exception:
            self._state = EngineState.ERROR
            raise
        self._state = EngineState.INITIALIZED
        return ExecutionResult(success=True)

    def execute_file(self, path: Union[str, Path]) -> ExecutionResult:
        """Read a source file and execute its contents."""
        if self._state != EngineState.INITIALIZED:
            return self._not_ready("execute file")

        try:
            source = Path(path).read_bytes().decode(self.config.output_encoding,
                                                    errors="surrogateescape")
        except OSError as e:
            diag = diagnostic_open_failed(str(path), e.strerror or str(e))
            self.error("Failed to open file")
            return ExecutionResult(success=False, error_message=diag.message,
                                   diagnostics=[diag])
        return self.execute(source)

    def _statement_keyword(self, source: str, pos: int) -> Optional[str]:
        for keyword in STATEMENT_KEYWORDS:
            if source.startswith(keyword, pos):
                return keyword
        return None

    def _run(self, source: str) -> None:
        pos = 0
        end = len(source)

        while pos < end:
            while pos < end and source[pos] in STATEMENT_SPACE:
                pos += 1
            if pos >= end:
                break

            # Region markers carry no meaning here beyond being skipped
            if source.startswith(OPEN_TAG, pos):
                pos += len(OPEN_TAG)
                continue
            if source.startswith(SHORT_OPEN_TAG, pos):
                pos += len(SHORT_OPEN_TAG)
                continue
            if source.startswith(CLOSE_TAG, pos):
                pos += len(CLOSE_TAG)
                continue

            keyword = self._statement_keyword(source, pos)
            if keyword is not None:
                pos += len(keyword)
                while pos < end and source[pos] in " \t":
                    pos += 1
                if pos < end and source[pos] in QUOTES:
                    text, pos, terminated = scan_string_literal(source, pos)
                    if terminated:
                        self.sink.output(text)
                continue

            stop = pos
            while stop < end and source[stop] not in ";\n":
                stop += 1
            logger.debug("skipping statement %r", source[pos:stop])
            pos = stop + 1 if stop < end and source[stop] == ";" else stop

    # --- Syntax check ---

    def syntax_check(self, path: Union[str, Path]) -> bool:
        """Check brace and parenthesis balance of a source file."""
        try:
            source = Path(path).read_text(encoding=self.config.output_encoding,
                                          errors="replace")
        except OSError as e:
            self.diagnostics.add(diagnostic_open_failed(str(path), e.strerror or str(e)))
            return False
        return self.syntax_check_source(source)

    def syntax_check_source(self, source: str) -> bool:
        """
        Count braces and parentheses inside code regions, line by line.

        The count is purely textual: brackets inside strings and comments
        count too. Succeeds iff both counts end at zero.
        """
        ok, found = check_balance(source)
        for diag in found:
            self.diagnostics.add(diag)
        return ok

    # --- Variables ---

    def set_variable(self, name: str, value: Value) -> bool:
        if self._current_scope is None:
            return False
        return self._current_scope.set(name, value)

    def get_variable(self, name: str) -> Optional[Value]:
        if self._current_scope is None:
            return None
        return self._current_scope.get(name)

    def unset_variable(self, name: str) -> bool:
        if self._current_scope is None:
            return False
        return self._current_scope.unset(name)

    def isset(self, name: str) -> bool:
        if self._current_scope is None:
            return False
        return self._current_scope.isset(name)

    def empty(self, name: str) -> bool:
        if self._current_scope is None:
            return True
        return self._current_scope.empty(name)

    # --- Functions ---

    def register_function(self, name: str, callback: BuiltinCallback,
                          min_args: int = 0, max_args: int = UNBOUNDED) -> bool:
        if self._functions is None:
            return False
        return self._functions.register(name, callback, min_args, max_args)

    def call_function(self, name: str, argv: Optional[List[Value]] = None) -> Optional[Value]:
        """Call a registered function; None for unknown names and bad arity."""
        if self._functions is None:
            return None
        return self._functions.call(name, argv)

    # --- Output and error reporting ---

    def output(self, text: Union[str, bytes, None]) -> None:
        self.sink.output(text)

    def _report(self, code: str, severity: ErrorSeverity, message: Optional[str]) -> None:
        if not message:
            return
        self.diagnostics.add(Diagnostic(code=code, message=message, severity=severity))
        if self.config.display_errors:
            self.sink.error(message + "\n")

    def error(self, message: Optional[str]) -> None:
        self._report("E400", ErrorSeverity.ERROR, message)

    def warning(self, message: Optional[str]) -> None:
        self._report("W400", ErrorSeverity.WARNING, message)

    def notice(self, message: Optional[str]) -> None:
        self._report("N400", ErrorSeverity.NOTICE, message)


def check_balance(source: str):
    """
    Textual brace/paren balance over code regions.

    Returns (ok, diagnostics). A region opens at ``<?`` (which covers
    ``<?php`` and ``<?=``) and closes at ``?>``; regions may span lines.
    """
    in_region = False
    braces = 0
    parens = 0
    first_unmatched = {}

    # Lines end at \n only; \v, \f and other separators stay inside a line
    for line_no, line in enumerate(source.split("\n"), 1):
        col = 0
        while col < len(line):
            if not in_region:
                if line.startswith(SHORT_OPEN_TAG, col):
                    in_region = True
                    col += len(SHORT_OPEN_TAG)
                else:
                    col += 1
                continue

            if line.startswith(CLOSE_TAG, col):
                in_region = False
                col += len(CLOSE_TAG)
                continue

            ch = line[col]
            if ch == "{":
                braces += 1
            elif ch == "}":
                braces -= 1
                if braces < 0:
                    first_unmatched.setdefault("braces", SourceLocation(line_no, col + 1))
            elif ch == "(":
                parens += 1
            elif ch == ")":
                parens -= 1
                if parens < 0:
                    first_unmatched.setdefault("parentheses", SourceLocation(line_no, col + 1))
            col += 1

    found = []
    if braces != 0:
        found.append(diagnostic_unbalanced("braces", braces, first_unmatched.get("braces")))
    if parens != 0:
        found.append(diagnostic_unbalanced("parentheses", parens,
                                           first_unmatched.get("parentheses")))
    return braces == 0 and parens == 0, found


def execute(source: str, sink: Optional[OutputSink] = None,
            config: Optional[EngineConfig] = None) -> ExecutionResult:
    """
    Convenience function: run source on a fresh engine and clean it up.

    Args:
        source: Source text to execute
        sink: Where output goes (defaults to the process streams)
        config: Optional engine configuration

    Returns:
        The ExecutionResult of the run
    """
    engine = Engine(config=config, sink=sink)
    engine.init()
    try:
        return engine.execute(source)
    finally:
        engine.cleanup()
