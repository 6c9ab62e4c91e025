"""
Runtime values for the phpcore engine.

A Value is a tagged variant with an explicit reference count. The creator
holds the first ownership unit; ``ref()`` adds a unit and ``unref()`` (or
``destroy()``) gives one back. The value is released exactly when the count
drops from 1 to 0, and any later read or release raises ValueReleasedError.
"""

from enum import Enum
from typing import Any, Optional, Union

from ..errors import error_double_release, error_value_released


INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


class ValueType(Enum):
    """Value variants. ARRAY, OBJECT and RESOURCE are reserved tags."""
    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"
    RESOURCE = "resource"


class AllocationTracker:
    """Counts value allocations and releases."""

    def __init__(self):
        self.allocated = 0
        self.released = 0

    @property
    def live(self) -> int:
        """Number of values allocated but not yet released."""
        return self.allocated - self.released

    def reset(self) -> None:
        self.allocated = 0
        self.released = 0

    def __repr__(self) -> str:
        return f"AllocationTracker(allocated={self.allocated}, released={self.released})"


DEFAULT_TRACKER = AllocationTracker()


class Value:
    """
    A reference-counted runtime value.

    ``data`` holds the payload: None, bool, int, float or bytes depending on
    ``type``. String payloads are bytes so that length is a byte length and
    embedded NUL survives.
    """

    __slots__ = ("_type", "_data", "_refcount", "_tracker")

    def __init__(self, value_type: ValueType, data: Any = None,
                 tracker: Optional[AllocationTracker] = None):
        self._type = value_type
        self._data = data
        self._refcount = 1
        self._tracker = tracker if tracker is not None else DEFAULT_TRACKER
        self._tracker.allocated += 1

    @property
    def type(self) -> ValueType:
        return self._type

    @property
    def data(self) -> Any:
        if self._refcount == 0:
            raise error_value_released(self._type.value)
        return self._data

    @property
    def refcount(self) -> int:
        return self._refcount

    @property
    def released(self) -> bool:
        return self._refcount == 0

    def ref(self) -> "Value":
        """Take one more ownership unit and return this value."""
        if self._refcount == 0:
            raise error_value_released(self._type.value)
        self._refcount += 1
        return self

    def unref(self) -> None:
        """Give back one ownership unit, releasing the value at zero."""
        if self._refcount == 0:
            raise error_double_release(self._type.value)
        self._refcount -= 1
        if self._refcount == 0:
            self._data = None
            self._tracker.released += 1

    destroy = unref

    def is_empty(self) -> bool:
        """True for values that count as empty: null, false, 0, 0.0, '' and arrays."""
        data = self.data
        if self._type == ValueType.NULL:
            return True
        if self._type in (ValueType.BOOL, ValueType.INT, ValueType.FLOAT):
            return not data
        if self._type == ValueType.STRING:
            return len(data) == 0
        if self._type == ValueType.ARRAY:
            return True
        return False

    def __repr__(self) -> str:
        if self._refcount == 0:
            return f"Value({self._type.value}, <released>)"
        return f"Value({self._type.value}, {self._data!r}, refcount={self._refcount})"


# Convenience constructors

def null_val(tracker: Optional[AllocationTracker] = None) -> Value:
    """Create a null value."""
    return Value(ValueType.NULL, None, tracker)


def bool_val(b: bool, tracker: Optional[AllocationTracker] = None) -> Value:
    """Create a boolean value."""
    return Value(ValueType.BOOL, bool(b), tracker)


def int_val(n: int, tracker: Optional[AllocationTracker] = None) -> Value:
    """Create an integer value, wrapped to the signed 64-bit range."""
    n = int(n)
    if not INT64_MIN <= n <= INT64_MAX:
        n = ((n - INT64_MIN) % (1 << 64)) + INT64_MIN
    return Value(ValueType.INT, n, tracker)


def float_val(x: float, tracker: Optional[AllocationTracker] = None) -> Value:
    """Create a float value."""
    return Value(ValueType.FLOAT, float(x), tracker)


def _to_bytes(text: Union[str, bytes, bytearray], encoding: str) -> bytes:
    if isinstance(text, str):
        return text.encode(encoding)
    return bytes(text)


def string_val(text: Union[str, bytes, bytearray, None],
               tracker: Optional[AllocationTracker] = None,
               encoding: str = "utf-8") -> Value:
    """
    Create a string value holding a copy of ``text``.

    The copy stops at the first NUL byte; use string_val_len() to keep
    embedded NULs. A None input yields a null value.
    """
    if text is None:
        return null_val(tracker)
    data = _to_bytes(text, encoding)
    nul = data.find(b"\0")
    if nul >= 0:
        data = data[:nul]
    return Value(ValueType.STRING, data, tracker)


def string_val_len(text: Union[str, bytes, bytearray, None], length: int,
                   tracker: Optional[AllocationTracker] = None,
                   encoding: str = "utf-8") -> Value:
    """
    Create a string value from exactly the first ``length`` bytes of ``text``.

    Embedded NUL bytes are kept. A None input yields a null value.
    """
    if text is None:
        return null_val(tracker)
    data = _to_bytes(text, encoding)[:max(0, length)]
    return Value(ValueType.STRING, data, tracker)


def type_name(value: Optional[Value]) -> str:
    """Return the gettype() name of a value."""
    if value is None:
        return "NULL"
    return {
        ValueType.NULL: "NULL",
        ValueType.BOOL: "boolean",
        ValueType.INT: "integer",
        ValueType.FLOAT: "double",
        ValueType.STRING: "string",
        ValueType.ARRAY: "array",
        ValueType.OBJECT: "object",
        ValueType.RESOURCE: "resource",
    }[value.type]
