"""
Variable environment for the phpcore engine.

An Environment is an ordered table of (name, value, scope) entries. Lookup is
a linear scan by exact name. The table owns one reference to each stored
value: overwriting or unsetting a name destroys the value it held.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from .values import Value


logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 64


class Scope(Enum):
    """Scope tag of an entry. Only GLOBAL is used for now."""
    GLOBAL = "global"
    LOCAL = "local"
    FUNCTION = "function"


@dataclass
class VariableEntry:
    """A single binding in the environment."""
    name: str
    value: Value
    scope: Scope = Scope.GLOBAL


class Environment:
    """
    A single variable scope.

    Entries keep insertion order until a name is unset; unset moves the last
    entry into the freed slot. ``capacity`` is growth bookkeeping only: it
    doubles when the table fills but never limits the number of entries.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, scope: Scope = Scope.GLOBAL):
        self.capacity = max(1, capacity)
        self.scope = scope
        self._entries: List[VariableEntry] = []

    def _index(self, name: str) -> int:
        for i, entry in enumerate(self._entries):
            if entry.name == name:
                return i
        return -1

    def set(self, name: str, value: Value) -> bool:
        """
        Bind ``name`` to ``value``, taking over the caller's ownership unit.

        An existing binding is overwritten in place and its old value is
        destroyed. Returns False if ``name`` or ``value`` is None.
        """
        if name is None or value is None:
            return False

        i = self._index(name)
        if i >= 0:
            entry = self._entries[i]
            entry.value.destroy()
            entry.value = value
            return True

        if len(self._entries) >= self.capacity:
            self.capacity *= 2
            logger.debug("environment grown to capacity %d", self.capacity)
        self._entries.append(VariableEntry(name, value, self.scope))
        return True

    def get(self, name: str) -> Optional[Value]:
        """
        Look up ``name``; returns a borrowed value or None.

        Callers that keep the value past the current statement must ref() it.
        """
        if name is None:
            return None
        i = self._index(name)
        if i < 0:
            return None
        return self._entries[i].value

    def unset(self, name: str) -> bool:
        """Remove ``name`` and destroy its value. Returns whether it was bound."""
        if name is None:
            return False
        i = self._index(name)
        if i < 0:
            return False

        self._entries[i].value.destroy()
        last = self._entries.pop()
        if i < len(self._entries):
            self._entries[i] = last
        return True

    def isset(self, name: str) -> bool:
        """True if ``name`` is bound."""
        return self.get(name) is not None

    def empty(self, name: str) -> bool:
        """True if ``name`` is unbound or bound to an empty value."""
        value = self.get(name)
        if value is None:
            return True
        return value.is_empty()

    def clear(self) -> None:
        """Destroy every value and drop all entries."""
        for entry in self._entries:
            entry.value.destroy()
        self._entries.clear()

    def names(self) -> List[str]:
        """Bound names in table order."""
        return [entry.name for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: str) -> bool:
        return self.isset(name)

    def __iter__(self) -> Iterator[VariableEntry]:
        return iter(list(self._entries))
