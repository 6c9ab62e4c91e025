"""
Token types for the phpcore lexer.

The token kinds are deliberately coarse: the lexer only classifies text into
identifiers, literals, keywords and single-character operators. Keywords are
identifiers whose text appears in the reserved word set.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import FrozenSet, Optional


class TokenType(Enum):
    """All token kinds produced by the lexer."""

    EOF = auto()                # end of input (empty text)
    IDENTIFIER = auto()         # foo, _bar, x1
    STRING = auto()             # "hello", 'world' (quotes stripped)
    NUMBER = auto()             # 42, 3.14, 1.2.3
    OPERATOR = auto()           # any other single character
    KEYWORD = auto()            # reserved identifier
    SYMBOL = auto()             # reserved kind, never produced


@dataclass(frozen=True)
class SourceLocation:
    """Represents a position in source code."""
    line: int           # 1-indexed line number
    column: int         # 1-indexed column number
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class Token:
    """A single token from the lexer."""
    type: TokenType
    text: str               # token text; quotes are not included for STRING
    line: int
    column: int

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column)

    def __str__(self) -> str:
        if self.type == TokenType.EOF:
            return self.type.name
        return f"{self.type.name}({self.text!r})"


# Reserved words; an identifier with one of these exact spellings becomes
# a KEYWORD token. Matching is case-sensitive.
KEYWORDS: FrozenSet[str] = frozenset({
    # Statements
    "echo", "print", "if", "else", "elseif", "while", "for", "foreach",
    "function", "class", "interface", "trait", "namespace", "use",
    "return", "break", "continue", "switch", "case", "default",
    "try", "catch", "finally", "throw", "new", "clone", "instanceof",

    # Modifiers
    "public", "private", "protected", "static", "abstract", "final",
    "const", "var", "global",

    # Language constructs
    "unset", "isset", "empty",
    "include", "require", "include_once", "require_once",

    # Logical operators and constants
    "and", "or", "xor", "not", "true", "false", "null",

    # Type names
    "array", "object", "string", "int", "float", "bool", "mixed",
    "void", "self", "parent", "this",
})


def is_keyword(word: str) -> bool:
    """Check if a word is in the reserved word set."""
    return word in KEYWORDS
