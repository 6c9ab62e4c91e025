"""
Lexer for phpcore.

Converts source text into a stream of classified tokens. The lexer is
forgiving by construction: it never reports an error. Malformed input
produces tokens with partial or unexpected text instead.

Supports:
- Whitespace skipping with line/column tracking
- Line comments (// to end of line)
- Block comments (/* */), unterminated ones run to end of input
- String literals in single or double quotes, without escape processing
- Number literals made of digits and dots (1.2.3 is one token)
- Identifiers, relabelled as keywords when reserved
- Single-character operators for everything else
"""

import string
from typing import Iterator, List, Optional, Tuple

from .tokens import Token, TokenType, is_keyword


WHITESPACE = ' \t\n\r\v\f'
QUOTES = '"\''
DIGITS = string.digits
IDENT_START = string.ascii_letters + '_'
IDENT_CHARS = IDENT_START + DIGITS


def scan_string_literal(source: str, pos: int) -> Tuple[str, int, bool]:
    """
    Scan a quoted string literal starting at ``source[pos]``.

    The character at ``pos`` is the opening quote. The literal runs until the
    same quote character or end of input. Backslashes have no special meaning.

    Returns:
        (text, end, terminated) where ``text`` excludes the quotes, ``end`` is
        the index just past the closing quote (or ``len(source)``) and
        ``terminated`` tells whether a closing quote was found.
    """
    quote = source[pos]
    start = pos + 1
    close = source.find(quote, start)
    if close < 0:
        return source[start:], len(source), False
    return source[start:close], close + 1, True


class Lexer:
    """
    Tokenizer for phpcore source text.

    The source is scanned left to right without backtracking.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()

    Or for streaming:
        lexer = Lexer(source_code)
        for token in lexer:
            process(token)
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)
        self.column = 1         # Current column (1-indexed)

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return '\0'
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        return ch

    def _advance_to(self, end: int) -> None:
        """Consume characters up to (not including) index ``end``."""
        while self.pos < end:
            self._advance()

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _skip_line_comment(self) -> None:
        """Skip a // comment up to (not including) the newline."""
        while not self._is_at_end() and self._peek() != '\n':
            self._advance()

    def _skip_block_comment(self) -> None:
        """Skip /* ... */; an unterminated comment swallows the rest of the input."""
        self._advance()  # consume '/'
        self._advance()  # consume '*'
        while not self._is_at_end():
            if self._peek() == '*' and self._peek(1) == '/':
                self._advance()
                self._advance()
                return
            self._advance()

    def _skip_whitespace_and_comments(self) -> None:
        while not self._is_at_end():
            ch = self._peek()
            if ch in WHITESPACE:
                self._advance()
            elif ch == '/' and self._peek(1) == '/':
                self._skip_line_comment()
            elif ch == '/' and self._peek(1) == '*':
                self._skip_block_comment()
            else:
                break

    def _scan_string(self, line: int, column: int) -> Token:
        text, end, _ = scan_string_literal(self.source, self.pos)
        self._advance_to(end)
        return Token(TokenType.STRING, text, line, column)

    def _scan_while(self, allowed: str) -> str:
        start = self.pos
        while not self._is_at_end() and self._peek() in allowed:
            self._advance()
        return self.source[start:self.pos]

    def next_token(self) -> Token:
        """Scan and return the next token; EOF is returned repeatedly at the end."""
        self._skip_whitespace_and_comments()

        line, column = self.line, self.column
        if self._is_at_end():
            return Token(TokenType.EOF, "", line, column)

        ch = self._peek()

        if ch in QUOTES:
            return self._scan_string(line, column)

        if ch in DIGITS:
            text = self._scan_while(DIGITS + '.')
            return Token(TokenType.NUMBER, text, line, column)

        if ch in IDENT_START:
            text = self._scan_while(IDENT_CHARS)
            kind = TokenType.KEYWORD if is_keyword(text) else TokenType.IDENTIFIER
            return Token(kind, text, line, column)

        self._advance()
        return Token(TokenType.OPERATOR, ch, line, column)

    def tokenize(self) -> List[Token]:
        """Tokenize the entire source, returning a list of tokens ending in EOF."""
        tokens = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == TokenType.EOF:
                break
        return tokens

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens, ending with EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                break


def tokenize(source: str) -> List[Token]:
    """
    Convenience function to tokenize source code.

    Args:
        source: The source code to tokenize

    Returns:
        List of tokens, the last of which is EOF
    """
    return Lexer(source).tokenize()


def parse_source(source: Optional[str]) -> bool:
    """
    Run the lexer over ``source`` until end of input.

    No grammar is applied; the only failure is a missing source.
    """
    if source is None:
        return False
    for _ in Lexer(source):
        pass
    return True
