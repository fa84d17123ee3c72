"""
Lexical analyzer for the Clue scripting language.

This module converts raw source text into a lazy stream of tokens:

Classes:
    CharacterStream: Stream abstraction for reading characters with offset/line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens, with lookahead.

Features:
    - Skips whitespace (newlines included) and `//` / `/* */` comments
    - Recognizes:
        * Numbers made of dot-separated digit groups (`1`, `1.5`, `1.2.3`)
        * Identifiers, and keywords by exact match of a whole identifier
        * Punctuation `{ } = =>` with longest-match recognition
    - Returns `EOF` forever once the input is exhausted
    - `mark()` / `reset()` to re-scan from a saved position

Raises:
    LexError: On an unrecognized character or an unterminated block comment.

Example:
    >>> lexer = Lexer.from_source("local x = 5")
    >>> lexer.next_token()
    Token(LOCAL, local)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from clue.clue_constants import (
    EOF,
    IDENT,
    MAX_PUNCT_LEN,
    NUMBER,
    keyword_tokens,
    punctuation_tokens,
)
from clue.clue_errors import LexError, Position

logger = logging.getLogger(__name__)

DIGITS = "0123456789"
IDENT_START = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_"
IDENT_CHARS = IDENT_START + DIGITS
WHITESPACE = " \t\r\n\f\v"


def is_digit(ch: str) -> bool:
    """ASCII digits only; `str.isdigit` also accepts other Unicode digits."""
    return ch != "" and ch in DIGITS


class CharacterStream:
    """
    A utility for reading characters from a string source with location tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            IndexError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise IndexError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)

    def location(self) -> Position:
        """The position of the next unread character."""
        return Position(self.position, self.line, self.column)

    def seek(self, position: Position) -> None:
        """Moves the stream back (or forward) to a previously recorded location."""
        self.position, self.line, self.column = position


class Token:
    """Represents a single lexical token in the Clue language.

    Attributes:
        type (str): The canonical token type (e.g. 'IDENT', 'NUMBER', 'LBRACE', 'EOF').
        value (str): The literal source text of the token ("" for EOF).
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
        offset (int): The 0-based character offset where the token starts.
    """

    __slots__ = ("type", "value", "line", "col", "offset")

    def __init__(
        self, type_: str, value: str, line: int = 0, col: int = 0, offset: int = 0
    ):
        object.__setattr__(self, "type", type_)
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "col", col)
        object.__setattr__(self, "offset", offset)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Token is immutable; cannot set {name!r}")

    @property
    def position(self) -> Position:
        return Position(self.offset, self.line, self.col)

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
            and self.offset == other.offset
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col, self.offset))


class Lexer:
    """Lexical analyzer for the Clue language.

    Tokens are produced on demand. Lookahead tokens requested through `peek`
    are buffered until `next_token` consumes them.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        filename (str | None): Reported in errors when set.
    """

    def __init__(self, stream: CharacterStream, filename: str | None = None) -> None:
        self.stream = stream
        self.filename = filename
        self._lookahead: list[Token] = []

    @classmethod
    def from_source(cls, source: str, filename: str | None = None) -> Lexer:
        return cls(CharacterStream(source), filename=filename)

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            if tok.type == EOF:
                return
            yield tok

    def next_token(self) -> Token:
        """Consumes and returns the next token.

        Returns:
            Token: The next token; `EOF` once (and every time after) the input is exhausted.

        Raises:
            LexError: If the next lexeme is not a valid Clue token.
        """
        if self._lookahead:
            return self._lookahead.pop(0)
        return self._scan()

    def peek(self, offset: int = 0) -> Token:
        """Returns the token `offset` places ahead without consuming anything.

        `peek()` is the token the next call to `next_token()` will return.
        """
        while len(self._lookahead) <= offset:
            self._lookahead.append(self._scan())
        return self._lookahead[offset]

    def mark(self) -> Position:
        """Returns the location of the next unconsumed token, for use with `reset`."""
        if self._lookahead:
            return self._lookahead[0].position
        return self.stream.location()

    def reset(self, position: Position) -> None:
        """Rewinds the scanner to a location previously returned by `mark`."""
        self._lookahead.clear()
        self.stream.seek(position)

    def skip_whitespace(self) -> None:
        """Skips whitespace and comments."""
        while not self.stream.end_of_file():
            ch = self.stream.peek()
            if ch in WHITESPACE:
                self.stream.next()
            elif ch == "/" and self.stream.peek(1) == "/":
                self.skip_line_comment()
            elif ch == "/" and self.stream.peek(1) == "*":
                self.skip_block_comment()
            else:
                break

    def skip_line_comment(self) -> None:
        while not self.stream.end_of_file() and self.stream.peek() != "\n":
            self.stream.next()

    def skip_block_comment(self) -> None:
        start = self.stream.location()
        self.stream.next()
        self.stream.next()
        while not self.stream.end_of_file():
            if self.stream.peek() == "*" and self.stream.peek(1) == "/":
                self.stream.next()
                self.stream.next()
                return
            self.stream.next()
        raise LexError("unterminated comment", start, char="/", filename=self.filename)

    def match_punctuation(self) -> Token | None:
        """Attempts to match the longest punctuation lexeme at the current position."""
        start = self.stream.location()
        best = ""
        candidate = ""
        for i in range(MAX_PUNCT_LEN):
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in punctuation_tokens:
                best = candidate

        if not best:
            return None
        for _ in best:
            self.stream.next()
        return Token(
            punctuation_tokens[best], best, start.line, start.column, start.offset
        )

    def read_number(self) -> str:
        """Reads `\\d+(\\.\\d+)*`; a dot only joins the literal when a digit follows it."""
        num = self.read_digits()
        while self.stream.peek() == "." and is_digit(self.stream.peek(1)):
            num += self.stream.next()
            num += self.read_digits()
        return num

    def read_digits(self) -> str:
        digits = ""
        while is_digit(self.stream.peek()):
            digits += self.stream.next()
        return digits

    def _scan(self) -> Token:
        self.skip_whitespace()
        start = self.stream.location()

        if self.stream.end_of_file():
            return Token(EOF, "", start.line, start.column, start.offset)

        ch = self.stream.peek()

        # 1. Identifier or keyword
        if ch in IDENT_START:
            ident = ""
            while self.stream.peek() and self.stream.peek() in IDENT_CHARS:
                ident += self.stream.next()
            type_ = keyword_tokens.get(ident, IDENT)
            return Token(type_, ident, start.line, start.column, start.offset)

        # 2. Number
        if is_digit(ch):
            num = self.read_number()
            return Token(NUMBER, num, start.line, start.column, start.offset)

        # 3. Punctuation
        token = self.match_punctuation()
        if token:
            return token

        # 4. Unknown character
        raise LexError(
            f"unrecognized character {ch!r}", start, char=ch, filename=self.filename
        )


def tokenize(source: str, filename: str | None = None) -> list[Token]:
    """Lexes the whole source eagerly. The returned list always ends with `EOF`."""
    lexer = Lexer.from_source(source, filename=filename)
    tokens = list(lexer)
    tokens.append(lexer.next_token())
    logger.debug("lexed %d tokens from %s", len(tokens), filename or "<string>")
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
