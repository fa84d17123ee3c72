"""
Error types raised by the Clue lexer and parser.

Both error kinds derive from the builtin `SyntaxError`, so callers that already
guard a parse with `except SyntaxError` keep working.

Classes:
    Position: Offset/line/column triple pointing into the source text.
    ClueSyntaxError: Common base carrying a message, a position and a filename.
    LexError: An unrecognized character or an unterminated comment.
    ParseError: A token that is present but grammatically unexpected.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from clue.clue_lexer import Token


class Position(NamedTuple):
    """A location in the source text.

    Attributes:
        offset (int): 0-based character index.
        line (int): 1-based line number.
        column (int): 1-based column number.
    """

    offset: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"line {self.line}, col {self.column}"


class ClueSyntaxError(SyntaxError):
    """Base class for every error the Clue front end raises.

    Attributes:
        message (str): Human readable description, without location.
        position (Position): Where the offending character or token starts.
        filename (str | None): Source file name, if the text came from a file.
    """

    def __init__(
        self, message: str, position: Position, filename: str | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.position = position
        self.filename = filename
        self.lineno = position.line
        self.offset = position.column

    def __str__(self) -> str:
        where = str(self.position)
        if self.filename:
            where = f"{self.filename}, {where}"
        return f"{self.message} at {where}"

    def render(self, source: str) -> str:
        """Formats the error with the offending source line and a caret under it.

        Args:
            source (str): The text that was being parsed.

        Returns:
            str: A multi-line message suitable for terminal output.
        """
        lines = source.split("\n")
        header = f"error: {self}"
        if not 0 < self.position.line <= len(lines):
            return header
        text = lines[self.position.line - 1].expandtabs(1)
        gutter = f"{self.position.line} | "
        pointer = " " * (len(gutter) + self.position.column - 1) + "^"
        return f"{header}\n{gutter}{text}\n{pointer}"


class LexError(ClueSyntaxError):
    """Raised when the current position matches no token rule.

    Attributes:
        char (str): The offending character ("" when not tied to one character).
    """

    def __init__(
        self,
        message: str,
        position: Position,
        char: str = "",
        filename: str | None = None,
    ) -> None:
        super().__init__(message, position, filename)
        self.char = char


class ParseError(ClueSyntaxError):
    """Raised when a token does not fit the grammar at the current position.

    Attributes:
        token (Token | None): The offending token.
    """

    def __init__(
        self,
        message: str,
        position: Position,
        token: Token | None = None,
        filename: str | None = None,
    ) -> None:
        super().__init__(message, position, filename)
        self.token = token

    @classmethod
    def at(cls, message: str, token: Token, filename: str | None = None) -> ParseError:
        return cls(message, token.position, token=token, filename=filename)


__all__ = ["ClueSyntaxError", "LexError", "ParseError", "Position"]
