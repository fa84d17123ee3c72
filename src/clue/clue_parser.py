"""
Clue Language Parser

Parses Clue source text into structured abstract syntax trees (ASTs).

The parser is a recursive-descent parser with one function per grammar
nonterminal. It pulls tokens lazily from a `Lexer` and decides every production
from the current token alone, so it never backtracks.

Grammar
-------
    expr         := block | NUMBER | local_decl | if_stmt | match_stmt | try_stmt
    exprlist     := expr+
    block        := '{' exprlist? '}'
    local_decl   := 'local' IDENT '=' expr
    if_stmt      := if_block elseif_block* else_block?
    if_block     := 'if' expr block
    elseif_block := 'elseif' expr block
    else_block   := 'else' block
    match_stmt   := 'match' expr match_block
    match_block  := '{' match_case+ '}'
    match_case   := match_expr '=>' block
    match_expr   := 'default' | expr
    try_stmt     := try_block catch_block?
    try_block    := 'try' expr block
    catch_block  := 'catch' IDENT? block

Parser Behavior
---------------
- Fails fast: the first error raises a `ParseError` (or a `LexError` from the
  lexer) carrying the position of the offending token.
- Newlines carry no meaning; expressions in a list are separated by whitespace only.
- Constructs that end in an optional tail (`if`, `try`) consume the tail only
  when its keyword follows; any other token is left to the caller.

Entry Points
------------
- `parse(source)`: Parse a full program into a root `block` node.
- `Parser.parse_expr()`: Parse exactly one expression.
- `Parser.parse_exprlist()`: Parse one or more expressions.

Raises
------
ParseError
    Raised when a token does not fit the grammar.
LexError
    Raised (by the lexer) when the input contains an unrecognized character.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from clue.clue_ast import DEFAULT, ASTNode
from clue.clue_constants import (
    EOF,
    IDENT,
    NUMBER,
    expr_start_tokens,
    keyword_tokens,
    token_text,
)
from clue.clue_errors import ParseError
from clue.clue_lexer import Lexer, Token

logger = logging.getLogger(__name__)

KEYWORD_TYPES = frozenset(keyword_tokens.values())

# Maximum expression nesting accepted by parse_expr.
MAX_DEPTH = 100


def describe(tok: Token) -> str:
    if tok.type == EOF:
        return "end of input"
    return repr(tok.value)


class Parser:
    """
    Clue Parser Class

    Transforms the token stream of one `Lexer` into `ASTNode` trees. The only
    state is the lexer's scan position; one Parser instance serves one parse.

    Attributes
    ----------
    lexer : Lexer
        The token source. The parser is its only consumer.
    filename : str | None
        Reported in errors when set.
    dispatch : dict[str, Callable[[], ASTNode]]
        Leading token type -> production that handles it.

    Methods
    -------
    parse() -> ASTNode
        Parse a complete program into a root `block` node.
    parse_expr() -> ASTNode
        Parse one expression, choosing the production from the current token.
    parse_exprlist() -> list[ASTNode]
        Parse one or more expressions.
    parse_block() -> ASTNode
        Parse a `{}`-enclosed, possibly empty, expression list.
    parse_local_decl() -> ASTNode
        Parse `local name = expr`.
    parse_if_stmt() -> ASTNode
        Parse an `if`/`elseif`/`else` chain.
    parse_match_stmt() -> ASTNode
        Parse `match expr { case... }`.
    parse_try_stmt() -> ASTNode
        Parse `try expr block` with an optional `catch`.
    """

    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.filename = lexer.filename
        self.depth = 0
        self.dispatch: dict[str, Callable[[], ASTNode]] = {
            "LBRACE": self.parse_block,
            NUMBER: self.parse_number,
            "LOCAL": self.parse_local_decl,
            "IF": self.parse_if_stmt,
            "MATCH": self.parse_match_stmt,
            "TRY": self.parse_try_stmt,
        }

    @classmethod
    def from_source(cls, source: str, filename: str | None = None) -> Parser:
        return cls(Lexer.from_source(source, filename=filename))

    def current(self) -> Token:
        return self.lexer.peek()

    def peek(self, offset: int = 1) -> Token:
        return self.lexer.peek(offset)

    def advance(self) -> Token:
        """Consumes the current token and returns it."""
        return self.lexer.next_token()

    def check(self, *types: str) -> bool:
        return self.current().type in types

    def starts_expr(self) -> bool:
        return self.current().type in expr_start_tokens

    def error(self, message: str, tok: Token | None = None) -> ParseError:
        return ParseError.at(message, tok or self.current(), filename=self.filename)

    def match(self, *types: str) -> Token:
        tok = self.current()
        if tok.type in types:
            return self.advance()
        expected = " or ".join(repr(token_text.get(t, t)) for t in types)
        raise self.error(f"expected {expected}, got {describe(tok)}", tok)

    def expect_close(self) -> Token:
        """Consumes the `}` that ends a block or match block."""
        tok = self.current()
        if tok.type == "RBRACE":
            return self.advance()
        if tok.type == EOF:
            raise self.error("unterminated block", tok)
        raise self.error(f"unexpected token {describe(tok)}", tok)

    def node(
        self,
        kind: str,
        tok: Token,
        value: str | None = None,
        children: list[ASTNode] | None = None,
    ) -> ASTNode:
        return ASTNode(
            kind, value, children, line=tok.line, col=tok.col, offset=tok.offset
        )

    def parse(self) -> ASTNode:
        """Parse a full Clue program: one or more expressions, then end of input."""
        exprs = self.parse_exprlist()
        tok = self.current()
        if tok.type != EOF:
            raise self.error(f"unexpected token {describe(tok)}", tok)
        logger.debug(
            "parsed %s: %d top-level expressions",
            self.filename or "<string>",
            len(exprs),
        )
        return ASTNode("block", None, exprs, line=1, col=1, offset=0)

    def parse_expr(self) -> ASTNode:
        tok = self.current()
        handler = self.dispatch.get(tok.type)
        if handler is None:
            raise self.error(f"unexpected token {describe(tok)}", tok)
        if self.depth >= MAX_DEPTH:
            raise self.error("nesting too deep", tok)
        self.depth += 1
        try:
            return handler()
        finally:
            self.depth -= 1

    def parse_exprlist(self) -> list[ASTNode]:
        if not self.starts_expr():
            raise self.error("empty expression list")
        exprs = []
        while self.starts_expr():
            exprs.append(self.parse_expr())
        return exprs

    def parse_number(self) -> ASTNode:
        tok = self.match(NUMBER)
        return self.node("number", tok, tok.value)

    def parse_block(self) -> ASTNode:
        """Parse `{ exprlist? }`. Unlike a bare exprlist, a block may be empty."""
        open_tok = self.match("LBRACE")
        exprs = self.parse_exprlist() if self.starts_expr() else []
        self.expect_close()
        return self.node("block", open_tok, children=exprs)

    def parse_local_decl(self) -> ASTNode:
        local_tok = self.match("LOCAL")
        name_tok = self.current()
        if name_tok.type != IDENT:
            raise self.error("expected identifier after local", name_tok)
        self.advance()
        self.match("ASSIGN")
        init = self.parse_expr()
        return self.node("local_decl", local_tok, name_tok.value, [init])

    def parse_conditional_arm(self, kind: str, keyword: str) -> ASTNode:
        """Parse `if expr block` or `elseif expr block`."""
        tok = self.match(keyword)
        cond = self.parse_expr()
        body = self.parse_block()
        return self.node(kind, tok, children=[cond, body])

    def parse_if_stmt(self) -> ASTNode:
        first = self.current()
        arms = [self.parse_conditional_arm("if_block", "IF")]

        while self.check("ELSEIF"):
            arms.append(self.parse_conditional_arm("elseif_block", "ELSEIF"))

        if self.check("ELSE"):
            else_tok = self.advance()
            else_body = self.parse_block()
            arms.append(self.node("else_block", else_tok, children=[else_body]))

        return self.node("if_stmt", first, children=arms)

    def parse_match_stmt(self) -> ASTNode:
        match_tok = self.match("MATCH")
        scrutinee = self.parse_expr()
        open_tok = self.match("LBRACE")

        if self.check("RBRACE"):
            raise self.error("empty match block")

        cases = []
        while not self.check("RBRACE", EOF):
            cases.append(self.parse_match_case())
        self.expect_close()

        match_block = self.node("match_block", open_tok, children=cases)
        return self.node("match_stmt", match_tok, children=[scrutinee, match_block])

    def parse_match_case(self) -> ASTNode:
        first = self.current()
        if first.type == "DEFAULT":
            self.advance()
            pattern = self.node("match_expr", first, DEFAULT)
        else:
            pattern = self.node("match_expr", first, children=[self.parse_expr()])
        self.match("ARROW")
        body = self.parse_block()
        return self.node("match_case", first, children=[pattern, body])

    def parse_try_stmt(self) -> ASTNode:
        try_tok = self.match("TRY")
        guarded = self.parse_expr()
        recovery = self.parse_block()
        parts = [self.node("try_block", try_tok, children=[guarded, recovery])]

        if self.check("CATCH"):
            catch_tok = self.advance()
            name = None
            if self.check(IDENT):
                name = self.advance().value
            elif self.current().type in KEYWORD_TYPES:
                raise self.error("expected identifier or block after catch")
            catch_body = self.parse_block()
            parts.append(self.node("catch_block", catch_tok, name, [catch_body]))

        return self.node("try_stmt", try_tok, children=parts)


def parse(source: str, filename: str | None = None) -> ASTNode:
    """Parse Clue source text into a root `block` node.

    Args:
        source (str): The complete program text.
        filename (str | None): Reported in error messages when given.

    Returns:
        ASTNode: A `block` whose children are the top-level expressions.

    Raises:
        LexError: If the text contains a character no token starts with.
        ParseError: If the tokens do not form a valid program.
    """
    logger.debug("parsing %s (%d chars)", filename or "<string>", len(source))
    return Parser.from_source(source, filename=filename).parse()


__all__ = ["Parser", "parse"]
