"""
Defines the abstract syntax tree (AST) node structure for the Clue language.

Classes:
    ASTNode:
        A node in the syntax tree, produced by the parser and consumed by the formatter.
        One class covers every construct; `kind` names the grammar nonterminal.

    ASTDict:
        TypedDict representation for serializing ASTNode instances to plain Python dictionaries,
        suitable for JSON output or debugging.

Node layout by kind:
    block         children: zero or more expressions
    number        value: literal text
    local_decl    value: identifier name; children: [initializer]
    if_stmt       children: [if_block, elseif_block..., else_block?]
    if_block      children: [condition, block]
    elseif_block  children: [condition, block]
    else_block    children: [block]
    match_stmt    children: [scrutinee, match_block]
    match_block   children: [match_case, ...]
    match_case    children: [match_expr, block]
    match_expr    value: "default" with no children, or None with children: [expr]
    try_stmt      children: [try_block, catch_block?]
    try_block     children: [guarded expr, recovery block]
    catch_block   value: bound identifier or None; children: [block]

Example:
    node = ASTNode("local_decl", "x", [ASTNode("number", "5")])
"""

from __future__ import annotations

from typing import Any, TypedDict

EXPRESSION_KINDS = frozenset(
    {"block", "number", "local_decl", "if_stmt", "match_stmt", "try_stmt"}
)

DEFAULT = "default"


class ASTDict(TypedDict):
    """
    TypedDict representation of an ASTNode used for serialization.

    Fields:
        kind (str): The type of AST node (e.g., "block", "if_stmt").
        value (str | None): Literal text, identifier name, or the default-arm marker.
        line (int): Line number in the source code where the node originates.
        col (int): Column number in the source code where the node originates.
        offset (int): Character offset in the source code where the node originates.
        children (list[ASTDict]): Child nodes, in source order.
    """

    kind: str
    value: str | None
    line: int
    col: int
    offset: int
    children: list[ASTDict]


class ASTNode:
    """
    Represents a node in the abstract syntax tree (AST) for the Clue language.

    Args:
        kind (str): The grammar construct (e.g., "block", "match_case").
        value (str, optional): A literal value, identifier name or marker.
        children (list[ASTNode], optional): Child nodes in source order.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).
        offset (int): Source character offset (default is 0).

    Equality is structural and includes the source location; use `same_shape`
    to compare trees while ignoring where they came from.
    """

    __slots__ = ("kind", "value", "children", "line", "col", "offset")

    def __init__(
        self,
        kind: str,
        value: str | None = None,
        children: list[ASTNode] | None = None,
        line: int = 0,
        col: int = 0,
        offset: int = 0,
    ):
        self.kind = kind
        self.value = value
        self.children: list[ASTNode] = children or []
        self.line = line
        self.col = col
        self.offset = offset

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        if self.value is not None:
            parts.append(f"value={repr(self.value)}")
        if self.children:
            preview = ", ".join(repr(c) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        return f"ASTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ASTNode):
            return False
        return (
            self.kind == other.kind
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
            and self.offset == other.offset
            and self.children == other.children
        )

    def same_shape(self, other: ASTNode) -> bool:
        """Structural equality ignoring source positions."""
        return (
            self.kind == other.kind
            and self.value == other.value
            and len(self.children) == len(other.children)
            and all(a.same_shape(b) for a, b in zip(self.children, other.children))
        )

    def walk(self) -> list[ASTNode]:
        """All nodes of the subtree in pre-order, this node first."""
        nodes = [self]
        for child in self.children:
            nodes.extend(child.walk())
        return nodes

    def to_dict(self) -> ASTDict:
        return {
            "kind": self.kind,
            "value": self.value,
            "line": self.line,
            "col": self.col,
            "offset": self.offset,
            "children": [c.to_dict() for c in self.children],
        }

    @classmethod
    def from_dict(cls, data: ASTDict) -> ASTNode:
        return cls(
            data["kind"],
            data["value"],
            [cls.from_dict(c) for c in data["children"]],
            line=data["line"],
            col=data["col"],
            offset=data["offset"],
        )

    # Accessors over the fixed child layout.

    def _child_of_kind(self, kind: str) -> ASTNode | None:
        return next((c for c in self.children if c.kind == kind), None)

    @property
    def is_expression(self) -> bool:
        return self.kind in EXPRESSION_KINDS

    @property
    def is_default(self) -> bool:
        return self.kind == "match_expr" and self.value == DEFAULT

    @property
    def initializer(self) -> ASTNode:
        assert self.kind == "local_decl", self.kind
        return self.children[0]

    @property
    def condition(self) -> ASTNode:
        assert self.kind in ("if_block", "elseif_block"), self.kind
        return self.children[0]

    @property
    def body(self) -> ASTNode:
        """The trailing block of an if/elseif/else arm, match case, try or catch."""
        return self.children[-1]

    @property
    def if_block(self) -> ASTNode:
        assert self.kind == "if_stmt", self.kind
        return self.children[0]

    @property
    def elseif_blocks(self) -> list[ASTNode]:
        return [c for c in self.children if c.kind == "elseif_block"]

    @property
    def else_block(self) -> ASTNode | None:
        return self._child_of_kind("else_block")

    @property
    def scrutinee(self) -> ASTNode:
        assert self.kind == "match_stmt", self.kind
        return self.children[0]

    @property
    def cases(self) -> list[ASTNode]:
        assert self.kind == "match_stmt", self.kind
        return self.children[1].children

    @property
    def try_block(self) -> ASTNode:
        assert self.kind == "try_stmt", self.kind
        return self.children[0]

    @property
    def catch_block(self) -> ASTNode | None:
        return self._child_of_kind("catch_block")


__all__ = ["ASTDict", "ASTNode", "DEFAULT", "EXPRESSION_KINDS"]
