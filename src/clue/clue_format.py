"""
Re-serializes Clue ASTs into canonical Clue source text.

The `Formatter` walks a tree produced by the parser and emits source that parses
back to a tree of the same shape. Layout is fixed: one top-level expression per
line, non-empty blocks broken over several lines, four-space indentation.

Usage:
    >>> from clue.clue_parser import parse
    >>> format_source(parse("if 1 {2} else {}"))
    'if 1 {\\n    2\\n} else {}'

Raises:
    TypeError: If handed something that is not an ASTNode.
    NotImplementedError: If a node kind has no `emit_*` method.
"""

from clue.clue_ast import ASTNode

INDENT = "    "


def indent(text: str) -> str:
    return "\n".join(INDENT + line if line else line for line in text.split("\n"))


class Formatter:
    """Emits canonical Clue source from AST nodes.

    Each `emit_<kind>` method returns the text for one node kind; `_visit`
    dispatches on `node.kind`.
    """

    def format(self, node: ASTNode) -> str:
        """Formats a single expression (or sub-form) node."""
        if not isinstance(node, ASTNode):
            raise TypeError(f"Expected an ASTNode, got {type(node).__name__}")
        return self._visit(node)

    def format_program(self, root: ASTNode) -> str:
        """Formats a root `block` as a program: its expressions, one per line, no braces."""
        if not isinstance(root, ASTNode):
            raise TypeError(f"Expected an ASTNode, got {type(root).__name__}")
        return "\n".join(self._visit(expr) for expr in root.children)

    def _visit(self, node: ASTNode) -> str:
        method = getattr(self, f"emit_{node.kind}", None)
        if method is None:
            raise NotImplementedError(
                f"No emitter method for node kind '{node.kind}' "
                f"(line {node.line}, col {node.col})"
            )
        result: str = method(node)
        return result

    def _braced(self, items: list[ASTNode]) -> str:
        if not items:
            return "{}"
        body = "\n".join(indent(self._visit(item)) for item in items)
        return "{\n" + body + "\n}"

    def emit_block(self, node: ASTNode) -> str:
        return self._braced(node.children)

    def emit_number(self, node: ASTNode) -> str:
        return str(node.value)

    def emit_local_decl(self, node: ASTNode) -> str:
        return f"local {node.value} = {self._visit(node.initializer)}"

    def emit_if_stmt(self, node: ASTNode) -> str:
        return " ".join(self._visit(arm) for arm in node.children)

    def emit_if_block(self, node: ASTNode) -> str:
        return f"if {self._visit(node.condition)} {self._visit(node.body)}"

    def emit_elseif_block(self, node: ASTNode) -> str:
        return f"elseif {self._visit(node.condition)} {self._visit(node.body)}"

    def emit_else_block(self, node: ASTNode) -> str:
        return f"else {self._visit(node.body)}"

    def emit_match_stmt(self, node: ASTNode) -> str:
        return f"match {self._visit(node.scrutinee)} {self._visit(node.children[1])}"

    def emit_match_block(self, node: ASTNode) -> str:
        return self._braced(node.children)

    def emit_match_case(self, node: ASTNode) -> str:
        pattern, body = node.children
        return f"{self._visit(pattern)} => {self._visit(body)}"

    def emit_match_expr(self, node: ASTNode) -> str:
        if node.is_default:
            return "default"
        return self._visit(node.children[0])

    def emit_try_stmt(self, node: ASTNode) -> str:
        return " ".join(self._visit(part) for part in node.children)

    def emit_try_block(self, node: ASTNode) -> str:
        guarded, recovery = node.children
        return f"try {self._visit(guarded)} {self._visit(recovery)}"

    def emit_catch_block(self, node: ASTNode) -> str:
        if node.value is None:
            return f"catch {self._visit(node.body)}"
        return f"catch {node.value} {self._visit(node.body)}"


def format_source(root: ASTNode) -> str:
    """Formats the root node returned by `clue.clue_parser.parse` back into source."""
    return Formatter().format_program(root)


__all__ = ["Formatter", "format_source", "indent"]
