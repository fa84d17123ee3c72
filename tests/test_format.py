import pytest
from hypothesis import given
from hypothesis import strategies as st

from clue.clue_ast import ASTNode
from clue.clue_constants import keyword_tokens
from clue.clue_format import Formatter, format_source, indent
from clue.clue_parser import parse

numbers = st.from_regex(r"[0-9]{1,3}(\.[0-9]{1,2}){0,2}", fullmatch=True)
names = st.from_regex(r"[a-z_][a-z0-9_]{0,5}", fullmatch=True).filter(
    lambda s: s not in keyword_tokens
)


def braces(items: list[str]) -> str:
    return "{" + " ".join(items) + "}"


def extend(children: st.SearchStrategy[str]) -> st.SearchStrategy[str]:
    blocks = st.lists(children, max_size=3).map(braces)
    locals_ = st.builds(lambda n, e: f"local {n} = {e}", names, children)
    ifs = st.builds(
        lambda c, b, arms, tail: " ".join(
            [f"if {c} {b}"]
            + [f"elseif {ac} {ab}" for ac, ab in arms]
            + ([f"else {tail}"] if tail is not None else [])
        ),
        children,
        blocks,
        st.lists(st.tuples(children, blocks), max_size=2),
        st.none() | blocks,
    )
    matches = st.builds(
        lambda s, cases: f"match {s} " + braces([f"{p} => {b}" for p, b in cases]),
        children,
        st.lists(st.tuples(st.just("default") | children, blocks), min_size=1, max_size=3),
    )
    tries = st.builds(
        lambda g, b, catch: f"try {g} {b}" + (f" {catch}" if catch else ""),
        children,
        blocks,
        st.none()
        | st.builds(lambda n, cb: f"catch {n} {cb}", names, blocks)
        | blocks.map(lambda cb: f"catch {cb}"),
    )
    return st.one_of(blocks, locals_, ifs, matches, tries)


expressions = st.recursive(numbers | st.just("{}"), extend, max_leaves=10)
programs = st.lists(expressions, min_size=1, max_size=3).map("\n".join)


def test_format_empty_block() -> None:
    assert format_source(parse("{}")) == "{}"


def test_format_block_is_indented() -> None:
    assert format_source(parse("{1 {2.5}}")) == "{\n    1\n    {\n        2.5\n    }\n}"


def test_format_program_one_expression_per_line() -> None:
    assert format_source(parse("1 2   local  x=3")) == "1\n2\nlocal x = 3"


def test_format_if_chain() -> None:
    source = "if 1 {2} elseif 3 {} else {4}"
    assert format_source(parse(source)) == (
        "if 1 {\n    2\n} elseif 3 {} else {\n    4\n}"
    )


def test_format_match() -> None:
    assert format_source(parse("match 1 {default=>{} 2=>{3}}")) == (
        "match 1 {\n    default => {}\n    2 => {\n        3\n    }\n}"
    )


def test_format_try_catch() -> None:
    assert format_source(parse("try 1 {} catch e {}")) == "try 1 {} catch e {}"
    assert format_source(parse("try 1 {} catch {}")) == "try 1 {} catch {}"
    assert format_source(parse("try 1 {}")) == "try 1 {}"


def test_format_single_node() -> None:
    node = parse("local a = 1.2.3").children[0]
    assert Formatter().format(node) == "local a = 1.2.3"


def test_format_rejects_non_ast() -> None:
    with pytest.raises(TypeError, match="ASTNode"):
        Formatter().format("{}")  # type: ignore[arg-type]


def test_format_unknown_kind() -> None:
    with pytest.raises(NotImplementedError, match="'bogus'"):
        Formatter().format(ASTNode("bogus", line=3, col=4))


def test_indent_skips_blank_lines() -> None:
    assert indent("a\n\nb") == "    a\n\n    b"


@given(programs)  # type: ignore[misc]
def test_format_roundtrip_preserves_shape(source: str) -> None:
    tree = parse(source)
    assert parse(format_source(tree)).same_shape(tree)


@given(programs)  # type: ignore[misc]
def test_format_is_idempotent(source: str) -> None:
    once = format_source(parse(source))
    assert format_source(parse(once)) == once
