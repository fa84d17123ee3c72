"""
Clue CLI Entrypoint.

This module provides the command-line interface for the Clue front end.
It reads a `.clue` file (or an inline string), runs it through the lexer and
parser, and prints one of several views of the result.

Features:
    - Read source from `.clue` files or inline strings.
    - Print the token stream, the AST (repr or JSON), or the canonical source.
    - Output to console or file.
    - Render lex/parse errors with a caret under the offending column.

Example usage:
    clue hello.clue
    clue -s "local x = 5" -m json
    clue messy.clue -m format -o tidy.clue

Functions:
    run_clue(source: str, is_string: bool = False, mode: str = "ast", out: str | None = None) -> str:
        Executes the pipeline (read → lex → parse → render) and returns the rendered text.

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments, runs the pipeline and returns the process exit status.
"""

import argparse
import json
import logging
import sys

from clue.clue_ast import ASTNode
from clue.clue_errors import ClueSyntaxError
from clue.clue_format import format_source
from clue.clue_lexer import tokenize
from clue.clue_parser import parse

logger = logging.getLogger(__name__)

MODES = ("ast", "json", "tokens", "format")


def read_source(source: str, is_string: bool) -> tuple[str, str | None]:
    """Returns the program text and, when it came from a file, the file name.

    Raises:
        ValueError: If `is_string` is False and the path does not end with '.clue'.
    """
    if is_string:
        return source, None
    if not source.endswith(".clue"):
        raise ValueError("Only .clue files are supported.")
    with open(source, encoding="utf-8") as f:
        return f.read(), source


def render_tree(node: ASTNode, depth: int = 0) -> str:
    """One line per node, children indented under their parent."""
    label = node.kind if node.value is None else f"{node.kind} {node.value!r}"
    lines = [f"{'  ' * depth}{label} @{node.line}:{node.col}"]
    lines.extend(render_tree(child, depth + 1) for child in node.children)
    return "\n".join(lines)


def run_clue(
    source: str,
    is_string: bool = False,
    mode: str = "ast",
    out: str | None = None,
) -> str:
    """
    Run the Clue front end on one program and emit the requested view.

    Args:
        source (str): The Clue source code or path to a `.clue` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        mode (str): One of 'ast', 'json', 'tokens', 'format'. Defaults to 'ast'.
        out (str | None): Optional path to write the output to. If None, prints to stdout.

    Returns:
        str: The rendered output.

    Raises:
        ValueError: On an unsupported file extension or unknown mode.
        LexError, ParseError: If the program is malformed.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown output mode: {mode!r}")

    # 1. Read source
    text, filename = read_source(source, is_string)
    logger.debug("read %d chars from %s", len(text), filename or "<string>")

    # 2. Lex or parse
    if mode == "tokens":
        tokens = tokenize(text, filename=filename)
        output = "\n".join(
            f"{tok.line}:{tok.col}\t{tok.type}\t{tok.value}" for tok in tokens
        )
    else:
        root = parse(text, filename=filename)
        if mode == "json":
            output = json.dumps(root.to_dict(), indent=2)
        elif mode == "format":
            output = format_source(root)
        else:
            output = render_tree(root)

    # 3. Output result
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(output + "\n")
        logger.debug("wrote %s output to %s", mode, out)
    else:
        print(output)
    return output


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the Clue CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `-m`, `--mode`: Output view ('ast', 'json', 'tokens', 'format'), default is 'ast'.
        - `-o`, `--out`: Write output to a file.
        - `--verbose`: Log debug information to stderr.

    Returns:
        int: 0 on success, 1 if the program failed to lex or parse.
    """
    parser = argparse.ArgumentParser(prog="clue")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=MODES,
        default="ast",
        help="What to print (default: ast)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "--verbose", action="store_true", help="Log debug information to stderr"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        run_clue(
            source=args.source,
            is_string=args.string,
            mode=args.mode,
            out=args.out,
        )
    except ClueSyntaxError as e:
        text = args.source if args.string else read_source(args.source, False)[0]
        print(e.render(text), file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
