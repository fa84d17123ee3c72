"""
Token tables shared by the Clue lexer, parser and formatter.

Exports:
    keyword_tokens: Reserved words mapped to their token types.
    punctuation_tokens: Fixed punctuation strings mapped to their token types.
    token_hashmap: Union of the two tables, used for lexeme -> type lookups.
    token_text: Reverse mapping, token type -> canonical source text.
    expr_start_tokens: Token types that can begin an `expr` production.
"""

NUMBER = "NUMBER"
IDENT = "IDENT"
EOF = "EOF"

keyword_tokens: dict[str, str] = {
    "local": "LOCAL",
    "if": "IF",
    "elseif": "ELSEIF",
    "else": "ELSE",
    "match": "MATCH",
    "default": "DEFAULT",
    "try": "TRY",
    "catch": "CATCH",
}

punctuation_tokens: dict[str, str] = {
    "{": "LBRACE",
    "}": "RBRACE",
    "=": "ASSIGN",
    "=>": "ARROW",
}

token_hashmap: dict[str, str] = {**keyword_tokens, **punctuation_tokens}

token_text: dict[str, str] = {v: k for k, v in token_hashmap.items()}

# Longest punctuation lexeme; bounds the longest-match scan.
MAX_PUNCT_LEN = max(len(p) for p in punctuation_tokens)

expr_start_tokens: frozenset[str] = frozenset(
    {"LBRACE", NUMBER, "LOCAL", "IF", "MATCH", "TRY"}
)

__all__ = [
    "EOF",
    "IDENT",
    "MAX_PUNCT_LEN",
    "NUMBER",
    "expr_start_tokens",
    "keyword_tokens",
    "punctuation_tokens",
    "token_hashmap",
    "token_text",
]
