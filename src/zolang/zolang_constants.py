"""
Lexical tables for the Zolang modeling language.

The tokenizer walks `lexical_rules` in order and the first rule that matches at
the current offset wins, so the order of the table is part of the language:
multi-character operators come before their single-character prefixes, word
operators come before plain labels, and floats come before integers.

Exports:
    - token kind names (IDENT, INTEGER, ...)
    - keywords, boolean_literals
    - operator_tokens, prefix_operator_tokens
    - lexical_rules
"""

import re

IDENT = "IDENT"
INTEGER = "INTEGER"
FLOAT = "FLOAT"
STRING = "STRING"
BOOLEAN = "BOOLEAN"
OPERATOR = "OPERATOR"
PREFIX_OPERATOR = "PREFIX_OPERATOR"
COMMA = "COMMA"
COLON = "COLON"
DOT = "DOT"
EQUALS = "EQUALS"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
LBRACK = "LBRACK"
RBRACK = "RBRACK"
LBRACE = "LBRACE"
RBRACE = "RBRACE"
NEWLINE = "NEWLINE"

# Rule kinds that never reach the token stream
WHITESPACE = "WHITESPACE"
COMMENT = "COMMENT"
LABEL = "LABEL"

keywords: dict[str, str] = {
    "describe": "DESCRIBE",
    "return": "RETURN",
    "while": "WHILE",
    "from": "FROM",
    "let": "LET",
    "make": "MAKE",
    "as": "AS",
    "be": "BE",
    "if": "IF",
    "else": "ELSE",
    "private": "PRIVATE",
    "static": "STATIC",
    "default": "DEFAULT",
    "of": "OF",
}

boolean_literals: set[str] = {"true", "false"}

# Longest first
operator_tokens: list[str] = [
    "===",
    "==",
    "!=",
    "<=",
    ">=",
    "&&",
    "||",
    "<",
    ">",
    "+",
    "-",
    "*",
    "/",
    "%",
    "and",
    "or",
    "plus",
    "minus",
    "times",
    "over",
]

prefix_operator_tokens: list[str] = ["not", "!"]

# Operators that may also open an expression, e.g. `-1` or `minus x`
signed_prefixes: set[str] = {"-", "minus"}

punctuation: dict[str, str] = {
    ",": COMMA,
    ":": COLON,
    ".": DOT,
    "=": EQUALS,
    "(": LPAREN,
    ")": RPAREN,
    "[": LBRACK,
    "]": RBRACK,
    "{": LBRACE,
    "}": RBRACE,
}


def _alternation(words: list[str]) -> str:
    parts = []
    for word in words:
        if word.isalpha():
            parts.append(rf"{re.escape(word)}\b")
        else:
            parts.append(re.escape(word))
    return "|".join(parts)


lexical_rules: list[tuple[str, re.Pattern[str]]] = [
    (WHITESPACE, re.compile(r"[ \t\r]+")),
    (COMMENT, re.compile(r"#[^\n]*")),
    (NEWLINE, re.compile(r"\n")),
    (OPERATOR, re.compile(_alternation(operator_tokens))),
    (PREFIX_OPERATOR, re.compile(r"not\b|!(?!=)")),
    (LABEL, re.compile(r"[A-Za-z_][A-Za-z0-9_]*")),
    (STRING, re.compile(r'"(?:[^"\\\n]|\\[^\n])*"')),
    (FLOAT, re.compile(r"\d+\.\d+")),
    (INTEGER, re.compile(r"\d+")),
    (COMMA, re.compile(r",")),
    (COLON, re.compile(r":")),
    (DOT, re.compile(r"\.")),
    (EQUALS, re.compile(r"=")),
    (LPAREN, re.compile(r"\(")),
    (RPAREN, re.compile(r"\)")),
    (LBRACK, re.compile(r"\[")),
    (RBRACK, re.compile(r"\]")),
    (LBRACE, re.compile(r"\{")),
    (RBRACE, re.compile(r"\}")),
]

token_symbols: dict[str, str] = {kind: symbol for symbol, kind in punctuation.items()}
