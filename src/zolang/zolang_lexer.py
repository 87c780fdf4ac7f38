"""
Lexical analyzer for the Zolang modeling language.

This module converts raw source text into an ordered token sequence:

Classes:
    CharacterStream: Source text with an offset and line/column tracking.
    Token: A single immutable token with a kind and an optional payload.
    Lexer: Converts a CharacterStream into tokens using the ordered rule table.

Features:
    - Fixed-priority rule table (see `zolang_constants.lexical_rules`)
    - Inline whitespace and `#` comments are discarded
    - Newlines are kept as tokens, the parsers count them for diagnostics
    - Labels are split into keywords, boolean literals and identifiers
    - String literal payloads keep escape sequences verbatim

Raises:
    ZolangError: UNRECOGNIZED_CHARACTER when no rule matches at an offset.

Example:
    >>> tokenize("let x be 1")
    [Token(LET, let), Token(IDENT, x), Token(BE, be), Token(INTEGER, 1)]
"""

import logging
from dataclasses import dataclass

from zolang.zolang_constants import (
    BOOLEAN,
    COMMENT,
    IDENT,
    LABEL,
    STRING,
    WHITESPACE,
    boolean_literals,
    keywords,
    lexical_rules,
)
from zolang.zolang_errors import ErrorKind, ZolangError

logger = logging.getLogger(__name__)

# Kinds whose matched text is kept as the token payload
_PAYLOAD_KINDS = {"OPERATOR", "PREFIX_OPERATOR", "FLOAT", "INTEGER"}


class CharacterStream:
    """
    Source text read by offset with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current offset in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def advance(self, count: int) -> str:
        """Consumes `count` characters and returns them."""
        if self.position + count > len(self.source):
            raise IndexError(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        text = self.source[self.position : self.position + count]
        for char in text:
            if char == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        self.position += count
        return text

    def peek(self, offset: int = 0) -> str:
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        type (str): Token kind, e.g. 'IDENT', 'OPERATOR' or a keyword kind like 'LET'.
        value (str | None): Raw text for identifiers, literals, operators and keywords.
    """

    type: str
    value: str | None = None

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.type})"
        return f"Token({self.type}, {self.value})"


class Lexer:
    """Tokenizer for Zolang source.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        file (str): File identifier used in error messages.
    """

    def __init__(self, stream: CharacterStream, file: str = "<string>") -> None:
        self.stream = stream
        self.file = file

    def next_token(self) -> Token | None:
        """Consumes input up to and including the next token.

        Returns:
            Token | None: The next token, or None once the stream is exhausted.

        Raises:
            ZolangError: If no lexical rule matches at the current offset.
        """
        while not self.stream.end_of_file():
            kind, text = self.match_rule()
            self.stream.advance(len(text))
            if kind in (WHITESPACE, COMMENT):
                continue
            return self.make_token(kind, text)
        return None

    def match_rule(self) -> tuple[str, str]:
        """Returns the kind and text of the first rule matching at the current offset."""
        for kind, pattern in lexical_rules:
            match = pattern.match(self.stream.source, self.stream.position)
            if match and match.end() > match.start():
                return kind, match.group()
        raise ZolangError(
            ErrorKind.UNRECOGNIZED_CHARACTER,
            self.file,
            self.stream.line,
            f"{self.stream.peek()!r} at column {self.stream.column}",
        )

    @staticmethod
    def make_token(kind: str, text: str) -> Token:
        if kind == LABEL:
            if text in keywords:
                return Token(keywords[text], text)
            if text in boolean_literals:
                return Token(BOOLEAN, text)
            return Token(IDENT, text)
        if kind == STRING:
            return Token(STRING, text[1:-1])
        if kind in _PAYLOAD_KINDS:
            return Token(kind, text)
        return Token(kind)

    def tokens(self) -> list[Token]:
        """Tokenizes the rest of the stream."""
        result = []
        while True:
            tok = self.next_token()
            if tok is None:
                break
            result.append(tok)
        return result


def tokenize(source: str, file: str = "<string>", line: int = 1) -> list[Token]:
    """Tokenizes `source`, numbering lines from `line` for error messages."""
    tokens = Lexer(CharacterStream(source, 0, line, 1), file).tokens()
    logger.debug("Tokenized %s into %d tokens", file, len(tokens))
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
