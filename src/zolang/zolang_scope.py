"""
Scope matching and diagnostic position state shared by the Zolang parsers.

Classes:
    ParserContext: Per-file file identifier and line counter threaded through parsing.

Functions:
    range_of_scope: Locates a balanced open/close token range.
    index_of_first_not: First index whose token is not of a given kind.
    newline_count: Number of newline tokens in a prefix of a token list.
    trim_leading_newlines / trim_trailing_newlines: Strip newline tokens.
    indices_outside_of: Top-level separator positions, skipping nested scopes.
"""

from dataclasses import dataclass, replace

from zolang.zolang_constants import LBRACK, LPAREN, NEWLINE, RBRACK, RPAREN
from zolang.zolang_lexer import Token


@dataclass
class ParserContext:
    """Position state for one file's parse.

    The line counter only moves forward: callers add the newlines they consume.

    Attributes:
        file (str): Identifier of the file being parsed.
        line (int): Current 1-based line.
    """

    file: str
    line: int = 1

    def copy(self, line: int | None = None) -> "ParserContext":
        """Returns a detached context for a sub-range, optionally starting at `line`."""
        return replace(self, line=self.line if line is None else line)


def range_of_scope(
    tokens: list[Token], open_type: str, close_type: str, start: int = 0
) -> tuple[int, int] | None:
    """Finds the first `open_type` token at or after `start` and its matching close.

    Only tokens of the two given kinds change the nesting depth.

    Returns:
        tuple[int, int] | None: Indices of the open and matching close tokens,
        or None if there is no open token or the stream ends unbalanced.
    """
    depth = 0
    open_index = None
    for i in range(start, len(tokens)):
        kind = tokens[i].type
        if kind == open_type:
            if open_index is None:
                open_index = i
            depth += 1
        elif kind == close_type and open_index is not None:
            depth -= 1
            if depth == 0:
                return open_index, i
    return None


def index_of_first(tokens: list[Token], types: set[str], start: int = 0) -> int | None:
    for i in range(start, len(tokens)):
        if tokens[i].type in types:
            return i
    return None


def index_of_first_not(tokens: list[Token], type_: str, start: int = 0) -> int | None:
    for i in range(start, len(tokens)):
        if tokens[i].type != type_:
            return i
    return None


def newline_count(tokens: list[Token], end: int | None = None, start: int = 0) -> int:
    """Counts newline tokens in `tokens[start:end]`."""
    return sum(1 for tok in tokens[start:end] if tok.type == NEWLINE)


def trim_leading_newlines(tokens: list[Token]) -> int:
    """Removes leading newline tokens in place and returns how many were removed."""
    count = 0
    while count < len(tokens) and tokens[count].type == NEWLINE:
        count += 1
    del tokens[:count]
    return count


def trim_trailing_newlines(tokens: list[Token]) -> int:
    """Removes trailing newline tokens in place and returns how many were removed."""
    count = 0
    while count < len(tokens) and tokens[len(tokens) - 1 - count].type == NEWLINE:
        count += 1
    if count:
        del tokens[len(tokens) - count :]
    return count


def indices_outside_of(
    tokens: list[Token],
    separator_type: str,
    start: int = 0,
    end: int | None = None,
    scopes: tuple[tuple[str, str], ...] = ((LPAREN, RPAREN), (LBRACK, RBRACK)),
) -> list[int]:
    """Positions of `separator_type` tokens in `tokens[start:end]` that are not
    nested inside any of the given scopes."""
    opens = {open_type for open_type, _ in scopes}
    closes = {close_type for _, close_type in scopes}
    end = len(tokens) if end is None else end
    depth = 0
    found = []
    for i in range(start, end):
        kind = tokens[i].type
        if kind in opens:
            depth += 1
        elif kind in closes:
            depth -= 1
        elif kind == separator_type and depth == 0:
            found.append(i)
    return found
