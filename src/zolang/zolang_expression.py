"""
Zolang expression parser.

Turns a token sequence holding exactly one expression into an `Expression` tree.

Algorithm
---------
1. Classify the leading construct by the first matching prefix in
   `leading_constructs` (parenthesized, prefix-operated, list literal, function
   call, list access, identifier, integer, float, string, boolean).
2. Consume the tokens of that construct, using `range_of_scope` for bracketed
   forms.
3. If the next non-newline token is an operator that is not the last token,
   split there: the tokens before it are the left operand, the whole tail after
   it is the right operand. There is no precedence, so `a op1 b op2 c` becomes
   `Operation(a, op1, Operation(b, op2, c))`. Explicit grouping survives as a
   `Parentheses` node.
4. Otherwise the construct must account for every token; leftovers are an
   UNEXPECTED_TOKEN error.

String literals are scanned for `${...}` interpolations (or a `{` at text
position 0), whose contents are re-tokenized and parsed recursively.

The `ParserContext` passed in is advanced past the newlines the parser walks
over, so errors raised deep in the recursion report the line they occur on.

Functions:
    parse_expression(tokens, context) -> Expression
    parse_expression_list(tokens, open_type, close_type, context) -> list[Expression]
    parse_string_literal(text, context) -> Expression
"""

from __future__ import annotations

import logging

from zolang.zolang_ast import (
    BooleanLiteral,
    Expression,
    FloatLiteral,
    FunctionCall,
    Identifier,
    IntegerLiteral,
    ListAccess,
    ListLiteral,
    Operation,
    Parentheses,
    Prefix,
    StringLiteral,
    TemplatedString,
)
from zolang.zolang_constants import (
    BOOLEAN,
    COMMA,
    FLOAT,
    IDENT,
    INTEGER,
    LBRACK,
    LPAREN,
    NEWLINE,
    OPERATOR,
    PREFIX_OPERATOR,
    RBRACK,
    RPAREN,
    STRING,
    signed_prefixes,
    token_symbols,
)
from zolang.zolang_errors import ErrorKind, ZolangError
from zolang.zolang_lexer import Token, tokenize
from zolang.zolang_scope import (
    ParserContext,
    index_of_first,
    index_of_first_not,
    indices_outside_of,
    newline_count,
    range_of_scope,
    trim_leading_newlines,
    trim_trailing_newlines,
)

logger = logging.getLogger(__name__)

PARENTHESES = "parentheses"
PREFIX_OPERATED = "prefixOperated"
LIST_LITERAL = "listLiteral"
FUNCTION_CALL = "functionCall"
LIST_ACCESS = "listAccess"
IDENTIFIER = "identifier"
INTEGER_LITERAL = "integerLiteral"
FLOAT_LITERAL = "floatLiteral"
STRING_LITERAL = "stringLiteral"
BOOLEAN_LITERAL = "booleanLiteral"

# Order matters: calls and list accesses must be tried before bare identifiers.
leading_constructs: list[tuple[str, tuple[str, ...]]] = [
    (PARENTHESES, (LPAREN,)),
    (PREFIX_OPERATED, (PREFIX_OPERATOR,)),
    (LIST_LITERAL, (LBRACK,)),
    (FUNCTION_CALL, (IDENT, LPAREN)),
    (LIST_ACCESS, (IDENT, LBRACK)),
    (IDENTIFIER, (IDENT,)),
    (INTEGER_LITERAL, (INTEGER,)),
    (FLOAT_LITERAL, (FLOAT,)),
    (STRING_LITERAL, (STRING,)),
    (BOOLEAN_LITERAL, (BOOLEAN,)),
]

_leaf_nodes: dict[str, type[Expression]] = {
    IDENTIFIER: Identifier,
    INTEGER_LITERAL: IntegerLiteral,
    FLOAT_LITERAL: FloatLiteral,
    BOOLEAN_LITERAL: BooleanLiteral,
}

_missing_scope_errors: dict[str, ErrorKind] = {
    LPAREN: ErrorKind.MISSING_MATCHING_PARENS,
    LBRACK: ErrorKind.MISSING_MATCHING_BRACKET,
}


def has_prefix_types(tokens: list[Token], types: tuple[str, ...], skipping: str = NEWLINE) -> bool:
    """True if the non-`skipping` tokens of `tokens` start with `types`."""
    significant = (tok.type for tok in tokens if tok.type != skipping)
    for expected in types:
        if next(significant, None) != expected:
            return False
    return True


def is_prefix_operated(tokens: list[Token]) -> bool:
    first = tokens[0] if tokens else None
    if first is None:
        return False
    if first.type == PREFIX_OPERATOR:
        return True
    return first.type == OPERATOR and first.value in signed_prefixes


def classify(tokens: list[Token]) -> str | None:
    """Names the leading construct of `tokens`, or None if nothing matches."""
    for construct, types in leading_constructs:
        if construct == PREFIX_OPERATED:
            if is_prefix_operated(tokens):
                return construct
        elif has_prefix_types(tokens, types):
            return construct
    return None


def parse_expression(tokens: list[Token], context: ParserContext) -> Expression:
    """Parses `tokens` as exactly one expression.

    Args:
        tokens: The tokens of the expression; leading and trailing newlines are allowed.
        context: Diagnostic position, advanced past the newlines consumed.

    Raises:
        ZolangError: On any malformed input, positioned at the offending line.
    """
    tokens = list(tokens)
    context.line += trim_leading_newlines(tokens)
    trim_trailing_newlines(tokens)

    construct = classify(tokens)
    if construct is None:
        raise ZolangError(
            ErrorKind.INVALID_EXPRESSION,
            context.file,
            context.line,
            tokens[0] if tokens else None,
        )

    if construct == PREFIX_OPERATED:
        return _parse_prefix(tokens, context)
    if construct == PARENTHESES:
        return _parse_parentheses(tokens, context)
    if construct == LIST_LITERAL:
        return _parse_list_literal(tokens, context)
    if construct == FUNCTION_CALL:
        return _parse_function_call(tokens, context)
    if construct == LIST_ACCESS:
        return _parse_list_access(tokens, context)
    return _parse_leaf(construct, tokens, context)


def parse_operator(index: int, tokens: list[Token], context: ParserContext) -> Expression | None:
    """Operator continuation after a construct ending just before `index`.

    Returns:
        Expression | None: An Operation when the next non-newline token is an
        operator followed by more tokens, otherwise None.
    """
    if index >= len(tokens):
        return None
    operator_index = index_of_first_not(tokens, NEWLINE, index)
    if (
        operator_index is None
        or operator_index == len(tokens) - 1
        or tokens[operator_index].type != OPERATOR
    ):
        return None

    start_line = context.line
    left_tokens = tokens[:index]
    trim_trailing_newlines(left_tokens)
    left = parse_expression(left_tokens, context)

    # Collection operands parse on detached contexts; recount up to the operator.
    context.line = max(context.line, start_line + newline_count(tokens, operator_index))
    right = parse_expression(tokens[operator_index + 1 :], context)

    operator = tokens[operator_index].value
    assert operator is not None  # for mypy
    return Operation(left, operator, right)


def _require_consumed(end: int, tokens: list[Token], context: ParserContext) -> None:
    """Raises UNEXPECTED_TOKEN if anything but newlines follows `end`."""
    leftover = index_of_first_not(tokens, NEWLINE, end)
    if leftover is not None:
        line = context.line + newline_count(tokens, leftover)
        raise ZolangError(ErrorKind.UNEXPECTED_TOKEN, context.file, line, tokens[leftover])


def _scope_or_raise(tokens: list[Token], open_type: str, close_type: str, context: ParserContext) -> tuple[int, int]:
    scope = range_of_scope(tokens, open_type, close_type)
    if scope is None:
        open_index = index_of_first(tokens, {open_type}) or 0
        raise ZolangError(
            _missing_scope_errors[open_type],
            context.file,
            context.line + newline_count(tokens, open_index),
        )
    return scope


def _parse_prefix(tokens: list[Token], context: ParserContext) -> Expression:
    prefix = tokens[0].value
    assert prefix is not None  # for mypy
    if len(tokens) < 2:
        raise ZolangError(ErrorKind.INVALID_EXPRESSION, context.file, context.line, tokens[0])
    return Prefix(prefix, parse_expression(tokens[1:], context))


def _parse_parentheses(tokens: list[Token], context: ParserContext) -> Expression:
    start, end = _scope_or_raise(tokens, LPAREN, RPAREN, context)
    inner = tokens[start + 1 : end]
    if index_of_first_not(inner, NEWLINE) is None:
        raise ZolangError(ErrorKind.INVALID_EXPRESSION, context.file, context.line, "empty parentheses")

    operation = parse_operator(end + 1, tokens, context)
    if operation is not None:
        return operation

    _require_consumed(end + 1, tokens, context)
    return Parentheses(parse_expression(inner, context))


def _parse_list_literal(tokens: list[Token], context: ParserContext) -> Expression:
    _, end = _scope_or_raise(tokens, LBRACK, RBRACK, context)

    operation = parse_operator(end + 1, tokens, context)
    if operation is not None:
        return operation

    _require_consumed(end + 1, tokens, context)
    return ListLiteral(parse_expression_list(tokens, LBRACK, RBRACK, context))


def _parse_function_call(tokens: list[Token], context: ParserContext) -> Expression:
    name = tokens[0].value
    assert name is not None  # for mypy
    _, end = _scope_or_raise(tokens, LPAREN, RPAREN, context)

    operation = parse_operator(end + 1, tokens, context)
    if operation is not None:
        return operation

    _require_consumed(end + 1, tokens, context)
    return FunctionCall(name, parse_expression_list(tokens, LPAREN, RPAREN, context))


def _parse_list_access(tokens: list[Token], context: ParserContext) -> Expression:
    start, end = _scope_or_raise(tokens, LBRACK, RBRACK, context)

    operation = parse_operator(end + 1, tokens, context)
    if operation is not None:
        return operation

    identifier = tokens[0].value
    if identifier is None:
        raise ZolangError(ErrorKind.MISSING_IDENTIFIER, context.file, context.line)

    _require_consumed(end + 1, tokens, context)

    inner = tokens[start + 1 : end]
    line = context.line + newline_count(tokens, start + 1)
    leading = trim_leading_newlines(inner)
    trim_trailing_newlines(inner)
    if not inner:
        raise ZolangError(ErrorKind.INVALID_EXPRESSION, context.file, line, "empty list index")

    index_context = context.copy(line + leading)
    index = parse_expression(inner, index_context)
    context.line = max(context.line, index_context.line)
    return ListAccess(identifier, index)


def _parse_leaf(construct: str, tokens: list[Token], context: ParserContext) -> Expression:
    operation = parse_operator(1, tokens, context)
    if operation is not None:
        return operation

    if len(tokens) != 1:
        raise ZolangError(ErrorKind.UNEXPECTED_TOKEN, context.file, context.line, tokens[1])

    value = tokens[0].value
    assert value is not None  # for mypy
    if construct == STRING_LITERAL:
        return parse_string_literal(value, context)
    return _leaf_nodes[construct](value)


def parse_expression_list(
    tokens: list[Token], open_type: str, close_type: str, context: ParserContext
) -> list[Expression]:
    """Parses the comma-separated expressions inside the first `open_type` scope.

    An empty scope gives an empty list. Commas nested in parentheses or brackets
    do not split. When the scope holds a single element that fails to parse, the
    element is dropped and an empty list is returned; failures in a
    comma-separated list propagate.
    """
    open_index = index_of_first(tokens, {open_type})
    if open_index is None:
        raise ZolangError(ErrorKind.MISSING_TOKEN, context.file, context.line, token_symbols[open_type])

    scope = range_of_scope(tokens, open_type, close_type)
    if scope is None:
        raise ZolangError(
            _missing_scope_errors[open_type],
            context.file,
            context.line + newline_count(tokens, open_index),
        )
    start, end = scope
    if end - start < 2:
        return []

    commas = indices_outside_of(tokens, COMMA, start + 1, end)
    if not commas:
        inner = tokens[start + 1 : end]
        element_context = context.copy(context.line + newline_count(tokens, start + 1))
        try:
            return [parse_expression(inner, element_context)]
        except ZolangError as e:
            logger.warning("Dropping unparsable single list element: %s", e)
            return []

    expressions = []
    bounds = [start] + commas + [end]
    for lower, upper in zip(bounds, bounds[1:]):
        segment = tokens[lower + 1 : upper]
        element_context = context.copy(context.line + newline_count(tokens, lower + 1))
        expressions.append(parse_expression(segment, element_context))
    return expressions


def _is_escaped(text: str, index: int) -> bool:
    """True if the character at `index` follows an odd run of backslashes."""
    backslashes = 0
    i = index - 1
    while i >= 0 and text[i] == "\\":
        backslashes += 1
        i -= 1
    return backslashes % 2 == 1


def _match_brace(text: str, open_index: int) -> int | None:
    depth = 0
    for i in range(open_index, len(text)):
        if text[i] == "{":
            depth += 1
        elif text[i] == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def interpolation_ranges(text: str) -> list[tuple[int, int, int]]:
    """Finds interpolation scopes in raw string text.

    Returns:
        list[tuple[int, int, int]]: For each interpolation, the index where its
        marker starts (`$` or a leading `{`), the index of its `{` and the index
        of the matching `}`.
    """
    ranges = []
    i = 0
    while i < len(text):
        brace = None
        if i == 0 and text.startswith("{"):
            brace = 0
        elif text.startswith("${", i) and not _is_escaped(text, i):
            brace = i + 1
        close = _match_brace(text, brace) if brace is not None else None
        if brace is not None and close is not None:
            ranges.append((i, brace, close))
            i = close + 1
        else:
            i += 1
    return ranges


def parse_string_literal(text: str, context: ParserContext) -> Expression:
    """Parses the raw text of a string literal.

    Returns a StringLiteral when there is no interpolation, otherwise a
    TemplatedString alternating literal fragments and parsed expressions.
    """
    ranges = interpolation_ranges(text)
    if not ranges:
        return StringLiteral(text)

    expressions: list[Expression] = []
    last_end = 0
    for marker, brace, close in ranges:
        if close - brace < 2:
            raise ZolangError(ErrorKind.UNKNOWN, context.file, context.line, "empty interpolation")
        if marker > last_end:
            expressions.append(StringLiteral(text[last_end:marker]))
        inner = tokenize(text[brace + 1 : close], context.file, context.line)
        expressions.append(parse_expression(inner, context.copy()))
        last_end = close + 1

    if last_end < len(text):
        expressions.append(StringLiteral(text[last_end:]))
    return TemplatedString(expressions)
