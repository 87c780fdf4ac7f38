"""
Zolang statement parser.

Parses a whole file's token stream into a `CodeBlock` of statements. Every value
position (initializers, conditions, defaults, return values, bare expression
statements) is cut out of the stream and handed to the expression parser.
Nested bodies are located with `range_of_scope` and parsed by a child `Parser`
sharing the same `ParserContext`, so the line counter advances exactly once per
newline token consumed.

Supported Constructs
--------------------
- Models:       describe Person { name as text default "x" ... }
- Members:      [private] [static] name as type [default expr]
                [private] [static] name [return type] from (a as type, ...) { ... }
- Variables:    let x [as type] be expr
- Mutation:     make x be expr, make x[i] be expr
- Control flow: if expr { ... } else if expr { ... } else { ... }, while expr { ... }
- Return:       return [expr]
- Expression statements, e.g. a function call on its own line

Parser Behavior
---------------
Fail-fast: the first error aborts the file, no partial tree is returned.

Raises
------
ZolangError
    Positioned at the line of the offending construct.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from zolang.zolang_ast import (
    CodeBlock,
    Conditional,
    Expression,
    ExpressionStatement,
    FunctionDeclaration,
    Loop,
    Member,
    ModelDescription,
    Mutation,
    Parameter,
    Property,
    Return,
    Statement,
    TypeReference,
    VariableDeclaration,
)
from zolang.zolang_constants import (
    COMMA,
    IDENT,
    LBRACE,
    LBRACK,
    LPAREN,
    NEWLINE,
    OPERATOR,
    PREFIX_OPERATOR,
    RBRACE,
    RBRACK,
    RPAREN,
    keywords,
    token_symbols,
)
from zolang.zolang_errors import ErrorKind, ZolangError
from zolang.zolang_expression import parse_expression
from zolang.zolang_lexer import Token, tokenize
from zolang.zolang_scope import ParserContext, index_of_first_not, range_of_scope

logger = logging.getLogger(__name__)

T = TypeVar("T")

DESCRIBE = keywords["describe"]
RETURN = keywords["return"]
WHILE = keywords["while"]
FROM = keywords["from"]
LET = keywords["let"]
MAKE = keywords["make"]
AS = keywords["as"]
BE = keywords["be"]
IF = keywords["if"]
ELSE = keywords["else"]
PRIVATE = keywords["private"]
STATIC = keywords["static"]
DEFAULT = keywords["default"]
OF = keywords["of"]

_missing_scope_errors: dict[str, ErrorKind] = {
    LPAREN: ErrorKind.MISSING_MATCHING_PARENS,
    LBRACK: ErrorKind.MISSING_MATCHING_BRACKET,
    LBRACE: ErrorKind.MISSING_MATCHING_CURLY,
}

_closing: dict[str, str] = {LPAREN: RPAREN, LBRACK: RBRACK, LBRACE: RBRACE}


class Parser:
    """
    Zolang statement parser.

    Attributes
    ----------
    tokens : list[Token]
        The tokens of the file, or of the body being parsed.
    position : int
        Current index into `tokens`.
    context : ParserContext
        File identifier and line counter, shared with child parsers.
    """

    def __init__(self, tokens: list[Token], context: ParserContext | None = None, file: str = "<string>") -> None:
        self.tokens = tokens
        self.position = 0
        self.context = context if context is not None else ParserContext(file)

    def current(self) -> Token | None:
        return self.tokens[self.position] if self.position < len(self.tokens) else None

    def at_end(self) -> bool:
        return self.position >= len(self.tokens)

    def check(self, *types: str) -> bool:
        tok = self.current()
        return tok is not None and tok.type in types

    def advance(self) -> Token:
        tok = self.tokens[self.position]
        self.position += 1
        if tok.type == NEWLINE:
            self.context.line += 1
        return tok

    def advance_to(self, index: int) -> None:
        while self.position < index:
            self.advance()

    def skip_newlines(self) -> None:
        while self.check(NEWLINE):
            self.advance()

    def error(self, kind: ErrorKind, detail: object = None) -> ZolangError:
        return ZolangError(kind, self.context.file, self.context.line, detail)

    def match(self, type_: str) -> Token:
        if self.check(type_):
            return self.advance()
        expected = token_symbols.get(type_, type_.lower())
        raise self.error(ErrorKind.MISSING_TOKEN, f"expected {expected!r}, got {self.current()}")

    def match_identifier(self) -> str:
        if not self.check(IDENT):
            raise self.error(ErrorKind.MISSING_IDENTIFIER, self.current())
        value = self.advance().value
        assert value is not None  # for mypy
        return value

    def parse(self) -> CodeBlock:
        """Parse the whole token stream as the file's top-level code block."""
        block = self.parse_code_block()
        logger.debug("Parsed %s: %d top-level statements", self.context.file, len(block.statements))
        return block

    def parse_code_block(self) -> CodeBlock:
        statements: list[Statement] = []
        while True:
            self.skip_newlines()
            if self.at_end():
                break
            statements.append(self.parse_statement())
            self.end_statement()
        return CodeBlock(statements)

    def end_statement(self) -> None:
        if not self.at_end() and not self.check(NEWLINE):
            raise self.error(ErrorKind.UNEXPECTED_TOKEN, self.current())

    def parse_statement(self) -> Statement:
        """Parse one statement starting at the current token."""
        if self.check(DESCRIBE):
            return self.parse_model_description()
        if self.check(LET):
            return self.parse_variable_declaration()
        if self.check(MAKE):
            return self.parse_mutation()
        if self.check(IF):
            return self.parse_conditional()
        if self.check(WHILE):
            return self.parse_loop()
        if self.check(RETURN):
            return self.parse_return()
        return ExpressionStatement(self.parse_value())

    def expression_end(self, start: int) -> int:
        """Index just past the expression starting at `start`.

        The expression ends at the first newline, `{` or `}` outside parentheses and
        brackets, except that a newline next to an operator continues it.
        """
        depth = 0
        i = start
        while i < len(self.tokens):
            kind = self.tokens[i].type
            if kind in (LPAREN, LBRACK):
                depth += 1
            elif kind in (RPAREN, RBRACK):
                depth -= 1
                if depth < 0:
                    break
            elif kind in (LBRACE, RBRACE) and depth == 0:
                break
            elif kind == NEWLINE and depth == 0 and not self.continues_after(start, i):
                break
            i += 1
        return i

    def continues_after(self, start: int, newline: int) -> bool:
        previous = next(
            (tok for tok in reversed(self.tokens[start:newline]) if tok.type != NEWLINE),
            None,
        )
        if previous is not None and previous.type in (OPERATOR, PREFIX_OPERATOR):
            return True
        following = index_of_first_not(self.tokens, NEWLINE, newline)
        return following is not None and self.tokens[following].type == OPERATOR

    def parse_value(self) -> Expression:
        """Cut the expression at the current position out and parse it."""
        start = self.position
        end = self.expression_end(start)
        if end == start:
            raise self.error(ErrorKind.INVALID_EXPRESSION, self.current())
        expression = parse_expression(self.tokens[start:end], self.context.copy())
        self.advance_to(end)
        return expression

    def parse_scoped(self, open_type: str, parse_body: Callable[[Parser], T]) -> T:
        """Parse the balanced scope opening at the current token with a child parser."""
        if not self.check(open_type):
            raise self.error(ErrorKind.MISSING_TOKEN, f"expected {token_symbols[open_type]!r}, got {self.current()}")
        scope = range_of_scope(self.tokens, open_type, _closing[open_type], self.position)
        if scope is None:
            raise self.error(_missing_scope_errors[open_type])
        start, end = scope
        self.advance()
        body = parse_body(Parser(self.tokens[start + 1 : end], self.context))
        self.position = end + 1
        return body

    def parse_block(self) -> CodeBlock:
        self.skip_newlines()
        return self.parse_scoped(LBRACE, Parser.parse_code_block)

    def parse_type(self) -> TypeReference:
        """Parse a type such as `text` or `list of number`."""
        name = self.match_identifier()
        element = None
        if self.check(OF):
            self.advance()
            element = self.parse_type()
        return TypeReference(name, element)

    def parse_model_description(self) -> ModelDescription:
        self.match(DESCRIBE)
        name = self.match_identifier()
        self.skip_newlines()
        members = self.parse_scoped(LBRACE, Parser.parse_members)
        return ModelDescription(name, members)

    def parse_members(self) -> list[Member]:
        members: list[Member] = []
        while True:
            self.skip_newlines()
            if self.at_end():
                return members
            members.append(self.parse_member())
            self.end_statement()

    def parse_member(self) -> Member:
        """Parse a property or function declaration inside a model description."""
        is_private = is_static = False
        if self.check(PRIVATE):
            self.advance()
            is_private = True
        if self.check(STATIC):
            self.advance()
            is_static = True
        name = self.match_identifier()

        if self.check(AS):
            self.advance()
            type_ = self.parse_type()
            default = None
            if self.check(DEFAULT):
                self.advance()
                default = self.parse_value()
            return Property(name, type_, is_private, is_static, default)

        return_type = None
        if self.check(RETURN):
            self.advance()
            return_type = self.parse_type()
        self.match(FROM)
        parameters = self.parse_scoped(LPAREN, Parser.parse_parameters)
        body = self.parse_block()
        return FunctionDeclaration(name, parameters, body, return_type, is_private, is_static)

    def parse_parameters(self) -> list[Parameter]:
        parameters: list[Parameter] = []
        self.skip_newlines()
        while not self.at_end():
            name = self.match_identifier()
            self.match(AS)
            parameters.append(Parameter(name, self.parse_type()))
            self.skip_newlines()
            if self.at_end():
                break
            self.match(COMMA)
            self.skip_newlines()
        return parameters

    def parse_variable_declaration(self) -> VariableDeclaration:
        self.match(LET)
        name = self.match_identifier()
        type_ = None
        if self.check(AS):
            self.advance()
            type_ = self.parse_type()
        self.match(BE)
        return VariableDeclaration(name, self.parse_value(), type_)

    def parse_mutation(self) -> Mutation:
        self.match(MAKE)
        name = self.match_identifier()
        index = None
        if self.check(LBRACK):
            index = self.parse_scoped(LBRACK, Parser.parse_index)
        self.match(BE)
        return Mutation(name, self.parse_value(), index)

    def parse_index(self) -> Expression:
        self.skip_newlines()
        if self.at_end():
            raise self.error(ErrorKind.INVALID_EXPRESSION, "empty list index")
        expression = parse_expression(self.tokens[self.position :], self.context.copy())
        self.advance_to(len(self.tokens))
        return expression

    def parse_conditional(self) -> Conditional:
        self.match(IF)
        condition = self.parse_value()
        body = self.parse_block()

        else_index = index_of_first_not(self.tokens, NEWLINE, self.position)
        if else_index is None or self.tokens[else_index].type != ELSE:
            return Conditional(condition, body)

        self.skip_newlines()
        self.match(ELSE)
        if self.check(IF):
            return Conditional(condition, body, CodeBlock([self.parse_conditional()]))
        return Conditional(condition, body, self.parse_block())

    def parse_loop(self) -> Loop:
        self.match(WHILE)
        condition = self.parse_value()
        return Loop(condition, self.parse_block())

    def parse_return(self) -> Return:
        self.match(RETURN)
        if self.at_end() or self.check(NEWLINE):
            return Return()
        return Return(self.parse_value())


def parse_source(source: str, file: str = "<string>") -> CodeBlock:
    """Tokenize and parse one file's source text."""
    return Parser(tokenize(source, file), file=file).parse()
