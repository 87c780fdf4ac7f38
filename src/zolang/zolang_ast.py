"""
Abstract syntax tree for the Zolang modeling language.

The tree is strict: every node owns its children exclusively and nodes are never
shared, so any subtree can be projected on its own. Nodes are frozen dataclasses
compared by value, which is what the tests rely on when asserting structure.

Expression variants:
    IntegerLiteral, FloatLiteral, StringLiteral, BooleanLiteral, Identifier,
    TemplatedString, ListLiteral, ListAccess, FunctionCall, Prefix,
    Parentheses, Operation

Statement variants:
    CodeBlock, ModelDescription, Property, FunctionDeclaration, Parameter,
    TypeReference, VariableDeclaration, Mutation, Conditional, Loop, Return,
    ExpressionStatement

Each class carries a `kind` naming its variant; the context projector dispatches
on it.

Example:
    Operation(IntegerLiteral("1"), "plus", IntegerLiteral("2"))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Union


class ASTNode:
    """Base class of every Zolang syntax tree node."""

    kind: ClassVar[str] = ""


class Expression(ASTNode):
    """Base class of the expression variants."""


class Statement(ASTNode):
    """Base class of the statement and declaration variants."""


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    kind: ClassVar[str] = "integerLiteral"
    value: str


@dataclass(frozen=True)
class FloatLiteral(Expression):
    kind: ClassVar[str] = "floatLiteral"
    value: str


@dataclass(frozen=True)
class StringLiteral(Expression):
    """A string literal; `value` is the raw text between the quotes."""

    kind: ClassVar[str] = "stringLiteral"
    value: str


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    kind: ClassVar[str] = "booleanLiteral"
    value: str


@dataclass(frozen=True)
class Identifier(Expression):
    kind: ClassVar[str] = "identifier"
    value: str


@dataclass(frozen=True)
class TemplatedString(Expression):
    """A string literal with interpolations.

    `expressions` alternates StringLiteral fragments and interpolated
    expressions in source order.
    """

    kind: ClassVar[str] = "templatedString"
    expressions: list[Expression] = field(default_factory=list)


@dataclass(frozen=True)
class ListLiteral(Expression):
    kind: ClassVar[str] = "listLiteral"
    expressions: list[Expression] = field(default_factory=list)


@dataclass(frozen=True)
class ListAccess(Expression):
    kind: ClassVar[str] = "listAccess"
    identifier: str
    expression: Expression


@dataclass(frozen=True)
class FunctionCall(Expression):
    kind: ClassVar[str] = "functionCall"
    name: str
    expressions: list[Expression] = field(default_factory=list)


@dataclass(frozen=True)
class Prefix(Expression):
    kind: ClassVar[str] = "prefix"
    prefix: str
    expression: Expression


@dataclass(frozen=True)
class Parentheses(Expression):
    """Explicit grouping, kept so the target code can reproduce it."""

    kind: ClassVar[str] = "parentheses"
    expression: Expression


@dataclass(frozen=True)
class Operation(Expression):
    kind: ClassVar[str] = "operation"
    left: Expression
    operator: str
    right: Expression


@dataclass(frozen=True)
class TypeReference(Statement):
    """A type such as `number` or `list of text`."""

    kind: ClassVar[str] = "typeReference"
    name: str
    element: TypeReference | None = None


@dataclass(frozen=True)
class Parameter(Statement):
    kind: ClassVar[str] = "parameter"
    name: str
    type: TypeReference


@dataclass(frozen=True)
class CodeBlock(Statement):
    kind: ClassVar[str] = "codeBlock"
    statements: list[Statement] = field(default_factory=list)


@dataclass(frozen=True)
class Property(Statement):
    kind: ClassVar[str] = "property"
    name: str
    type: TypeReference
    is_private: bool = False
    is_static: bool = False
    default: Expression | None = None


@dataclass(frozen=True)
class FunctionDeclaration(Statement):
    kind: ClassVar[str] = "functionDeclaration"
    name: str
    parameters: list[Parameter]
    body: CodeBlock
    return_type: TypeReference | None = None
    is_private: bool = False
    is_static: bool = False


Member = Union[Property, FunctionDeclaration]


@dataclass(frozen=True)
class ModelDescription(Statement):
    kind: ClassVar[str] = "modelDescription"
    name: str
    members: list[Member] = field(default_factory=list)


@dataclass(frozen=True)
class VariableDeclaration(Statement):
    kind: ClassVar[str] = "variableDeclaration"
    name: str
    expression: Expression
    type: TypeReference | None = None


@dataclass(frozen=True)
class Mutation(Statement):
    """`make x be ...`, or `make x[i] be ...` when `index` is set."""

    kind: ClassVar[str] = "mutation"
    identifier: str
    expression: Expression
    index: Expression | None = None


@dataclass(frozen=True)
class Conditional(Statement):
    kind: ClassVar[str] = "conditional"
    condition: Expression
    body: CodeBlock
    else_body: CodeBlock | None = None


@dataclass(frozen=True)
class Loop(Statement):
    kind: ClassVar[str] = "loop"
    condition: Expression
    body: CodeBlock


@dataclass(frozen=True)
class Return(Statement):
    kind: ClassVar[str] = "return"
    expression: Expression | None = None


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    kind: ClassVar[str] = "expressionStatement"
    expression: Expression


expression_kinds: tuple[type[Expression], ...] = (
    IntegerLiteral,
    FloatLiteral,
    StringLiteral,
    BooleanLiteral,
    Identifier,
    TemplatedString,
    ListLiteral,
    ListAccess,
    FunctionCall,
    Prefix,
    Parentheses,
    Operation,
)

statement_kinds: tuple[type[Statement], ...] = (
    CodeBlock,
    ModelDescription,
    Property,
    FunctionDeclaration,
    Parameter,
    TypeReference,
    VariableDeclaration,
    Mutation,
    Conditional,
    Loop,
    Return,
    ExpressionStatement,
)
