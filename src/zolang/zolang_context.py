"""
Projects Zolang syntax trees into generic, template-consumable context values.

A context value is a string, an ordered list of context values, or a mapping from
string keys to context values. Every node becomes a mapping with a discriminator
key (`expressionType` for expressions, `type` for statements) plus one entry per
child field. The projection is purely structural: nothing is evaluated, inferred
or reordered. Optional children are left out when absent and declaration
modifiers become a list of strings, so the output never leaves the closed value
type.

Classes:
    ContextProjector: Dispatches each node to its `project_<kind>` method.

Functions:
    project(node, build_setting=None) -> ContextValue

Raises:
    NotImplementedError: If a node kind has no projection.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

from zolang.zolang_ast import (
    ASTNode,
    BooleanLiteral,
    CodeBlock,
    Conditional,
    ExpressionStatement,
    FloatLiteral,
    FunctionCall,
    FunctionDeclaration,
    Identifier,
    IntegerLiteral,
    ListAccess,
    ListLiteral,
    Loop,
    ModelDescription,
    Mutation,
    Operation,
    Parameter,
    Parentheses,
    Prefix,
    Property,
    Return,
    StringLiteral,
    TemplatedString,
    TypeReference,
    VariableDeclaration,
)

if TYPE_CHECKING:
    from zolang.zolang_config import BuildSetting

ContextValue = Union[str, list["ContextValue"], dict[str, "ContextValue"]]
ContextMap = dict[str, ContextValue]

EXPRESSION_KEY = "expressionType"
STATEMENT_KEY = "type"
DEFAULT_SEPARATORS: dict[str, str] = {"block": "\n"}


def _modifiers(is_private: bool, is_static: bool) -> list[ContextValue]:
    modifiers: list[ContextValue] = []
    if is_private:
        modifiers.append("private")
    if is_static:
        modifiers.append("static")
    return modifiers


class ContextProjector:
    """Converts AST nodes into context values.

    Attributes:
        separators (dict[str, str]): Named separators read from the build setting;
            `block` is attached to every projected code block.
    """

    def __init__(self, build_setting: BuildSetting | None = None) -> None:
        self.separators = dict(DEFAULT_SEPARATORS)
        if build_setting is not None:
            self.separators.update(build_setting.separators)

    def project(self, node: ASTNode) -> ContextMap:
        """Project `node` and all of its descendants."""
        method = getattr(self, f"project_{node.kind}", None)
        if method is None:
            raise NotImplementedError(f"No context projection for node kind '{node.kind}'")
        result: ContextMap = method(node)
        return result

    def project_all(self, nodes: list) -> list[ContextValue]:
        return [self.project(node) for node in nodes]

    # Expressions

    def project_integerLiteral(self, node: IntegerLiteral) -> ContextMap:
        return {EXPRESSION_KEY: node.kind, "value": node.value}

    def project_floatLiteral(self, node: FloatLiteral) -> ContextMap:
        return {EXPRESSION_KEY: node.kind, "value": node.value}

    def project_stringLiteral(self, node: StringLiteral) -> ContextMap:
        return {EXPRESSION_KEY: node.kind, "value": node.value}

    def project_booleanLiteral(self, node: BooleanLiteral) -> ContextMap:
        return {EXPRESSION_KEY: node.kind, "value": node.value}

    def project_identifier(self, node: Identifier) -> ContextMap:
        return {EXPRESSION_KEY: node.kind, "value": node.value}

    def project_templatedString(self, node: TemplatedString) -> ContextMap:
        return {EXPRESSION_KEY: node.kind, "expressions": self.project_all(node.expressions)}

    def project_listLiteral(self, node: ListLiteral) -> ContextMap:
        return {EXPRESSION_KEY: node.kind, "expressions": self.project_all(node.expressions)}

    def project_listAccess(self, node: ListAccess) -> ContextMap:
        return {
            EXPRESSION_KEY: node.kind,
            "identifier": node.identifier,
            "expression": self.project(node.expression),
        }

    def project_functionCall(self, node: FunctionCall) -> ContextMap:
        return {
            EXPRESSION_KEY: node.kind,
            "name": node.name,
            "expressions": self.project_all(node.expressions),
        }

    def project_prefix(self, node: Prefix) -> ContextMap:
        return {
            EXPRESSION_KEY: node.kind,
            "prefix": node.prefix,
            "expression": self.project(node.expression),
        }

    def project_parentheses(self, node: Parentheses) -> ContextMap:
        return {EXPRESSION_KEY: node.kind, "expression": self.project(node.expression)}

    def project_operation(self, node: Operation) -> ContextMap:
        return {
            EXPRESSION_KEY: node.kind,
            "leftExpression": self.project(node.left),
            "operator": node.operator,
            "rightExpression": self.project(node.right),
        }

    # Statements

    def project_codeBlock(self, node: CodeBlock) -> ContextMap:
        return {
            STATEMENT_KEY: node.kind,
            "statements": self.project_all(node.statements),
            "separator": self.separators["block"],
        }

    def project_typeReference(self, node: TypeReference) -> ContextMap:
        context: ContextMap = {STATEMENT_KEY: node.kind, "name": node.name}
        if node.element is not None:
            context["elementType"] = self.project(node.element)
        return context

    def project_parameter(self, node: Parameter) -> ContextMap:
        return {STATEMENT_KEY: node.kind, "name": node.name, "paramType": self.project(node.type)}

    def project_property(self, node: Property) -> ContextMap:
        context: ContextMap = {
            STATEMENT_KEY: node.kind,
            "name": node.name,
            "propertyType": self.project(node.type),
            "modifiers": _modifiers(node.is_private, node.is_static),
        }
        if node.default is not None:
            context["defaultValue"] = self.project(node.default)
        return context

    def project_functionDeclaration(self, node: FunctionDeclaration) -> ContextMap:
        context: ContextMap = {
            STATEMENT_KEY: node.kind,
            "name": node.name,
            "params": self.project_all(node.parameters),
            "codeBlock": self.project(node.body),
            "modifiers": _modifiers(node.is_private, node.is_static),
        }
        if node.return_type is not None:
            context["returnType"] = self.project(node.return_type)
        return context

    def project_modelDescription(self, node: ModelDescription) -> ContextMap:
        properties = [m for m in node.members if isinstance(m, Property)]
        functions = [m for m in node.members if isinstance(m, FunctionDeclaration)]
        return {
            STATEMENT_KEY: node.kind,
            "name": node.name,
            "members": self.project_all(node.members),
            "properties": self.project_all(properties),
            "functions": self.project_all(functions),
        }

    def project_variableDeclaration(self, node: VariableDeclaration) -> ContextMap:
        context: ContextMap = {
            STATEMENT_KEY: node.kind,
            "identifier": node.name,
            "expression": self.project(node.expression),
        }
        if node.type is not None:
            context["varType"] = self.project(node.type)
        return context

    def project_mutation(self, node: Mutation) -> ContextMap:
        context: ContextMap = {
            STATEMENT_KEY: node.kind,
            "identifier": node.identifier,
            "expression": self.project(node.expression),
        }
        if node.index is not None:
            context["index"] = self.project(node.index)
        return context

    def project_conditional(self, node: Conditional) -> ContextMap:
        context: ContextMap = {
            STATEMENT_KEY: node.kind,
            "condition": self.project(node.condition),
            "codeBlock": self.project(node.body),
        }
        if node.else_body is not None:
            context["elseBlock"] = self.project(node.else_body)
        return context

    def project_loop(self, node: Loop) -> ContextMap:
        return {
            STATEMENT_KEY: node.kind,
            "condition": self.project(node.condition),
            "codeBlock": self.project(node.body),
        }

    def project_return(self, node: Return) -> ContextMap:
        context: ContextMap = {STATEMENT_KEY: node.kind}
        if node.expression is not None:
            context["expression"] = self.project(node.expression)
        return context

    def project_expressionStatement(self, node: ExpressionStatement) -> ContextMap:
        return {STATEMENT_KEY: node.kind, "expression": self.project(node.expression)}


def project(node: ASTNode, build_setting: BuildSetting | None = None) -> ContextMap:
    """Project `node` with the separators of `build_setting`."""
    return ContextProjector(build_setting).project(node)
