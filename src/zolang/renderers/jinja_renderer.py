"""
Renders projected Zolang contexts into target-language source with Jinja2.

Each context node is rendered by the template named after its discriminator
(`codeBlock.j2`, `operation.j2`, ...) in the build setting's template directory.
The node's keys are the template variables; child nodes are rendered with the
`render` function or filter:

    {# codeBlock.j2 #}
    {{ statements | map('render') | join(separator) }}

    {# operation.j2 #}
    {{ render(leftExpression) }} {{ operator }} {{ render(rightExpression) }}

Templates are loaded with StrictUndefined so a template that references a key
the node does not carry fails loudly instead of emitting nothing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from zolang.zolang_context import EXPRESSION_KEY, STATEMENT_KEY, ContextValue

TEMPLATE_SUFFIX = ".j2"


class JinjaRenderer:
    """Renders context values with one template per node kind.

    Attributes:
        env (Environment): The Jinja2 environment bound to the template directory.
    """

    def __init__(self, template_path: str | Path) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(template_path)),
            undefined=StrictUndefined,
            keep_trailing_newline=False,
            autoescape=False,
        )
        self.env.globals["render"] = self.render
        self.env.filters["render"] = self.render

    @staticmethod
    def template_name(context: dict[str, Any]) -> str:
        kind = context.get(STATEMENT_KEY) or context.get(EXPRESSION_KEY)
        if not isinstance(kind, str):
            raise ValueError(f"Context has no node discriminator: {sorted(context)}")
        return f"{kind}{TEMPLATE_SUFFIX}"

    def render(self, context: ContextValue) -> str:
        """Render a context value; strings pass through and lists are concatenated."""
        if isinstance(context, str):
            return context
        if isinstance(context, list):
            return "".join(self.render(item) for item in context)
        template = self.env.get_template(self.template_name(context))
        return template.render(**context)
