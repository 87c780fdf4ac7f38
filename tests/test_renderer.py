from pathlib import Path

import pytest
from jinja2 import TemplateNotFound, UndefinedError

from zolang.renderers.jinja_renderer import JinjaRenderer
from zolang.zolang_build import compile_source


def render_source(template_dir: Path, source: str) -> str:
    return JinjaRenderer(template_dir).render(compile_source("test.zolang", source))


def test_renders_statements_joined_by_separator(template_dir: Path) -> None:
    assert render_source(template_dir, "let x be 1 plus 2\nprint(x, \"hi\")") == 'x = 1 plus 2\nprint(x, "hi")'


def test_template_name_from_discriminator() -> None:
    assert JinjaRenderer.template_name({"type": "codeBlock"}) == "codeBlock.j2"
    assert JinjaRenderer.template_name({"expressionType": "operation"}) == "operation.j2"
    with pytest.raises(ValueError):
        JinjaRenderer.template_name({"value": "1"})


def test_strings_and_lists_pass_through(template_dir: Path) -> None:
    renderer = JinjaRenderer(template_dir)
    assert renderer.render("raw") == "raw"
    assert renderer.render([{"expressionType": "integerLiteral", "value": "1"}, "+", "2"]) == "1+2"


def test_missing_template(template_dir: Path) -> None:
    with pytest.raises(TemplateNotFound):
        render_source(template_dir, "while x {\n}")


def test_missing_key_fails_loudly(template_dir: Path) -> None:
    # `return` without a value has no `expression` key
    with pytest.raises(UndefinedError):
        render_source(template_dir, "return")
