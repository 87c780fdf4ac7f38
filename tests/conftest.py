import json
from pathlib import Path

import pytest

# A tiny Python-like target: one template per node kind the fixtures use.
TEMPLATES = {
    "codeBlock.j2": "{{ statements | map('render') | join(separator) }}",
    "variableDeclaration.j2": "{{ identifier }} = {{ render(expression) }}",
    "mutation.j2": "{{ identifier }} = {{ render(expression) }}",
    "expressionStatement.j2": "{{ render(expression) }}",
    "operation.j2": "{{ render(leftExpression) }} {{ operator }} {{ render(rightExpression) }}",
    "functionCall.j2": "{{ name }}({{ expressions | map('render') | join(', ') }})",
    "integerLiteral.j2": "{{ value }}",
    "identifier.j2": "{{ value }}",
    "stringLiteral.j2": '"{{ value }}"',
    "return.j2": "return {{ expression }}",
}


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    path = tmp_path / "templates"
    path.mkdir()
    for name, text in TEMPLATES.items():
        (path / name).write_text(text + "\n", encoding="utf-8")
    return path


@pytest.fixture
def project_dir(tmp_path: Path, template_dir: Path) -> Path:
    """A project with a `zolang.json` and an empty `src/` directory."""
    (tmp_path / "src").mkdir()
    config = {
        "buildSettings": [
            {
                "sourcePath": "src",
                "templatePath": template_dir.name,
                "buildPath": "build",
                "fileExtension": "py",
            }
        ]
    }
    (tmp_path / "zolang.json").write_text(json.dumps(config), encoding="utf-8")
    return tmp_path
