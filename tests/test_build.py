from pathlib import Path

from jinja2 import TemplateNotFound

from zolang.renderers.jinja_renderer import JinjaRenderer
from zolang.zolang_build import ERROR_SEPARATOR, build, compile_source, format_errors
from zolang.zolang_config import load_config
from zolang.zolang_errors import ErrorKind, ZolangError

GOOD = "let x be 1\nprint(x)\n"
BAD = "let a be 1\n\nlet b be (2\n"


def test_compile_source_returns_root_block() -> None:
    context = compile_source("good.zolang", GOOD)
    assert context["type"] == "codeBlock"
    assert [s["type"] for s in context["statements"]] == ["variableDeclaration", "expressionStatement"]


def test_every_file_is_attempted() -> None:
    report = build(None, [("bad.zolang", BAD), ("good.zolang", GOOD), ("worse.zolang", "let = 1")])

    assert report.failed
    assert [r.file for r in report.results] == ["bad.zolang", "good.zolang", "worse.zolang"]
    bad, good, worse = report.results
    assert good.succeeded and good.context is not None
    assert bad.context is None

    first, second = report.errors
    assert isinstance(first, ZolangError)
    assert (first.kind, first.file, first.line) == (ErrorKind.MISSING_MATCHING_PARENS, "bad.zolang", 3)
    assert isinstance(second, ZolangError)
    assert second.file == "worse.zolang"


def test_report_without_errors() -> None:
    report = build(None, [("good.zolang", GOOD)])
    assert not report.failed
    assert report.errors == []
    assert report.format_errors() == ""


def test_format_errors_joins_with_separator() -> None:
    report = build(None, [("a.zolang", "let = 1"), ("b.zolang", "let y be @")])
    text = report.format_errors()
    first, second = text.split(ERROR_SEPARATOR)
    assert first.startswith("Error: a.zolang:1:")
    assert second.startswith("Error: b.zolang:1:")
    assert format_errors(["one"]) == "Error: one"


def test_build_writes_rendered_files(project_dir: Path) -> None:
    (project_dir / "src" / "models").mkdir()
    (project_dir / "src" / "models" / "main.zolang").write_text(GOOD, encoding="utf-8")
    [setting] = load_config(project_dir / "zolang.json").build_settings

    report = build(setting, setting.discover_sources(), JinjaRenderer(setting.template_path), write=True)

    assert not report.failed
    output = project_dir / "build" / "models" / "main.py"
    assert output.read_text(encoding="utf-8") == "x = 1\nprint(x)"
    assert report.results[0].output == "x = 1\nprint(x)"


def test_template_errors_are_collected(project_dir: Path) -> None:
    [setting] = load_config(project_dir / "zolang.json").build_settings
    sources = [("loop.zolang", "while x {\n}"), ("good.zolang", GOOD)]

    report = build(setting, sources, JinjaRenderer(setting.template_path), write=True)

    loop, good = report.results
    assert isinstance(loop.error, TemplateNotFound)
    assert loop.output is None
    assert good.succeeded
    assert report.format_errors().startswith("Error: loop.zolang: ")
    assert not (project_dir / "build" / "loop.py").exists()
    assert (project_dir / "build" / "good.py").exists()


def test_overly_long_chain_fails_only_its_file() -> None:
    chain = "let x be " + " plus ".join(["1"] * 2000)
    report = build(None, [("long.zolang", chain), ("good.zolang", GOOD)])

    chained, good = report.results
    assert isinstance(chained.error, ZolangError)
    assert chained.error.kind is ErrorKind.UNKNOWN
    assert chained.error.file == "long.zolang"
    assert good.succeeded


def test_unreadable_source_fails_only_its_file(tmp_path: Path) -> None:
    broken = tmp_path / "broken.zolang"
    broken.write_bytes(b'let x be "\xff"\n')
    good = tmp_path / "good.zolang"
    good.write_text(GOOD, encoding="utf-8")
    missing = tmp_path / "missing.zolang"

    report = build(None, [(str(broken), broken), (str(missing), missing), (str(good), good)])

    broken_result, missing_result, good_result = report.results
    assert isinstance(broken_result.error, UnicodeDecodeError)
    assert isinstance(missing_result.error, FileNotFoundError)
    assert good_result.succeeded
    assert report.format_errors().startswith(f"Error: {broken}: ")
