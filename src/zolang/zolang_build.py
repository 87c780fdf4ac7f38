"""
Compiles the source files of a build setting, collecting failures per file.

Within one file compilation is fail-fast: the first `ZolangError` aborts that
file and no partial tree is kept. Across the files of a build setting every file
is attempted, errors are accumulated, and the setting is reported failed when
any file failed.

Classes:
    FileResult: Outcome of compiling one file.
    BuildReport: Outcomes for every file of one build setting.

Functions:
    compile_source(file, source, build_setting=None) -> ContextMap
    build(build_setting, sources, renderer=None, write=False) -> BuildReport
    build_setting_sources(build_setting) -> list[tuple[str, Path]]
    format_errors(errors) -> str
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from jinja2 import TemplateError

from zolang.renderers.jinja_renderer import JinjaRenderer
from zolang.zolang_config import BuildSetting
from zolang.zolang_context import ContextMap, ContextProjector
from zolang.zolang_errors import ErrorKind, ZolangError
from zolang.zolang_parser import parse_source

logger = logging.getLogger(__name__)

ERROR_SEPARATOR = "\n--------------------------------------\n"


@dataclass
class FileResult:
    """Outcome of one file: its context and rendered output, or its error."""

    file: str
    context: ContextMap | None = None
    output: str | None = None
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class BuildReport:
    setting: BuildSetting | None
    results: list[FileResult] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return any(not result.succeeded for result in self.results)

    @property
    def errors(self) -> list[Exception]:
        return [result.error for result in self.results if result.error is not None]

    def format_errors(self) -> str:
        messages = []
        for result in self.results:
            if isinstance(result.error, ZolangError):
                messages.append(str(result.error))
            elif result.error is not None:
                messages.append(f"{result.file}: {result.error}")
        return format_errors(messages)


def compile_source(file: str, source: str, build_setting: BuildSetting | None = None) -> ContextMap:
    """Tokenize, parse and project one file.

    Raises:
        ZolangError: The first error in the file.
    """
    try:
        ast = parse_source(source, file)
        return ContextProjector(build_setting).project(ast)
    except RecursionError:
        raise ZolangError(ErrorKind.UNKNOWN, file, 1, "expression nested too deeply") from None


def build(
    build_setting: BuildSetting | None,
    sources: list[tuple[str, str | Path]],
    renderer: JinjaRenderer | None = None,
    write: bool = False,
) -> BuildReport:
    """Compile every (file identifier, text or path) pair of a build setting.

    Args:
        build_setting: Separators for projection and paths for writing output.
        sources: Files in the order they should be reported. A `Path` is read
            inside the per-file error handling, so an unreadable file only fails itself.
        renderer: Optional renderer producing target code from each context.
        write: Write rendered output under the setting's build path.
    """
    report = BuildReport(build_setting)
    for file, source in sources:
        result = FileResult(file)
        try:
            text = source.read_text(encoding="utf-8") if isinstance(source, Path) else source
            result.context = compile_source(file, text, build_setting)
            if renderer is not None:
                result.output = renderer.render(result.context)
        except RecursionError:
            result.error = ZolangError(ErrorKind.UNKNOWN, file, 1, "context nested too deeply to render")
        except (ZolangError, TemplateError, OSError, UnicodeDecodeError) as e:
            logger.debug("Failed to compile %s: %s", file, e)
            result.error = e
        report.results.append(result)

        if write and result.output is not None and build_setting is not None:
            out = build_setting.output_path(Path(file))
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text(result.output, encoding="utf-8")
            logger.info("Wrote %s", out)

    return report


def build_setting_sources(build_setting: BuildSetting) -> list[tuple[str, Path]]:
    """Every source file of `build_setting`, to be read lazily by `build`."""
    return [(str(path), path) for path in build_setting.source_files()]


def format_errors(errors: list[str] | list[Exception]) -> str:
    """Join error messages into one human-readable report."""
    return ERROR_SEPARATOR.join(f"Error: {error}" for error in errors)
