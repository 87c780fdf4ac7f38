"""
Zolang CLI Entrypoint.

Commands:
    zolang build [-c CONFIG]
        Compile every build setting of the config file. Every source file is
        attempted; all errors are printed together and the exit status is 1 if
        any file failed.

    zolang parse SOURCE [-s] [--indent N]
        Print the projected context of one file (or of a literal string with
        `-s`) as JSON.

Example usage:
    zolang build
    zolang --verbose build -c project/zolang.json
    zolang parse model.zolang
    zolang parse -s "let x be 1 plus 2"

Functions:
    run_build(config_path) -> int
    run_parse(source, is_string=False, indent=2) -> int
    main(argv=None) -> int
"""

import argparse
import json
import logging
import sys

from zolang.renderers.jinja_renderer import JinjaRenderer
from zolang.zolang_build import build, build_setting_sources, compile_source
from zolang.zolang_config import DEFAULT_CONFIG_PATH, SOURCE_SUFFIX, load_config
from zolang.zolang_errors import ConfigError, ZolangError

logger = logging.getLogger(__name__)


def run_build(config_path: str = DEFAULT_CONFIG_PATH) -> int:
    """
    Run every build setting of a config file and write the generated files.

    Args:
        config_path (str): Path to the `zolang.json` config file.

    Returns:
        int: 0 if every file of every build setting compiled, 1 otherwise.
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    status = 0
    for setting in config.build_settings:
        sources = build_setting_sources(setting)
        logger.info("Building %d files from %s", len(sources), setting.source_path)
        report = build(setting, sources, JinjaRenderer(setting.template_path), write=True)
        if report.failed:
            print(report.format_errors(), file=sys.stderr)
            status = 1
    return status


def run_parse(source: str, is_string: bool = False, indent: int = 2) -> int:
    """
    Print the projected context of one source as JSON.

    Args:
        source (str): Path to a `.zolang` file, or raw source with `is_string`.
        is_string (bool): Treat `source` as source text instead of a path.
        indent (int): JSON indentation.

    Returns:
        int: 0 on success, 1 if the source cannot be read or fails to parse.

    Raises:
        ValueError: If `source` is a path without the `.zolang` suffix.
    """
    if is_string:
        file, text = "<string>", source
    else:
        if not source.endswith(SOURCE_SUFFIX):
            raise ValueError(f"Only {SOURCE_SUFFIX} files are supported.")
        try:
            with open(source, encoding="utf-8") as f:
                file, text = source, f.read()
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    try:
        context = compile_source(file, text)
    except ZolangError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(context, indent=indent))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse command-line arguments and dispatch to `build` or `parse`."""
    parser = argparse.ArgumentParser(prog="zolang")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    build_parser = commands.add_parser("build", help="Compile every build setting")
    build_parser.add_argument(
        "-c", "--config", default=DEFAULT_CONFIG_PATH, help=f"Config file (default: {DEFAULT_CONFIG_PATH})"
    )

    parse_parser = commands.add_parser("parse", help="Print the context of one source as JSON")
    parse_parser.add_argument("source", help="Filename or raw source (with -s)")
    parse_parser.add_argument("-s", "--string", action="store_true", help="Interpret source as literal string")
    parse_parser.add_argument("--indent", type=int, default=2, help="JSON indentation (default: 2)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "build":
        return run_build(args.config)
    return run_parse(args.source, is_string=args.string, indent=args.indent)


if __name__ == "__main__":
    sys.exit(main())
