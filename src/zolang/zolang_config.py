"""
Build configuration for the Zolang compiler.

A project's `zolang.json` lists one or more build settings, each describing a
source to target compilation pass:

    {
      "buildSettings": [
        {
          "sourcePath": "./.zolang/src",
          "templatePath": "./.zolang/templates/swift",
          "buildPath": "./build/swift",
          "fileExtension": "swift",
          "separators": {"block": "\\n"}
        }
      ]
    }

The frontend only reads these values; the context projector picks up the
separators, the build driver the paths.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from zolang.zolang_errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "zolang.json"
SOURCE_SUFFIX = ".zolang"


class BuildSetting(BaseModel):
    """One source to target compilation pass.

    Attributes:
        source_path: Directory searched recursively for `.zolang` files.
        template_path: Directory holding the target language templates.
        build_path: Directory generated files are written to.
        file_extension: Extension of generated files, without the dot.
        separators: Named separators; `block` joins sibling statements.
    """

    source_path: Path = Field(validation_alias=AliasChoices("sourcePath", "source_path"))
    template_path: Path = Field(
        validation_alias=AliasChoices("templatePath", "stencilPath", "template_path")
    )
    build_path: Path = Field(validation_alias=AliasChoices("buildPath", "build_path"))
    file_extension: str = Field(validation_alias=AliasChoices("fileExtension", "file_extension"))
    separators: dict[str, str] = Field(default_factory=lambda: {"block": "\n"})

    model_config = ConfigDict(frozen=True)

    def output_path(self, source_file: Path) -> Path:
        """Where the generated code for `source_file` is written."""
        extension = self.file_extension.lstrip(".")
        try:
            relative = source_file.relative_to(self.source_path)
        except ValueError:
            relative = Path(source_file.name)
        return self.build_path / relative.with_suffix(f".{extension}")

    def source_files(self) -> list[Path]:
        """Every `.zolang` file under `source_path`, sorted."""
        return sorted(self.source_path.rglob(f"*{SOURCE_SUFFIX}"))

    def discover_sources(self) -> list[tuple[str, str]]:
        """Every source file as (file identifier, text).

        Raises:
            OSError, UnicodeDecodeError: If a file cannot be read.
        """
        return [(str(path), path.read_text(encoding="utf-8")) for path in self.source_files()]


class Config(BaseModel):
    build_settings: list[BuildSetting] = Field(
        default_factory=list,
        validation_alias=AliasChoices("buildSettings", "build_settings"),
    )

    model_config = ConfigDict(frozen=True)


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> Config:
    """Load and validate a config file; relative paths resolve against its directory.

    Raises:
        ConfigError: If the file cannot be read, is not JSON, or fails validation.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {path} is not valid JSON: {e}") from e

    try:
        config = Config.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}:\n{e}") from e

    root = path.parent
    settings = [
        setting.model_copy(
            update={
                "source_path": root / setting.source_path,
                "template_path": root / setting.template_path,
                "build_path": root / setting.build_path,
            }
        )
        for setting in config.build_settings
    ]
    logger.debug("Loaded %d build settings from %s", len(settings), path)
    return Config(build_settings=settings)
