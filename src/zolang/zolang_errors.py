"""
Error types raised by the Zolang frontend.

Every failure in tokenizing or parsing a file is a `ZolangError` carrying the kind
of failure, the file it came from and the line of the offending construct. Errors
are immutable once raised and carry no recovery state: a file's parse stops at
the first one.

Classes:
    ErrorKind: Enumeration of the failure kinds.
    ZolangError: The exception raised by the lexer and parsers.
    ConfigError: Raised when a build configuration cannot be loaded.
"""

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Kinds of frontend failures, valued by their human-readable description."""

    UNRECOGNIZED_CHARACTER = "Unrecognized character"
    MISSING_MATCHING_PARENS = "Missing matching parenthesis"
    MISSING_MATCHING_BRACKET = "Missing matching bracket"
    MISSING_MATCHING_CURLY = "Missing matching curly brace"
    INVALID_EXPRESSION = "Invalid expression"
    MISSING_IDENTIFIER = "Missing identifier"
    MISSING_TOKEN = "Missing token"
    UNEXPECTED_TOKEN = "Unexpected token"
    UNKNOWN = "Unknown error"


class ZolangError(Exception):
    """A positioned frontend error.

    Attributes:
        kind (ErrorKind): What went wrong.
        file (str): Identifier of the originating source file.
        line (int): 1-based line of the offending construct.
        detail (Any): Optional offending token, character or note.
    """

    def __init__(self, kind: ErrorKind, file: str, line: int, detail: Any = None):
        self.kind = kind
        self.file = file
        self.line = line
        self.detail = detail
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        message = f"{self.file}:{self.line}: {self.kind.value}"
        if self.detail is not None:
            message += f": {self.detail}"
        return message


class ConfigError(Exception):
    """Raised when a build configuration file is missing or malformed."""
