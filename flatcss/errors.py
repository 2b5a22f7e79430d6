from __future__ import annotations
from enum import Enum

__all__ = [
    "ErrorKind",
    "CompileError",
    "TokenizeError",
    "ParseError",
    "EvaluationError",
    "ResolveError",
    "line_column",
]

class ErrorKind(Enum):
    IoError = "io-error"
    InvalidOutputStyle = "invalid-output-style"
    InvalidPrecision = "invalid-precision"

    # Lexing
    TokenizerError = "tokenizer-error"
    UnexpectedEof = "unexpected-eof"

    # Structure
    ParseError = "parse-error"
    UnexpectedTopLevelElement = "unexpected-top-level-element"

    # Evaluation
    ExpectedValue = "expected-value"
    ExpectedOperator = "expected-operator"
    InvalidOperator = "invalid-operator"
    InvalidApplyListArgs = "invalid-apply-list-args"
    InvalidApplyMathArgs = "invalid-apply-math-args"
    InvalidSquareUnits = "invalid-square-units"
    IncompatibleUnits = "incompatible-units"
    UnknownFunction = "unknown-function"
    InvalidColor = "invalid-color"
    UnexpectedValuePartType = "unexpected-value-part-type"

    # Scope resolution
    ExpectedMixin = "expected-mixin"
    ExpectedMixinArgument = "expected-mixin-argument"
    ArgumentNotFound = "argument-not-found"


class CompileError(Exception):
    """A failure anywhere in the pipeline.

    Carries a machine checkable `kind`, a human readable `message` and the
    offset into the source it applies to (`0` when there is none).
    """

    def __init__(self, kind: ErrorKind, message: str, offset: int | None = None) -> None:
        self.kind = kind
        self.message = message
        self.offset = offset or 0
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.kind.name} at {self.offset}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.kind.name}, {self.message!r}, offset={self.offset})"

class TokenizeError(CompileError): pass
class ParseError(CompileError): pass
class EvaluationError(CompileError): pass
class ResolveError(CompileError): pass


def line_column(source: str, offset: int) -> tuple[int, int]:
    """Translate a source offset into a 1-based (line, column) pair."""
    offset = max(0, min(offset, len(source)))
    line = source.count("\n", 0, offset) + 1
    column = offset - (source.rfind("\n", 0, offset) + 1) + 1
    return line, column
