from __future__ import annotations
import logging

from flatcss.config import CompileOptions
from flatcss.errors import CompileError, ErrorKind
from flatcss.scss.context import Context
from flatcss.scss.lexer import Lexer
from flatcss.scss.optimizer import optimize
from flatcss.scss.parser import Parser
from flatcss.scss.resolver import resolve
from flatcss.style import OutputStyle, render

__version__ = "0.1.0"

__all__ = ["compile_string", "compile_file", "read_file", "CompileOptions", "CompileError", "OutputStyle", "__version__"]

logger = logging.getLogger(__name__)

""" # Pipeline

source -> Lexer -> Parser -> resolve (evaluates values) -> optimize (flattens) -> render
"""

def compile_string(
    source: str,
    style: OutputStyle | str = OutputStyle.Nested,
    precision: int = 5,
) -> str:
    """Compile stylesheet source into css text. The first error aborts with a `CompileError`."""
    style = OutputStyle.parse(style)
    logger.debug("parsing %d characters", len(source))
    tree = Parser(Lexer(source)).parse()
    logger.debug("resolving scopes")
    tree = resolve(tree, Context(precision=precision))
    logger.debug("flattening rules")
    tree = optimize(tree)
    logger.debug("rendering as %s", style.value)
    return render(tree, style, precision)


def compile_file(
    path: str,
    style: OutputStyle | str = OutputStyle.Nested,
    precision: int = 5,
) -> str:
    return compile_string(read_file(path), style, precision)


def read_file(path: str) -> str:
    """Stylesheet source at `path`, any failure to read it raised as an `IoError`."""
    try:
        with open(path, "r", encoding="utf-8") as file:
            return file.read()
    except OSError as error:
        raise CompileError(ErrorKind.IoError, f"Could not read '{path}': {error.strerror or error}") from error
