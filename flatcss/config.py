from __future__ import annotations

from dataclasses import dataclass
import os

from flatcss.errors import CompileError, ErrorKind
from flatcss.style import OutputStyle


@dataclass(frozen=True)
class CompileOptions:
    style: OutputStyle = OutputStyle.Nested
    precision: int = 5  # decimals kept when printing computed numbers

    @staticmethod
    def from_env(environ: dict[str, str] | None = None) -> CompileOptions:
        """Options from `FLATCSS_STYLE` and `FLATCSS_PRECISION`, defaults for anything unset."""
        environ = os.environ if environ is None else environ
        style = OutputStyle.parse(environ.get("FLATCSS_STYLE", OutputStyle.Nested.value))
        precision = environ.get("FLATCSS_PRECISION", "5")
        try:
            return CompileOptions(style, int(precision))
        except ValueError:
            raise CompileError(
                ErrorKind.InvalidPrecision,
                f"FLATCSS_PRECISION must be an integer, got '{precision}'",
            ) from None
