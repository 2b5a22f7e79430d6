"""flatcss command line entry point."""
from __future__ import annotations

import logging

import click
from conterm.pretty import Markup

from flatcss import __version__, compile_string, read_file
from flatcss.config import CompileOptions
from flatcss.errors import CompileError, ErrorKind, line_column
from flatcss.style import OutputStyle


def format_error(error: CompileError, source: str | None = None) -> str:
    """`error: <message> (line L, column C)`, the prefix coloured for the terminal."""
    message = f"{Markup.parse('[bold red]error:[/]', mar=False)} {error.message}"
    if source is not None and error.kind is not ErrorKind.IoError:
        line, column = line_column(source, error.offset)
        message += f" (line {line}, column {column})"
    return message


def read_source(path: str) -> str:
    if path == "-":
        return click.get_text_stream("stdin").read()
    return read_file(path)


@click.command()
@click.argument("input_path", metavar="INPUT")
@click.option(
    "-t",
    "--style",
    default=None,
    help=f"Output style: {', '.join(OutputStyle.names())} [default: nested]",
)
@click.option("--precision", type=int, default=None, help="Decimals kept in computed numbers [default: 5]")
@click.option("-o", "--output", default=None, type=click.Path(dir_okay=False), help="Write css to this file instead of stdout")
@click.option("--verbose", is_flag=True, default=False, help="Log each compile stage")
@click.version_option(__version__, prog_name="flatcss")
def main(input_path: str, style: str | None, precision: int | None, output: str | None, verbose: bool) -> None:
    """Compile a nested stylesheet INPUT into flat css. Use `-` to read stdin."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    source = None
    try:
        options = CompileOptions.from_env()
        source = read_source(input_path)
        css = compile_string(
            source,
            OutputStyle.parse(style) if style is not None else options.style,
            precision if precision is not None else options.precision,
        )
    except CompileError as error:
        click.echo(format_error(error, source), err=True)
        raise SystemExit(1)

    if output is None:
        click.echo(css, nl=False)
    else:
        try:
            with open(output, "w", encoding="utf-8") as file:
                file.write(css)
        except OSError as error:
            click.echo(format_error(CompileError(ErrorKind.IoError, f"Could not write '{output}': {error.strerror or error}")), err=True)
            raise SystemExit(1)
