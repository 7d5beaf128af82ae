"""
stlc - Let Statement Compiler Command-Line Interface
====================================================

Compiles a single let statement into stack-machine instructions.

Usage Examples
--------------
Print instructions to stdout:
    $ stlc prog.let

Write them to a file:
    $ stlc prog.let -o prog.vm

Compile a statement given on the command line:
    $ stlc -e "let x = 1 + 2 - 3;"

Dump the token stream:
    $ stlc --tokens prog.let
"""

import codecs
import logging
from pathlib import Path
from typing import Optional

import click

from stacklet import __version__
from stacklet.cli.errors import handle_cli_exception
from stacklet.compiler import CompilerOptions, LetCompiler

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def validate_encoding(ctx: click.Context, param: click.Parameter, value: str) -> str:
    """Reject codec names Python does not know."""
    try:
        codecs.lookup(value)
    except LookupError:
        raise click.BadParameter(f"unknown encoding: {value}")
    return value


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-e", "--expr",
    "statement",
    metavar="TEXT",
    help="Compile this statement instead of reading INPUT_FILE",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write instructions to this file (default: stdout)",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit (for debugging)",
)
@click.option(
    "--encoding",
    default="utf-8",
    callback=validate_encoding,
    show_default=True,
    help="Encoding used to decode string literals",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="stlc")
def main(
    input_file: Optional[Path],
    statement: Optional[str],
    output: Optional[Path],
    tokens: bool,
    encoding: str,
    verbose: bool,
) -> None:
    """
    Compile a let statement to stack-machine instructions.

    INPUT_FILE holds one statement of the form 'let name = expr;'
    where expr chains numbers and names with '+' and '-'.

    \b
    Examples:
        stlc prog.let                   # Print instructions
        stlc prog.let -o prog.vm        # Write to a file
        stlc -e "let x = a + 1;"        # Compile inline text
        stlc --tokens prog.let          # Dump tokens

    \b
    Output instructions:
        push <value>, add, sub, pop <name>
    """
    if (input_file is None) == (statement is None):
        raise click.UsageError("give exactly one of INPUT_FILE or --expr")

    setup_logging(verbose)

    if input_file is not None:
        filename = str(input_file)
    else:
        filename = "<expr>"

    compiler = LetCompiler(CompilerOptions(string_encoding=encoding))

    try:
        if input_file is not None:
            source = input_file.read_bytes()
        else:
            source = statement.encode("utf-8")

        logger.debug(f"Compiling {filename} ({len(source)} bytes)")

        if tokens:
            for token in compiler.tokenize(source, filename):
                click.echo(f"{token.type.name} {token.lexeme}")
            return

        result = compiler.compile_source(source, filename)

        if output is None:
            click.echo(result.text, nl=False)
            return

        output.write_text(result.text)
        click.echo(f"Compiled {filename} -> {output}")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
