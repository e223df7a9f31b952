"""CLI entry point for srttool."""

import logging
import sys
from typing import TextIO

import click

from .config import Config
from .errors import ParseError, ParseErrorKind
from .srt import BlockReader, format_block, open_blocks, shift_blocks
from .timing import Offset

logger = logging.getLogger(__name__)

OFFSET_FORMS = '"00:11:22,333", "-00:11:22,333" or "n00:11:22,333"'


def describe(kind: ParseErrorKind) -> str:
    """Human readable diagnostic for a decode failure."""
    match kind:
        case ParseErrorKind.INVALID_INDEX:
            return "Invalid index (expected a block number)"
        case ParseErrorKind.INVALID_TIME_STRING:
            return "Invalid time (expected HH:MM:SS,mmm)"
        case ParseErrorKind.INVALID_TIME_LINE:
            return "Invalid time line (expected HH:MM:SS,mmm --> HH:MM:SS,mmm)"
        case ParseErrorKind.INVALID_CONTENT:
            return "Invalid content (line could not be read)"
    raise AssertionError(f"unhandled error kind: {kind}")


def _setup_logging(level: str, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level, logging.WARNING),
        stream=sys.stderr,
        format="%(levelname)s [%(name)s] %(message)s",
    )


def _resolve_offset(text: str | None, param_hint: str) -> Offset:
    if not text:
        return Offset()
    try:
        return Offset.parse(text)
    except ParseError as e:
        raise click.BadParameter(
            f"{e.kind.description}: {text!r}, offset must be in the form {OFFSET_FORMS}",
            param_hint=param_hint,
        ) from e


def _shift_file(
    path: str, reader: BlockReader, offset: Offset, out: TextIO, index: int
) -> tuple[int, bool]:
    """Copy one input to the output, retimed and renumbered.

    Returns:
        The next free sequence number and whether the input decoded cleanly
    """
    try:
        for block in shift_blocks(reader, offset):
            out.write(format_block(index, block))
            index += 1
    except ParseError as e:
        click.echo(f"ERROR: {path}:{e.line}: {describe(e.kind)}", err=True)
        return index, False
    return index, True


@click.command()
@click.argument("infiles", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.option(
    "--offset",
    "-o",
    default=None,
    help=f"Time offset to add, prefix with - (or n) for negative values, e.g. {OFFSET_FORMS}",
)
@click.option(
    "--out-file",
    "-f",
    "out_file",
    type=click.Path(dir_okay=False),
    default="-",
    show_default=True,
    help="Output SRT file path (- for stdout)",
)
@click.option(
    "--encoding",
    default=None,
    help="Encoding of the input files (default: utf-8, BOM tolerated)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.version_option(package_name="srttool")
def main(
    infiles: tuple[str, ...],
    offset: str | None,
    out_file: str,
    encoding: str | None,
    verbose: bool,
) -> None:
    """Readjust the timing of SRT subtitle files.

    Blocks of all INFILES are written in order to a single output, renumbered
    from 1 and shifted by the offset. Timestamps never go below zero.

    \b
    Examples:
      srttool movie.srt -o 00:00:02,500 -f fixed.srt
      srttool movie.srt -o -00:00:01,000
      srttool cd1.srt cd2.srt -f movie.srt
    """
    config = Config.from_env()
    _setup_logging(config.log_level, verbose)

    if offset is None and config.has_offset():
        shift = _resolve_offset(config.offset, param_hint="'SRTTOOL_OFFSET' (environment)")
    else:
        shift = _resolve_offset(offset, param_hint="'--offset'")
    encoding = encoding or config.encoding
    logger.debug("offset %s, encoding %s, output %s", shift, encoding, out_file)

    failed = []
    index = 1
    try:
        out = click.open_file(out_file, "w", encoding="utf-8")
    except OSError as e:
        raise click.FileError(out_file, hint=e.strerror or str(e)) from e

    with out:
        for path in infiles:
            try:
                with open_blocks(path, encoding) as reader:
                    index, ok = _shift_file(path, reader, shift, out, index)
            except OSError as e:
                click.echo(f"ERROR: {path}: {e.strerror or e}", err=True)
                failed.append(path)
                continue
            except LookupError as e:
                raise click.BadParameter(str(e), param_hint="'--encoding'") from e

            if not ok:
                failed.append(path)
            click.echo(f'from "{path}" {reader.line} lines parsed', err=True)

    if failed:
        click.secho(f"{len(failed)} of {len(infiles)} inputs failed", fg="red", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
