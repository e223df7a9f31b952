"""SRT subtitle file parsing and generation."""

import codecs
import io
import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from .errors import ParseError, ParseErrorKind
from .models import Block, Decoded
from .timing import Offset, StartEnd

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8-sig"


class _ReadFault(Exception):
    pass


def _is_index(line: str) -> bool:
    return line.isascii() and line.isdigit()


class BlockReader:
    """Pull-based decoder turning a sequence of lines into Blocks.

    Each call to decode() consumes the lines of at most one block. `line`
    counts every line read so far and is what errors are reported against.
    Once the input is exhausted or a block fails to decode, the reader is
    finished and returns None from then on.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = iter(lines)
        self.line = 0
        self.finished = False

    def _next_line(self) -> str | None:
        """Read one line, trimming the line terminator.

        Returns None when the source is exhausted.
        """
        try:
            raw = next(self._lines)
        except StopIteration:
            return None
        except ValueError as e:
            # UnicodeDecodeError from decode_lines lands here
            self.line += 1
            raise _ReadFault() from e
        self.line += 1
        return raw.removesuffix("\n").removesuffix("\r")

    def _fail(self, kind: ParseErrorKind) -> Decoded:
        self.finished = True
        logger.debug("decode failed at line %d: %s", self.line, kind.description)
        return Decoded(error=kind, line=self.line)

    def decode(self) -> Decoded | None:
        """Decode the next block.

        Returns:
            Decoded holding either the block or the error kind, together
            with the current line count. None signals there are no more
            blocks (end of input or a blank line where an index was due).
        """
        if self.finished:
            return None

        try:
            index = self._next_line()
            if not index:
                self.finished = True
                return None
            if not _is_index(index):
                return self._fail(ParseErrorKind.INVALID_INDEX)

            time_line = self._next_line()
            if time_line is None:
                return self._fail(ParseErrorKind.INVALID_TIME_STRING)
            try:
                times = StartEnd.parse(time_line)
            except ParseError as e:
                return self._fail(e.kind)

            content = []
            while text := self._next_line():
                content.append(text + "\n")
        except _ReadFault:
            return self._fail(ParseErrorKind.INVALID_CONTENT)

        return Decoded(block=Block(times=times, content="".join(content)), line=self.line)

    def __iter__(self) -> Iterator[Block]:
        """Yield blocks until end of input.

        Raises:
            ParseError: On the first malformed block, with its line number
        """
        while (result := self.decode()) is not None:
            if result.error is not None:
                raise ParseError(result.error, line=result.line)
            yield result.block


def decode_lines(raw_lines: Iterable[bytes], encoding: str = DEFAULT_ENCODING) -> Iterator[str]:
    """Decode byte lines one at a time.

    Lines are split on b"\\n" only, so a stray "\\r" stays part of its line.
    A line that does not decode raises UnicodeDecodeError when it is reached,
    after every line before it has been yielded.

    Raises:
        LookupError: If the encoding is unknown
    """
    decoder = codecs.getincrementaldecoder(encoding)()
    for raw in raw_lines:
        yield decoder.decode(raw, final=True)


@contextmanager
def open_blocks(
    path: str | Path, encoding: str = DEFAULT_ENCODING
) -> Iterator[BlockReader]:
    """Open an SRT file and yield a BlockReader over its lines.

    Args:
        path: Path to the SRT file
        encoding: Text encoding of the file (BOM tolerated by default)
    """
    codecs.lookup(encoding)
    with open(path, "rb") as f:
        logger.debug("opened %s (%s)", path, encoding)
        yield BlockReader(decode_lines(f, encoding))


def shift_blocks(blocks: Iterable[Block], offset: Offset) -> Iterator[Block]:
    """Lazily retime every block by a signed offset."""
    for block in blocks:
        yield block.retimed(offset.apply(block.times))


def format_block(index: int, block: Block) -> str:
    """Render a block under a new sequence number."""
    return block.to_srt_block(index)


def write_blocks(blocks: Iterable[Block], out: TextIO, start: int = 1) -> int:
    """Write blocks renumbered from `start`, one at a time.

    Args:
        blocks: Blocks to write, consumed lazily
        out: Text stream to write to
        start: Sequence number of the first block

    Returns:
        The sequence number the next block would get
    """
    index = start
    for block in blocks:
        out.write(format_block(index, block))
        index += 1
    return index


def parse_srt(content: str) -> list[Block]:
    """Parse SRT content into Block objects.

    Args:
        content: Raw SRT file content

    Returns:
        List of Block objects

    Raises:
        ParseError: If a block is malformed
    """
    return list(BlockReader(io.StringIO(content)))


def read_srt(path: str | Path, encoding: str = DEFAULT_ENCODING) -> list[Block]:
    """Read and parse an SRT file.

    Args:
        path: Path to the SRT file
        encoding: Text encoding of the file

    Returns:
        List of Block objects
    """
    with open_blocks(path, encoding) as reader:
        return list(reader)


def subtitles_to_srt(blocks: Iterable[Block]) -> str:
    """Convert blocks to an SRT string numbered from 1."""
    buf = io.StringIO()
    write_blocks(blocks, buf)
    return buf.getvalue()
