"""Structural errors raised while decoding SRT input."""

from enum import Enum


class ParseErrorKind(Enum):
    """The fixed set of ways an SRT block can be malformed."""

    INVALID_INDEX = "Invalid index"
    INVALID_TIME_STRING = "Invalid time"
    INVALID_TIME_LINE = "Invalid time line"
    INVALID_CONTENT = "Invalid content"

    @property
    def description(self) -> str:
        return self.value


class ParseError(ValueError):
    """A decode failure, tagged with its kind and the line it occurred on."""

    def __init__(
        self,
        kind: ParseErrorKind,
        line: int | None = None,
        detail: str | None = None,
    ) -> None:
        self.kind = kind
        self.line = line
        self.detail = detail
        super().__init__(str(self))

    def __str__(self) -> str:
        msg = self.kind.description
        if self.line is not None:
            msg = f"line {self.line}: {msg}"
        if self.detail is not None:
            msg = f"{msg}: {self.detail!r}"
        return msg
