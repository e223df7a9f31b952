"""Data models for srttool."""

from pydantic import BaseModel, ConfigDict, model_validator

from .errors import ParseErrorKind
from .timing import StartEnd


class Block(BaseModel):
    """A single subtitle entry with timing and text."""

    model_config = ConfigDict(frozen=True)

    times: StartEnd
    content: str = ""  # one "\n" terminated line per content line

    def retimed(self, times: StartEnd) -> "Block":
        """Return a copy of this block displayed over a different range."""
        return self.model_copy(update={"times": times})

    def to_srt_block(self, index: int) -> str:
        """Convert to a numbered SRT block, blank line included."""
        return f"{index}\n{self}"

    def __str__(self) -> str:
        return f"{self.times}\n{self.content}\n"


class Decoded(BaseModel):
    """Outcome of one decode call: a block or an error, at a given line."""

    block: Block | None = None
    error: ParseErrorKind | None = None
    line: int

    @model_validator(mode="after")
    def _one_of(self) -> "Decoded":
        if (self.block is None) == (self.error is None):
            raise ValueError("exactly one of block or error must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None
