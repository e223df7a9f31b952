"""Subtitle timestamps and time ranges."""

from datetime import timedelta
from functools import total_ordering

from pydantic import BaseModel, ConfigDict, Field

from .errors import ParseError, ParseErrorKind

RANGE_SEPARATOR = " --> "
_ONE_MS = timedelta(milliseconds=1)


def _parse_field(text: str) -> int | None:
    if not text or not (text.isascii() and text.isdigit()):
        return None
    return int(text)


@total_ordering
class Time(BaseModel):
    """A non-negative instant with millisecond resolution."""

    model_config = ConfigDict(frozen=True)

    ms: int = Field(default=0, ge=0)

    @classmethod
    def zero(cls) -> "Time":
        return cls()

    @classmethod
    def from_parts(cls, hours: int, minutes: int, seconds: int, millis: int) -> "Time":
        """Build a Time from (possibly out of range) clock fields."""
        return cls(ms=((hours * 60 + minutes) * 60 + seconds) * 1000 + millis)

    @classmethod
    def from_timedelta(cls, td: timedelta) -> "Time":
        """Convert a timedelta, clamping negative durations to zero."""
        total = td // _ONE_MS
        return cls(ms=max(total, 0))

    @classmethod
    def parse(cls, text: str) -> "Time":
        """Parse an SRT timestamp.

        Args:
            text: Timestamp in the form "HH:MM:SS,mmm". Field widths are not
                fixed and ranges are not checked, "99:99:99,999" is valid.

        Returns:
            Parsed Time

        Raises:
            ParseError: With kind INVALID_TIME_STRING
        """
        clock, sep, millis = text.rstrip("\r").partition(",")
        parts = clock.split(":")
        if not sep or len(parts) != 3:
            raise ParseError(ParseErrorKind.INVALID_TIME_STRING, detail=text)

        fields = [_parse_field(p) for p in (*parts, millis)]
        if any(f is None for f in fields):
            raise ParseError(ParseErrorKind.INVALID_TIME_STRING, detail=text)
        return cls.from_parts(*fields)

    @property
    def seconds(self) -> int:
        """Whole seconds."""
        return self.ms // 1000

    @property
    def millis(self) -> int:
        """Sub-second remainder in milliseconds."""
        return self.ms % 1000

    def to_timedelta(self) -> timedelta:
        return timedelta(milliseconds=self.ms)

    def format(self) -> str:
        """Format as "HH:MM:SS,mmm", the hour field is never truncated."""
        minutes, secs = divmod(self.seconds, 60)
        hours, minutes = divmod(minutes, 60)
        return f"{hours:02d}:{minutes:02d}:{secs:02d},{self.millis:03d}"

    def __str__(self) -> str:
        return self.format()

    def _shifted(self, delta_ms: int) -> "Time":
        # Saturates at zero, on-screen timestamps are never negative.
        return Time(ms=max(self.ms + delta_ms, 0))

    def __add__(self, other: "Time | timedelta") -> "Time":
        if isinstance(other, timedelta):
            return self._shifted(other // _ONE_MS)
        if not isinstance(other, Time):
            return NotImplemented
        return Time(ms=self.ms + other.ms)

    def __sub__(self, other: "Time | timedelta") -> "Time":
        if isinstance(other, timedelta):
            return self._shifted(-(other // _ONE_MS))
        if not isinstance(other, Time):
            return NotImplemented
        return self._shifted(-other.ms)

    def __mul__(self, factor: int) -> "Time":
        if not isinstance(factor, int) or isinstance(factor, bool):
            return NotImplemented
        return Time(ms=self.ms * factor)

    __rmul__ = __mul__

    def __lt__(self, other: "Time") -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self.ms < other.ms


class StartEnd(BaseModel):
    """Display interval of one subtitle block.

    start is not required to precede end, input is passed through as-is.
    """

    model_config = ConfigDict(frozen=True)

    start: Time = Field(default_factory=Time)
    end: Time = Field(default_factory=Time)

    @classmethod
    def from_time(cls, value: "Time | timedelta") -> "StartEnd":
        """Pair a single Time (or non-negative duration) with itself.

        Raises:
            ValueError: If the duration is negative
        """
        if isinstance(value, timedelta):
            if value < timedelta(0):
                raise ValueError(f"negative duration cannot be a time: {value}")
            value = Time.from_timedelta(value)
        return cls(start=value, end=value)

    @classmethod
    def parse(cls, text: str) -> "StartEnd":
        """Parse a "HH:MM:SS,mmm --> HH:MM:SS,mmm" line.

        Raises:
            ParseError: With kind INVALID_TIME_LINE
        """
        halves = text.rstrip("\r").split(RANGE_SEPARATOR, 1)
        if len(halves) != 2:
            raise ParseError(ParseErrorKind.INVALID_TIME_LINE, detail=text)
        try:
            start, end = (Time.parse(h) for h in halves)
        except ParseError as e:
            raise ParseError(ParseErrorKind.INVALID_TIME_LINE, detail=text) from e
        return cls(start=start, end=end)

    def __add__(self, other: "StartEnd | Time | timedelta") -> "StartEnd":
        if isinstance(other, StartEnd):
            return StartEnd(start=self.start + other.start, end=self.end + other.end)
        if not isinstance(other, (Time, timedelta)):
            return NotImplemented
        return StartEnd(start=self.start + other, end=self.end + other)

    def __sub__(self, other: "StartEnd | Time | timedelta") -> "StartEnd":
        if isinstance(other, StartEnd):
            return StartEnd(start=self.start - other.start, end=self.end - other.end)
        if not isinstance(other, (Time, timedelta)):
            return NotImplemented
        return StartEnd(start=self.start - other, end=self.end - other)

    def __str__(self) -> str:
        return f"{self.start}{RANGE_SEPARATOR}{self.end}"


class Offset(BaseModel):
    """A signed shift applied to every block of a file."""

    model_config = ConfigDict(frozen=True)

    amount: Time = Field(default_factory=Time)
    negative: bool = False

    @classmethod
    def parse(cls, text: str) -> "Offset":
        """Parse an offset such as "00:00:01,500" or "-00:00:01,500".

        A leading "+" is accepted, and "n" is accepted as an alias of "-".

        Raises:
            ParseError: With kind INVALID_TIME_STRING
        """
        text = text.strip()
        negative = False
        if text[:1] in ("-", "n"):
            negative = True
            text = text[1:]
        elif text[:1] == "+":
            text = text[1:]
        amount = Time.parse(text)
        return cls(amount=amount, negative=negative and amount.ms > 0)

    def apply(self, times: StartEnd) -> StartEnd:
        """Shift both ends of a range, clamping each end at zero."""
        if self.negative:
            return times - self.amount
        return times + self.amount

    def __bool__(self) -> bool:
        return self.amount.ms > 0

    def __str__(self) -> str:
        return f"-{self.amount}" if self.negative else str(self.amount)
